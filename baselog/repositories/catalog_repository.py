from sqlalchemy import func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.models import ExitObject as ExitObjectEntity
from ..database.models import JumpType as JumpTypeEntity
from ..database.models import LogEntry
from ..database.models import Rig as RigEntity
from ..domain.exceptions import StorageError
from ..domain.models import ExitObject, JumpType, Rig
from .interfaces import CatalogRepository


class SqlCatalogRepository(CatalogRepository):
    """SQLAlchemy implementation of CatalogRepository."""

    def __init__(self, session: Session):
        self.session = session

    def find_object_names(self) -> list[str]:
        """Get the names of all exit objects that have one."""
        try:
            rows = (
                self.session.query(ExitObjectEntity.name)
                .filter(ExitObjectEntity.name.isnot(None))
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("find_object_names", str(e)) from e
        return [row.name for row in rows]

    def find_objects(self) -> list[ExitObject]:
        """Get all exit objects ordered by name."""
        try:
            entities = (
                self.session.query(ExitObjectEntity)
                .order_by(ExitObjectEntity.name, ExitObjectEntity.object_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("find_objects", str(e)) from e
        return [self._object_to_domain(entity) for entity in entities]

    def save_object(self, exit_object: ExitObject) -> ExitObject:
        """Save exit object to database."""
        try:
            if exit_object.object_id:
                existing = self.session.get(ExitObjectEntity, exit_object.object_id)
                if existing:
                    existing.name = exit_object.name
                    existing.region = exit_object.region
                    existing.notes = exit_object.notes
                    existing.optimistic_lock = (existing.optimistic_lock or 0) + 1
                    self.session.commit()
                    self.session.refresh(existing)
                    return self._object_to_domain(existing)

            entity = ExitObjectEntity(
                object_id=self._next_id(ExitObjectEntity.object_id),
                entity=1,
                optimistic_lock=1,
                name=exit_object.name,
                region=exit_object.region,
                latitude=exit_object.latitude,
                longitude=exit_object.longitude,
                height=exit_object.height,
                notes=exit_object.notes,
            )
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
            return self._object_to_domain(entity)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("save_object", str(e)) from e

    def delete_object(self, object_id: int) -> bool:
        """Delete exit object by ID."""
        try:
            entity = self.session.get(ExitObjectEntity, object_id)
            if entity:
                self.session.delete(entity)
                self.session.commit()
                return True
            return False
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("delete_object", str(e)) from e

    def count_jumps_with_object(self, object_id: int) -> int:
        """Count the jumps made from an exit object."""
        try:
            return (
                self.session.query(func.count(LogEntry.jump_id))
                .filter(LogEntry.object_id == object_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("count_jumps_with_object", str(e)) from e

    def find_jump_types(self) -> list[JumpType]:
        """Get all jump types ordered by name."""
        try:
            entities = (
                self.session.query(JumpTypeEntity).order_by(JumpTypeEntity.name).all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("find_jump_types", str(e)) from e
        return [self._to_domain(entity) for entity in entities]

    def save_jump_type(self, jump_type: JumpType) -> JumpType:
        """Save jump type to database."""
        try:
            if jump_type.jump_type_id:
                existing = self.session.get(JumpTypeEntity, jump_type.jump_type_id)
                if existing:
                    existing.name = jump_type.name
                    existing.optimistic_lock = (existing.optimistic_lock or 0) + 1
                    self.session.commit()
                    self.session.refresh(existing)
                    return self._to_domain(existing)

            entity = JumpTypeEntity(
                jump_type_id=self._next_id(JumpTypeEntity.jump_type_id),
                entity=1,
                optimistic_lock=1,
                name=jump_type.name,
            )
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
            return self._to_domain(entity)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("save_jump_type", str(e)) from e

    def delete_jump_type(self, jump_type_id: int) -> bool:
        """Delete jump type by ID."""
        try:
            entity = self.session.get(JumpTypeEntity, jump_type_id)
            if entity:
                self.session.delete(entity)
                self.session.commit()
                return True
            return False
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("delete_jump_type", str(e)) from e

    def count_jumps_with_type(self, jump_type_id: int) -> int:
        """Count the jumps referencing a jump type."""
        try:
            return (
                self.session.query(func.count(LogEntry.jump_id))
                .filter(LogEntry.jump_type_id == jump_type_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("count_jumps_with_type", str(e)) from e

    def has_rig_table(self) -> bool:
        """Check whether the logbook has a rig catalog."""
        try:
            return inspect(self.session.get_bind()).has_table(RigEntity.__tablename__)
        except SQLAlchemyError as e:
            raise StorageError("has_rig_table", str(e)) from e

    def find_rigs(self) -> list[Rig]:
        """Get all rigs ordered by name, none when the logbook has no rig table."""
        if not self.has_rig_table():
            return []
        try:
            entities = self.session.query(RigEntity).order_by(RigEntity.name).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("find_rigs", str(e)) from e
        return [self._rig_to_domain(entity) for entity in entities]

    def save_rig(self, rig: Rig) -> Rig:
        """Save rig to database.

        Raises:
            StorageError: If the logbook has no rig table
        """
        if not self.has_rig_table():
            raise StorageError("save_rig", "logbook has no ZRIG table")
        try:
            if rig.rig_id:
                existing = self.session.get(RigEntity, rig.rig_id)
                if existing:
                    existing.name = rig.name
                    existing.notes = rig.notes
                    existing.optimistic_lock = (existing.optimistic_lock or 0) + 1
                    self.session.commit()
                    self.session.refresh(existing)
                    return self._rig_to_domain(existing)

            entity = RigEntity(
                rig_id=self._next_id(RigEntity.rig_id),
                entity=1,
                optimistic_lock=1,
                name=rig.name,
                notes=rig.notes,
            )
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
            return self._rig_to_domain(entity)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("save_rig", str(e)) from e

    def delete_rig(self, rig_id: int) -> bool:
        """Delete rig by ID."""
        if not self.has_rig_table():
            return False
        try:
            entity = self.session.get(RigEntity, rig_id)
            if entity:
                self.session.delete(entity)
                self.session.commit()
                return True
            return False
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError("delete_rig", str(e)) from e

    def _next_id(self, pk_column) -> int:
        # Legacy keys are not autoincrement; allocate MAX(Z_PK) + 1
        return self.session.query(func.coalesce(func.max(pk_column), 0)).scalar() + 1

    def _to_domain(self, entity: JumpTypeEntity) -> JumpType:
        """Convert SQLAlchemy entity to domain model."""
        return JumpType(jump_type_id=entity.jump_type_id, name=entity.name)

    def _object_to_domain(self, entity: ExitObjectEntity) -> ExitObject:
        return ExitObject(
            object_id=entity.object_id,
            name=entity.name,
            region=entity.region,
            latitude=entity.latitude,
            longitude=entity.longitude,
            height=entity.height,
            notes=entity.notes,
        )

    def _rig_to_domain(self, entity: RigEntity) -> Rig:
        return Rig(rig_id=entity.rig_id, name=entity.name, notes=entity.notes)
