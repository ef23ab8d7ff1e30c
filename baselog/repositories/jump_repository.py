import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.models import ExitObject as ExitObjectEntity
from ..database.models import JumpType as JumpTypeEntity
from ..database.models import LogEntry
from ..database.models import ObjectImage
from ..domain.exceptions import (
    JumpNotFoundError,
    LogbookError,
    ShiftFailure,
    StorageError,
)
from ..domain.models import ExitObject, JumpRecord, JumpType
from ..logging_config import LogCategory, diagnostic
from .interfaces import JumpRepository

logger = logging.getLogger(__name__)

# Core Data bookkeeping values used by the legacy app for new rows
DEFAULT_ENTITY = 1
DEFAULT_OPTIMISTIC_LOCK = 1


class SqlJumpRepository(JumpRepository):
    """SQLAlchemy implementation of JumpRepository."""

    _DOMAIN_FIELDS = (
        "jump_number",
        "jump_date_raw",
        "notes",
        "object_id",
        "delay_seconds",
        "jump_type_id",
        "deployment_type_id",
        "slider_type_id",
    )

    def __init__(self, session: Session, allow_number_shift: bool = True):
        self.session = session
        self.allow_number_shift = allow_number_shift

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """Roll back and translate SQLAlchemy failures into StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Storage operation {operation} failed: {e}")
            raise StorageError(operation, str(e)) from e

    def get_all(self) -> list[JumpRecord]:
        """Get all jumps, highest jump number first."""
        with self._storage_errors("get_all"):
            entities = (
                self.session.query(LogEntry)
                .order_by(LogEntry.jump_number.desc(), LogEntry.jump_id.desc())
                .all()
            )
            return [self._to_domain(entity) for entity in entities]

    def get_by_id(self, jump_id: int) -> JumpRecord | None:
        """Find jump by ID."""
        with self._storage_errors("get_by_id"):
            entity = self.session.get(LogEntry, jump_id)
            return self._to_domain(entity) if entity else None

    def upsert(self, record: JumpRecord) -> int:
        """Save jump to database."""
        with self._storage_errors("upsert"):
            jump_id = self._write(record)
            self.session.commit()
            logger.info(f"Saved jump {jump_id} (number {record.jump_number})")
            return jump_id

    def delete(self, jump_id: int) -> int:
        """Delete jump by ID."""
        with self._storage_errors("delete"):
            deleted_count = (
                self.session.query(LogEntry)
                .filter(LogEntry.jump_id == jump_id)
                .delete()
            )
            self.session.commit()
            return deleted_count

    def get_object(self, object_id: int) -> ExitObject | None:
        """Find exit object by ID."""
        with self._storage_errors("get_object"):
            entity = self.session.get(ExitObjectEntity, object_id)
            if entity is None:
                return None
            return ExitObject(
                object_id=entity.object_id,
                name=entity.name,
                region=entity.region,
                latitude=entity.latitude,
                longitude=entity.longitude,
                height=entity.height,
                notes=entity.notes,
            )

    def get_object_thumbnail(self, object_id: int) -> bytes | None:
        """Get the first image stored for an exit object."""
        with self._storage_errors("get_object_thumbnail"):
            image = (
                self.session.query(ObjectImage.image)
                .filter(ObjectImage.object_id == object_id)
                .order_by(ObjectImage.image_id)
                .limit(1)
                .scalar()
            )
            return bytes(image) if image else None

    def get_jump_type(self, jump_type_id: int) -> JumpType | None:
        """Find jump type by ID."""
        with self._storage_errors("get_jump_type"):
            entity = self.session.get(JumpTypeEntity, jump_type_id)
            if entity is None:
                return None
            return JumpType(jump_type_id=entity.jump_type_id, name=entity.name)

    def supports_number_shift(self) -> bool:
        """Renumbering needs the setting enabled and a jump number column."""
        if not self.allow_number_shift:
            return False
        with self._storage_errors("supports_number_shift"):
            columns = inspect(self.session.get_bind()).get_columns(
                LogEntry.__tablename__
            )
            return any(column["name"] == "ZJUMPNUMBER" for column in columns)

    def shift_numbers_up_from(self, threshold: int, exclude_id: int | None) -> int:
        """Increment every jump number >= threshold by one in one transaction."""
        try:
            shifted = self._shift(threshold, exclude_id)
            self.session.commit()
        except Exception as e:
            self._abort_shift(threshold, e)
            raise ShiftFailure(threshold, exclude_id, str(e)) from e

        logger.info(
            f"Shifted {shifted} jump(s) up from number {threshold}",
            extra=diagnostic(LogCategory.NUMBER_SHIFT),
        )
        return shifted

    def shift_and_upsert(
        self, threshold: int, exclude_id: int | None, record: JumpRecord
    ) -> tuple[int, int]:
        """Shift jump numbers up from threshold, then save record, in one transaction."""
        try:
            shifted = self._shift(threshold, exclude_id)
        except Exception as e:
            self._abort_shift(threshold, e)
            raise ShiftFailure(threshold, exclude_id, str(e)) from e

        try:
            jump_id = self._write(record)
            self.session.commit()
        except LogbookError as e:
            self._abort_shift(threshold, e)
            raise
        except SQLAlchemyError as e:
            self._abort_shift(threshold, e)
            raise StorageError("shift_and_upsert", str(e)) from e

        logger.info(
            f"Shifted {shifted} jump(s) up from number {threshold} "
            f"and saved jump {jump_id}",
            extra=diagnostic(LogCategory.NUMBER_SHIFT),
        )
        return jump_id, shifted

    def _shift(self, threshold: int, exclude_id: int | None) -> int:
        query = self.session.query(LogEntry).filter(LogEntry.jump_number >= threshold)
        if exclude_id is not None:
            query = query.filter(LogEntry.jump_id != exclude_id)

        # Highest first so no row ever lands on a number not yet moved
        entities = query.order_by(LogEntry.jump_number.desc()).all()
        for entity in entities:
            self._bump_number(entity)
            self.session.flush()
        return len(entities)

    def _abort_shift(self, threshold: int, error: Exception) -> None:
        self.session.rollback()
        logger.error(
            f"Shift from {threshold} failed, rolled back: {error}",
            extra=diagnostic(LogCategory.NUMBER_SHIFT),
        )

    def _bump_number(self, entity: LogEntry) -> None:
        entity.jump_number = entity.jump_number + 1
        entity.optimistic_lock = (entity.optimistic_lock or 0) + 1

    def _write(self, record: JumpRecord) -> int:
        """Stage an insert or update of record without committing."""
        if record.is_new():
            # Legacy keys are not autoincrement; allocate MAX(Z_PK) + 1
            next_id = (
                self.session.query(func.coalesce(func.max(LogEntry.jump_id), 0)).scalar()
            ) + 1
            entity = self._to_entity(record, next_id)
            entity.entity = DEFAULT_ENTITY
            entity.optimistic_lock = DEFAULT_OPTIMISTIC_LOCK
            self.session.add(entity)
            self.session.flush()
            return next_id

        existing = self.session.get(LogEntry, record.jump_id)
        if existing is None:
            raise JumpNotFoundError(record.jump_id)

        # Update every mapped field, None included, so fields can be cleared
        updated = self._to_entity(record, record.jump_id)
        for attr in self._DOMAIN_FIELDS:
            setattr(existing, attr, getattr(updated, attr))
        existing.optimistic_lock = (existing.optimistic_lock or 0) + 1
        self.session.flush()
        return record.jump_id

    def _to_entity(self, domain: JumpRecord, jump_id: int) -> LogEntry:
        """Convert domain model to SQLAlchemy entity."""
        return LogEntry(
            jump_id=jump_id,
            jump_number=domain.jump_number,
            jump_date_raw=domain.jump_date_raw,
            notes=domain.notes,
            object_id=domain.object_id,
            delay_seconds=domain.delay_seconds,
            jump_type_id=domain.jump_type_id,
            deployment_type_id=domain.deployment_type_id,
            slider_type_id=domain.slider_type_id,
        )

    def _to_domain(self, entity: LogEntry) -> JumpRecord:
        """Convert SQLAlchemy entity to domain model."""
        return JumpRecord(
            jump_id=entity.jump_id,
            jump_number=entity.jump_number,
            jump_date_raw=entity.jump_date_raw,
            notes=entity.notes,
            object_id=entity.object_id,
            delay_seconds=entity.delay_seconds,
            jump_type_id=entity.jump_type_id,
            deployment_type_id=entity.deployment_type_id,
            slider_type_id=entity.slider_type_id,
        )
