import logging

from ..domain.exceptions import InvalidInputError, ReferenceIntegrityError
from ..domain.models import ExitObject, JumpType, Rig
from ..logging_config import LogCategory, diagnostic
from ..repositories.interfaces import CatalogRepository

logger = logging.getLogger(__name__)

DEFAULT_JUMP_TYPES = ("Low", "Terminal", "Subterminal")

OBJECT_NOTES_SEPARATOR = " | "


def compose_object_notes(
    description: str | None = None,
    position: str | None = None,
    height_meters: str | int | None = None,
) -> str | None:
    """
    Join the free-form exit object fields into the single ZNOTES text.

    Example:
        compose_object_notes("Big wall", "46.1,7.9", 150)
        # "Big wall | GPS: 46.1,7.9 | H: 150m"

    Returns:
        The joined text, None when every part is blank
    """
    parts = [(description or "").strip()]
    position = (position or "").strip()
    if position:
        parts.append(f"GPS: {position}")
    height = str(height_meters).strip() if height_meters is not None else ""
    if height:
        parts.append(f"H: {height}m")
    return OBJECT_NOTES_SEPARATOR.join(part for part in parts if part) or None


class CatalogService:
    """Service for the exit object, jump type and rig catalogs."""

    def __init__(self, catalog_repo: CatalogRepository):
        self.catalog_repo = catalog_repo

    def get_object_names(self) -> list[str]:
        """
        Get exit object names for pickers and autocompletion.

        Returns:
            Trimmed names, de-duplicated ignoring case, sorted
        """
        names: dict[str, str] = {}
        for raw in self.catalog_repo.find_object_names():
            name = (raw or "").strip()
            if name:
                names.setdefault(name.casefold(), name)
        return sorted(names.values(), key=str.casefold)

    def list_objects(self) -> list[ExitObject]:
        return self.catalog_repo.find_objects()

    def add_object(
        self,
        name: str,
        description: str | None = None,
        position: str | None = None,
        height_meters: str | int | None = None,
        region: str | None = None,
    ) -> ExitObject:
        """
        Add an exit object.

        Description, GPS position and height are stored together as notes.

        Raises:
            InvalidInputError: If the name is blank
        """
        exit_object = ExitObject(
            object_id=0,
            name=self._clean_name(name),
            region=(region or "").strip() or None,
            notes=compose_object_notes(description, position, height_meters),
        )
        saved = self.catalog_repo.save_object(exit_object)
        logger.info(f"Added exit object {saved.object_id} ({saved.name})")
        return saved

    def update_object(
        self,
        object_id: int,
        name: str,
        notes: str | None = None,
        region: str | None = None,
    ) -> ExitObject:
        return self.catalog_repo.save_object(
            ExitObject(
                object_id=object_id,
                name=self._clean_name(name),
                region=(region or "").strip() or None,
                notes=self._clean_notes(notes),
            )
        )

    def can_delete_object(self, object_id: int) -> tuple[bool, str | None]:
        count = self.catalog_repo.count_jumps_with_object(object_id)
        if count:
            return False, f"Exit object is used by {count} jump(s)"
        return True, None

    def delete_object(self, object_id: int) -> bool:
        """Delete an exit object no jump was made from.

        Raises:
            ReferenceIntegrityError: If jumps still reference the object
        """
        count = self.catalog_repo.count_jumps_with_object(object_id)
        if count:
            logger.warning(
                f"Refused to delete exit object {object_id} used by {count} jump(s)",
                extra=diagnostic(LogCategory.REFERENCE_INTEGRITY),
            )
            raise ReferenceIntegrityError("exit_object", object_id, count)
        return self.catalog_repo.delete_object(object_id)

    def list_jump_types(self) -> list[JumpType]:
        return self.catalog_repo.find_jump_types()

    def add_jump_type(self, name: str) -> JumpType:
        """Add a jump type.

        Raises:
            InvalidInputError: If the name is blank
        """
        return self.catalog_repo.save_jump_type(
            JumpType(jump_type_id=0, name=self._clean_name(name))
        )

    def rename_jump_type(self, jump_type_id: int, name: str) -> JumpType:
        return self.catalog_repo.save_jump_type(
            JumpType(jump_type_id=jump_type_id, name=self._clean_name(name))
        )

    def can_delete_jump_type(self, jump_type_id: int) -> tuple[bool, str | None]:
        """
        Check whether a jump type can be deleted.

        Returns:
            Tuple of (allowed, reason when not allowed)
        """
        count = self.catalog_repo.count_jumps_with_type(jump_type_id)
        if count:
            return False, f"Jump type is used by {count} jump(s)"
        return True, None

    def delete_jump_type(self, jump_type_id: int) -> bool:
        """Delete a jump type that no jump references.

        Raises:
            ReferenceIntegrityError: If jumps still use the jump type
        """
        count = self.catalog_repo.count_jumps_with_type(jump_type_id)
        if count:
            logger.warning(
                f"Refused to delete jump type {jump_type_id} used by {count} jump(s)",
                extra=diagnostic(LogCategory.REFERENCE_INTEGRITY),
            )
            raise ReferenceIntegrityError("jump_type", jump_type_id, count)
        return self.catalog_repo.delete_jump_type(jump_type_id)

    def seed_default_jump_types(self) -> list[JumpType]:
        """Add the default jump types that are missing, returning the new ones."""
        existing = {
            (jump_type.name or "").strip().casefold()
            for jump_type in self.catalog_repo.find_jump_types()
        }
        added = []
        for name in DEFAULT_JUMP_TYPES:
            if name.casefold() not in existing:
                added.append(self.add_jump_type(name))
        if added:
            logger.info(f"Seeded {len(added)} default jump type(s)")
        return added

    def list_rigs(self) -> list[Rig]:
        """Get the rig catalog, empty for logbooks without one."""
        return self.catalog_repo.find_rigs()

    def add_rig(self, name: str, description: str | None = None) -> Rig:
        """Add a rig.

        Raises:
            InvalidInputError: If the name is blank
            StorageError: If the logbook has no rig table
        """
        saved = self.catalog_repo.save_rig(
            Rig(rig_id=0, name=self._clean_name(name), notes=self._clean_notes(description))
        )
        logger.info(f"Added rig {saved.rig_id} ({saved.name})")
        return saved

    def update_rig(self, rig_id: int, name: str, description: str | None = None) -> Rig:
        return self.catalog_repo.save_rig(
            Rig(rig_id=rig_id, name=self._clean_name(name), notes=self._clean_notes(description))
        )

    def delete_rig(self, rig_id: int) -> bool:
        return self.catalog_repo.delete_rig(rig_id)

    def _clean_notes(self, notes: str | None) -> str | None:
        return (notes or "").strip() or None

    def _clean_name(self, name: str | None) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidInputError("name", "must not be blank")
        return cleaned
