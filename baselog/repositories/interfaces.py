from abc import ABC, abstractmethod

from ..domain.models import ExitObject, JumpRecord, JumpType, Rig


class JumpRepository(ABC):
    """Abstract repository interface for jump persistence."""

    @abstractmethod
    def get_all(self) -> list[JumpRecord]:
        """Get all jumps ordered by jump number, descending."""
        pass

    @abstractmethod
    def get_by_id(self, jump_id: int) -> JumpRecord | None:
        """Find jump by ID."""
        pass

    @abstractmethod
    def upsert(self, record: JumpRecord) -> int:
        """Insert the jump when it has no id, otherwise update it.

        Returns:
            The id of the stored jump
        """
        pass

    @abstractmethod
    def delete(self, jump_id: int) -> int:
        """Delete jump by ID, returning the number of rows removed."""
        pass

    @abstractmethod
    def get_object(self, object_id: int) -> ExitObject | None:
        """Find exit object by ID."""
        pass

    @abstractmethod
    def get_object_thumbnail(self, object_id: int) -> bytes | None:
        """Get the first image stored for an exit object."""
        pass

    @abstractmethod
    def get_jump_type(self, jump_type_id: int) -> JumpType | None:
        """Find jump type by ID."""
        pass

    @abstractmethod
    def supports_number_shift(self) -> bool:
        """Check whether the store can safely renumber jumps."""
        pass

    @abstractmethod
    def shift_numbers_up_from(self, threshold: int, exclude_id: int | None) -> int:
        """Increment every jump number >= threshold by one, atomically.

        Jumps are processed in descending number order. The jump with
        exclude_id is left untouched.

        Args:
            threshold: Lowest jump number to shift
            exclude_id: Id of the jump being edited, if any

        Returns:
            Number of jumps shifted

        Raises:
            ShiftFailure: If the shift could not complete; nothing is committed
        """
        pass

    @abstractmethod
    def shift_and_upsert(
        self, threshold: int, exclude_id: int | None, record: JumpRecord
    ) -> tuple[int, int]:
        """Shift jump numbers like shift_numbers_up_from, then upsert record.

        Both steps commit together or not at all.

        Returns:
            Tuple of (stored jump id, number of jumps shifted)

        Raises:
            ShiftFailure: If the shift could not complete
            StorageError: If the upsert failed; the shift is rolled back too
        """
        pass


class AsyncJumpRepository(ABC):
    """Non-blocking view of JumpRepository consumed by the state container."""

    @abstractmethod
    async def get_all(self) -> list[JumpRecord]:
        pass

    @abstractmethod
    async def get_by_id(self, jump_id: int) -> JumpRecord | None:
        pass

    @abstractmethod
    async def upsert(self, record: JumpRecord) -> int:
        pass

    @abstractmethod
    async def delete(self, jump_id: int) -> int:
        pass

    @abstractmethod
    async def get_object(self, object_id: int) -> ExitObject | None:
        pass

    @abstractmethod
    async def get_object_thumbnail(self, object_id: int) -> bytes | None:
        pass

    @abstractmethod
    async def get_jump_type(self, jump_type_id: int) -> JumpType | None:
        pass

    @abstractmethod
    async def supports_number_shift(self) -> bool:
        pass

    @abstractmethod
    async def shift_numbers_up_from(
        self, threshold: int, exclude_id: int | None
    ) -> int:
        pass

    @abstractmethod
    async def shift_and_upsert(
        self, threshold: int, exclude_id: int | None, record: JumpRecord
    ) -> tuple[int, int]:
        pass


class CatalogRepository(ABC):
    """Abstract repository interface for the exit object, jump type and rig catalogs."""

    @abstractmethod
    def find_object_names(self) -> list[str]:
        """Get the raw names of all exit objects."""
        pass

    @abstractmethod
    def find_jump_types(self) -> list[JumpType]:
        """Get all jump types ordered by name."""
        pass

    @abstractmethod
    def save_jump_type(self, jump_type: JumpType) -> JumpType:
        """Create the jump type when its id is 0, otherwise rename it."""
        pass

    @abstractmethod
    def delete_jump_type(self, jump_type_id: int) -> bool:
        """Delete jump type by ID."""
        pass

    @abstractmethod
    def count_jumps_with_type(self, jump_type_id: int) -> int:
        """Count the jumps referencing a jump type."""
        pass

    @abstractmethod
    def find_objects(self) -> list[ExitObject]:
        """Get all exit objects ordered by name."""
        pass

    @abstractmethod
    def save_object(self, exit_object: ExitObject) -> ExitObject:
        """Create the exit object when its id is 0, otherwise update it."""
        pass

    @abstractmethod
    def delete_object(self, object_id: int) -> bool:
        pass

    @abstractmethod
    def count_jumps_with_object(self, object_id: int) -> int:
        pass

    @abstractmethod
    def has_rig_table(self) -> bool:
        """Check whether the logbook has a rig catalog."""
        pass

    @abstractmethod
    def find_rigs(self) -> list[Rig]:
        pass

    @abstractmethod
    def save_rig(self, rig: Rig) -> Rig:
        """Create the rig when its id is 0, otherwise update it."""
        pass

    @abstractmethod
    def delete_rig(self, rig_id: int) -> bool:
        pass
