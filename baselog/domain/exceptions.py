"""Domain exceptions for the logbook."""


class LogbookError(Exception):
    """Base exception for logbook operations."""

    pass


class StorageError(LogbookError):
    """Raised when a repository operation fails.

    Attributes:
        operation: Name of the repository operation that failed
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Storage operation '{operation}' failed: {message}")


class ShiftFailure(StorageError):
    """Raised when an atomic jump number shift cannot complete.

    Nothing from the attempted shift is committed.

    Attributes:
        threshold: First jump number that was being shifted
        exclude_id: Id of the record excluded from the shift, if any
    """

    def __init__(self, threshold: int, exclude_id: int | None, message: str):
        self.threshold = threshold
        self.exclude_id = exclude_id
        super().__init__(
            "shift_numbers_up_from",
            f"shift from {threshold} (excluding {exclude_id}) rolled back: {message}",
        )


class NumberConflictError(LogbookError):
    """Raised when a jump number is already taken and cannot be shifted.

    Attributes:
        jump_number: The contested jump number
        conflicting_ids: Ids of the records already using it
        reason: Why the conflict could not be resolved
    """

    def __init__(self, jump_number: int, conflicting_ids: list[int], reason: str):
        self.jump_number = jump_number
        self.conflicting_ids = conflicting_ids
        self.reason = reason
        super().__init__(
            f"Jump number {jump_number} already used by {conflicting_ids}: {reason}"
        )


class JumpNotFoundError(LogbookError):
    """Raised when a requested jump does not exist.

    Attributes:
        jump_id: The jump id that was not found
    """

    def __init__(self, jump_id: int):
        self.jump_id = jump_id
        super().__init__(f"Jump not found: {jump_id}")


class InvalidInputError(LogbookError):
    """Raised when user-entered data is rejected.

    Attributes:
        field: Name of the offending field
        message: Description of the validation error
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid value for '{field}': {message}")


class ReferenceIntegrityError(LogbookError):
    """Raised when deleting a catalog entry that jumps still reference.

    Attributes:
        entity: Kind of catalog entry (e.g. "jump_type")
        entity_id: Id of the catalog entry
        reference_count: Number of jumps referencing it
    """

    def __init__(self, entity: str, entity_id: int, reference_count: int):
        self.entity = entity
        self.entity_id = entity_id
        self.reference_count = reference_count
        super().__init__(
            f"Cannot delete {entity} {entity_id}: used by {reference_count} jump(s)"
        )
