"""Jump number conflict detection and resolution on save."""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from ..domain.exceptions import NumberConflictError
from ..domain.models import JumpRecord
from ..logging_config import LogCategory, diagnostic
from ..repositories.interfaces import AsyncJumpRepository

logger = logging.getLogger(__name__)


@dataclass
class NumberConflict:
    """A jump number already used by other records.

    Attributes:
        jump_number: The contested number
        exclude_id: Id of the record being edited, None for a new record
        conflicting_ids: Ids of the other records using jump_number
        shift_count: Records a shift would renumber (number >= jump_number)
    """

    jump_number: int
    exclude_id: int | None
    conflicting_ids: list[int] = field(default_factory=list)
    shift_count: int = 0


@dataclass
class SaveResult:
    """Result of a successful save.

    Attributes:
        jump_id: Id of the stored record
        shifted: Records renumbered to make room
    """

    jump_id: int
    shifted: int = 0


ConfirmShift = Callable[[NumberConflict], bool | Awaitable[bool]]


def find_conflict(
    records: Iterable[JumpRecord], jump_number: int | None, exclude_id: int | None
) -> NumberConflict | None:
    """
    Detect whether a jump number is already used by another record.

    Args:
        records: The full current set of stored jumps
        jump_number: Candidate number; None never conflicts
        exclude_id: Id of the record being edited, ignored in the check

    Returns:
        NumberConflict describing the clash, or None
    """
    if jump_number is None:
        return None

    others = [r for r in records if exclude_id is None or r.jump_id != exclude_id]
    conflicting_ids = [r.jump_id for r in others if r.jump_number == jump_number]
    if not conflicting_ids:
        return None

    shift_count = sum(
        1 for r in others if r.jump_number is not None and r.jump_number >= jump_number
    )
    return NumberConflict(
        jump_number=jump_number,
        exclude_id=exclude_id,
        conflicting_ids=conflicting_ids,
        shift_count=shift_count,
    )


class NumberingService:
    """Saves jumps while keeping jump numbers unique."""

    def __init__(self, repo: AsyncJumpRepository):
        self.repo = repo

    async def check(self, record: JumpRecord) -> NumberConflict | None:
        """Check the record's number against the stored jumps."""
        records = await self.repo.get_all()
        exclude_id = None if record.is_new() else record.jump_id
        return find_conflict(records, record.jump_number, exclude_id)

    async def save(
        self, record: JumpRecord, confirm_shift: ConfirmShift | None = None
    ) -> SaveResult:
        """
        Save a jump, shifting later jump numbers up when its number is taken.

        Args:
            record: New or edited jump
            confirm_shift: Asked before renumbering; may be sync or async.
                Without it a conflict is never resolved.

        Returns:
            SaveResult with the stored id and number of shifted records

        Raises:
            NumberConflictError: The number is taken and no shift happened
            ShiftFailure: The shift was rolled back; nothing was written
            StorageError: A repository operation failed; a shift made for
                this save is rolled back with it
        """
        conflict = await self.check(record)

        if conflict is not None:
            logger.info(
                f"Jump number {conflict.jump_number} used by "
                f"{conflict.conflicting_ids}, {conflict.shift_count} jump(s) affected",
                extra=diagnostic(LogCategory.NUMBER_SHIFT),
            )

            if not await self.repo.supports_number_shift():
                logger.warning(
                    f"Save of jump number {conflict.jump_number} blocked: "
                    "store cannot renumber",
                    extra=diagnostic(LogCategory.NUMBER_SHIFT),
                )
                raise NumberConflictError(
                    conflict.jump_number,
                    conflict.conflicting_ids,
                    "store does not support renumbering",
                )

            if not await self._confirm(confirm_shift, conflict):
                raise NumberConflictError(
                    conflict.jump_number, conflict.conflicting_ids, "shift declined"
                )

            jump_id, shifted = await self.repo.shift_and_upsert(
                conflict.jump_number, conflict.exclude_id, record
            )
            return SaveResult(jump_id=jump_id, shifted=shifted)

        jump_id = await self.repo.upsert(record)
        return SaveResult(jump_id=jump_id)

    async def _confirm(
        self, confirm_shift: ConfirmShift | None, conflict: NumberConflict
    ) -> bool:
        if confirm_shift is None:
            return False
        answer = confirm_shift(conflict)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)
