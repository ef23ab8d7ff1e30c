"""Tests for jump number conflict resolution."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from baselog.database.models import LogEntry
from baselog.domain.exceptions import NumberConflictError, ShiftFailure, StorageError
from baselog.domain.models import JumpRecord
from baselog.repositories.jump_repository import SqlJumpRepository
from baselog.repositories.threaded_repository import ThreadedJumpRepository
from baselog.services.numbering_service import NumberingService, find_conflict

from .conftest import add_jump


def numbers_by_id(session_factory):
    session = session_factory()
    try:
        return {row.jump_id: row.jump_number for row in session.query(LogEntry).all()}
    finally:
        session.close()


@pytest.fixture
def three_jumps(file_session):
    for number in (1, 2, 3):
        add_jump(file_session, number, number)


def test_find_conflict_detects_taken_number():
    records = [JumpRecord(jump_id=i, jump_number=i) for i in (1, 2, 3)]

    conflict = find_conflict(records, 2, None)

    assert conflict.conflicting_ids == [2]
    assert conflict.shift_count == 2


def test_find_conflict_ignores_edited_record():
    records = [JumpRecord(jump_id=i, jump_number=i) for i in (1, 2, 3)]

    assert find_conflict(records, 2, exclude_id=2) is None
    assert find_conflict(records, 7, None) is None
    assert find_conflict(records, None, None) is None


@pytest.mark.asyncio
async def test_save_new_jump_shifts_later_numbers(session_factory, three_jumps):
    """Test inserting #2 into 1,2,3 renumbers the old 2 and 3."""
    service = NumberingService(ThreadedJumpRepository(session_factory))
    asked = []

    def confirm(conflict):
        asked.append(conflict)
        return True

    result = await service.save(JumpRecord(jump_number=2, notes="new"), confirm)

    assert result.jump_id == 4
    assert result.shifted == 2
    assert numbers_by_id(session_factory) == {1: 1, 2: 3, 3: 4, 4: 2}
    assert asked[0].jump_number == 2


@pytest.mark.asyncio
async def test_save_edit_excludes_itself_from_shift(session_factory, three_jumps):
    """Test moving jump 3 to number 1 shifts the others only."""
    service = NumberingService(ThreadedJumpRepository(session_factory))

    async def confirm(conflict):
        return True

    result = await service.save(JumpRecord(jump_id=3, jump_number=1), confirm)

    assert result.jump_id == 3
    assert numbers_by_id(session_factory) == {1: 2, 2: 3, 3: 1}


@pytest.mark.asyncio
async def test_save_without_conflict_does_not_ask(session_factory, three_jumps):
    service = NumberingService(ThreadedJumpRepository(session_factory))
    confirm = MagicMock(return_value=True)

    result = await service.save(JumpRecord(jump_number=4), confirm)

    assert result.shifted == 0
    confirm.assert_not_called()
    assert numbers_by_id(session_factory)[result.jump_id] == 4


@pytest.mark.asyncio
async def test_save_blocked_when_store_cannot_shift(session_factory, three_jumps):
    """Test an unsupported shift rejects the save and writes nothing."""
    repo = ThreadedJumpRepository(session_factory, allow_number_shift=False)
    service = NumberingService(repo)

    with pytest.raises(NumberConflictError) as exc_info:
        await service.save(JumpRecord(jump_number=2), lambda conflict: True)

    assert exc_info.value.reason == "store does not support renumbering"
    assert numbers_by_id(session_factory) == {1: 1, 2: 2, 3: 3}


@pytest.mark.asyncio
async def test_save_declined_writes_nothing(session_factory, three_jumps):
    service = NumberingService(ThreadedJumpRepository(session_factory))

    with pytest.raises(NumberConflictError) as exc_info:
        await service.save(JumpRecord(jump_number=2), lambda conflict: False)

    assert exc_info.value.reason == "shift declined"
    assert numbers_by_id(session_factory) == {1: 1, 2: 2, 3: 3}


@pytest.mark.asyncio
async def test_save_without_confirmation_is_declined(session_factory, three_jumps):
    service = NumberingService(ThreadedJumpRepository(session_factory))

    with pytest.raises(NumberConflictError):
        await service.save(JumpRecord(jump_number=1))


@pytest.mark.asyncio
async def test_shift_failure_skips_upsert():
    """Test a failed shift propagates and the record is not stored."""
    repo = MagicMock()
    repo.get_all = AsyncMock(return_value=[JumpRecord(jump_id=1, jump_number=1)])
    repo.supports_number_shift = AsyncMock(return_value=True)
    repo.shift_and_upsert = AsyncMock(
        side_effect=ShiftFailure(1, None, "database is locked")
    )
    repo.upsert = AsyncMock()
    service = NumberingService(repo)

    with pytest.raises(ShiftFailure):
        await service.save(JumpRecord(jump_number=1), lambda conflict: True)

    repo.shift_and_upsert.assert_awaited_once()
    assert repo.shift_and_upsert.await_args.args[:2] == (1, None)
    repo.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_save_after_shift_keeps_numbers(session_factory, three_jumps):
    """Test a save that fails after renumbering leaves the store unchanged."""
    service = NumberingService(ThreadedJumpRepository(session_factory))

    with patch.object(
        SqlJumpRepository,
        "_write",
        side_effect=OperationalError("INSERT INTO ZLOGENTRY", {}, Exception("disk full")),
    ):
        with pytest.raises(StorageError):
            await service.save(JumpRecord(jump_number=2), lambda conflict: True)

    assert numbers_by_id(session_factory) == {1: 1, 2: 2, 3: 3}
