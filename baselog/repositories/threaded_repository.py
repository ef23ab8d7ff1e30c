"""Async adapter running the SQL jump repository on worker threads."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.orm import sessionmaker

from ..domain.models import ExitObject, JumpRecord, JumpType
from .interfaces import AsyncJumpRepository, JumpRepository
from .jump_repository import SqlJumpRepository

T = TypeVar("T")


class ThreadedJumpRepository(AsyncJumpRepository):
    """AsyncJumpRepository backed by SqlJumpRepository.

    Every call opens its own session on a worker thread, so calls issued
    concurrently (such as one hydration fetch per jump) never share a session.
    """

    def __init__(self, session_factory: sessionmaker, allow_number_shift: bool = True):
        """
        Initialize threaded repository.

        Args:
            session_factory: Factory producing sessions bound to the logbook
            allow_number_shift: Whether renumbering is permitted on this store
        """
        self.session_factory = session_factory
        self.allow_number_shift = allow_number_shift

    def _call(self, operation: Callable[[JumpRepository], T]) -> T:
        session = self.session_factory()
        try:
            return operation(SqlJumpRepository(session, self.allow_number_shift))
        finally:
            session.close()

    async def _run(self, operation: Callable[[JumpRepository], T]) -> T:
        return await asyncio.to_thread(self._call, operation)

    async def get_all(self) -> list[JumpRecord]:
        return await self._run(lambda repo: repo.get_all())

    async def get_by_id(self, jump_id: int) -> JumpRecord | None:
        return await self._run(lambda repo: repo.get_by_id(jump_id))

    async def upsert(self, record: JumpRecord) -> int:
        return await self._run(lambda repo: repo.upsert(record))

    async def delete(self, jump_id: int) -> int:
        return await self._run(lambda repo: repo.delete(jump_id))

    async def get_object(self, object_id: int) -> ExitObject | None:
        return await self._run(lambda repo: repo.get_object(object_id))

    async def get_object_thumbnail(self, object_id: int) -> bytes | None:
        return await self._run(lambda repo: repo.get_object_thumbnail(object_id))

    async def get_jump_type(self, jump_type_id: int) -> JumpType | None:
        return await self._run(lambda repo: repo.get_jump_type(jump_type_id))

    async def supports_number_shift(self) -> bool:
        return await self._run(lambda repo: repo.supports_number_shift())

    async def shift_numbers_up_from(
        self, threshold: int, exclude_id: int | None
    ) -> int:
        return await self._run(
            lambda repo: repo.shift_numbers_up_from(threshold, exclude_id)
        )

    async def shift_and_upsert(
        self, threshold: int, exclude_id: int | None, record: JumpRecord
    ) -> tuple[int, int]:
        return await self._run(
            lambda repo: repo.shift_and_upsert(threshold, exclude_id, record)
        )
