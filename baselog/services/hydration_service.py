"""Background enrichment of listed jumps with exit object data."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..domain.exceptions import StorageError
from ..domain.models import JumpRecord
from ..logging_config import LogCategory, diagnostic
from ..repositories.interfaces import AsyncJumpRepository
from ..state.entries import HydrationResult, JumpViewEntry

logger = logging.getLogger(__name__)

ApplyCallback = Callable[[JumpViewEntry, HydrationResult], bool]


@dataclass
class HydrationReport:
    """Outcome of hydrating one batch.

    Attributes:
        applied: Entries whose results were applied
        discarded: Entries whose results were dropped as stale
        failed: Entries degraded to the empty state after a storage error
    """

    applied: int = 0
    discarded: int = 0
    failed: int = 0


class HydrationService:
    """Fetches exit objects and thumbnails for jumps, one pipeline per jump."""

    def __init__(self, repo: AsyncJumpRepository):
        """
        Initialize hydration service.

        Args:
            repo: Repository used for object and thumbnail lookups
        """
        self.repo = repo

    async def fetch(self, record: JumpRecord) -> HydrationResult:
        """
        Fetch the exit object and its thumbnail for one jump.

        Raises:
            StorageError: If a lookup fails
        """
        if not record.has_object():
            return HydrationResult.empty()

        exit_object = await self.repo.get_object(record.object_id)
        if exit_object is None:
            logger.warning(
                f"Jump {record.jump_id} references missing object {record.object_id}",
                extra=diagnostic(LogCategory.REFERENCE_INTEGRITY),
            )
            return HydrationResult.empty()

        thumbnail = await self.repo.get_object_thumbnail(exit_object.object_id)
        return HydrationResult(exit_object=exit_object, thumbnail=thumbnail or None)

    async def hydrate_entry(
        self, entry: JumpViewEntry, apply: ApplyCallback
    ) -> tuple[bool, bool]:
        """
        Hydrate one entry, degrading to the empty state on storage errors.

        Args:
            entry: Entry to hydrate
            apply: Applies the result on the UI context; returns False when
                the result was discarded as stale

        Returns:
            Tuple of (applied, failed)
        """
        failed = False
        try:
            result = await self.fetch(entry.record)
        except StorageError as e:
            logger.warning(
                f"Hydration of jump {entry.jump_id} failed: {e}",
                extra=diagnostic(LogCategory.RUNTIME_ERROR),
            )
            result = HydrationResult.empty()
            failed = True
        return apply(entry, result), failed

    async def hydrate_batch(
        self, entries: Sequence[JumpViewEntry], apply: ApplyCallback
    ) -> HydrationReport:
        """
        Hydrate every entry of a load snapshot concurrently.

        One entry failing never stops the others.

        Args:
            entries: Stable snapshot of the entries of one load
            apply: Applies a result on the UI context

        Returns:
            HydrationReport with per-batch counts
        """
        report = HydrationReport()
        if not entries:
            return report

        outcomes = await asyncio.gather(
            *(self.hydrate_entry(entry, apply) for entry in entries),
            return_exceptions=True,
        )

        for entry, outcome in zip(entries, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.error(
                    f"Unexpected hydration error for jump {entry.jump_id}: {outcome!r}",
                    extra=diagnostic(LogCategory.RUNTIME_ERROR),
                )
                report.failed += 1
                continue
            applied, failed = outcome
            if applied:
                report.applied += 1
            else:
                report.discarded += 1
            if failed:
                report.failed += 1

        logger.info(
            f"Hydrated {report.applied} jump(s), {report.failed} failed, "
            f"{report.discarded} discarded"
        )
        return report
