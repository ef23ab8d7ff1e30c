"""Observable jump list: load, background hydration, search, expansion, save."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..domain.exceptions import LogbookError, StorageError
from ..domain.models import JumpDetails, JumpRecord
from ..logging_config import LogCategory, diagnostic
from ..repositories.interfaces import AsyncJumpRepository
from ..services.expansion_tracker import ExpansionTracker
from ..services.filter_service import filter_entries, normalize_query
from ..services.hydration_service import HydrationReport, HydrationService
from ..services.numbering_service import ConfirmShift, NumberingService
from .dispatcher import UiDispatcher
from .entries import HydrationResult, JumpViewEntry
from .observable import ObservableObject

logger = logging.getLogger(__name__)

FILTER_PROPERTIES = ("jumps", "filtered_count", "count_summary", "page_title")
FULL_SET_PROPERTIES = ("all_jumps", "total_count")


@dataclass
class SaveOutcome:
    """Result of JumpListState.save_jump.

    Attributes:
        success: Whether the jump was stored
        jump_id: Id of the stored jump
        shifted: Jumps renumbered to make room
        error: The failure when success is False
    """

    success: bool
    jump_id: int | None = None
    shifted: int = 0
    error: LogbookError | None = None


class JumpListState(ObservableObject):
    """State container behind the jump list screen.

    Owns the full set of loaded jumps, the search query and the visible
    subset derived from them. All mutations happen on the event loop that
    calls load(); background lookups run on worker threads through the
    repository and their results are marshalled back through the dispatcher.
    """

    def __init__(
        self,
        repo: AsyncJumpRepository,
        dispatcher: UiDispatcher | None = None,
    ):
        """
        Initialize jump list state.

        Args:
            repo: Non-blocking jump repository
            dispatcher: UI loop dispatcher, bound on first load when omitted
        """
        super().__init__()
        self.repo = repo
        self.dispatcher = dispatcher or UiDispatcher()
        self.hydration_service = HydrationService(repo)
        self.numbering_service = NumberingService(repo)
        self.expansion = ExpansionTracker()

        self._all: list[JumpViewEntry] = []
        self._index: dict[int, JumpViewEntry] = {}
        self._filtered: list[JumpViewEntry] = []
        self._query = ""
        self._visible_ids: set[int] = set()
        self._is_busy = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._generation = 0
        self._save_lock = asyncio.Lock()

        self.hydration_task: asyncio.Task | None = None
        self.last_error: LogbookError | None = None

    @property
    def all_jumps(self) -> tuple[JumpViewEntry, ...]:
        return tuple(self._all)

    @property
    def jumps(self) -> tuple[JumpViewEntry, ...]:
        """The visible jumps for the current query."""
        return tuple(self._filtered)

    @property
    def total_count(self) -> int:
        return len(self._all)

    @property
    def filtered_count(self) -> int:
        return len(self._filtered)

    @property
    def count_summary(self) -> str:
        return f"{self.filtered_count}/{self.total_count}"

    @property
    def page_title(self) -> str:
        return f"Jumps ({self.count_summary})"

    @property
    def is_busy(self) -> bool:
        return self._is_busy

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def expanded_id(self) -> int | None:
        return self.expansion.expanded_id

    @property
    def query(self) -> str:
        return self._query

    @query.setter
    def query(self, value: str | None) -> None:
        value = value or ""
        if value == self._query:
            return
        self._query = value
        self.notify_property_changed("query")
        self._apply_filter()

    def find(self, jump_id: int) -> JumpViewEntry | None:
        """Get the loaded entry for a jump id."""
        return self._index.get(jump_id)

    async def load(self) -> bool:
        """
        Load all jumps and start hydrating them in the background.

        Returns once the unhydrated list is published. A load already in
        progress turns this call into a no-op.

        Returns:
            True when a new list was published
        """
        self.dispatcher.bind_running_loop()
        if self._is_busy:
            logger.debug("Load already in progress, request ignored")
            return False

        self._set_busy(True)
        try:
            try:
                records = await self.repo.get_all()
            except StorageError as e:
                # The previous full set stays published
                self.last_error = e
                logger.error(
                    f"Loading jumps failed: {e}",
                    extra=diagnostic(LogCategory.RUNTIME_ERROR),
                )
                return False

            self._generation += 1
            generation = self._generation
            entries = [JumpViewEntry(record, generation) for record in records]
            self._publish(entries)
            self.last_error = None
            logger.info(f"Loaded {len(entries)} jump(s), generation {generation}")

            snapshot = list(entries)
            self.hydration_task = asyncio.create_task(
                self._hydrate(snapshot, generation)
            )
            return True
        finally:
            self._set_busy(False)

    async def wait_for_hydration(self) -> HydrationReport | None:
        """Wait for the hydration of the latest load to finish."""
        if self.hydration_task is None:
            return None
        return await self.hydration_task

    def cancel_hydration(self) -> None:
        """Cancel the hydration of the latest load, if still running."""
        if self.hydration_task is not None and not self.hydration_task.done():
            self.hydration_task.cancel()

    def toggle_expand(self, target: JumpViewEntry | int | None) -> bool:
        """
        Expand a jump, collapsing any other; collapse it if already expanded.

        Only jumps visible under the current query can be toggled, so the
        expanded pointer always names a visible jump.

        Args:
            target: Entry or jump id from the visible set

        Returns:
            The new expanded state, False for unknown or hidden targets
        """
        if target is None:
            return False
        jump_id = target.jump_id if isinstance(target, JumpViewEntry) else target
        entry = self._index.get(jump_id)
        if entry is None:
            logger.debug(f"Toggle ignored for jump {jump_id} not in the current list")
            return False
        if jump_id not in self._visible_ids:
            logger.debug(f"Toggle ignored for jump {jump_id} hidden by the query")
            return False

        expanded = self.expansion.toggle(entry, self._all)
        self.notify_property_changed("expanded_id")
        return expanded

    def toggle_expand_threadsafe(self, target: JumpViewEntry | int) -> None:
        """Schedule toggle_expand on the UI loop from any thread."""
        self.dispatcher.post(self.toggle_expand, target)

    async def save_jump(
        self, record: JumpRecord, confirm_shift: ConfirmShift | None = None
    ) -> SaveOutcome:
        """
        Save a new or edited jump, resolving number conflicts, then reload.

        Args:
            record: Jump to store
            confirm_shift: Asked before renumbering later jumps

        Returns:
            SaveOutcome; failures carry the error instead of raising
        """
        async with self._save_lock:
            try:
                result = await self.numbering_service.save(record, confirm_shift)
            except LogbookError as e:
                self.last_error = e
                logger.warning(f"Save of jump number {record.jump_number} failed: {e}")
                return SaveOutcome(success=False, error=e)

            await self._reload_when_idle()
            return SaveOutcome(
                success=True, jump_id=result.jump_id, shifted=result.shifted
            )

    async def delete_jump(self, jump_id: int) -> bool:
        """
        Delete a jump and drop it from the loaded set.

        Returns:
            True if a stored jump was removed
        """
        try:
            removed = await self.repo.delete(jump_id)
        except StorageError as e:
            self.last_error = e
            logger.error(
                f"Deleting jump {jump_id} failed: {e}",
                extra=diagnostic(LogCategory.RUNTIME_ERROR),
            )
            return False

        if not removed:
            return False

        entry = self._index.pop(jump_id, None)
        if entry is not None:
            self._all = [e for e in self._all if e is not entry]
            if self.expansion.expanded_id == jump_id:
                self.expansion.clear()
            self.notify_property_changed(*FULL_SET_PROPERTIES)
            self._apply_filter()
        return True

    async def get_details(self, jump_id: int) -> JumpDetails | None:
        """
        Get a stored jump with its exit object and jump type.

        Raises:
            StorageError: If a lookup fails
        """
        record = await self.repo.get_by_id(jump_id)
        if record is None:
            return None

        exit_object = None
        if record.has_object():
            exit_object = await self.repo.get_object(record.object_id)

        jump_type = None
        if record.jump_type_id:
            jump_type = await self.repo.get_jump_type(record.jump_type_id)

        return JumpDetails(record=record, exit_object=exit_object, jump_type=jump_type)

    def _set_busy(self, busy: bool) -> None:
        if busy:
            self._idle.clear()
        else:
            self._idle.set()
        if self._is_busy != busy:
            self._is_busy = busy
            self.notify_property_changed("is_busy")

    def _publish(self, entries: Sequence[JumpViewEntry]) -> None:
        self._all = list(entries)
        self._index = {entry.jump_id: entry for entry in self._all}
        self.expansion.clear()
        self.notify_property_changed(*FULL_SET_PROPERTIES)
        self._apply_filter()

    def _apply_filter(self) -> None:
        self._filtered = filter_entries(self._all, self._query)
        self._visible_ids = {entry.jump_id for entry in self._filtered}
        self.expansion.forget_if_absent(self._visible_ids)
        self.notify_property_changed(*FILTER_PROPERTIES)

    def _apply_hydration(self, entry: JumpViewEntry, result: HydrationResult) -> bool:
        if entry.generation != self._generation or self._index.get(entry.jump_id) is not entry:
            logger.debug(f"Dropped stale hydration for jump {entry.jump_id}")
            return False
        self.dispatcher.post(entry.apply_hydration, result)
        return True

    async def _hydrate(
        self, snapshot: list[JumpViewEntry], generation: int
    ) -> HydrationReport:
        report = await self.hydration_service.hydrate_batch(
            snapshot, self._apply_hydration
        )
        if report.discarded:
            logger.info(
                f"Discarded {report.discarded} stale hydration result(s) "
                f"from load {generation}",
                extra=diagnostic(LogCategory.DATA_CONSISTENCY),
            )
        # Exit names only become searchable once hydrated
        if generation == self._generation and normalize_query(self._query):
            self._apply_filter()
        return report

    async def _reload_when_idle(self) -> None:
        while self._is_busy:
            await self._idle.wait()
        await self.load()
