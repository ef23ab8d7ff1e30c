import logging
from collections.abc import Iterable

from ..state.entries import JumpViewEntry

logger = logging.getLogger(__name__)


class ExpansionTracker:
    """Tracks the single expanded jump of a list, by jump id."""

    def __init__(self):
        self.expanded_id: int | None = None

    def toggle(self, entry: JumpViewEntry, all_entries: Iterable[JumpViewEntry]) -> bool:
        """
        Expand the entry, or collapse it when it is already expanded.

        Expanding collapses every other expanded entry of the full set,
        including one hidden by the current filter.

        Args:
            entry: Entry the user toggled
            all_entries: The full set the entry belongs to

        Returns:
            The new expanded state of entry
        """
        if entry.is_expanded:
            entry.is_expanded = False
            if self.expanded_id == entry.jump_id:
                self.expanded_id = None
            return False

        for other in all_entries:
            if other is not entry and other.is_expanded:
                other.is_expanded = False

        entry.is_expanded = True
        self.expanded_id = entry.jump_id
        logger.debug(f"Expanded jump {entry.jump_id}")
        return True

    def clear(self) -> None:
        """Forget the expanded entry without touching its flag."""
        self.expanded_id = None

    def forget_if_absent(self, visible_ids: set[int]) -> None:
        """Clear the pointer when the expanded entry is no longer visible."""
        if self.expanded_id is not None and self.expanded_id not in visible_ids:
            logger.debug(f"Expanded jump {self.expanded_id} filtered out")
            self.clear()
