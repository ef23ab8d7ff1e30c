"""Free-text search over loaded jumps."""

from collections.abc import Sequence

from ..state.entries import JumpViewEntry


def normalize_query(query: str | None) -> str:
    """Trim a query; None and whitespace-only queries become empty."""
    return (query or "").strip()


def matches(entry: JumpViewEntry, query: str) -> bool:
    """
    Check whether a jump matches a search query.

    A jump matches when its number, notes, exit name, location name or
    displayed local date contains the query, ignoring case. An empty query
    matches everything.

    Args:
        entry: The jump to test
        query: Query text, already trimmed

    Returns:
        True if the jump should be visible
    """
    if not query:
        return True

    needle = query.casefold()

    if entry.jump_number is not None and needle in str(entry.jump_number):
        return True

    for text in (entry.notes, entry.exit_name, entry.location_name, entry.date_text):
        if text and needle in text.casefold():
            return True

    return False


def filter_entries(
    entries: Sequence[JumpViewEntry], query: str | None
) -> list[JumpViewEntry]:
    """
    Compute the visible subset of the full set for a query.

    Always recomputed from the full set, preserving its order.

    Args:
        entries: The full ordered set of loaded jumps
        query: Raw query text

    Returns:
        Matching entries in their original order
    """
    criteria = normalize_query(query)
    if not criteria:
        return list(entries)
    return [entry for entry in entries if matches(entry, criteria)]
