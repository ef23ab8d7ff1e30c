from baselog.domain.models import JumpRecord
from baselog.services.expansion_tracker import ExpansionTracker
from baselog.state.entries import JumpViewEntry


def make_entries(count):
    return [JumpViewEntry(JumpRecord(jump_id=i, jump_number=i)) for i in range(1, count + 1)]


def test_toggle_expands_and_collapses():
    tracker = ExpansionTracker()
    entries = make_entries(3)

    assert tracker.toggle(entries[0], entries) is True
    assert entries[0].is_expanded
    assert tracker.expanded_id == 1

    assert tracker.toggle(entries[0], entries) is False
    assert not entries[0].is_expanded
    assert tracker.expanded_id is None


def test_expanding_collapses_the_previous_entry():
    """Test at most one entry is expanded at a time."""
    tracker = ExpansionTracker()
    entries = make_entries(3)

    tracker.toggle(entries[0], entries)
    tracker.toggle(entries[2], entries)

    assert [e.is_expanded for e in entries] == [False, False, True]
    assert tracker.expanded_id == 3


def test_hidden_expanded_entry_is_collapsed_on_next_expand():
    """Test an entry filtered out of view is still collapsed."""
    tracker = ExpansionTracker()
    entries = make_entries(3)

    tracker.toggle(entries[0], entries)
    tracker.forget_if_absent({2, 3})
    assert tracker.expanded_id is None
    assert entries[0].is_expanded

    tracker.toggle(entries[1], entries)

    assert sum(1 for e in entries if e.is_expanded) == 1
    assert entries[1].is_expanded


def test_forget_if_absent_keeps_visible_pointer():
    tracker = ExpansionTracker()
    entries = make_entries(2)
    tracker.toggle(entries[1], entries)

    tracker.forget_if_absent({1, 2})

    assert tracker.expanded_id == 2
