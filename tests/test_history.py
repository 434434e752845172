"""Test module for avpath.history

The tests are run using pytest.
"""

import logging

import pytest

from avpath.history import AvCommandHistory, AvHistoryEntry

###############################################################################
# AvCommandHistory Tests
###############################################################################


class TestCommandHistory:
    """Tests for push, undo and redo."""

    def test_new_history_is_empty(self):
        """A new history has no entries and nothing to undo or redo."""
        history = AvCommandHistory(10)

        assert len(history) == 0
        assert history.index == -1
        assert history.current is None
        assert not history.can_undo()
        assert not history.can_redo()

    def test_push_undo_redo(self):
        """Undo and redo walk along the pushed snapshots."""
        history = AvCommandHistory(10)
        history.push("M 0 0", "Initial")
        history.push("M 0 0 L 10 10", "Draw line")

        assert history.current.serialized_path == "M 0 0 L 10 10"
        assert history.undo().serialized_path == "M 0 0"
        assert history.can_redo()
        assert history.redo().serialized_path == "M 0 0 L 10 10"
        assert not history.can_redo()

    def test_single_entry_cannot_undo(self):
        """The first snapshot is the earliest reachable state."""
        history = AvCommandHistory(10)
        history.push("M 0 0", "Initial")

        assert not history.can_undo()
        assert history.undo() is None
        assert history.current.serialized_path == "M 0 0"

    def test_refused_undo_is_logged(self, caplog):
        """Refused moves are logged as warnings."""
        history = AvCommandHistory(10)
        with caplog.at_level(logging.WARNING, logger="avpath.history"):
            history.undo()
            history.redo()
        assert "cannot undo" in caplog.text
        assert "cannot redo" in caplog.text

    def test_undo_returns_state_to_restore(self):
        """Undo returns the entry moved back to, not the undone one."""
        history = AvCommandHistory(10)
        history.push("A", "first")
        history.push("B", "second")

        entry = history.undo()

        assert entry.label == "first"
        assert entry is history.current

    def test_redo_truncation(self):
        """Pushing after an undo discards the redo branch."""
        history = AvCommandHistory(10)
        history.push("A", "first")
        history.push("B", "second")
        history.undo()
        history.push("C", "third")

        assert history.redo() is None
        assert [entry.serialized_path for entry in history.entries] == ["A", "C"]

    def test_bounded_size(self):
        """Pushing beyond max_size evicts the oldest entries."""
        history = AvCommandHistory(10)
        for number in range(15):
            history.push(f"path-{number}", f"step {number}")

        assert len(history) == 10
        assert history.entries[0].serialized_path == "path-5"
        assert history.index == 9
        assert history.current.serialized_path == "path-14"

        for _ in range(9):
            assert history.undo() is not None
        assert history.undo() is None
        assert history.current.serialized_path == "path-5"

    def test_clear(self):
        """Clear removes all entries."""
        history = AvCommandHistory(10)
        history.push("A", "first")
        history.push("B", "second")
        history.clear()

        assert len(history) == 0
        assert not history.can_undo()
        assert not history.can_redo()

    def test_invalid_size(self):
        """The maximum size must be positive."""
        with pytest.raises(ValueError):
            AvCommandHistory(0)

    def test_entries_is_a_copy(self):
        """Changing the returned list does not change the history."""
        history = AvCommandHistory(10)
        history.push("A", "first")
        history.entries.clear()
        assert len(history) == 1


###############################################################################
# AvHistoryEntry Tests
###############################################################################


class TestHistoryEntry:
    """Tests for AvHistoryEntry."""

    def test_metadata_and_to_dict(self):
        """Metadata is kept and the timestamp is serialized in ISO format."""
        history = AvCommandHistory(10)
        entry = history.push("M 0 0", "Initial", {"tool": "pen"})

        data = entry.to_dict()
        assert data["serialized_path"] == "M 0 0"
        assert data["label"] == "Initial"
        assert data["metadata"] == {"tool": "pen"}
        assert data["timestamp"] == entry.timestamp.isoformat()

    def test_entry_is_immutable(self):
        """Entries are frozen."""
        entry = AvHistoryEntry("M 0 0", "Initial")
        with pytest.raises(AttributeError):
            entry.label = "changed"
