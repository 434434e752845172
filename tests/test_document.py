"""Test module for avpath.document

The tests are run using pytest.
"""

import pytest

from avpath.config import AvPathEngineConfig
from avpath.document import AvPathDocument
from avpath.editing import append_point, delete_point, move_point
from avpath.errors import DiagnosticKind
from avpath.transform import rotate, translate

###############################################################################
# AvPathDocument Tests
###############################################################################


class TestPathDocument:
    """Tests for editing a path document with undo and redo."""

    def test_initial_state(self):
        """The initial text is the first history entry."""
        document = AvPathDocument("M 0 0 L 10 10")

        assert document.text == "M 0 0 L 10 10"
        assert len(document.segments) == 2
        assert len(document.history) == 1
        assert document.history.current.label == "Initial path"
        assert not document.history.can_undo()

    def test_set_text_only_records_changes(self):
        """Setting the current text again records nothing."""
        document = AvPathDocument("M 0 0")

        assert not document.set_text("M 0 0", "Same")
        assert document.set_text("M 0 0 L 1 1", "Draw")
        assert len(document.history) == 2

    def test_apply_writes_canonical_text(self):
        """Segment functions are applied and the result is stored in canonical form."""
        document = AvPathDocument("M 0 0 l 10 10")

        assert document.apply(translate, "Move", 5, 5)
        assert document.text == "M 5 5 L 15 15"

    def test_apply_without_change(self):
        """A function that changes nothing records nothing."""
        document = AvPathDocument("M 0 0 L 10 10")

        assert not document.apply(translate, "Move", 0, 0)
        assert len(document.history) == 1

    def test_undo_redo(self):
        """Undo and redo restore text and segments."""
        document = AvPathDocument("M 0 0 L 10 10")
        document.apply(move_point, "Drag", 1, 0, 13, 17, grid=document.config.grid_snap_interval)
        assert document.text == "M 0 0 L 10 20"

        entry = document.undo()
        assert entry.label == "Initial path"
        assert document.text == "M 0 0 L 10 10"
        assert document.segments[1].anchor.xy == (10, 10)

        entry = document.redo()
        assert entry.label == "Drag"
        assert document.text == "M 0 0 L 10 20"

    def test_undo_at_start(self):
        """Undo on the initial state changes nothing."""
        document = AvPathDocument("M 0 0")

        assert document.undo() is None
        assert document.text == "M 0 0"

    def test_pen_tool_on_empty_document(self):
        """Drawing with the pen starts the path with a MoveTo."""
        document = AvPathDocument()
        document.apply(append_point, "Pen", 5, 5)
        document.apply(append_point, "Pen", 10, 5)

        assert document.text == "M 5 5 L 10 5"
        assert len(document.history) == 3

    def test_ids_are_stable_across_edits(self):
        """Unchanged points keep their ids after an edit."""
        document = AvPathDocument("M 0 0 L 10 10 L 20 0")
        first_id = document.segments[0].anchor.id
        last_id = document.segments[2].anchor.id

        document.apply(delete_point, "Delete", 1, 0)

        assert document.text == "M 0 0 L 20 0"
        assert document.segments[0].anchor.id == first_id
        assert document.segments[1].anchor.id == last_id

    def test_history_depth_from_config(self):
        """The configured history depth bounds the undo steps."""
        document = AvPathDocument("M 0 0", AvPathEngineConfig(max_undo_history=3))
        for number in range(1, 6):
            document.set_text(f"M {number} 0", "Move")

        assert len(document.history) == 3
        document.undo()
        document.undo()
        assert document.undo() is None
        assert document.text == "M 3 0"

    def test_diagnostics_of_current_text(self):
        """Diagnostics of the current text are available."""
        document = AvPathDocument("M 0 0 L 10")
        assert document.diagnostics[0].kind == DiagnosticKind.ARGUMENT_COUNT

    def test_drag_derived_smooth_handle(self):
        """Dragging the derived handle of an S segment is recorded and kept."""
        document = AvPathDocument("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0")

        assert document.apply(move_point, "Drag", 2, 0, 50, 50)

        assert document.text == "M 0 0 C 0 10 10 10 10 0 C 50 50 20 -10 20 0"
        assert document.segments[2].points[0].xy == (50, 50)
        assert len(document.history) == 2

    def test_rotate_keeps_horizontal_lines(self):
        """Rotating a path with H and V segments keeps both coordinates of every anchor."""
        document = AvPathDocument("M 0 0 H 10 V 10")

        document.apply(rotate, "Rotate", 90)

        anchors = [value for segment in document.segments for value in segment.anchor.xy]
        assert anchors == pytest.approx([0, 0, 0, 10, -10, 10])

    def test_move_point_snaps_to_configured_grid(self):
        """With snap the dragged point lands on the grid of the configuration."""
        document = AvPathDocument("M 0 0 L 10 10", AvPathEngineConfig(grid_snap_interval=5.0))

        assert document.move_point(1, 0, 13, 17, snap=True)
        assert document.text == "M 0 0 L 15 15"
        assert document.history.current.label == "Move point"

    def test_move_point_without_snap(self):
        """Without snap the point lands exactly where it is dropped."""
        document = AvPathDocument("M 0 0 L 10 10")

        assert document.move_point(1, 0, 13, 17, label="Drag")
        assert document.text == "M 0 0 L 13 17"
        assert document.history.current.label == "Drag"
