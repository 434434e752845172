"""Test module for avpath.model and avpath.common

The tests are run using pytest.
"""

import pytest

from avpath.common import SVG_CMDS, AvCommandKind
from avpath.model import (
    COMMAND_INFO,
    AvPathPoint,
    AvPathSegment,
    all_points,
    points_array,
    segments_equivalent,
)
from avpath.parser import parse

###############################################################################
# AvCommandKind / COMMAND_INFO
###############################################################################


class TestCommandKind:
    """Tests for the command letters and their metadata."""

    def test_from_letter(self):
        """Absolute and relative letters map onto the same kind."""
        assert AvCommandKind.from_letter("c") == AvCommandKind.CUBIC_CURVE_TO
        assert AvCommandKind.from_letter("C") == AvCommandKind.CUBIC_CURVE_TO
        assert AvCommandKind.ARC_TO.letter(relative=True) == "a"

    def test_unknown_letter(self):
        """Letters outside the micro-language are rejected."""
        with pytest.raises(ValueError):
            AvCommandKind.from_letter("X")

    def test_every_letter_has_info(self):
        """Every command letter has metadata."""
        for letter in SVG_CMDS:
            assert AvCommandKind.from_letter(letter) in COMMAND_INFO

    def test_argument_counts(self):
        """Argument counts of the micro-language."""
        counts = {kind.value: info.arguments for kind, info in COMMAND_INFO.items()}
        assert counts == {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}


###############################################################################
# AvPathPoint / AvPathSegment
###############################################################################


class TestSegment:
    """Tests for points and segments."""

    def test_lists_are_stored_as_tuples(self):
        """Segments are immutable values."""
        segment = AvPathSegment("seg-0", "a", [AvPathPoint(1, 2, "p-0")], [5, 5, 0, 1, 0])

        assert isinstance(segment.points, tuple)
        assert isinstance(segment.raw_parameters, tuple)
        assert segment.kind == AvCommandKind.ARC_TO
        assert segment.is_relative

    def test_anchor_and_control_points(self):
        """The anchor is the last point, control handles come before it."""
        segment = parse("M 0 0 C 1 1 2 2 3 3").segments[1]

        assert segment.anchor.xy == (3, 3)
        assert [point.xy for point in segment.control_points] == [(1, 1), (2, 2)]
        assert parse("M 0 0 Z").segments[1].anchor is None

    def test_point_helpers(self):
        """moved_to keeps the id, distance_to is Euclidean."""
        point = AvPathPoint(0, 0, "p-0", True, "p-1")
        moved = point.moved_to(3, 4)

        assert moved.id == "p-0"
        assert moved.associated_anchor_id == "p-1"
        assert moved.distance_to(point) == 5.0

    def test_to_from_dict(self):
        """Segments survive conversion to dictionaries."""
        segment = parse("M 0 0 A 5 5 0 1 0 10 0").segments[1]
        assert AvPathSegment.from_dict(segment.to_dict()) == segment

        cubic = parse("M 0 0 C 1 1 2 2 3 3").segments[1]
        assert AvPathSegment.from_dict(cubic.to_dict()) == cubic


###############################################################################
# Helpers
###############################################################################


class TestHelpers:
    """Tests for the module level helpers."""

    def test_points_array(self):
        """Coordinates are returned in drawing order."""
        segments = parse("M 0 0 Q 1 2 3 4").segments

        assert points_array(segments).tolist() == [[0, 0], [1, 2], [3, 4]]
        assert points_array([]).shape == (0, 2)
        assert len(all_points(segments)) == 3

    def test_relative_and_absolute_are_equivalent(self):
        """Letter case and ids do not matter for equivalence."""
        first = parse("M 10 10 l 5 5 a 5 5 0 0 1 10 0").segments
        second = parse("M 10 10 L 15 15 A 5 5 0 0 1 25 15").segments
        assert segments_equivalent(first, second)

    def test_different_geometry(self):
        """Different coordinates or arc parameters are not equivalent."""
        base = parse("M 0 0 A 5 5 0 0 1 10 0").segments
        assert not segments_equivalent(base, parse("M 0 0 A 5 5 0 1 1 10 0").segments)
        assert not segments_equivalent(base, parse("M 0 0 A 5 5 0 0 1 10 1").segments)
        assert not segments_equivalent(base, base[:1])
