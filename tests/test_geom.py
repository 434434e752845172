"""Test module for avpath.geom

The tests are run using pytest.
These tests ensure that all functions and interfaces in src/avpath/geom.py
remain working correctly after changes and refactoring.
"""

import pytest
import svgpathtools

from avpath.geom import AvBox, GeomMath, bounding_box, curve_bounding_box, path_bounding_box, to_svgpathtools_segments
from avpath.parser import parse
from avpath.transform import transform_affine

###############################################################################
# GeomMath Tests
###############################################################################


class TestGeomMath:
    """Test class for GeomMath functionality."""

    def test_rotation_trafo(self):
        """A quarter turn around (10, 10) maps (20, 10) onto (10, 20)."""
        segments = parse("M 20 10 L 10 10").segments
        rotated = transform_affine(segments, GeomMath.rotation_trafo(90, 10, 10))

        assert rotated[0].anchor.xy == pytest.approx((10, 20))
        assert rotated[1].anchor.xy == pytest.approx((10, 10))

    def test_scale_trafo(self):
        """The origin of a scaling stays in place."""
        segments = parse("M 10 10 L 20 20").segments
        scaled = transform_affine(segments, GeomMath.scale_trafo(2, 0.5, 10, 10))

        assert scaled[0].anchor.xy == (10.0, 10.0)
        assert scaled[1].anchor.xy == (30.0, 15.0)

    def test_snap_to_grid(self):
        """Values are rounded to the nearest multiple of the interval."""
        assert GeomMath.snap_to_grid(13, 10) == 10.0
        assert GeomMath.snap_to_grid(16, 10) == 20.0
        assert GeomMath.snap_to_grid(-16, 10) == -20.0
        assert GeomMath.snap_to_grid(0.3, 0.25) == 0.25

    def test_snap_to_grid_invalid_interval(self):
        """The grid interval must be positive."""
        with pytest.raises(ValueError):
            GeomMath.snap_to_grid(5, 0)


###############################################################################
# AvBox Tests
###############################################################################


class TestAvBox:
    """Test class for AvBox functionality."""

    def test_avbox_initialization_reversed(self):
        """Test AvBox initialization with reversed coordinates."""
        box = AvBox(xmin=30.0, ymin=40.0, xmax=10.0, ymax=20.0)

        # Should automatically reorder
        assert box.extent == (10.0, 20.0, 30.0, 40.0)

    def test_avbox_properties(self):
        """Test AvBox property calculations."""
        box = AvBox(xmin=10.0, ymin=20.0, xmax=30.0, ymax=40.0)

        assert box.x == 10.0
        assert box.y == 20.0
        assert box.width == 20.0
        assert box.height == 20.0
        assert box.centroid == (20.0, 30.0)

    def test_avbox_union(self):
        """The union contains both boxes."""
        box = AvBox(0, 0, 10, 10).union(AvBox(5, -5, 20, 5))
        assert box.extent == (0.0, -5.0, 20.0, 10.0)

    def test_avbox_str_representation(self):
        """Test AvBox string representation."""
        str_repr = str(AvBox(xmin=10.0, ymin=20.0, xmax=30.0, ymax=40.0))

        assert "AvBox" in str_repr
        assert "xmin=10.0" in str_repr
        assert "width=20.0" in str_repr

    def test_avbox_immutability(self):
        """Test that AvBox properties are read-only."""
        box = AvBox(xmin=10.0, ymin=20.0, xmax=30.0, ymax=40.0)

        with pytest.raises(AttributeError):
            box.xmin = 15.0

        with pytest.raises(AttributeError):
            box.width = 5.0

    def test_avbox_to_dict(self):
        """The dictionary of an AvBox carries corners, position and size."""
        box = AvBox(xmin=10.0, ymin=20.0, xmax=30.0, ymax=40.0)

        data = box.to_dict()

        assert data == {
            "xmin": 10.0,
            "ymin": 20.0,
            "xmax": 30.0,
            "ymax": 40.0,
            "x": 10.0,
            "y": 20.0,
            "width": 20.0,
            "height": 20.0,
        }


###############################################################################
# Bounding box Tests
###############################################################################


class TestBoundingBox:
    """Tests for the bounding boxes of points and paths."""

    def test_empty_is_zero_box(self):
        """No points give a zero box at the origin."""
        box = bounding_box([])
        assert box.extent == (0.0, 0.0, 0.0, 0.0)
        assert path_bounding_box([]).extent == (0.0, 0.0, 0.0, 0.0)
        assert curve_bounding_box([]).extent == (0.0, 0.0, 0.0, 0.0)

    def test_path_box_includes_control_points(self):
        """By default control handles count towards the box."""
        segments = parse("M 0 0 C 0 20 10 20 10 0").segments

        assert path_bounding_box(segments).extent == (0.0, 0.0, 10.0, 20.0)
        assert path_bounding_box(segments, include_control_points=False).extent == (0.0, 0.0, 10.0, 0.0)

    def test_curve_box_of_cubic(self):
        """The drawn cubic curve only reaches 3/4 of its handle height."""
        box = curve_bounding_box(parse("M 0 0 C 0 20 10 20 10 0").segments)

        assert box.extent == pytest.approx((0.0, 0.0, 10.0, 15.0))

    def test_curve_box_of_arc(self):
        """A half circle bulges beyond its end points."""
        box = curve_bounding_box(parse("M 0 0 A 10 10 0 0 1 20 0").segments)

        assert box.width == pytest.approx(20.0)
        assert box.height == pytest.approx(10.0)

    def test_box_of_relative_path(self):
        """Boxes are computed from the absolute coordinates."""
        box = path_bounding_box(parse("m 10 10 l 5 5 h -20").segments)
        assert box.extent == (-5.0, 10.0, 15.0, 15.0)


###############################################################################
# svgpathtools conversion Tests
###############################################################################


class TestSvgPathTools:
    """Tests for the conversion into svgpathtools segments."""

    def test_lines_and_close(self):
        """ClosePath adds the closing line."""
        result = to_svgpathtools_segments(parse("M 0 0 L 10 0 L 10 10 Z").segments)

        assert len(result) == 3
        assert all(isinstance(seg, svgpathtools.Line) for seg in result)
        assert result[-1].start == complex(10, 10)
        assert result[-1].end == complex(0, 0)

    def test_curves_and_arcs(self):
        """Curves and arcs map onto their svgpathtools counterparts."""
        result = to_svgpathtools_segments(parse("M 0 0 C 1 1 2 2 3 3 Q 4 4 5 5 A 5 5 0 0 1 15 5").segments)

        assert isinstance(result[0], svgpathtools.CubicBezier)
        assert isinstance(result[1], svgpathtools.QuadraticBezier)
        assert isinstance(result[2], svgpathtools.Arc)

    def test_zero_radius_arc_is_line(self):
        """An arc with zero radius is drawn as a straight line."""
        result = to_svgpathtools_segments(parse("M 0 0 A 0 5 0 0 1 10 0").segments)
        assert isinstance(result[0], svgpathtools.Line)
