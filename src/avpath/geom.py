"""Handling geometries: boxes, affine transformations and path extents"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import svgpathtools

from avpath.common import AvCommandKind
from avpath.model import AvPathPoint, AvPathSegment, all_points

SvgSegment = Union[svgpathtools.Line, svgpathtools.QuadraticBezier, svgpathtools.CubicBezier, svgpathtools.Arc]


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def rotation_trafo(angle_degrees: float, origin_x: float = 0.0, origin_y: float = 0.0) -> List[float]:
        """Affine transformation rotating by _angle_degrees_ around (origin_x, origin_y)."""
        angle = math.radians(angle_degrees)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return [
            cos_a,
            -sin_a,
            sin_a,
            cos_a,
            origin_x - cos_a * origin_x + sin_a * origin_y,
            origin_y - sin_a * origin_x - cos_a * origin_y,
        ]

    @staticmethod
    def scale_trafo(scale_x: float, scale_y: float, origin_x: float = 0.0, origin_y: float = 0.0) -> List[float]:
        """Affine transformation scaling by (scale_x, scale_y) relative to (origin_x, origin_y)."""
        return [scale_x, 0.0, 0.0, scale_y, origin_x * (1.0 - scale_x), origin_y * (1.0 - scale_y)]

    @staticmethod
    def snap_to_grid(value: float, interval: float) -> float:
        """Round _value_ to the nearest multiple of _interval_."""
        if interval <= 0:
            raise ValueError(f"Grid interval must be positive, got {interval}")
        return float(round(value / interval) * interval)


###############################################################################
# AvBox
###############################################################################
@dataclass
class AvBox:
    """
    Represents a rectangular box with coordinates and dimensions.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        self._xmin = float(xmin)
        self._ymin = float(ymin)
        self._xmax = float(xmax)
        self._ymax = float(ymax)

        # Normalize coordinates to ensure xmin ≤ xmax and ymin ≤ ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def x(self) -> float:
        """float: The left edge (same as xmin)."""
        return self._xmin

    @property
    def y(self) -> float:
        """float: The top edge (same as ymin)."""
        return self._ymin

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    @property
    def centroid(self) -> Tuple[float, float]:
        """The centroid of the box as (x, y)."""
        return (self._xmin + self._xmax) / 2, (self._ymin + self._ymax) / 2

    def union(self, other: AvBox) -> AvBox:
        """Return the smallest box containing this box and _other_."""
        xmin, ymin, xmax, ymax = other.extent
        return AvBox(min(self._xmin, xmin), min(self._ymin, ymin), max(self._xmax, xmax), max(self._ymax, ymax))

    def __str__(self):
        return (
            f"AvBox(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )

    def to_dict(self) -> dict:
        """Convert the AvBox instance to a dictionary."""
        return {
            "xmin": self.xmin,
            "ymin": self.ymin,
            "xmax": self.xmax,
            "ymax": self.ymax,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


###############################################################################
# Bounding boxes
###############################################################################


def bounding_box(points: Sequence[AvPathPoint]) -> AvBox:
    """Return the min/max box around the given _points_; a zero box at the origin if empty."""
    if not points:
        return AvBox(0.0, 0.0, 0.0, 0.0)
    xs = [point.x for point in points]
    ys = [point.y for point in points]
    return AvBox(min(xs), min(ys), max(xs), max(ys))


def path_bounding_box(segments: Sequence[AvPathSegment], include_control_points: bool = True) -> AvBox:
    """Return the box around the points of _segments_ (optionally anchors only)."""
    points = all_points(segments)
    if not include_control_points:
        points = [point for point in points if not point.is_control_point]
    return bounding_box(points)


def curve_bounding_box(segments: Sequence[AvPathSegment]) -> AvBox:
    """Return the exact extent of the drawn geometry of _segments_.

    Unlike path_bounding_box, control handles lying outside the curve do not widen
    the box, and arcs bulging beyond their end points do. The extents are computed
    by svgpathtools.
    """
    box = path_bounding_box(segments, include_control_points=False)
    if not segments:
        return box
    for geometry in to_svgpathtools_segments(segments):
        xmin, xmax, ymin, ymax = geometry.bbox()
        box = box.union(AvBox(xmin, ymin, xmax, ymax))
    return box


def to_svgpathtools_segments(segments: Sequence[AvPathSegment]) -> List[SvgSegment]:
    """Convert _segments_ into svgpathtools segments (complex coordinates).

    MoveTo produces no segment; degenerate arcs (zero radius) become lines and arcs
    ending at their start point are omitted, as a renderer would do.
    """
    result: List[SvgSegment] = []
    current = complex(0, 0)
    start = complex(0, 0)
    for segment in segments:
        kind = segment.kind
        coords = [complex(point.x, point.y) for point in segment.points]

        if kind == AvCommandKind.CLOSE_PATH:
            if current != start:
                result.append(svgpathtools.Line(current, start))
            current = start
            continue
        if not coords:
            continue

        end = coords[-1]
        if kind == AvCommandKind.MOVE_TO:
            start = end
        elif kind in (AvCommandKind.LINE_TO, AvCommandKind.HORIZONTAL_LINE_TO, AvCommandKind.VERTICAL_LINE_TO):
            result.append(svgpathtools.Line(current, end))
        elif kind in (AvCommandKind.CUBIC_CURVE_TO, AvCommandKind.SMOOTH_CUBIC_CURVE_TO) and len(coords) == 3:
            result.append(svgpathtools.CubicBezier(current, coords[0], coords[1], end))
        elif kind in (AvCommandKind.QUADRATIC_CURVE_TO, AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO) and len(coords) == 2:
            result.append(svgpathtools.QuadraticBezier(current, coords[0], end))
        elif kind == AvCommandKind.ARC_TO and len(segment.raw_parameters) == 5:
            rx, ry, rotation, large_arc, sweep = segment.raw_parameters
            if end != current:
                if rx == 0 or ry == 0:
                    result.append(svgpathtools.Line(current, end))
                else:
                    result.append(
                        svgpathtools.Arc(
                            current, complex(abs(rx), abs(ry)), float(rotation), bool(large_arc), bool(sweep), end
                        )
                    )
        else:
            result.append(svgpathtools.Line(current, end))
        current = end
    return result

