"""Structured segment model of a path: points, segments and command metadata."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from avpath.common import AvCommandKind

###############################################################################
# PathCommandInfo
###############################################################################


@dataclass(frozen=True)
class PathCommandInfo:
    """Metadata for path commands.

    Attributes:
        arguments: Number of numeric arguments one instance of the command takes
        points: Number of points one instance stores in its segment
        is_curve: Whether this command represents a Bezier curve
        is_line: Whether this command belongs to the LineTo family (L, H, V)
    """

    arguments: int
    points: int
    is_curve: bool = False
    is_line: bool = False


# Command registry with metadata
COMMAND_INFO: Dict[AvCommandKind, PathCommandInfo] = {
    AvCommandKind.MOVE_TO: PathCommandInfo(2, 1),
    AvCommandKind.LINE_TO: PathCommandInfo(2, 1, is_line=True),
    AvCommandKind.HORIZONTAL_LINE_TO: PathCommandInfo(1, 1, is_line=True),
    AvCommandKind.VERTICAL_LINE_TO: PathCommandInfo(1, 1, is_line=True),
    AvCommandKind.CUBIC_CURVE_TO: PathCommandInfo(6, 3, is_curve=True),
    AvCommandKind.SMOOTH_CUBIC_CURVE_TO: PathCommandInfo(4, 3, is_curve=True),  # derived cp1, cp2, end
    AvCommandKind.QUADRATIC_CURVE_TO: PathCommandInfo(4, 2, is_curve=True),
    AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO: PathCommandInfo(2, 2, is_curve=True),  # derived cp, end
    AvCommandKind.ARC_TO: PathCommandInfo(7, 1),
    AvCommandKind.CLOSE_PATH: PathCommandInfo(0, 0),
}

# Number of leading arc arguments kept verbatim in raw_parameters
ARC_RAW_PARAMETER_COUNT: int = 5


###############################################################################
# AvPathPoint
###############################################################################


@dataclass(frozen=True)
class AvPathPoint:
    """A point of a segment: an on-curve anchor or a control handle.

    Attributes:
        x: absolute x-coordinate
        y: absolute y-coordinate
        id: identifier, unique within a parsed path
        is_control_point: True for Bezier control handles
        associated_anchor_id: for control handles, the id of the anchor they shape
    """

    x: float
    y: float
    id: str
    is_control_point: bool = False
    associated_anchor_id: Optional[str] = None

    @property
    def xy(self) -> Tuple[float, float]:
        """The coordinates as (x, y)."""
        return (self.x, self.y)

    def moved_to(self, x: float, y: float) -> AvPathPoint:
        """Return a copy of this point at (x, y), keeping id and role."""
        return replace(self, x=float(x), y=float(y))

    def distance_to(self, other: AvPathPoint) -> float:
        """Euclidean distance to _other_."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict:
        """Convert the point to a dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "id": self.id,
            "is_control_point": self.is_control_point,
            "associated_anchor_id": self.associated_anchor_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AvPathPoint:
        """Create a point from a dictionary."""
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            id=data["id"],
            is_control_point=data.get("is_control_point", False),
            associated_anchor_id=data.get("associated_anchor_id"),
        )


###############################################################################
# AvPathSegment
###############################################################################


@dataclass(frozen=True)
class AvPathSegment:
    """One parsed instance of a path command.

    Points are always stored in absolute coordinates, also for relative commands.

    Attributes:
        id: identifier, unique within a parsed path
        command: the command letter as read (absolute or relative form)
        points: control handles followed by the anchor; empty for ClosePath
        raw_parameters: Arc only - rx, ry, x-axis-rotation, large-arc-flag, sweep-flag
    """

    id: str
    command: str
    points: Tuple[AvPathPoint, ...] = ()
    raw_parameters: Tuple[float, ...] = field(default=())

    def __post_init__(self) -> None:
        # accept lists for convenience, store tuples
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))
        if not isinstance(self.raw_parameters, tuple):
            object.__setattr__(self, "raw_parameters", tuple(self.raw_parameters))

    @property
    def kind(self) -> AvCommandKind:
        """The logical command of this segment."""
        return AvCommandKind.from_letter(self.command)

    @property
    def is_relative(self) -> bool:
        """True if the segment was read from a relative (lowercase) command."""
        return self.command.islower()

    @property
    def info(self) -> PathCommandInfo:
        """Command metadata of this segment."""
        return COMMAND_INFO[self.kind]

    @property
    def anchor(self) -> Optional[AvPathPoint]:
        """The on-curve end point of this segment, None for ClosePath."""
        return self.points[-1] if self.points else None

    @property
    def control_points(self) -> Tuple[AvPathPoint, ...]:
        """The control handles of this segment."""
        return tuple(point for point in self.points if point.is_control_point)

    def with_points(self, points: Iterable[AvPathPoint]) -> AvPathSegment:
        """Return a copy of this segment with the given points."""
        return replace(self, points=tuple(points))

    def to_dict(self) -> dict:
        """Convert the segment to a dictionary."""
        return {
            "id": self.id,
            "command": self.command,
            "points": [point.to_dict() for point in self.points],
            "raw_parameters": list(self.raw_parameters),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AvPathSegment:
        """Create a segment from a dictionary."""
        return cls(
            id=data["id"],
            command=data["command"],
            points=tuple(AvPathPoint.from_dict(point) for point in data.get("points", [])),
            raw_parameters=tuple(data.get("raw_parameters", [])),
        )


###############################################################################
# Helpers
###############################################################################


def all_points(segments: Sequence[AvPathSegment]) -> List[AvPathPoint]:
    """Return the points of all segments in drawing order."""
    return [point for segment in segments for point in segment.points]


def points_array(segments: Sequence[AvPathSegment]) -> NDArray[np.float64]:
    """Return the coordinates of all points as a numpy array of shape (n_points, 2)."""
    points = all_points(segments)
    if not points:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([point.xy for point in points], dtype=np.float64)


def derive_smooth_control(
    mode: str,
    pen: Tuple[float, float],
    previous_control: Optional[Tuple[float, float]],
    hint: Tuple[float, float],
) -> Tuple[float, float]:
    """Return the implicit first control point of a smooth curve instance (S or T).

    In "reflect" mode _previous_control_ (the last control point of a preceding curve
    of the same family, None if there is none) is mirrored about the _pen_ position;
    without one the pen itself is used.
    In "midpoint" mode the midpoint between pen and _hint_ is used, where _hint_ is the
    second control point (S) or the end point (T).
    """
    if mode == "midpoint":
        return ((pen[0] + hint[0]) / 2, (pen[1] + hint[1]) / 2)
    if previous_control is not None:
        return (2 * pen[0] - previous_control[0], 2 * pen[1] - previous_control[1])
    return pen


def segments_equivalent(
    first: Sequence[AvPathSegment], second: Sequence[AvPathSegment], tolerance: float = 1e-9
) -> bool:
    """Return True if both paths have the same structure and geometry.

    Segments are compared by logical command (absolute and relative forms are equal),
    point roles, coordinates (within _tolerance_) and arc parameters. Ids are ignored.
    """
    if len(first) != len(second):
        return False
    for seg_a, seg_b in zip(first, second):
        if seg_a.kind != seg_b.kind or len(seg_a.points) != len(seg_b.points):
            return False
        if len(seg_a.raw_parameters) != len(seg_b.raw_parameters):
            return False
        for param_a, param_b in zip(seg_a.raw_parameters, seg_b.raw_parameters):
            if abs(float(param_a) - float(param_b)) > tolerance:
                return False
        for pt_a, pt_b in zip(seg_a.points, seg_b.points):
            if pt_a.is_control_point != pt_b.is_control_point:
                return False
            if abs(pt_a.x - pt_b.x) > tolerance or abs(pt_a.y - pt_b.y) > tolerance:
                return False
    return True
