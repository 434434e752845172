"""Pure geometric transforms over segment lists.

All functions return new segment lists and never modify their input.
Point ids, control flags and anchor associations survive every transform.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from avpath.common import AvCommandKind
from avpath.geom import GeomMath
from avpath.model import AvPathPoint, AvPathSegment, points_array

logger = logging.getLogger(__name__)


def transform_affine(
    segments: Sequence[AvPathSegment], affine_trafo: Sequence[Union[int, float]]
) -> List[AvPathSegment]:
    """Apply the affine transformation [a00, a01, a10, a11, b0, b1] to every point.

    Arc raw parameters are left untouched (see scale/rotate for arc-aware variants).

    Args:
        segments: path to transform
        affine_trafo: Affine transformation - [a00, a01, a10, a11, b0, b1]

    Returns:
        List[AvPathSegment]: the transformed path
    """
    if len(affine_trafo) != 6:
        raise ValueError(f"affine_trafo must have 6 values, got {len(affine_trafo)}")

    coords = points_array(segments)
    matrix = np.array([[affine_trafo[0], affine_trafo[1]], [affine_trafo[2], affine_trafo[3]]], dtype=np.float64)
    offset = np.array([affine_trafo[4], affine_trafo[5]], dtype=np.float64)
    transformed = coords @ matrix.T + offset
    return _with_coordinates(segments, transformed)


def translate(segments: Sequence[AvPathSegment], dx: float, dy: float) -> List[AvPathSegment]:
    """Move every point by (dx, dy)."""
    if dx == 0 and dy == 0:
        return list(segments)
    logger.debug("Translating path by (%s, %s)", dx, dy)
    return transform_affine(segments, (1.0, 0.0, 0.0, 1.0, dx, dy))


def scale(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    segments: Sequence[AvPathSegment],
    scale_x: float,
    scale_y: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
    scale_arcs: bool = False,
) -> List[AvPathSegment]:
    """Scale every point relative to (origin_x, origin_y).

    Each coordinate is remapped as origin + (coordinate - origin) * factor.

    Args:
        segments: path to scale
        scale_x: factor along x
        scale_y: factor along y
        origin_x: x-coordinate of the fixed point
        origin_y: y-coordinate of the fixed point
        scale_arcs: also scale arc radii by |scale_x|, |scale_y| and flip the sweep flag
            on mirroring, so that arcs keep their shape relative to their end points

    Returns:
        List[AvPathSegment]: the scaled path
    """
    if scale_x == 1 and scale_y == 1:
        return list(segments)
    logger.debug("Scaling path by (%s, %s) from origin (%s, %s)", scale_x, scale_y, origin_x, origin_y)
    result = transform_affine(segments, GeomMath.scale_trafo(scale_x, scale_y, origin_x, origin_y))
    if not scale_arcs:
        return result

    mirrored = (scale_x < 0) != (scale_y < 0)

    def scale_arc(params):
        rx, ry, rotation, large_arc, sweep = params
        return (rx * abs(scale_x), ry * abs(scale_y), rotation, large_arc, 1 - sweep if mirrored else sweep)

    return _with_arc_parameters(result, scale_arc)


def rotate(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    segments: Sequence[AvPathSegment],
    angle_degrees: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
    rotate_arcs: bool = False,
) -> List[AvPathSegment]:
    """Rotate every point by _angle_degrees_ around (origin_x, origin_y).

    With _rotate_arcs_ the x-axis-rotation of arcs is increased by the same angle.
    """
    if angle_degrees == 0:
        return list(segments)
    logger.debug("Rotating path by %s degrees around (%s, %s)", angle_degrees, origin_x, origin_y)
    result = transform_affine(segments, GeomMath.rotation_trafo(angle_degrees, origin_x, origin_y))
    if not rotate_arcs:
        return result
    return _with_arc_parameters(
        result,
        lambda params: (params[0], params[1], params[2] + angle_degrees, params[3], params[4]),
    )


def simplify(segments: Sequence[AvPathSegment], tolerance: float = 2.0) -> List[AvPathSegment]:
    """Drop LineTo-family segments (L, H, V) whose point lies within _tolerance_ of the last kept point.

    Move, curve, arc and close segments are kept unchanged; curve simplification
    would need curve fitting. ClosePath moves the reference point back to the
    start of its subpath.

    Args:
        segments: path to simplify
        tolerance: maximum Euclidean distance (inclusive) for a point to be dropped

    Returns:
        List[AvPathSegment]: the simplified path
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must not be negative, got {tolerance}")
    if len(segments) < 2:
        return list(segments)

    simplified: List[AvPathSegment] = []
    last_point: Optional[AvPathPoint] = None
    subpath_start: Optional[AvPathPoint] = None

    for segment in segments:
        kind = segment.kind
        if kind == AvCommandKind.CLOSE_PATH:
            simplified.append(segment)
            last_point = subpath_start
            continue
        if segment.info.is_line and last_point is not None and segment.points:
            if segment.points[-1].distance_to(last_point) <= tolerance:
                continue
        simplified.append(segment)
        if segment.points:
            last_point = segment.points[-1]
            if kind == AvCommandKind.MOVE_TO:
                subpath_start = last_point

    logger.debug(
        "Simplified path from %d to %d segments (tolerance %s)", len(segments), len(simplified), tolerance
    )
    return simplified


###############################################################################
# Helpers
###############################################################################


def _with_coordinates(segments: Sequence[AvPathSegment], coords: NDArray[np.float64]) -> List[AvPathSegment]:
    """Rebuild _segments_ with the points replaced by the rows of _coords_ (drawing order)."""
    result: List[AvPathSegment] = []
    index = 0
    for segment in segments:
        count = len(segment.points)
        points = [
            point.moved_to(coords[index + offset, 0], coords[index + offset, 1])
            for offset, point in enumerate(segment.points)
        ]
        index += count
        result.append(segment.with_points(points))
    return result


def _with_arc_parameters(segments: Sequence[AvPathSegment], func) -> List[AvPathSegment]:
    result: List[AvPathSegment] = []
    for segment in segments:
        if segment.kind == AvCommandKind.ARC_TO and len(segment.raw_parameters) == 5:
            segment = AvPathSegment(
                id=segment.id,
                command=segment.command,
                points=segment.points,
                raw_parameters=tuple(func(segment.raw_parameters)),
            )
        result.append(segment)
    return result
