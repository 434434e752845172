"""Point editing on segment lists and reconciliation of ids between parses.

All functions return new segment lists and never modify their input.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np
from scipy.spatial import KDTree

from avpath.common import AvCommandKind
from avpath.geom import GeomMath
from avpath.model import AvPathPoint, AvPathSegment, all_points

logger = logging.getLogger(__name__)

# Curve command left over when one control handle of a curve is deleted
_REDUCED_CURVE = {
    AvCommandKind.CUBIC_CURVE_TO: AvCommandKind.QUADRATIC_CURVE_TO,
    AvCommandKind.SMOOTH_CUBIC_CURVE_TO: AvCommandKind.QUADRATIC_CURVE_TO,
    AvCommandKind.QUADRATIC_CURVE_TO: AvCommandKind.LINE_TO,
    AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO: AvCommandKind.LINE_TO,
}


###############################################################################
# Lookup
###############################################################################


def find_point(segments: Sequence[AvPathSegment], point_id: str) -> Optional[Tuple[int, int]]:
    """Return (segment_index, point_index) of the point with the given id, None if not found."""
    for segment_index, segment in enumerate(segments):
        for point_index, point in enumerate(segment.points):
            if point.id == point_id:
                return segment_index, point_index
    return None


def _checked_indices(segments: Sequence[AvPathSegment], segment_index: int, point_index: int) -> AvPathSegment:
    if not 0 <= segment_index < len(segments):
        raise IndexError(f"Segment index {segment_index} out of range (path has {len(segments)} segments)")
    segment = segments[segment_index]
    if not 0 <= point_index < len(segment.points):
        raise IndexError(
            f"Point index {point_index} out of range (segment '{segment.id}' has {len(segment.points)} points)"
        )
    return segment


###############################################################################
# Editing
###############################################################################


def move_point(
    # pylint: disable=too-many-arguments,too-many-positional-arguments
    segments: Sequence[AvPathSegment],
    segment_index: int,
    point_index: int,
    x: float,
    y: float,
    grid: Optional[float] = None,
) -> List[AvPathSegment]:
    """Move one point to (x, y), optionally snapped to a grid of interval _grid_.

    Only the addressed point moves; control handles of a moved anchor stay where they are.

    Raises:
        IndexError: if segment_index or point_index does not address a point
    """
    segment = _checked_indices(segments, segment_index, point_index)
    if grid is not None:
        x = GeomMath.snap_to_grid(x, grid)
        y = GeomMath.snap_to_grid(y, grid)

    points = list(segment.points)
    points[point_index] = points[point_index].moved_to(x, y)
    logger.debug("Moved point '%s' to (%s, %s)", points[point_index].id, x, y)

    result = list(segments)
    result[segment_index] = segment.with_points(points)
    return result


def delete_point(segments: Sequence[AvPathSegment], segment_index: int, point_index: int) -> List[AvPathSegment]:
    """Delete one point and keep the path structurally valid.

    * Deleting a control handle lowers the degree of the curve: a cubic curve
      becomes a quadratic one with the remaining handle, a quadratic curve becomes a line.
    * Deleting an anchor removes its whole segment. If that segment was a MoveTo,
      the next drawing segment becomes the MoveTo of the subpath.

    Raises:
        IndexError: if segment_index or point_index does not address a point
    """
    segment = _checked_indices(segments, segment_index, point_index)
    point = segment.points[point_index]
    result = list(segments)

    if point.is_control_point and segment.info.is_curve:
        reduced = _REDUCED_CURVE[segment.kind]
        letter = reduced.letter(relative=segment.is_relative)
        remaining = [other for index, other in enumerate(segment.points) if index != point_index]
        result[segment_index] = AvPathSegment(id=segment.id, command=letter, points=remaining)
        logger.debug("Deleted control point '%s', segment '%s' is now '%s'", point.id, segment.id, letter)
        return result

    del result[segment_index]
    logger.debug("Deleted point '%s' together with segment '%s'", point.id, segment.id)
    if segment.kind == AvCommandKind.MOVE_TO and segment_index < len(result):
        follower = result[segment_index]
        if follower.kind != AvCommandKind.MOVE_TO and follower.anchor is not None:
            result[segment_index] = AvPathSegment(
                id=follower.id,
                command=AvCommandKind.MOVE_TO.letter(relative=follower.is_relative),
                points=(follower.anchor,),
            )
    return result


def delete_items(
    segments: Sequence[AvPathSegment],
    segment_ids: Iterable[str] = (),
    point_ids: Iterable[str] = (),
) -> List[AvPathSegment]:
    """Delete the selected segments and points (by id); unknown ids are ignored."""
    segment_id_set = set(segment_ids)
    result = [segment for segment in segments if segment.id not in segment_id_set]
    for point_id in point_ids:
        location = find_point(result, point_id)
        if location is not None:
            result = delete_point(result, *location)
    logger.debug("Deleted selection: %d segments left of %d", len(result), len(segments))
    return result


def append_point(segments: Sequence[AvPathSegment], x: float, y: float) -> List[AvPathSegment]:
    """Pen tool: start the path with a MoveTo to (x, y), or append a LineTo to (x, y)."""
    taken = _taken_ids(segments)
    kind = AvCommandKind.LINE_TO if segments else AvCommandKind.MOVE_TO
    point = AvPathPoint(x=float(x), y=float(y), id=_fresh_id("p", taken))
    segment = AvPathSegment(id=_fresh_id("seg", taken), command=kind.letter(), points=(point,))
    logger.debug("Appended '%s' to (%s, %s)", segment.command, x, y)
    return [*segments, segment]


###############################################################################
# Id reconciliation
###############################################################################


def reconcile_ids(
    previous: Sequence[AvPathSegment], current: Sequence[AvPathSegment], tolerance: float = 1e-9
) -> List[AvPathSegment]:
    """Return _current_ with the ids of unchanged geometry taken over from _previous_.

    Every current point takes the id of the nearest previous point of the same kind
    (anchor or control handle) lying within _tolerance_; each previous id is used once.
    A segment keeps the previous segment id if the previous path has a segment of the
    same kind at the same index and all points of the segment were matched.
    Points and segments that were not matched get ids not used by _previous_, so an id
    never moves over to different geometry.

    Args:
        previous: segments of the earlier parse
        current: freshly parsed segments
        tolerance: maximum distance between matched points

    Returns:
        List[AvPathSegment]: the current segments with reconciled ids
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must not be negative, got {tolerance}")

    old_points = all_points(previous)
    new_points = all_points(current)
    matches: Dict[int, str] = {}
    for is_control in (False, True):
        matches.update(_match_points(old_points, new_points, is_control, tolerance))

    taken: Set[str] = {point.id for point in old_points}
    point_ids: Dict[str, str] = {}
    for index, point in enumerate(new_points):
        if index in matches:
            point_ids[point.id] = matches[index]
        else:
            new_id = point.id if point.id not in taken else _fresh_id(point.id.split("-")[0], taken)
            taken.add(new_id)
            point_ids[point.id] = new_id

    segment_ids = _reconcile_segment_ids(previous, current, matches)

    result: List[AvPathSegment] = []
    for segment in current:
        points = [
            AvPathPoint(
                x=point.x,
                y=point.y,
                id=point_ids[point.id],
                is_control_point=point.is_control_point,
                associated_anchor_id=point_ids.get(point.associated_anchor_id, point.associated_anchor_id),
            )
            for point in segment.points
        ]
        result.append(
            AvPathSegment(
                id=segment_ids[segment.id],
                command=segment.command,
                points=points,
                raw_parameters=segment.raw_parameters,
            )
        )

    logger.debug("Reconciled ids: %d of %d points taken over", len(matches), len(new_points))
    return result


def _match_points(
    old_points: Sequence[AvPathPoint], new_points: Sequence[AvPathPoint], is_control: bool, tolerance: float
) -> Dict[int, str]:
    """Map indices of _new_points_ to ids of _old_points_ of the given kind."""
    old_indices = [i for i, point in enumerate(old_points) if point.is_control_point == is_control]
    new_indices = [i for i, point in enumerate(new_points) if point.is_control_point == is_control]
    if not old_indices or not new_indices:
        return {}

    old_coords = np.array([old_points[i].xy for i in old_indices], dtype=np.float64)
    tree = KDTree(old_coords)

    matches: Dict[int, str] = {}
    used: Set[int] = set()
    for new_index in new_indices:
        xy = np.array(new_points[new_index].xy, dtype=np.float64)
        candidates = tree.query_ball_point(xy, r=tolerance)
        if not candidates:
            continue
        # nearest first, drawing order on ties
        distances = np.linalg.norm(old_coords[candidates] - xy, axis=1)
        for _, candidate in sorted(zip(distances, candidates)):
            if candidate not in used:
                used.add(candidate)
                matches[new_index] = old_points[old_indices[candidate]].id
                break
    return matches


def _reconcile_segment_ids(
    previous: Sequence[AvPathSegment], current: Sequence[AvPathSegment], matches: Dict[int, str]
) -> Dict[str, str]:
    taken: Set[str] = {segment.id for segment in previous}
    kept: Dict[int, str] = {}
    point_index = 0
    for index, segment in enumerate(current):
        count = len(segment.points)
        all_matched = all(point_index + offset in matches for offset in range(count))
        point_index += count
        if index < len(previous) and previous[index].kind == segment.kind and all_matched:
            kept[index] = previous[index].id

    segment_ids: Dict[str, str] = {}
    for index, segment in enumerate(current):
        if index in kept:
            segment_ids[segment.id] = kept[index]
        else:
            new_id = segment.id if segment.id not in taken else _fresh_id("seg", taken)
            taken.add(new_id)
            segment_ids[segment.id] = new_id
    return segment_ids


###############################################################################
# Helpers
###############################################################################


def _taken_ids(segments: Sequence[AvPathSegment]) -> Set[str]:
    taken = {segment.id for segment in segments}
    taken.update(point.id for point in all_points(segments))
    return taken


def _fresh_id(prefix: str, taken: Set[str]) -> str:
    """Return an id "<prefix>-<n>" not contained in _taken_ and add it to _taken_."""
    counter = len(taken)
    while f"{prefix}-{counter}" in taken:
        counter += 1
    new_id = f"{prefix}-{counter}"
    taken.add(new_id)
    return new_id
