"""Serializer turning segments back into canonical path data.

The canonical form uses absolute command letters only, one letter per segment,
and single spaces between all tokens, e.g. "M 0 0 L 10 10 Z".

The builder follows the pen the same way the parser does when reading the
output back. Shorthand commands are only written where they reproduce the
stored points:
    H/V  only while the other coordinate equals the pen's, otherwise L
    S/T  only while the first control point equals the derived one, otherwise C/Q
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from avpath.common import AvCommandKind
from avpath.config import DEFAULT_CONFIG, AvPathEngineConfig
from avpath.errors import StructuralInvariantViolation
from avpath.model import ARC_RAW_PARAMETER_COUNT, AvPathPoint, AvPathSegment, derive_smooth_control

logger = logging.getLogger(__name__)

_CUBIC_FAMILY = (AvCommandKind.CUBIC_CURVE_TO, AvCommandKind.SMOOTH_CUBIC_CURVE_TO)
_QUADRATIC_FAMILY = (AvCommandKind.QUADRATIC_CURVE_TO, AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO)


def format_number(value: float, precision: Optional[int] = None) -> str:
    """Format a coordinate or parameter for path output.

    Integral values are written without decimal part, negative zero as "0".
    Other values use the shortest representation that reads back to the same float,
    or are rounded to _precision_ decimals with trailing zeros stripped.

    Args:
        value (float): the value to format
        precision (Optional[int]): number of decimals, None for exact output

    Returns:
        str: the formatted value
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value}")
    if precision is not None:
        value = round(value, precision)
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    if precision is not None:
        return f"{value:.{precision}f}".rstrip("0").rstrip(".")
    return repr(value)


@dataclass
class _BuildPen:
    """Pen state a parser has after reading the tokens written so far."""

    x: float = 0.0
    y: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    last_kind: Optional[AvCommandKind] = None
    last_control: Optional[Tuple[float, float]] = None

    def advance(self, kind: AvCommandKind, end: AvPathPoint, control: Optional[AvPathPoint]) -> None:
        self.x, self.y = end.x, end.y
        if kind == AvCommandKind.MOVE_TO:
            self.start_x, self.start_y = end.x, end.y
        self.last_kind = kind
        self.last_control = control.xy if control is not None else None

    def close(self) -> None:
        self.x, self.y = self.start_x, self.start_y
        self.last_kind = AvCommandKind.CLOSE_PATH
        self.last_control = None


class AvPathBuilder:
    """Builds canonical path strings from lists of AvPathSegment."""

    def __init__(self, config: AvPathEngineConfig = DEFAULT_CONFIG, expand_smooth: bool = False):
        """
        Args:
            config: engine configuration (number precision, smooth-curve mode of the reading parser)
            expand_smooth: always write S as C and T as Q including the derived control points
        """
        self._precision = config.number_precision
        self._smooth_curve_mode = config.smooth_curve_mode
        self._expand_smooth = expand_smooth

    def build(self, segments: Sequence[AvPathSegment]) -> str:
        """Return the canonical path string of the given _segments_."""
        tokens: List[str] = []
        pen = _BuildPen()
        for index, segment in enumerate(segments):
            tokens.extend(self._segment_tokens(index, segment, pen))
        path_string = " ".join(tokens)
        logger.debug("Built path of %d segments (%d characters)", len(segments), len(path_string))
        return path_string

    def _segment_tokens(self, index: int, segment: AvPathSegment, pen: _BuildPen) -> List[str]:
        kind = segment.kind
        points = segment.points

        if kind == AvCommandKind.CLOSE_PATH:
            pen.close()
            return [kind.letter()]
        if not points:
            # nothing to draw to
            return []

        anchor = points[-1]
        control: Optional[AvPathPoint] = None
        if kind in (AvCommandKind.MOVE_TO, AvCommandKind.LINE_TO):
            tokens = [kind.letter(), *self._pair(anchor)]
        elif kind == AvCommandKind.HORIZONTAL_LINE_TO:
            if self._num(anchor.y) == self._num(pen.y):
                tokens = [kind.letter(), self._num(anchor.x)]
            else:
                tokens = [AvCommandKind.LINE_TO.letter(), *self._pair(anchor)]
        elif kind == AvCommandKind.VERTICAL_LINE_TO:
            if self._num(anchor.x) == self._num(pen.x):
                tokens = [kind.letter(), self._num(anchor.y)]
            else:
                tokens = [AvCommandKind.LINE_TO.letter(), *self._pair(anchor)]
        elif kind == AvCommandKind.ARC_TO:
            tokens = [kind.letter(), *self._arc_parameters(index, segment), *self._pair(anchor)]
        else:
            self._check_point_count(index, segment)
            # the control point a following smooth curve reflects
            control = points[-2]
            tokens = self._curve_tokens(segment, pen)

        pen.advance(kind, anchor, control)
        return tokens

    def _curve_tokens(self, segment: AvPathSegment, pen: _BuildPen) -> List[str]:
        kind = segment.kind
        points = segment.points
        if kind == AvCommandKind.SMOOTH_CUBIC_CURVE_TO:
            if not self._expand_smooth and self._is_derived(pen, _CUBIC_FAMILY, points[0], points[1]):
                return [kind.letter(), *self._pairs(points[1:])]
            return [AvCommandKind.CUBIC_CURVE_TO.letter(), *self._pairs(points)]
        if kind == AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO:
            if not self._expand_smooth and self._is_derived(pen, _QUADRATIC_FAMILY, points[0], points[1]):
                return [kind.letter(), *self._pair(points[-1])]
            return [AvCommandKind.QUADRATIC_CURVE_TO.letter(), *self._pairs(points)]
        # C and Q carry all their points
        return [kind.letter(), *self._pairs(points)]

    def _is_derived(
        self,
        pen: _BuildPen,
        family: Tuple[AvCommandKind, AvCommandKind],
        control: AvPathPoint,
        hint: AvPathPoint,
    ) -> bool:
        """True if a parser reading the output would derive _control_ by itself."""
        previous = pen.last_control if pen.last_kind in family else None
        derived = derive_smooth_control(self._smooth_curve_mode, (pen.x, pen.y), previous, hint.xy)
        return [self._num(derived[0]), self._num(derived[1])] == self._pair(control)

    def _arc_parameters(self, index: int, segment: AvPathSegment) -> List[str]:
        params = segment.raw_parameters
        if len(params) != ARC_RAW_PARAMETER_COUNT:
            raise StructuralInvariantViolation(
                f"Arc segment {index} ('{segment.id}') needs {ARC_RAW_PARAMETER_COUNT} raw parameters, "
                f"got {len(params)}"
            )
        rx, ry, rotation, large_arc, sweep = params
        return [
            self._num(rx),
            self._num(ry),
            self._num(rotation),
            "1" if large_arc else "0",
            "1" if sweep else "0",
        ]

    @staticmethod
    def _check_point_count(index: int, segment: AvPathSegment) -> None:
        expected = segment.info.points
        if len(segment.points) != expected:
            raise StructuralInvariantViolation(
                f"Segment {index} ('{segment.command}') needs {expected} points, got {len(segment.points)}"
            )

    def _num(self, value: float) -> str:
        return format_number(value, self._precision)

    def _pair(self, point: AvPathPoint) -> List[str]:
        return [self._num(point.x), self._num(point.y)]

    def _pairs(self, points: Sequence[AvPathPoint]) -> List[str]:
        return [token for point in points for token in self._pair(point)]


def build(
    segments: Sequence[AvPathSegment],
    config: AvPathEngineConfig = DEFAULT_CONFIG,
    expand_smooth: bool = False,
) -> str:
    """Build the canonical (absolute) path string of the given _segments_."""
    return AvPathBuilder(config, expand_smooth).build(segments)
