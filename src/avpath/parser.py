"""Parser for the path micro-language (SVG path data).

The parser splits a path string into (command letter, argument blob) pairs,
tokenizes the arguments, expands implicit command repetition and resolves
relative coordinates into absolute ones. Each command instance becomes one
AvPathSegment.

Commands (command : number of values : command-character):
    MoveTo:           2: Mm
    LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
    CubicBezier:      6: Cc   4: Ss
    QuadraticBezier:  4: Qq   2: Tt
    ArcCurve:         7: Aa
    ClosePath:        0: Zz

Problems on single commands never abort the parse: the command is skipped and
a ParseDiagnostic is added to the result.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from avpath.common import SVG_CMDS, AvCommandKind
from avpath.config import DEFAULT_CONFIG, AvPathEngineConfig
from avpath.editing import reconcile_ids
from avpath.errors import DiagnosticKind, ParseDiagnostic, PathParseError
from avpath.model import COMMAND_INFO, AvPathPoint, AvPathSegment, derive_smooth_control

logger = logging.getLogger(__name__)

# Every ASCII letter except the exponent marker e/E starts a command
_COMMAND_RE = re.compile(r"([A-DF-Za-df-z])([^A-DF-Za-df-z]*)")
# Definition of a number:
_NUMBER_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_SEPARATOR_RE = re.compile(r"[\s,]*")
_DELIMITER_RE = re.compile(r"[\s,]")
_FLAG_RE = re.compile(r"[01]")

# Positions of large-arc-flag and sweep-flag within one arc instance
_ARC_FLAG_POSITIONS = (3, 4)

_CUBIC_FAMILY = (AvCommandKind.CUBIC_CURVE_TO, AvCommandKind.SMOOTH_CUBIC_CURVE_TO)
_QUADRATIC_FAMILY = (AvCommandKind.QUADRATIC_CURVE_TO, AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO)


class _ArgumentError(Exception):
    """Raised by the tokenizer on a character sequence that is not a valid argument."""

    def __init__(self, offset: int, text: str):
        super().__init__(text)
        self.offset = offset
        self.text = text


###############################################################################
# AvParseResult
###############################################################################


@dataclass
class AvParseResult:
    """Best-effort result of a parse.

    Attributes:
        segments: the parsed segments (possibly partial)
        diagnostics: recoverable problems found while parsing
    """

    segments: List[AvPathSegment] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the input was parsed without any diagnostic."""
        return not self.diagnostics

    def raise_for_diagnostics(self) -> List[AvPathSegment]:
        """Return the segments, or raise PathParseError if there were diagnostics."""
        if self.diagnostics:
            raise PathParseError(self.diagnostics)
        return self.segments


###############################################################################
# _PenCursor
###############################################################################


@dataclass
class _PenCursor:
    """State carried from one command instance to the next during a single parse."""

    x: float = 0.0
    y: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    last_kind: Optional[AvCommandKind] = None
    last_control: Optional[Tuple[float, float]] = None
    segment_counter: int = 0
    point_counter: int = 0
    point_count: int = 0

    def next_segment_id(self) -> str:
        segment_id = f"seg-{self.segment_counter}"
        self.segment_counter += 1
        return segment_id

    def anchor(self, x: float, y: float) -> AvPathPoint:
        point = AvPathPoint(x=x, y=y, id=f"p-{self.point_counter}")
        self.point_counter += 1
        return point

    def curve_points(self, controls: Sequence[Tuple[float, float]], end: Tuple[float, float]) -> List[AvPathPoint]:
        """Mint the anchor first so that its id can be referenced by the control handles."""
        anchor = self.anchor(*end)
        points = []
        for cx, cy in controls:
            points.append(
                AvPathPoint(
                    x=cx,
                    y=cy,
                    id=f"cp-{self.point_counter}",
                    is_control_point=True,
                    associated_anchor_id=anchor.id,
                )
            )
            self.point_counter += 1
        points.append(anchor)
        return points


###############################################################################
# AvPathParser
###############################################################################


class AvPathParser:
    """Converts path strings into lists of AvPathSegment."""

    def __init__(self, config: AvPathEngineConfig = DEFAULT_CONFIG):
        self._config = config

    @property
    def config(self) -> AvPathEngineConfig:
        """The configuration used by this parser."""
        return self._config

    def parse(self, text: str, previous: Optional[Sequence[AvPathSegment]] = None) -> AvParseResult:
        """Parse the given path _text_.

        Args:
            text: path data, e.g. "M 0 0 L 10 10 20 20 Z"
            previous: segments of an earlier parse; ids of unchanged geometry are taken over

        Returns:
            AvParseResult: the segments and the diagnostics of this parse
        """
        result = AvParseResult()
        cursor = _PenCursor()

        matches = list(_COMMAND_RE.finditer(text))
        leading = text[: matches[0].start()] if matches else text
        if leading.strip():
            message = f"Ignored text before first command: '{leading.strip()}'"
            self._report(result, DiagnosticKind.STRAY_TEXT, message, None, 0)

        for match in matches:
            letter = match.group(1)
            blob = match.group(2)
            position = match.start()

            if letter not in SVG_CMDS:
                self._report(result, DiagnosticKind.UNKNOWN_COMMAND, f"Unknown command '{letter}'", letter, position)
                continue

            kind = AvCommandKind.from_letter(letter)
            info = COMMAND_INFO[kind]

            try:
                args = self._tokenize_arguments(blob, kind == AvCommandKind.ARC_TO)
            except _ArgumentError as e:
                self._report(
                    result,
                    DiagnosticKind.INVALID_NUMBER,
                    f"Invalid argument '{e.text}' for command '{letter}'",
                    letter,
                    match.start(2) + e.offset,
                )
                continue

            if info.arguments == 0:
                if args:
                    self._report(
                        result,
                        DiagnosticKind.ARGUMENT_COUNT,
                        f"Command '{letter}' takes no arguments, got {len(args)}",
                        letter,
                        position,
                    )
                    continue
                instances = [[]]
            else:
                if not args or len(args) % info.arguments:
                    self._report(
                        result,
                        DiagnosticKind.ARGUMENT_COUNT,
                        f"Command '{letter}' needs a multiple of {info.arguments} arguments, got {len(args)}",
                        letter,
                        position,
                    )
                    continue
                instances = [args[i : i + info.arguments] for i in range(0, len(args), info.arguments)]

            if not self._append_instances(result, cursor, letter, instances, position):
                break

        if result.segments and result.segments[0].kind != AvCommandKind.MOVE_TO:
            self._report(
                result,
                DiagnosticKind.MISSING_MOVETO,
                f"Path starts with '{result.segments[0].command}' instead of a MoveTo",
                result.segments[0].command,
                0,
            )

        if previous:
            result.segments = reconcile_ids(previous, result.segments)

        logger.debug(
            "Parsed %d segments (%d points) with %d diagnostics",
            len(result.segments),
            cursor.point_count,
            len(result.diagnostics),
        )
        return result

    def _append_instances(
        self,
        result: AvParseResult,
        cursor: _PenCursor,
        letter: str,
        instances: List[List[float]],
        position: int,
    ) -> bool:
        """Decode the instances of one command. Returns False once a ceiling is reached."""
        for index, args in enumerate(instances):
            instance_letter = letter
            # Coordinate pairs following a MoveTo are implicit LineTo commands
            if index > 0 and letter in "Mm":
                instance_letter = "l" if letter == "m" else "L"

            needed_points = COMMAND_INFO[AvCommandKind.from_letter(instance_letter)].points
            if len(result.segments) >= self._config.max_path_segments:
                self._report(
                    result,
                    DiagnosticKind.BOUNDS_EXCEEDED,
                    f"Path exceeds {self._config.max_path_segments} segments, remainder ignored",
                    letter,
                    position,
                )
                return False
            if cursor.point_count + needed_points > self._config.max_path_points:
                self._report(
                    result,
                    DiagnosticKind.BOUNDS_EXCEEDED,
                    f"Path exceeds {self._config.max_path_points} points, remainder ignored",
                    letter,
                    position,
                )
                return False

            segment = self._decode_instance(cursor, instance_letter, args)
            cursor.point_count += len(segment.points)
            result.segments.append(segment)
        return True

    def _decode_instance(self, cursor: _PenCursor, letter: str, args: Sequence[float]) -> AvPathSegment:
        """Turn one command instance into a segment and advance the cursor."""
        kind = AvCommandKind.from_letter(letter)
        relative = letter.islower()
        # Relative coordinates refer to the pen position at the start of the instance
        origin_x, origin_y = (cursor.x, cursor.y) if relative else (0.0, 0.0)

        def absolute(index: int) -> Tuple[float, float]:
            return (args[index] + origin_x, args[index + 1] + origin_y)

        segment_id = cursor.next_segment_id()
        raw_parameters: Tuple[float, ...] = ()
        control: Optional[Tuple[float, float]] = None

        if kind in (AvCommandKind.MOVE_TO, AvCommandKind.LINE_TO):
            end = absolute(0)
            points = [cursor.anchor(*end)]
            if kind == AvCommandKind.MOVE_TO:
                cursor.start_x, cursor.start_y = end
        elif kind == AvCommandKind.HORIZONTAL_LINE_TO:
            end = (args[0] + origin_x, cursor.y)
            points = [cursor.anchor(*end)]
        elif kind == AvCommandKind.VERTICAL_LINE_TO:
            end = (cursor.x, args[0] + origin_y)
            points = [cursor.anchor(*end)]
        elif kind == AvCommandKind.CUBIC_CURVE_TO:
            control1, control = absolute(0), absolute(2)
            end = absolute(4)
            points = cursor.curve_points([control1, control], end)
        elif kind == AvCommandKind.SMOOTH_CUBIC_CURVE_TO:
            control, end = absolute(0), absolute(2)
            control1 = self._derive_smooth_control(cursor, _CUBIC_FAMILY, control)
            points = cursor.curve_points([control1, control], end)
        elif kind == AvCommandKind.QUADRATIC_CURVE_TO:
            control, end = absolute(0), absolute(2)
            points = cursor.curve_points([control], end)
        elif kind == AvCommandKind.SMOOTH_QUADRATIC_CURVE_TO:
            end = absolute(0)
            control = self._derive_smooth_control(cursor, _QUADRATIC_FAMILY, end)
            points = cursor.curve_points([control], end)
        elif kind == AvCommandKind.ARC_TO:
            end = absolute(5)
            raw_parameters = (args[0], args[1], args[2], int(args[3]), int(args[4]))
            points = [cursor.anchor(*end)]
        else:  # ClosePath: the pen returns to the start of the subpath
            end = (cursor.start_x, cursor.start_y)
            points = []

        cursor.x, cursor.y = end
        cursor.last_kind = kind
        cursor.last_control = control

        return AvPathSegment(id=segment_id, command=letter, points=tuple(points), raw_parameters=raw_parameters)

    def _derive_smooth_control(
        self,
        cursor: _PenCursor,
        family: Tuple[AvCommandKind, AvCommandKind],
        hint: Tuple[float, float],
    ) -> Tuple[float, float]:
        """Return the implicit first control point of a smooth curve instance."""
        previous = cursor.last_control if cursor.last_kind in family else None
        return derive_smooth_control(self._config.smooth_curve_mode, (cursor.x, cursor.y), previous, hint)

    @staticmethod
    def _tokenize_arguments(blob: str, is_arc: bool) -> List[float]:
        """Split an argument blob into numbers.

        Arc flags are read as a single 0/1 digit, so "1150" inside an arc yields
        the flags 1, 1 followed by the number 50.
        """
        values: List[float] = []
        pos = 0
        length = len(blob)
        while True:
            pos = _SEPARATOR_RE.match(blob, pos).end()
            if pos >= length:
                return values
            if is_arc and len(values) % 7 in _ARC_FLAG_POSITIONS:
                match = _FLAG_RE.match(blob, pos)
            else:
                match = _NUMBER_RE.match(blob, pos)
            if match is None:
                end = _DELIMITER_RE.search(blob, pos)
                raise _ArgumentError(pos, blob[pos : end.start() if end else length])
            value = float(match.group())
            if not math.isfinite(value):
                raise _ArgumentError(pos, match.group())
            values.append(value)
            pos = match.end()

    @staticmethod
    def _report(
        result: AvParseResult,
        kind: DiagnosticKind,
        message: str,
        command: Optional[str],
        position: Optional[int],
    ) -> None:
        diagnostic = ParseDiagnostic(kind=kind, message=message, command=command, position=position)
        result.diagnostics.append(diagnostic)
        logger.warning("Path parse: %s", diagnostic)


def parse(
    text: str,
    config: AvPathEngineConfig = DEFAULT_CONFIG,
    previous: Optional[Sequence[AvPathSegment]] = None,
) -> AvParseResult:
    """Parse the given path _text_ into segments (see AvPathParser.parse)."""
    return AvPathParser(config).parse(text, previous)


###############################################################################
# Main
###############################################################################


def main():
    """Main"""
    for text in ("M 0 0 L 10 10 20 20 30 30", "M10 10 l5 5 h10 v-5 z", "M 0 0 A 50 30 10 1 0 100 50"):
        result = parse(text)
        print(f"{text!r}: {len(result.segments)} segments")
        for segment in result.segments:
            print("   ", segment.command, [point.xy for point in segment.points], segment.raw_parameters)


if __name__ == "__main__":
    main()
