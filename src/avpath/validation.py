"""Structural checks, bounds enforcement and auto-repair of segment lists."""

from __future__ import annotations

import logging
from typing import List, Sequence

from avpath.common import AvCommandKind
from avpath.config import DEFAULT_CONFIG, AvPathEngineConfig
from avpath.errors import (
    BoundsExceededError,
    DiagnosticKind,
    ParseDiagnostic,
    StructuralInvariantViolation,
)
from avpath.model import ARC_RAW_PARAMETER_COUNT, AvPathPoint, AvPathSegment

logger = logging.getLogger(__name__)


###############################################################################
# PathValidator
###############################################################################


class PathValidator:
    """Validates path structure: leading MoveTo, empty ClosePath, points and arc parameters per command."""

    @staticmethod
    def check(segments: Sequence[AvPathSegment]) -> List[ParseDiagnostic]:
        """Return all structural problems of the given path (empty list if valid).

        The position of each diagnostic is the index of the offending segment.
        """
        problems: List[ParseDiagnostic] = []
        if not segments:
            return problems

        if segments[0].kind != AvCommandKind.MOVE_TO:
            problems.append(
                ParseDiagnostic(
                    DiagnosticKind.MISSING_MOVETO,
                    f"Path must start with a MoveTo, found '{segments[0].command}'",
                    segments[0].command,
                    0,
                )
            )

        for index, segment in enumerate(segments):
            kind = segment.kind
            if kind == AvCommandKind.CLOSE_PATH:
                if segment.points:
                    problems.append(
                        ParseDiagnostic(
                            DiagnosticKind.CLOSE_PATH_POINTS,
                            f"ClosePath segment '{segment.id}' must not carry points ({len(segment.points)} found)",
                            segment.command,
                            index,
                        )
                    )
                continue

            expected = segment.info.points
            if len(segment.points) != expected:
                problems.append(
                    ParseDiagnostic(
                        DiagnosticKind.POINT_COUNT,
                        f"Segment '{segment.id}' ('{segment.command}') needs {expected} points, "
                        f"got {len(segment.points)}",
                        segment.command,
                        index,
                    )
                )

            if kind == AvCommandKind.ARC_TO and len(segment.raw_parameters) != ARC_RAW_PARAMETER_COUNT:
                problems.append(
                    ParseDiagnostic(
                        DiagnosticKind.ARC_PARAMETERS,
                        f"Arc segment '{segment.id}' needs {ARC_RAW_PARAMETER_COUNT} raw parameters, "
                        f"got {len(segment.raw_parameters)}",
                        segment.command,
                        index,
                    )
                )
        return problems

    @staticmethod
    def validate(segments: Sequence[AvPathSegment]) -> None:
        """Validate the structure of the given path.

        Raises:
            StructuralInvariantViolation: on the first structural problem found.
        """
        problems = PathValidator.check(segments)
        if problems:
            raise StructuralInvariantViolation(str(problems[0]))

    @staticmethod
    def check_bounds(segments: Sequence[AvPathSegment], config: AvPathEngineConfig = DEFAULT_CONFIG) -> None:
        """Validate segment and point counts against the configured ceilings.

        Raises:
            BoundsExceededError: if a ceiling is exceeded.
        """
        if len(segments) > config.max_path_segments:
            raise BoundsExceededError(
                f"Path has {len(segments)} segments but max is {config.max_path_segments}"
            )
        point_count = sum(len(segment.points) for segment in segments)
        if point_count > config.max_path_points:
            raise BoundsExceededError(f"Path has {point_count} points but max is {config.max_path_points}")

    @staticmethod
    def repair(segments: Sequence[AvPathSegment]) -> List[AvPathSegment]:
        """Return a copy of the path with the repairable invariants restored.

        A leading "M 0 0" is synthesized if the path does not start with a MoveTo,
        and points are removed from ClosePath segments. Other problems (for example
        missing arc parameters) cannot be repaired and are left for validate() to report.
        """
        repaired: List[AvPathSegment] = []
        if segments and segments[0].kind != AvCommandKind.MOVE_TO:
            logger.info("Repairing path: synthesizing leading MoveTo at (0, 0)")
            repaired.append(
                AvPathSegment(id="seg-repair-0", command="M", points=(AvPathPoint(0.0, 0.0, "p-repair-0"),))
            )
        for segment in segments:
            if segment.kind == AvCommandKind.CLOSE_PATH and segment.points:
                logger.info("Repairing path: removing points from ClosePath segment '%s'", segment.id)
                segment = segment.with_points(())
            repaired.append(segment)
        return repaired
