"""Exceptions and recoverable diagnostics of the path engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple


class DiagnosticKind(str, Enum):
    """Category of a recoverable problem found in a path."""

    UNKNOWN_COMMAND = "unknown_command"
    ARGUMENT_COUNT = "argument_count"
    INVALID_NUMBER = "invalid_number"
    STRAY_TEXT = "stray_text"
    MISSING_MOVETO = "missing_moveto"
    CLOSE_PATH_POINTS = "close_path_points"
    POINT_COUNT = "point_count"
    ARC_PARAMETERS = "arc_parameters"
    BOUNDS_EXCEEDED = "bounds_exceeded"


@dataclass(frozen=True)
class ParseDiagnostic:
    """A recoverable problem reported alongside a (partial) result.

    Attributes:
        kind: Category of the problem.
        message: Human readable description.
        command: The command letter involved, if any.
        position: Character offset in the input text, or segment index for structural checks.
    """

    kind: DiagnosticKind
    message: str
    command: Optional[str] = None
    position: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert the diagnostic to a dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "command": self.command,
            "position": self.position,
        }

    def __str__(self) -> str:
        where = f" at {self.position}" if self.position is not None else ""
        return f"{self.kind.value}{where}: {self.message}"


class PathEngineError(Exception):
    """Base exception for path engine errors."""


class PathParseError(PathEngineError):
    """Raised when a parse result with diagnostics is required to be clean."""

    def __init__(self, diagnostics: Sequence[ParseDiagnostic]):
        self.diagnostics: Tuple[ParseDiagnostic, ...] = tuple(diagnostics)
        summary = "; ".join(str(diagnostic) for diagnostic in self.diagnostics)
        super().__init__(f"{len(self.diagnostics)} problem(s) while parsing path: {summary}")


class StructuralInvariantViolation(PathEngineError, ValueError):
    """Raised when a path breaks a structural invariant (leading MoveTo, empty ClosePath, arc parameters)."""


class BoundsExceededError(PathEngineError, ValueError):
    """Raised when a path exceeds the configured segment or point ceiling."""
