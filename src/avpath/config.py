"""Engine configuration: resource ceilings, history depth and output formatting."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Literal, Optional

SmoothCurveMode = Literal["reflect", "midpoint"]

SMOOTH_CURVE_MODES = ("reflect", "midpoint")


###############################################################################
# AvPathEngineConfig
###############################################################################


@dataclass(frozen=True)
class AvPathEngineConfig:
    """Settings shared by parser, builder, history and editing helpers.

    Attributes:
        max_path_segments: Ceiling for the number of segments a parse may produce.
        max_path_points: Ceiling for the number of points a parse may produce.
        max_undo_history: Number of snapshots kept by the command history.
        grid_snap_interval: Default grid spacing used when snapping dragged points.
        smooth_curve_mode: How the implicit first control point of S/T commands is derived.
            "reflect" mirrors the previous control point about the pen (SVG semantics),
            "midpoint" uses the midpoint of the pen and the next given point.
        number_precision: Decimal places used by the builder. None writes exact values.
    """

    max_path_segments: int = 5000
    max_path_points: int = 20000
    max_undo_history: int = 200
    grid_snap_interval: float = 10.0
    smooth_curve_mode: SmoothCurveMode = "reflect"
    number_precision: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_path_segments < 1:
            raise ValueError(f"max_path_segments must be positive, got {self.max_path_segments}")
        if self.max_path_points < 1:
            raise ValueError(f"max_path_points must be positive, got {self.max_path_points}")
        if self.max_undo_history < 1:
            raise ValueError(f"max_undo_history must be positive, got {self.max_undo_history}")
        if self.grid_snap_interval <= 0:
            raise ValueError(f"grid_snap_interval must be positive, got {self.grid_snap_interval}")
        if self.smooth_curve_mode not in SMOOTH_CURVE_MODES:
            raise ValueError(
                f"smooth_curve_mode must be one of {SMOOTH_CURVE_MODES}, got '{self.smooth_curve_mode}'"
            )
        if self.number_precision is not None and self.number_precision < 0:
            raise ValueError(f"number_precision must not be negative, got {self.number_precision}")

    def with_changes(self, **changes) -> AvPathEngineConfig:
        """Return a copy of this configuration with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> AvPathEngineConfig:
        """Create a configuration from a dictionary; missing keys use the defaults."""
        defaults = cls()
        return cls(
            max_path_segments=data.get("max_path_segments", defaults.max_path_segments),
            max_path_points=data.get("max_path_points", defaults.max_path_points),
            max_undo_history=data.get("max_undo_history", defaults.max_undo_history),
            grid_snap_interval=data.get("grid_snap_interval", defaults.grid_snap_interval),
            smooth_curve_mode=data.get("smooth_curve_mode", defaults.smooth_curve_mode),
            number_precision=data.get("number_precision", defaults.number_precision),
        )


DEFAULT_CONFIG = AvPathEngineConfig()

# Midpoint approximation for smooth curves, as used by simpler path editors
MIDPOINT_SMOOTHING_CONFIG = AvPathEngineConfig(smooth_curve_mode="midpoint")
