"""Central module containing the command letters and definitions of the path micro-language."""

from __future__ import annotations

from enum import Enum

###############################################################################
# Enums and Consts
###############################################################################


class AvCommandKind(str, Enum):
    """Logical path commands; the value is the absolute command letter."""

    MOVE_TO = "M"
    LINE_TO = "L"
    HORIZONTAL_LINE_TO = "H"
    VERTICAL_LINE_TO = "V"
    CUBIC_CURVE_TO = "C"
    SMOOTH_CUBIC_CURVE_TO = "S"
    QUADRATIC_CURVE_TO = "Q"
    SMOOTH_QUADRATIC_CURVE_TO = "T"
    ARC_TO = "A"
    CLOSE_PATH = "Z"

    @classmethod
    def from_letter(cls, letter: str) -> AvCommandKind:
        """Return the kind of the given absolute or relative command letter.

        Raises:
            ValueError: if _letter_ is not a command letter.
        """
        return cls(letter.upper())

    def letter(self, relative: bool = False) -> str:
        """The command letter of this kind (lowercase if _relative_)."""
        return self.value.lower() if relative else self.value


# Command letters:
SVG_CMDS: str = "MmLlHhVvCcSsQqTtAaZz"
