"""ANSI escape fragments and template variables.

Static escape-sequence fragments for templating layers that want to emit
styled text, plus add_ansi_vars() which exports them under stable
variable names (``ansi_csi``, ``ansi_bold``, ``ansi_red``, ...).
"""

from __future__ import annotations

from collections.abc import MutableMapping
from enum import IntEnum

ANSI_ESC = "\x1b"
ANSI_CSI = "\x1b["
ANSI_NORM = "\x1b[0m"
ANSI_BOLD_START = "\x1b[1m"
ANSI_UNDERLINE_START = "\x1b[4m"


class AnsiColor(IntEnum):
    """The eight base terminal colors, by SGR color index."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


def ansi_color(color: int) -> str:
    """Foreground color start marker for a base color index (0-7)."""
    if not 0 <= color <= 7:
        raise ValueError(f"ANSI base color index must be 0-7, got {color}")
    return f"{ANSI_CSI}3{int(color)}m"


def add_ansi_vars(variables: MutableMapping[str, str]) -> None:
    """Populate a template variable mapping with ANSI fragments.

    Existing keys with the same names are overwritten; other keys are
    left alone.

    Args:
        variables: Mapping to fill

    Example:
        >>> env = {}
        >>> add_ansi_vars(env)
        >>> env["ansi_red"]
        '\\x1b[31m'
    """
    variables["ansi_csi"] = ANSI_CSI
    variables["ansi_norm"] = ANSI_NORM
    variables["ansi_bold"] = ANSI_BOLD_START
    variables["ansi_underline"] = ANSI_UNDERLINE_START
    for color in AnsiColor:
        variables[f"ansi_{color.name.lower()}"] = ansi_color(color)


__all__ = [
    "ANSI_BOLD_START",
    "ANSI_CSI",
    "ANSI_ESC",
    "ANSI_NORM",
    "ANSI_UNDERLINE_START",
    "AnsiColor",
    "add_ansi_vars",
    "ansi_color",
]
