"""Annotation model shared by the scrubber and the highlighter.

Annotations are StringAttr records: a LineRange over the current line
buffer tagged with one payload. Three payload kinds exist:

- STYLE: a TextAttrs bundle (bold, underline, colors, ...)
- ROLE: a semantic Role, independent of raw colors
- ORIGIN_OFFSET: the number of bytes removed from the raw line before
  the range, so that ``raw_offset = offset + value``

An attribute list is a plain ``list[StringAttr]``. Insertion order is
significant: open ranges are found by scanning backward from the end.

Thread Safety:
TextAttrs and Role are immutable. StringAttr and attribute lists are
owned by the caller of the scrub/highlight call that filled them.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto

from linescan.ranges import LineRange


@dataclass(frozen=True, slots=True)
class TextAttrs:
    """Display style bundle decoded from an SGR sequence.

    Attributes:
        bold: Bold / increased intensity
        dim: Faint / decreased intensity
        underline: Underlined
        reverse: Reverse video
        standout: Bright color variant (SGR 90-97)
        fg: Foreground color index 0-7, or None for default
        bg: Background color index 0-7, or None for default

    """

    bold: bool = False
    dim: bool = False
    underline: bool = False
    reverse: bool = False
    standout: bool = False
    fg: int | None = None
    bg: int | None = None

    def __bool__(self) -> bool:
        """True when any attribute or color is set (color 0 counts)."""
        return (
            self.bold
            or self.dim
            or self.underline
            or self.reverse
            or self.standout
            or self.fg is not None
            or self.bg is not None
        )


class Role(IntEnum):
    """Semantic display roles.

    ``NONE`` and ``MAX`` are sentinels; only values strictly between
    them are real roles. Role codes are what ``ESC [ n O`` carries.
    """

    NONE = -1
    TEXT = 0
    IDENTIFIER = 1
    SEARCH = 2
    OK = 3
    ERROR = 4
    WARNING = 5
    ALT_ROW = 6
    HIDDEN = 7
    ADJUSTED_TIME = 8
    SKEWED_TIME = 9
    OFFSET_TIME = 10
    INVALID_MSG = 11
    STATUS = 12
    WARN_STATUS = 13
    ALERT_STATUS = 14
    ACTIVE_STATUS = 15
    KEYWORD = 16
    STRING = 17
    COMMENT = 18
    VARIABLE = 19
    SYMBOL = 20
    NUMBER = 21
    FILE = 22
    DIFF_DELETE = 23
    DIFF_ADD = 24
    DIFF_SECTION = 25
    LOW_THRESHOLD = 26
    MED_THRESHOLD = 27
    HIGH_THRESHOLD = 28
    MAX = 29

    @classmethod
    def from_code(cls, code: int) -> Role | None:
        """Map a wire code to a role, or None when outside the valid range."""
        if cls.NONE < code < cls.MAX:
            return cls(code)
        return None


class AttrType(Enum):
    """Payload kinds carried by StringAttr."""

    STYLE = auto()
    ROLE = auto()
    ORIGIN_OFFSET = auto()


AttrValue = TextAttrs | Role | int


@dataclass(slots=True)
class StringAttr:
    """A tagged annotation over a byte range of the line.

    Attributes:
        range: Byte range in the current buffer (may be open)
        type: Payload kind
        value: TextAttrs for STYLE, Role for ROLE, int for ORIGIN_OFFSET

    """

    range: LineRange
    type: AttrType
    value: AttrValue

    def __repr__(self) -> str:
        end = "" if self.range.end is None else self.range.end
        return f"StringAttr({self.type.name}, [{self.range.start}:{end}), {self.value!r})"


StringAttrs = list[StringAttr]


def shift_string_attrs(sa: StringAttrs, point: int, amount: int) -> None:
    """Shift every recorded range for an edit of ``amount`` bytes at ``point``."""
    for attr in sa:
        attr.range.shift(point, amount)


def close_open_ranges(sa: StringAttrs, end: int) -> None:
    """Close every open range, scanning from the most recent backward."""
    for attr in reversed(sa):
        if attr.range.end is None:
            attr.range.end = end


def find_string_attr(sa: StringAttrs, attr_type: AttrType, offset: int) -> StringAttr | None:
    """Find the most recently added attribute of a type covering ``offset``.

    Args:
        sa: Attribute list to search
        attr_type: Payload kind to look for
        offset: Byte offset in the current buffer

    Returns:
        The matching StringAttr, or None.
    """
    for attr in reversed(sa):
        if attr.type is attr_type and attr.range.contains(offset):
            return attr
    return None


def to_origin_offset(sa: StringAttrs, offset: int) -> int:
    """Map an offset in a scrubbed line back to the raw line.

    Offsets not covered by any ORIGIN_OFFSET range (lines that were not
    edited) map to themselves. An offset equal to the end of the last
    range (the end of the line) uses that range's value.

    Args:
        sa: Attribute list filled by the scrubber
        offset: Byte offset in the scrubbed line

    Returns:
        Byte offset in the raw line.

    Example:
        >>> from linescan.scrubber import scrub
        >>> line = scrub("\\x1b[1mHELLO\\x1b[0m")
        >>> to_origin_offset(line.attrs, 0)
        4
    """
    last: StringAttr | None = None
    for attr in sa:
        if attr.type is not AttrType.ORIGIN_OFFSET:
            continue
        if attr.range.contains(offset):
            return max(0, offset + attr.value)  # type: ignore[operator]
        if attr.range.end == offset and attr.range.end > attr.range.start:
            last = attr
    if last is not None:
        return max(0, offset + last.value)  # type: ignore[operator]
    return offset


__all__ = [
    "AttrType",
    "AttrValue",
    "Role",
    "StringAttr",
    "StringAttrs",
    "TextAttrs",
    "close_open_ranges",
    "find_string_attr",
    "shift_string_attrs",
    "to_origin_offset",
]
