"""Byte ranges over a single line of text.

Provides LineRange, the half-open [start, end) interval that every
annotation is attached to. Offsets are byte offsets into the current
(possibly already edited) line buffer.

Thread Safety:
LineRange is mutable and owned by the attribute list it lives in.
Ranges are created per call and never shared between calls.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class LineRange:
    """Half-open byte range within a line.

    An *open* range has ``end is None``; it runs to the end of the line
    until a later event closes it.

    Attributes:
        start: First byte offset covered by the range
        end: One past the last byte covered, or None while open

    Examples:
        >>> r = LineRange(2, 5)
        >>> r.contains(4), r.contains(5)
        (True, False)
        >>> LineRange(3).is_open
        True

    """

    start: int
    end: int | None = None

    @property
    def is_open(self) -> bool:
        """True while the range has no end."""
        return self.end is None

    def length(self, line_length: int) -> int:
        """Number of bytes covered, treating an open end as the line end."""
        end = line_length if self.end is None else self.end
        return max(0, end - self.start)

    def contains(self, offset: int) -> bool:
        """Check whether ``offset`` falls inside the range."""
        if offset < self.start:
            return False
        return self.end is None or offset < self.end

    def shift(self, point: int, amount: int) -> None:
        """Move range boundaries after an edit at ``point``.

        Boundaries at or after ``point`` move by ``amount``. When bytes
        are removed (negative amount) a boundary never moves before
        ``point``, and ``end`` never precedes ``start``.

        Args:
            point: Byte offset of the edit
            amount: Bytes inserted (positive) or removed (negative)
        """
        if self.start >= point:
            self.start = max(point, self.start + amount)
        if self.end is not None and self.end >= point:
            self.end = max(point, self.end + amount, self.start)

    def resolve(self, line_length: int) -> LineRange:
        """Return a closed copy, ending an open range at ``line_length``."""
        return LineRange(self.start, line_length if self.end is None else self.end)
