"""Priority-table data scanner.

Walks a cursor over one line of text. At each step the pattern table is
tried in priority order, anchored at the cursor; the first pattern that
matches wins (not the longest). The cursor advances to the end of the
match and a TokenSpan is emitted.

Every step consumes at least one byte (the last table entry matches any
byte, and an unmatched byte becomes a one-byte GARBAGE span), so a scan
performs O(n) steps and always terminates.

Thread Safety:
DataScanner instances are single-use. Create one per line.
TokenStream holds only immutable bytes; iterating it from several
threads at once is safe because each iteration builds its own scanner.

"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterator

from linescan.config import get_scrub_config
from linescan.scanner.matchers import MATCHERS
from linescan.tokens import DataToken, TokenSpan


def _as_bytes(text: str | bytes | bytearray) -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


def _is_ipv6(candidate: bytes) -> bool:
    try:
        ipaddress.IPv6Address(candidate.decode("ascii"))
    except ValueError:
        return False
    return True


class DataScanner:
    """Single-use scanner over one line of text.

    Usage:
        >>> scanner = DataScanner(b"host=10.0.0.1")
        >>> [span.name for span in scanner]
        ['sym', 'eq', 'ipv4']

    Thread Safety:
        Scanner state is instance-local; create one per line.

    """

    __slots__ = ("_data", "_data_len", "_pos", "_validate_ipv6")

    def __init__(self, text: str | bytes | bytearray) -> None:
        """Initialize scanner over text.

        Args:
            text: Line to scan; str is encoded as UTF-8
        """
        self._data = _as_bytes(text)
        self._data_len = len(self._data)
        self._pos = 0
        self._validate_ipv6 = get_scrub_config().validate_ipv6

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def offset(self) -> int:
        """Current cursor position."""
        return self._pos

    def __iter__(self) -> Iterator[TokenSpan]:
        return self.tokenize()

    def tokenize(self) -> Iterator[TokenSpan]:
        """Scan the remaining input into token spans.

        Yields:
            TokenSpan objects, left to right, contiguous

        Complexity: O(n) matches where n = len(data)
        """
        while self._pos < self._data_len:
            yield self._next_token()

    def _next_token(self) -> TokenSpan:
        data = self._data
        start = self._pos
        for matcher in MATCHERS:
            match = matcher.pattern.match(data, start)
            if match is None:
                continue
            end = match.end()
            if end == start:
                continue
            if (
                matcher.kind is DataToken.IPV6_ADDRESS
                and self._validate_ipv6
                and not _is_ipv6(data[start:end])
            ):
                continue
            self._pos = end
            return TokenSpan(matcher.kind, start, end)

        # Unreachable while the table ends with a match-anything entry
        self._pos = start + 1
        return TokenSpan(DataToken.GARBAGE, start, start + 1)


class TokenStream:
    """Lazy, restartable sequence of token spans over one line.

    Each iteration starts a fresh DataScanner, so iterating twice yields
    the same spans.

    Usage:
        >>> stream = scan('"a b"')
        >>> [(t.name, t.start, t.end) for t in stream]
        [('quot', 0, 5)]

    """

    __slots__ = ("_data",)

    def __init__(self, text: str | bytes | bytearray) -> None:
        self._data = _as_bytes(text)

    @property
    def data(self) -> bytes:
        """The scanned bytes."""
        return self._data

    def __iter__(self) -> Iterator[TokenSpan]:
        return DataScanner(self._data).tokenize()

    def kinds(self) -> list[DataToken]:
        """Token kinds in order."""
        return [span.kind for span in self]

    def values(self) -> list[bytes]:
        """Token bytes in order."""
        data = self._data
        return [data[span.start : span.end] for span in self]

    def __repr__(self) -> str:
        return f"TokenStream({self._data!r})"


def scan(text: str | bytes | bytearray) -> TokenStream:
    """Scan a line into classified token spans.

    Args:
        text: Line to scan; str is encoded as UTF-8 and offsets are bytes

    Returns:
        A TokenStream; iterate it (any number of times) for TokenSpans.

    Example:
        >>> [t.name for t in scan("host=10.0.0.1:8080")]
        ['sym', 'eq', 'ipv4', 'coln', 'num']
    """
    return TokenStream(text)
