"""Token kinds and spans for the linescan data scanner.

The scanner produces a stream of TokenSpan objects over a line of text.
Each span carries a terminal kind and a [start, end) byte range; spans
are contiguous and together cover the whole input.

Token kinds are split in three groups:
- Terminal kinds, produced directly by the scanner. Their values are
  their priority: lower values are tried first.
- Nonterminal kinds, produced by the external grouping grammar
  (key/value pairs, rows, ranges, ...). Named here so that every kind
  has a stable display name.
- The ANY wildcard, used only by grammar matching.

Thread Safety:
TokenSpan is frozen (immutable) and safe to share across threads.
DataToken is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class DataToken(IntEnum):
    """Token kinds, terminals in scanner priority order."""

    INVALID = -1

    # Terminals - quoted and structured values
    QUOTED_STRING = 0  # "a b" or 'a b'
    URL = 1  # scheme://...
    PATH = 2  # /var/log, ./x, ../y
    MAC_ADDRESS = 3  # 00:1a:2b:3c:4d:5e
    DATE = 4  # 2024-01-31
    TIME = 5  # 12:30:45.123
    IPV6_ADDRESS = 6  # fe80::1
    HEX_DUMP = 7  # de:ad:be:ef

    # Terminals - XML
    XML_DECL_TAG = 8  # <!ENTITY a="b">
    XML_EMPTY_TAG = 9  # <br/>
    XML_OPEN_TAG = 10  # <a href="x">
    XML_CLOSE_TAG = 11  # </a>

    # Terminals - header markers, identical patterns told apart by the grammar
    H1 = 12
    H2 = 13
    H3 = 14

    # Terminals - punctuation
    COLON = 15
    EQUALS = 16
    COMMA = 17
    SEMI = 18
    EMPTY_CONTAINER = 19  # () {} []
    LCURLY = 20
    RCURLY = 21
    LSQUARE = 22
    RSQUARE = 23
    LPAREN = 24
    RPAREN = 25
    LANGLE = 26
    RANGLE = 27

    # Terminals - numbers and identifiers
    IPV4_ADDRESS = 28
    UUID = 29
    VERSION_NUMBER = 30
    OCTAL_NUMBER = 31
    PERCENTAGE = 32
    NUMBER = 33
    HEX_NUMBER = 34
    EMAIL = 35
    CONSTANT = 36  # true, False, null, None
    WORD = 37
    SYMBOL = 38  # foo::bar, some.thing

    # Terminals - layout and fallback
    LINE = 39
    WHITE = 40
    DOT = 41
    ESCAPED_CHAR = 42
    GARBAGE = 43

    # Nonterminals (grouping grammar)
    KEY = 50
    PAIR = 51
    VALUE = 52
    ROW = 53
    UNIT = 54
    MEASUREMENT = 55
    VARIABLE = 56
    RANGE = 57
    DATE_TIME = 58
    GROUP = 59

    ANY = 100

    @property
    def is_terminal(self) -> bool:
        """True for kinds the scanner itself produces."""
        return 0 <= self.value < TERMINAL_MAX


# Number of terminal kinds; terminals occupy values [0, TERMINAL_MAX)
TERMINAL_MAX = DataToken.GARBAGE + 1

NONTERMINAL_NAMES: tuple[str, ...] = (
    "key",
    "pair",
    "val",
    "row",
    "unit",
    "meas",
    "var",
    "rang",
    "dt",
    "grp",
)


def token_name(kind: int) -> str:
    """Get the short, stable name of a token kind.

    Args:
        kind: DataToken member or raw integer kind

    Returns:
        Terminal pattern name (e.g. "quot", "ipv4"), "any" for the
        wildcard, a nonterminal name (e.g. "pair"), or "inv" for
        negative and unknown values.

    Example:
        >>> token_name(DataToken.IPV4_ADDRESS)
        'ipv4'
        >>> token_name(-1)
        'inv'
    """
    if kind < 0:
        return "inv"
    if kind < TERMINAL_MAX:
        from linescan.scanner.matchers import MATCHERS

        return MATCHERS[kind].name
    if kind == DataToken.ANY:
        return "any"
    index = kind - DataToken.KEY
    if 0 <= index < len(NONTERMINAL_NAMES):
        return NONTERMINAL_NAMES[index]
    return "inv"


@dataclass(frozen=True, slots=True)
class TokenSpan:
    """A classified run of bytes produced by the scanner.

    Attributes:
        kind: Terminal kind of the run
        start: Start byte offset (inclusive)
        end: End byte offset (exclusive)

    """

    kind: DataToken
    start: int
    end: int

    @property
    def name(self) -> str:
        """Short token name (convenience accessor)."""
        return token_name(self.kind)

    @property
    def length(self) -> int:
        return self.end - self.start

    def value(self, data: bytes) -> bytes:
        """Slice the token's bytes out of the scanned data."""
        return data[self.start : self.end]

    def __repr__(self) -> str:
        return f"TokenSpan({self.name}, {self.start}:{self.end})"


__all__ = [
    "NONTERMINAL_NAMES",
    "TERMINAL_MAX",
    "DataToken",
    "TokenSpan",
    "token_name",
]
