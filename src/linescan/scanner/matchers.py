"""Priority-ordered pattern table for the data scanner.

Each entry pairs a terminal kind with a compiled bytes pattern. The
scanner tries entries in table order, anchored at its cursor, and the
first entry that matches wins; order encodes precedence. A quoted
string has to be tried before a bare symbol would swallow its quote,
and a MAC address before a generic hex-colon run.

Patterns are bytes patterns so that every match position is a byte
offset. ``\\w``, ``\\d`` and ``\\s`` are therefore ASCII-only, and
non-ASCII bytes end up in symbols or garbage.

The h1/h2/h3 entries share one pattern. Only h1 can ever win here;
telling the three apart is the job of the grouping grammar.

Thread Safety:
The table is a tuple of frozen entries built at import time and never
modified. Compiled patterns are safe to use from any thread.

"""

from __future__ import annotations

import re
from dataclasses import dataclass

from linescan.tokens import TERMINAL_MAX, DataToken


@dataclass(frozen=True, slots=True)
class Matcher:
    """One row of the pattern table.

    Attributes:
        name: Short token name, used for config keys and logging
        kind: Terminal kind produced on a match
        pattern: Compiled pattern, matched with ``pattern.match(data, pos)``

    """

    name: str
    kind: DataToken
    pattern: re.Pattern[bytes]


# Shared fragments. A backslash only ever starts an escape pair, so quoted
# bodies and attribute values match in linear time; a lone backslash is
# allowed right before the closing quote.
_DQ_STRING = rb'"(?!")((?:[^"\\]|\\.)*\\?)"'
_SQ_STRING = rb"'(?!')((?:[^'\\]|\\.)*\\?)'"
_XML_VALUE = rb"(?:[^>/]|/(?!>))++"
_XML_ATTRS = (
    rb"(?:[\w:]+(?:\s*=\s*(?:" + _DQ_STRING + rb"|" + _SQ_STRING + rb"|" + _XML_VALUE + rb")))*"
)
_IPV4_OCTET = rb"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
_HEX_PAIR = rb"[0-9a-fA-F][0-9a-fA-F]"
_SYM_CHAR = rb"""[^";\s:=,\(\)\{\}\[\]\+#!@%\^&\*'\?<>\~`\|\\]"""

_PATTERNS: tuple[tuple[str, DataToken, bytes], ...] = (
    (
        "quot",
        DataToken.QUOTED_STRING,
        rb"(?:u|r)?" + _DQ_STRING + rb"|(?:u|r)?" + _SQ_STRING,
    ),
    ("url", DataToken.URL, rb"""([\w]+://[^\s'"\[\](){}]+[/a-zA-Z0-9\-=&])"""),
    ("path", DataToken.PATH, rb"((?:/|\./|\.\./)[\w\.\-_\~/]*)"),
    ("mac", DataToken.MAC_ADDRESS, rb"(" + _HEX_PAIR + rb"(?::" + _HEX_PAIR + rb"){5})(?!:)"),
    (
        "date",
        DataToken.DATE,
        rb"(\d{4}/\d{1,2}/\d{1,2}|\d{4}-\d{1,2}-\d{1,2}|\d{2}/\w{3}/\d{4})T?",
    ),
    (
        "time",
        DataToken.TIME,
        rb"([\s\d]\d:\d\d(?:(?!:\d)|:\d\d(?:[\.,]\d{3,6})?Z?))\b",
    ),
    # Candidates are checked with ipaddress before being accepted
    ("ipv6", DataToken.IPV6_ADDRESS, rb"([:\da-fA-F\.]+[a-fA-F\d](?:%\w+)?|::)"),
    ("hexd", DataToken.HEX_DUMP, rb"(" + _HEX_PAIR + rb"(?::" + _HEX_PAIR + rb")+)"),
    ("xmld", DataToken.XML_DECL_TAG, rb"(<!\??[\w:]+\s*" + _XML_ATTRS + rb"\s*>)"),
    ("xmlt", DataToken.XML_EMPTY_TAG, rb"(<\??[\w:]+\s*" + _XML_ATTRS + rb"\s*(?:/|\?)>)"),
    ("xmlo", DataToken.XML_OPEN_TAG, rb"(<[\w:]+\s*" + _XML_ATTRS + rb"\s*>)"),
    ("xmlc", DataToken.XML_CLOSE_TAG, rb"(</[\w:]+\s*>)"),
    ("h1", DataToken.H1, rb"([A-Z \-])"),
    ("h2", DataToken.H2, rb"([A-Z \-])"),
    ("h3", DataToken.H3, rb"([A-Z \-])"),
    ("coln", DataToken.COLON, rb"(:)"),
    ("eq", DataToken.EQUALS, rb"(=)"),
    ("comm", DataToken.COMMA, rb"(,)"),
    ("semi", DataToken.SEMI, rb"(;)"),
    ("empt", DataToken.EMPTY_CONTAINER, rb"(\(\)|\{\}|\[\])"),
    ("lcurly", DataToken.LCURLY, rb"(\{)"),
    ("rcurly", DataToken.RCURLY, rb"(\})"),
    ("lsquare", DataToken.LSQUARE, rb"(\[)"),
    ("rsquare", DataToken.RSQUARE, rb"(\])"),
    ("lparen", DataToken.LPAREN, rb"(\()"),
    ("rparen", DataToken.RPAREN, rb"(\))"),
    ("langle", DataToken.LANGLE, rb"(<)"),
    ("rangle", DataToken.RANGLE, rb"(>)"),
    (
        "ipv4",
        DataToken.IPV4_ADDRESS,
        rb"((?:" + _IPV4_OCTET + rb"\.){3}" + _IPV4_OCTET + rb"(?![\d]))",
    ),
    (
        "uuid",
        DataToken.UUID,
        rb"([0-9a-fA-F]{8}(?:-[0-9a-fA-F]{4}){3}-[0-9a-fA-F]{12})",
    ),
    (
        "vers",
        DataToken.VERSION_NUMBER,
        rb"([0-9]+(?:\.[0-9]+\w*){2,}(?:-\w+)?|[0-9]+(?:\.[0-9]+\w*)+(?<!\d[eE])-\w+?)\b",
    ),
    ("oct", DataToken.OCTAL_NUMBER, rb"(-?0[0-7]+\b)"),
    ("pcnt", DataToken.PERCENTAGE, rb"(-?[0-9]+(\.[0-9]+)?[ ]*%\b)"),
    (
        "num",
        DataToken.NUMBER,
        rb"(-?[0-9]+(\.[0-9]+)?([eE][\-+][0-9]+)?)\b(?![\._\-][a-zA-Z])",
    ),
    ("hex", DataToken.HEX_NUMBER, rb"(-?(?:0x|[0-9])[0-9a-fA-F]+)\b(?![\._\-][a-zA-Z])"),
    ("mail", DataToken.EMAIL, rb"([a-zA-Z0-9\._%+-]+@[a-zA-Z0-9\.-]+\.[a-zA-Z]+)\b"),
    ("cnst", DataToken.CONSTANT, rb"(true|True|TRUE|false|False|FALSE|None|null)\b"),
    (
        "word",
        DataToken.WORD,
        rb"""([a-zA-Z][a-z']+(?=[\s\(\)!\*:;'"\?,]|[\.\!,\?]\s|$))""",
    ),
    ("sym", DataToken.SYMBOL, rb"(" + _SYM_CHAR + rb"+(?:::" + _SYM_CHAR + rb"+)*)"),
    ("line", DataToken.LINE, rb"(\r?\n|\r|;)"),
    ("wspc", DataToken.WHITE, rb"([ \r\t\n]+)"),
    ("dot", DataToken.DOT, rb"(\.)"),
    ("escc", DataToken.ESCAPED_CHAR, rb"(\\\.)"),
    ("gbg", DataToken.GARBAGE, rb"(?s)(.)"),
)

MATCHERS: tuple[Matcher, ...] = tuple(
    Matcher(name, kind, re.compile(source)) for name, kind, source in _PATTERNS
)

# Table rows are indexed by terminal kind
if len(MATCHERS) != TERMINAL_MAX or any(m.kind != i for i, m in enumerate(MATCHERS)):
    raise RuntimeError("pattern table rows must follow DataToken terminal order")

MATCHER_NAMES: frozenset[str] = frozenset(m.name for m in MATCHERS)


__all__ = ["MATCHERS", "MATCHER_NAMES", "Matcher"]
