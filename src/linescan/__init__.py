"""
linescan: ANSI scrubbing and token scanning for log viewers

Turns raw terminal log lines into clean text plus style/role annotations,
and classifies the clean text into lexical tokens (numbers, addresses,
quoted strings, paths, ...) for highlighting and structure detection.

Quick Start:
    >>> from linescan import scrub, scan
    >>> line = scrub("\\x1b[1mHELLO\\x1b[0m world")
    >>> line.text
    'HELLO world'
    >>> [t.name for t in scan("host=10.0.0.1:8080")]
    ['sym', 'eq', 'ipv4', 'coln', 'num']

Low-level API:
    >>> from linescan import scrub_ansi_string
    >>> buf = bytearray(b"\\x1b[31mred")
    >>> attrs = []
    >>> outcome = scrub_ansi_string(buf, attrs)
    >>> bytes(buf), outcome.ok
    (b'red', True)

Installation:
    pip install linescan              # zero runtime deps
    pip install linescan[test]        # + pytest and hypothesis
"""

from linescan.ansi import (
    ANSI_BOLD_START,
    ANSI_CSI,
    ANSI_NORM,
    ANSI_UNDERLINE_START,
    AnsiColor,
    add_ansi_vars,
    ansi_color,
)
from linescan.attrs import (
    AttrType,
    Role,
    StringAttr,
    StringAttrs,
    TextAttrs,
    find_string_attr,
    to_origin_offset,
)
from linescan.config import (
    ScrubConfig,
    get_scrub_config,
    reset_scrub_config,
    scrub_config_context,
    set_scrub_config,
)
from linescan.errors import HighlightRuleError, LinescanError, ScrubError
from linescan.highlighting import Highlighter, TokenHighlighter
from linescan.ranges import LineRange
from linescan.scanner import DataScanner, TokenStream, scan
from linescan.scrubber import (
    ScrubbedLine,
    ScrubOutcome,
    scrub,
    scrub_ansi_string,
    strip_ansi,
)
from linescan.tokens import TERMINAL_MAX, DataToken, TokenSpan, token_name

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Scrubber
    "scrub",
    "scrub_ansi_string",
    "strip_ansi",
    "ScrubbedLine",
    "ScrubOutcome",
    # Scanner
    "scan",
    "DataScanner",
    "TokenStream",
    "DataToken",
    "TokenSpan",
    "TERMINAL_MAX",
    "token_name",
    # Annotations
    "AttrType",
    "LineRange",
    "Role",
    "StringAttr",
    "StringAttrs",
    "TextAttrs",
    "find_string_attr",
    "to_origin_offset",
    # Highlighting
    "Highlighter",
    "TokenHighlighter",
    # ANSI template variables
    "ANSI_CSI",
    "ANSI_NORM",
    "ANSI_BOLD_START",
    "ANSI_UNDERLINE_START",
    "AnsiColor",
    "add_ansi_vars",
    "ansi_color",
    # Configuration (ContextVar-based)
    "ScrubConfig",
    "get_scrub_config",
    "set_scrub_config",
    "reset_scrub_config",
    "scrub_config_context",
    # Errors
    "LinescanError",
    "ScrubError",
    "HighlightRuleError",
]
