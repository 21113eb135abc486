"""Data scanner for linescan.

Classifies runs of bytes in free text (typically scrubbed log lines)
into terminal token kinds using a fixed, priority-ordered pattern table.

Architecture:
scanner/
├── __init__.py          # Re-exports DataScanner, TokenStream, scan
├── core.py              # Cursor loop and restartable stream
└── matchers.py          # Priority-ordered pattern table

Usage:
    >>> from linescan.scanner import scan
    >>> for span in scan("host=10.0.0.1:8080"):
    ...     print(span)
TokenSpan(sym, 0:4)
TokenSpan(eq, 4:5)
TokenSpan(ipv4, 5:13)
TokenSpan(coln, 13:14)
TokenSpan(num, 14:18)

"""

from linescan.scanner.core import DataScanner, TokenStream, scan
from linescan.scanner.matchers import MATCHER_NAMES, MATCHERS, Matcher

__all__ = ["MATCHERS", "MATCHER_NAMES", "DataScanner", "Matcher", "TokenStream", "scan"]
