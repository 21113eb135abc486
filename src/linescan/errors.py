"""Exception classes for linescan.

Provides standardized exceptions for error handling throughout linescan.
"""

from __future__ import annotations


class LinescanError(Exception):
    """Base exception for all linescan errors.

    Subclass this for specific error categories.
    """

    pass


class ScrubError(LinescanError):
    """Error while scrubbing escape sequences from a line.

    Reported (not raised) by the scrubber when an overstrike run contains
    bytes that do not decode as UTF-8. The buffer is left partially edited
    and should not be used.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        """Initialize scrub error with optional byte offset.

        Args:
            message: Error description
            offset: Byte offset of the offending run in the buffer
        """
        self.message = message
        self.offset = offset

        location = f"offset {offset}: " if offset is not None else ""
        super().__init__(f"{location}{message}")


class HighlightRuleError(LinescanError):
    """Error in a token highlight rule.

    Raised when a rule names a token kind the scanner does not know.
    """

    def __init__(self, token_name: str, message: str) -> None:
        """Initialize highlight rule error.

        Args:
            token_name: Token name used as the rule key
            message: Description of the problem
        """
        self.token_name = token_name
        super().__init__(f"Highlight rule '{token_name}': {message}")
