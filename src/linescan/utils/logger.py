"""Logger lookup for linescan modules.

Every module logs under the ``linescan`` namespace so an application can
tune scrubber diagnostics with one ``logging.getLogger("linescan")`` call.
The library never installs handlers.

Example:
    >>> from linescan.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("dropping unhandled CSI command")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` inside the linescan namespace.

    Names already under ``linescan`` are used as is; anything else is
    nested below it.

    Example:
        >>> get_logger("scrubber").name
        'linescan.scrubber'
    """
    if not (name == "linescan" or name.startswith("linescan.")):
        name = f"linescan.{name}"
    return logging.getLogger(name)
