"""Utility modules for linescan.

Provides:
- logger: get_logger for logging
"""

from linescan.utils.logger import get_logger

__all__ = [
    "get_logger",
]
