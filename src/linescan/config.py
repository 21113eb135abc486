"""ContextVar-based scrub and scan configuration for linescan.

Provides thread-local configuration using Python's ContextVars (PEP 567).
The scrubber and scanner read the active config once per call.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from linescan.config import ScrubConfig, scrub_config_context

    with scrub_config_context(ScrubConfig(expand_cursor_moves=False)):
        line = scrub(b"a\\x1b[5Cb")  # cursor moves are dropped, not padded

"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class ScrubConfig:
    """Immutable scrub/scan configuration.

    Attributes:
        nul_replacement: Byte value written over NUL bytes before scrubbing
        expand_cursor_moves: Pad cursor-forward and cursor-position
            sequences with spaces instead of dropping them
        validate_ipv6: Only accept ipv6 tokens that parse as an address

    """

    nul_replacement: int = 0x20
    expand_cursor_moves: bool = True
    validate_ipv6: bool = True

    def __post_init__(self) -> None:
        if not 0 < self.nul_replacement < 256:
            raise ValueError(
                f"nul_replacement must be a non-NUL byte value, got {self.nul_replacement!r}"
            )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ScrubConfig":
        """Create ScrubConfig from dictionary.

        Only includes keys that are valid ScrubConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ScrubConfig attribute names.

        Returns:
            New ScrubConfig instance with values from dict.

        Example:
            >>> config = ScrubConfig.from_dict({
            ...     "expand_cursor_moves": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.expand_cursor_moves
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ScrubConfig = ScrubConfig()

_scrub_config: ContextVar[ScrubConfig] = ContextVar(
    "scrub_config",
    default=_DEFAULT_CONFIG,
)


def get_scrub_config() -> ScrubConfig:
    """Get current configuration (thread-local).

    Returns:
        The active ScrubConfig for this thread/context.

    """
    return _scrub_config.get()


def set_scrub_config(config: ScrubConfig) -> None:
    """Set configuration for current context.

    Args:
        config: ScrubConfig instance to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _scrub_config.set(config)


def reset_scrub_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _scrub_config.set(_DEFAULT_CONFIG)


@contextmanager
def scrub_config_context(config: ScrubConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ScrubConfig to use within the context.

    Yields:
        None

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _scrub_config.get()
    _scrub_config.set(config)
    try:
        yield
    finally:
        _scrub_config.set(previous)


__all__ = [
    "ScrubConfig",
    "get_scrub_config",
    "set_scrub_config",
    "reset_scrub_config",
    "scrub_config_context",
]
