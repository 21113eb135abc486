"""Packaging checks: version metadata and the public namespace."""

import tomllib
from pathlib import Path

import linescan
from linescan.utils.logger import get_logger


def test_version_matches_pyproject() -> None:
    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert linescan.__version__ == expected


def test_version_is_three_numeric_parts() -> None:
    parts = linescan.__version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_resolve() -> None:
    """Everything in __all__ is importable from the package root."""
    for name in linescan.__all__:
        assert hasattr(linescan, name), name


def test_loggers_share_namespace() -> None:
    assert get_logger("scrubber").name == "linescan.scrubber"
    assert get_logger("linescan.scanner").name == "linescan.scanner"
    assert get_logger("linescan").name == "linescan"
