"""Utility helpers for working with the example corpus on disk."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

EXAMPLE_SUFFIXES = (".cs", ".md")

_VERSION_DIR = re.compile(r"^v(\d+)$")


def iter_example_paths(root: Path) -> Iterator[Path]:
    """Yield code samples and markdown guides under ``root``, recursively."""
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in EXAMPLE_SUFFIXES:
            yield path


def has_example_files(root: Path) -> bool:
    return next(iter_example_paths(root), None) is not None


def relative_example_name(root: Path, path: Path) -> str:
    """Relative path of an example with forward slashes on every platform."""
    return path.relative_to(root).as_posix()


def detect_version(relative_name: str) -> int | None:
    """Return N for examples stored under a top-level ``vN/`` folder."""
    parts = relative_name.split("/")
    if len(parts) < 2:
        return None
    match = _VERSION_DIR.match(parts[0])
    return int(match.group(1)) if match else None
