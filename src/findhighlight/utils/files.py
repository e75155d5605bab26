"""Utility helpers for working with files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

LOGGER = logging.getLogger(__name__)


def iter_text_paths(inputs: Iterable[Path], *, pattern: str = "*") -> Iterator[Path]:
    """Yield file paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_text_paths(
                sorted(child for child in item.rglob(pattern) if child.is_file()),
                pattern=pattern,
            )
        elif item.is_file():
            yield item


def read_text(path: Path) -> str:
    """Read a text file as UTF-8, replacing undecodable bytes."""
    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        LOGGER.warning("%s is not valid UTF-8, undecodable bytes replaced", path)
        return data.decode("utf-8", errors="replace")
