"""Text helpers shared by the renderer and the highlighter."""

from __future__ import annotations

from typing import Iterable, Iterator, List

HTML_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}


def escape_html(text: str) -> str:
    """Escape the characters the highlighter accounts for (``& < >``).

    Quotes are left alone so that rendered widths stay predictable.
    """
    return "".join(HTML_ENTITIES.get(char, char) for char in text)


def expand_tabs(text: str, *, tab_width: int = 4) -> str:
    """Replace every tab with a fixed run of spaces, independent of column."""
    return text.replace("\t", " " * tab_width)


def strip_markers(markup: str, start_marker: str, end_marker: str) -> str:
    """Remove every occurrence of a highlight marker pair from markup."""
    return markup.replace(start_marker, "").replace(end_marker, "")


def join_lines(lines: Iterable[str]) -> str:
    """Concatenate lines, terminating each one with a newline."""
    return "".join(f"{line}\n" for line in lines)


def iter_positions(text: str, chars: str) -> Iterator[int]:
    """Yield the index of every character of ``text`` found in ``chars``."""
    for index, char in enumerate(text):
        if char in chars:
            yield index


def split_lines(text: str) -> List[str]:
    """Split text on ``\\n`` only, dropping the empty piece after a final newline.

    ``\\r\\n`` is folded to ``\\n`` first. Other separators that
    :meth:`str.splitlines` honours (form feed, ``\\x85``, ``\\u2028``...) stay
    inside their line so line numbers agree with newline counts.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines
