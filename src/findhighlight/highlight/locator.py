"""Locate query matches in plain text, grouped by line."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

from findhighlight.models import LineMatches, MatchRecord, Pattern

LOGGER = logging.getLogger(__name__)

SPECIAL_WIDTHS = {"<": 4, ">": 4, "&": 5}


def special_width(char: str) -> int | None:
    """Rendered width of an HTML-special character, or ``None`` for any other."""
    return SPECIAL_WIDTHS.get(char)


def rendered_width(text: str) -> int:
    """Length of ``text`` once ``& < >`` are expanded to entities."""
    return sum(special_width(char) or 1 for char in text)


def locate_matches(contents: str, pattern: Pattern, *, first_line: int = 0) -> List[LineMatches]:
    """Find every non-overlapping match of ``pattern`` in ``contents``.

    ``contents`` is the visible text with a newline after each line. Line
    numbers are relative to ``first_line``. Zero-width matches are ignored and
    a match running past the end of its line is cut at the newline.
    """
    if pattern.regex.search(contents) is None:
        return []

    lines = contents.split("\n")
    results: List[LineMatches] = []
    line_index = 0
    line_start = 0

    for match in pattern.finditer(contents):
        start = match.start()
        # Advance the line cursor; matches arrive in increasing order.
        newline = contents.find("\n", line_start)
        while newline != -1 and newline < start:
            line_index += 1
            line_start = newline + 1
            newline = contents.find("\n", line_start)

        matched = match.group(0).split("\n", 1)[0]
        if not matched:
            continue

        line_number = first_line + line_index
        if not results or results[-1].line != line_number:
            results.append(LineMatches(line=line_number, text=lines[line_index]))
        results[-1].add(start - line_start, rendered_width(matched))

    LOGGER.debug(
        "Found %d matches on %d lines", sum(len(result) for result in results), len(results)
    )
    return results


def iter_match_records(results: Iterable[LineMatches]) -> Iterator[MatchRecord]:
    """Flatten located matches into one :class:`MatchRecord` per occurrence."""
    for result in results:
        for offset, length in zip(result.offsets, result.lengths):
            end = offset
            width = 0
            while end < len(result.text) and width < length:
                width += special_width(result.text[end]) or 1
                end += 1
            yield MatchRecord(
                line_number=result.line,
                raw_offset=offset,
                rendered_width=length,
                text=result.text[offset:end],
            )
