"""Core findhighlight data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass(frozen=True, slots=True)
class Pattern:
    """Compiled query, ready to scan text."""

    source: str
    case_sensitive: bool
    is_regex: bool
    regex: re.Pattern[str] = field(repr=False, compare=False)

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        return self.regex.finditer(text)


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """A single match occurrence on one line."""

    line_number: int
    raw_offset: int
    rendered_width: int
    text: str = ""


@dataclass(slots=True)
class LineMatches:
    """All matches found on one line, in encounter order.

    ``offsets`` start out in raw-text coordinates and ``lengths`` hold the
    rendered width of each match. Reconciliation produces new instances whose
    offsets are valid in rendered-markup coordinates.
    """

    line: int
    offsets: List[int] = field(default_factory=list)
    lengths: List[int] = field(default_factory=list)
    text: str = ""

    def __len__(self) -> int:
        return len(self.offsets)

    def add(self, offset: int, length: int) -> None:
        self.offsets.append(offset)
        self.lengths.append(length)


@dataclass(slots=True)
class TagBoundary:
    """One markup tag inside a rendered line, in current string coordinates."""

    start: int
    shift_width: int

    @property
    def end(self) -> int:
        return self.start + self.shift_width


@dataclass(frozen=True, slots=True)
class VisibleRange:
    """Inclusive, 0-based range of lines currently shown."""

    first: int
    last: int

    def __len__(self) -> int:
        return max(self.last - self.first + 1, 0)

    def lines(self) -> range:
        return range(self.first, self.last + 1)
