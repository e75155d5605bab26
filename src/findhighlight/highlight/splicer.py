"""Insert highlight markers into rendered markup without breaking tag nesting.

The splicer walks the tags already present in a rendered line and the match
spans in step. A tag at or before the next match only pushes the match to the
right. A tag that falls inside a match splits the highlight: the marker is
closed just before the tag and reopened right after it, so every highlight
span either fully contains or fully excludes each tag boundary.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from findhighlight.config import HighlightConfig
from findhighlight.highlight.reconcile import reconcile
from findhighlight.models import LineMatches, TagBoundary

LOGGER = logging.getLogger(__name__)


class MarkupError(ValueError):
    """Raised when a rendered line cannot be spliced safely."""


def find_tags(markup: str) -> List[TagBoundary]:
    """Return the position and width of every ``<...>`` tag in ``markup``."""
    tags: List[TagBoundary] = []
    position = markup.find("<")
    while position != -1:
        close = markup.find(">", position + 1)
        if close == -1:
            raise MarkupError(f"Unclosed tag starting at offset {position}")
        if close > position + 1:
            tags.append(TagBoundary(start=position, shift_width=close - position + 1))
        position = markup.find("<", close + 1)
    return tags


def _shift(values: List[int], start: int, width: int) -> None:
    for index in range(start, len(values)):
        values[index] += width


def _shift_tags(tags: List[TagBoundary], start: int, width: int) -> None:
    for index in range(start, len(tags)):
        tags[index].start += width


def _insert(markup: str, position: int, text: str) -> str:
    if position < 0 or position > len(markup):
        raise MarkupError(f"Insertion point {position} outside markup of length {len(markup)}")
    return markup[:position] + text + markup[position:]


def splice_highlights(
    markup: str,
    offsets: Sequence[int],
    lengths: Sequence[int],
    *,
    start_marker: str,
    end_marker: str,
) -> str:
    """Wrap each ``offsets[i]``/``lengths[i]`` span of ``markup`` in markers.

    ``offsets`` are positions in the tag-free rendered text; the tags found in
    ``markup`` are skipped over as the merge walks along.

    Raises:
        MarkupError: if the markup has an unclosed tag or a span falls outside it.
    """
    tags = find_tags(markup)
    offsets = list(offsets)
    lengths = list(lengths)
    start_len = len(start_marker)
    end_len = len(end_marker)

    t = m = 0
    while t < len(tags) and m < len(offsets):
        if tags[t].start <= offsets[m]:
            _shift(offsets, m, tags[t].shift_width)
            t += 1
            continue

        markup = _insert(markup, offsets[m], start_marker)
        _shift(offsets, m, start_len)
        _shift_tags(tags, t, start_len)
        while t < len(tags) and offsets[m] + lengths[m] > tags[t].start:
            markup = _insert(markup, tags[t].start, end_marker)
            _shift(offsets, m + 1, end_len)
            _shift_tags(tags, t, end_len)
            lengths[m] += end_len

            # Back-to-back tags hold no text; reopen only after the last of them.
            while t + 1 < len(tags) and tags[t + 1].start == tags[t].end:
                _shift(offsets, m + 1, tags[t].shift_width)
                lengths[m] += tags[t].shift_width
                t += 1

            markup = _insert(markup, tags[t].end, start_marker)
            _shift(offsets, m + 1, tags[t].shift_width + start_len)
            _shift_tags(tags, t + 1, start_len)
            lengths[m] += tags[t].shift_width + start_len
            t += 1

        markup = _insert(markup, offsets[m] + lengths[m], end_marker)
        _shift(offsets, m + 1, end_len)
        _shift_tags(tags, t, end_len)
        m += 1

    # No tags remain, the leftover spans are contiguous.
    for index in range(m, len(offsets)):
        end = offsets[index] + lengths[index]
        if end > len(markup):
            raise MarkupError(f"Match end {end} outside markup of length {len(markup)}")
        markup = _insert(markup, offsets[index], start_marker)
        markup = _insert(markup, end + start_len, end_marker)
        _shift(offsets, index + 1, start_len + end_len)

    return markup


def highlight_line(markup: str, line_matches: LineMatches, config: HighlightConfig) -> str:
    """Reconcile one line's matches and splice highlight markers into ``markup``."""
    reconciled = reconcile(
        line_matches, tab_width=config.tab_width, legacy_tabs=config.legacy_tabs
    )
    return splice_highlights(
        markup,
        reconciled.offsets,
        reconciled.lengths,
        start_marker=config.start_marker,
        end_marker=config.end_marker,
    )
