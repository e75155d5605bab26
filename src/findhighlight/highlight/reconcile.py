"""Move match offsets from raw-text into rendered-markup coordinates.

The rendered line differs from the raw line in two ways: ``& < >`` become
entities, and tabs become a fixed run of spaces. Each pass below walks the
sorted match offsets and the sorted expansion points together, accumulating
the shift, and returns a fresh :class:`LineMatches`.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from findhighlight.highlight.locator import SPECIAL_WIDTHS, rendered_width, special_width
from findhighlight.models import LineMatches
from findhighlight.utils.text import iter_positions

Expansion = Tuple[int, int]


def _merge_shift(
    offsets: Sequence[int],
    lengths: Sequence[int],
    expansions: Sequence[Expansion],
    *,
    grow_lengths: bool,
) -> Tuple[List[int], List[int]]:
    shifted = list(offsets)
    grown = list(lengths)
    total = 0
    s = r = 0
    while r < len(offsets):
        if s < len(expansions) and expansions[s][0] < offsets[r]:
            total += expansions[s][1]
            s += 1
            continue
        shifted[r] = offsets[r] + total
        if grow_lengths:
            end = offsets[r] + lengths[r]
            inner = s
            while inner < len(expansions) and expansions[inner][0] < end:
                grown[r] += expansions[inner][1]
                inner += 1
        r += 1
    return shifted, grown


def shift_for_special(line_matches: LineMatches) -> LineMatches:
    """Account for ``& < >`` expanding into entities before each match."""
    line = line_matches.text
    expansions = [
        (position, special_width(line[position]) - 1)
        for position in iter_positions(line, "".join(SPECIAL_WIDTHS))
    ]
    offsets, lengths = _merge_shift(
        line_matches.offsets, line_matches.lengths, expansions, grow_lengths=False
    )
    return LineMatches(line=line_matches.line, offsets=offsets, lengths=lengths, text=line)


def shift_for_tabs(
    line_matches: LineMatches, *, tab_width: int = 4, legacy: bool = False
) -> LineMatches:
    """Account for tabs rendered as ``tab_width`` spaces.

    Expects offsets already adjusted by :func:`shift_for_special`. With
    ``legacy`` every offset moves by the line's total tab expansion, whatever
    its position.
    """
    line = line_matches.text
    extra = tab_width - 1
    tab_positions = list(iter_positions(line, "\t"))

    if legacy:
        offsets = [offset + extra * len(tab_positions) for offset in line_matches.offsets]
        lengths = list(line_matches.lengths)
    else:
        # Tab positions must live in the same entity-adjusted space as the offsets.
        expansions = [(rendered_width(line[:position]), extra) for position in tab_positions]
        offsets, lengths = _merge_shift(
            line_matches.offsets, line_matches.lengths, expansions, grow_lengths=True
        )
    return LineMatches(line=line_matches.line, offsets=offsets, lengths=lengths, text=line)


def reconcile(
    line_matches: LineMatches, *, tab_width: int = 4, legacy_tabs: bool = False
) -> LineMatches:
    """Run the special-character pass followed by the tab pass."""
    return shift_for_tabs(
        shift_for_special(line_matches), tab_width=tab_width, legacy=legacy_tabs
    )
