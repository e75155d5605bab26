"""Tests for core data models."""

from __future__ import annotations

import re

import pytest

from findhighlight.models import LineMatches, MatchRecord, Pattern, TagBoundary, VisibleRange


class TestPattern:
    """Test Pattern dataclass."""

    def test_finditer(self) -> None:
        """Should delegate to the compiled regex."""
        pattern = Pattern(source="o", case_sensitive=True, is_regex=True, regex=re.compile("o"))
        assert [m.start() for m in pattern.finditer("foo")] == [1, 2]

    def test_pattern_is_immutable(self) -> None:
        """Patterns are frozen once compiled."""
        pattern = Pattern(source="o", case_sensitive=True, is_regex=True, regex=re.compile("o"))
        with pytest.raises(AttributeError):
            pattern.source = "x"  # type: ignore[misc]


class TestMatchRecord:
    """Test MatchRecord dataclass."""

    def test_create_record(self) -> None:
        """Should create MatchRecord with all fields."""
        record = MatchRecord(line_number=2, raw_offset=4, rendered_width=5, text="&")

        assert record.line_number == 2
        assert record.raw_offset == 4
        assert record.rendered_width == 5
        assert record.text == "&"

    def test_record_equality(self) -> None:
        """Should compare records by value."""
        assert MatchRecord(1, 2, 3) == MatchRecord(1, 2, 3)
        assert MatchRecord(1, 2, 3) != MatchRecord(1, 2, 4)


class TestLineMatches:
    """Test LineMatches dataclass."""

    def test_add_and_len(self) -> None:
        """Should accumulate offsets and lengths together."""
        matches = LineMatches(line=0, text="foo foo")
        matches.add(0, 3)
        matches.add(4, 3)

        assert len(matches) == 2
        assert matches.offsets == [0, 4]
        assert matches.lengths == [3, 3]

    def test_independent_defaults(self) -> None:
        """Instances should not share offset lists."""
        first = LineMatches(line=0)
        second = LineMatches(line=1)
        first.add(0, 1)
        assert second.offsets == []


class TestTagBoundary:
    """Test TagBoundary dataclass."""

    def test_end(self) -> None:
        """End should be start plus width."""
        assert TagBoundary(start=3, shift_width=4).end == 7

    def test_start_is_mutable(self) -> None:
        """Tag starts move as markers are inserted."""
        tag = TagBoundary(start=3, shift_width=4)
        tag.start += 6
        assert tag.end == 13


class TestVisibleRange:
    """Test VisibleRange dataclass."""

    def test_lines_inclusive(self) -> None:
        """Both ends are visible."""
        visible = VisibleRange(first=2, last=4)

        assert list(visible.lines()) == [2, 3, 4]
        assert len(visible) == 3

    def test_empty_range(self) -> None:
        """A last line before the first means nothing is visible."""
        visible = VisibleRange(first=0, last=-1)

        assert len(visible) == 0
        assert list(visible.lines()) == []
