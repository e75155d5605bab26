"""Tests for file utility functions."""

from __future__ import annotations

from pathlib import Path

from findhighlight.utils.files import iter_text_paths, read_text


class TestIterTextPaths:
    """Test iter_text_paths function."""

    def test_single_file(self, tmp_path: Path) -> None:
        """Should yield a single file."""
        source = tmp_path / "notes.txt"
        source.write_text("dummy")

        paths = list(iter_text_paths([source]))

        assert paths == [source]

    def test_directory_recursive(self, tmp_path: Path) -> None:
        """Should find files in nested directories, sorted."""
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.py").write_text("a")

        paths = list(iter_text_paths([tmp_path]))

        assert paths == sorted([tmp_path / "b.txt", tmp_path / "sub" / "a.py"])

    def test_glob_filter(self, tmp_path: Path) -> None:
        """Should only yield files matching the pattern inside directories."""
        (tmp_path / "a.py").write_text("a")
        (tmp_path / "b.txt").write_text("b")

        paths = list(iter_text_paths([tmp_path], pattern="*.py"))

        assert paths == [tmp_path / "a.py"]

    def test_missing_path_skipped(self, tmp_path: Path) -> None:
        """Nonexistent paths yield nothing."""
        assert list(iter_text_paths([tmp_path / "missing.txt"])) == []

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Empty directories yield nothing."""
        assert list(iter_text_paths([tmp_path])) == []


class TestReadText:
    """Test read_text function."""

    def test_utf8(self, tmp_path: Path) -> None:
        """Should decode UTF-8 text."""
        source = tmp_path / "u.txt"
        source.write_text("caffè & <tag>", encoding="utf-8")

        assert read_text(source) == "caffè & <tag>"

    def test_invalid_bytes_replaced(self, tmp_path: Path) -> None:
        """Undecodable bytes are replaced rather than failing."""
        source = tmp_path / "bad.txt"
        source.write_bytes(b"ok \xff end")

        assert read_text(source) == "ok � end"
