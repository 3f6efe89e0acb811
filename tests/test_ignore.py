"""Tests for .gitignore merging."""

from pathlib import Path

from gitpanel.ignore import UNITY_IGNORE_PATTERNS, merge_ignore_patterns


class TestMergeIgnorePatterns:
    """Tests for merge_ignore_patterns."""

    def test_creates_file_with_all_patterns(self, tmp_path: Path) -> None:
        """Test that a missing file is created with every pattern in order."""
        path = tmp_path / ".gitignore"
        added = merge_ignore_patterns(path)
        assert added == UNITY_IGNORE_PATTERNS
        assert path.read_text(encoding="utf-8").splitlines() == UNITY_IGNORE_PATTERNS

    def test_existing_pattern_not_duplicated(self, tmp_path: Path) -> None:
        """Test that Library/ stays once and Temp/ is appended once."""
        path = tmp_path / ".gitignore"
        path.write_text("Library/\n", encoding="utf-8")

        added = merge_ignore_patterns(path, ["Library/", "Temp/"])

        assert added == ["Temp/"]
        assert path.read_text(encoding="utf-8") == "Library/\nTemp/\n"

    def test_merge_is_idempotent(self, tmp_path: Path) -> None:
        """Test that a second merge leaves the file byte-identical."""
        path = tmp_path / ".gitignore"
        path.write_text("# project\n*.log\n", encoding="utf-8")
        merge_ignore_patterns(path)
        once = path.read_text(encoding="utf-8")

        assert merge_ignore_patterns(path) == []
        assert path.read_text(encoding="utf-8") == once

    def test_existing_lines_compared_trimmed(self, tmp_path: Path) -> None:
        """Test that surrounding whitespace on existing lines still counts as present."""
        path = tmp_path / ".gitignore"
        path.write_text("  Temp/  \n", encoding="utf-8")
        assert merge_ignore_patterns(path, ["Temp/"]) == []
        assert path.read_text(encoding="utf-8") == "  Temp/  \n"

    def test_existing_order_preserved(self, tmp_path: Path) -> None:
        """Test that existing lines are kept in place and new ones appended."""
        path = tmp_path / ".gitignore"
        path.write_text("b\na\n", encoding="utf-8")
        merge_ignore_patterns(path, ["c", "a", "d"])
        assert path.read_text(encoding="utf-8").splitlines() == ["b", "a", "c", "d"]

    def test_missing_trailing_newline_completed(self, tmp_path: Path) -> None:
        """Test that appending never glues a pattern onto the last line."""
        path = tmp_path / ".gitignore"
        path.write_text("Library/", encoding="utf-8")
        merge_ignore_patterns(path, ["Temp/"])
        assert path.read_text(encoding="utf-8") == "Library/\nTemp/\n"

    def test_repeated_required_pattern_appended_once(self, tmp_path: Path) -> None:
        """Test that duplicates inside the required set are written once."""
        path = tmp_path / ".gitignore"
        assert merge_ignore_patterns(path, ["Temp/", "Temp/"]) == ["Temp/"]
        assert path.read_text(encoding="utf-8") == "Temp/\n"
