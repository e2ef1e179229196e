"""Tests for diff utilities."""

import logging

import pytest

from bikecase.diff import diff_lines, log_diff


class TestDiffLines:
    """Tests for diff_lines function."""

    def test_identical(self) -> None:
        """Unchanged lines should be prefixed with a space."""
        assert diff_lines("a\nb\n", "a\nb\n") == [" a", " b"]

    def test_replace(self) -> None:
        """Replaced lines should show removal before addition."""
        old = '[package]\nversion = "0.1.0"\n'
        new = '[package]\nversion = "0.2.0"\n'
        assert diff_lines(old, new) == [
            " [package]",
            '-version = "0.1.0"',
            '+version = "0.2.0"',
        ]

    def test_insert_and_delete(self) -> None:
        """Insertions and deletions should keep the surrounding context."""
        assert diff_lines("a\nb\nc\n", "a\nc\nd\n") == [" a", "-b", " c", "+d"]

    def test_empty_old(self) -> None:
        """Diff against nothing should add every line."""
        assert diff_lines("", "fn main() {}\n") == ["+fn main() {}"]


class TestLogDiff:
    """Tests for log_diff function."""

    def test_no_changes(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_diff should report unchanged files and return False."""
        with caplog.at_level(logging.INFO, logger="bikecase.diff"):
            assert log_diff("Cargo.toml", "x\n", "x\n") is False
        assert caplog.messages == ["No changes: Cargo.toml"]

    def test_changes(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_diff should log a header and one row per diff line."""
        with caplog.at_level(logging.INFO, logger="bikecase.diff"):
            assert log_diff("src/main.rs", "a\n", "b\n") is True
        assert caplog.messages == ["`src/main.rs`:", "│-a", "│+b"]
