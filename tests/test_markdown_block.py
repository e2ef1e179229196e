"""Tests for the markdown block locator."""

import pytest

from bikecase.core.markdown_block import EventKind, iter_events, locate_block
from bikecase.errors import ManifestBlockNotFoundError


def _content(body: str, marker: str = "cargo") -> str:
    start, end = locate_block(body, marker, "not found")
    return body[start:end]


@pytest.mark.unit
class TestIterEvents:
    """Tests for iter_events."""

    def test_fenced_block_events(self) -> None:
        events = list(iter_events("```cargo\na = 1\n```\n"))
        assert [e.kind for e in events] == [EventKind.START, EventKind.TEXT, EventKind.END]
        assert all(e.info == "cargo" for e in events)
        assert events[1].span == (9, 15)

    def test_paragraph_is_text(self) -> None:
        events = list(iter_events("Some prose.\n"))
        assert [e.kind for e in events] == [EventKind.TEXT]

    def test_nested_fence_is_text(self) -> None:
        events = list(iter_events("> ```cargo\n> a = 1\n> ```\n"))
        assert [e.kind for e in events] == [EventKind.TEXT]

    def test_longer_closing_fence(self) -> None:
        events = list(iter_events("```cargo\na = 1\n`````\n"))
        assert events[1].span == (9, 15)
        assert events[2].span == (15, 21)

    def test_carriage_return_is_not_a_line_break(self) -> None:
        events = list(iter_events("```cargo\na = 1\r\n```\n"))
        assert [e.span for e in events] == [(0, 9), (9, 16), (16, 20)]

    def test_empty_fence_has_no_text(self) -> None:
        events = list(iter_events("```cargo\n```\n"))
        assert [e.kind for e in events] == [EventKind.START, EventKind.END]


@pytest.mark.unit
class TestLocateBlock:
    """Tests for locate_block."""

    def test_finds_block(self) -> None:
        assert _content('# Title\n\n```cargo\nname = "x"\n```\n') == 'name = "x"\n'

    def test_first_block_wins(self) -> None:
        body = "```cargo\nfirst = 1\n```\n\n```cargo\nsecond = 2\n```\n"
        assert _content(body) == "first = 1\n"

    def test_ignores_other_info_strings(self) -> None:
        body = "```rust\nfn x() {}\n```\n\n```cargo\ny = 1\n```\n"
        assert _content(body) == "y = 1\n"

    def test_tilde_fence(self) -> None:
        assert _content("~~~cargo\nx = 1\n~~~\n") == "x = 1\n"

    def test_unclosed_fence_runs_to_end(self) -> None:
        assert _content("```cargo\na = 1\n") == "a = 1\n"

    def test_custom_marker(self) -> None:
        assert _content("```manifest\nk = 1\n```\n", marker="manifest") == "k = 1\n"

    def test_not_found_uses_message(self) -> None:
        with pytest.raises(ManifestBlockNotFoundError, match="no manifest here"):
            locate_block("just text\n", "cargo", "no manifest here")

    def test_fence_in_block_quote_is_ignored(self) -> None:
        with pytest.raises(ManifestBlockNotFoundError):
            locate_block("> ```cargo\n> a = 1\n> ```\n", "cargo", "missing")

    def test_fence_in_list_item_is_ignored(self) -> None:
        with pytest.raises(ManifestBlockNotFoundError):
            locate_block("- item\n\n  ```cargo\n  a = 1\n  ```\n", "cargo", "missing")

    def test_top_level_block_after_nested_one(self) -> None:
        body = "> ```cargo\n> a = 1\n> ```\n\n```cargo\nb = 2\n```\n"
        assert _content(body) == "b = 2\n"

    def test_block_after_empty_block(self) -> None:
        body = "```cargo\n```\n\n```cargo\nx = 1\n```\n"
        assert _content(body) == "x = 1\n"

    def test_empty_block_is_not_found(self) -> None:
        with pytest.raises(ManifestBlockNotFoundError):
            locate_block("```cargo\n```\n", "cargo", "missing")
