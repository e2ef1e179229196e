"""Locate the manifest code block inside a markdown body."""

from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple

from markdown_it import MarkdownIt

from ..errors import ManifestBlockNotFoundError


class EventKind(str, Enum):
    """Kinds of events in the markdown event stream."""

    START = "start"
    TEXT = "text"
    END = "end"


class Event(NamedTuple):
    """A markdown event with the body offsets it covers."""

    kind: EventKind
    info: str
    span: tuple[int, int]


class State(str, Enum):
    """States of the block locator."""

    NONE = "none"
    START = "start"
    TEXT = "text"
    END = "end"


def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _line_offsets(text: str) -> list[int]:
    offsets = [0]
    for line in text.split("\n"):
        offsets.append(min(offsets[-1] + len(line) + 1, len(text)))
    return offsets


def _is_closed(begin: int, end: int, content: str) -> bool:
    """Check whether a fence spanning lines [begin, end) has a closing fence."""
    return content.count("\n") == end - begin - 2


def iter_events(body: str) -> Iterator[Event]:
    """Yield start/text/end events for a markdown body.

    Fenced blocks produce a START, a TEXT covering their content (only when the
    content is not empty) and an END. Inline runs, indented code and fences
    nested in block quotes or list items produce a single TEXT event.
    """
    offsets = _line_offsets(body)

    # The parser treats a lone "\r" as a line break; offsets count only "\n".
    for token in _parser().parse(body.replace("\r", " ")):
        if token.map is None:
            continue
        begin, end = token.map
        if token.type == "fence" and token.level == 0:
            info = token.info.strip()
            closed = _is_closed(begin, end, token.content)
            content_end = end - 1 if closed else end
            yield Event(EventKind.START, info, (offsets[begin], offsets[begin + 1]))
            if token.content:
                yield Event(EventKind.TEXT, info, (offsets[begin + 1], offsets[content_end]))
            yield Event(EventKind.END, info, (offsets[content_end], offsets[end]))
        elif token.type in ("inline", "code_block", "fence"):
            yield Event(EventKind.TEXT, "", (offsets[begin], offsets[end]))


def locate_block(body: str, marker: str, on_not_found: str) -> tuple[int, int]:
    """Find the content span of the first fenced block tagged with `marker`.

    Runs a None -> Start -> Text -> End automaton over the event stream. Events
    that do not match the expected transition leave the state unchanged, and
    once End is reached later blocks are ignored, so the first block wins.

    Args:
        body: Markdown text
        marker: Info string identifying the block
        on_not_found: Message of the error raised when no block is found

    Returns:
        Half-open (start, end) offsets of the block content in `body`

    Raises:
        ManifestBlockNotFoundError: If no complete block is found
    """
    state = State.NONE
    span: tuple[int, int] | None = None

    for event in iter_events(body):
        if state == State.NONE:
            if event.kind == EventKind.START and event.info == marker:
                state = State.START
        elif state == State.START:
            if event.kind == EventKind.TEXT:
                state = State.TEXT
                span = event.span
        elif state == State.TEXT:
            if event.kind == EventKind.END and event.info == marker:
                state = State.END
        else:
            break

    if state != State.END or span is None:
        raise ManifestBlockNotFoundError(on_not_found)
    return span
