"""Doc-comment harvesting for Rust sources.

Splits a source file into an indexed list of line descriptors and collects the
contents of the leading `//!` inner doc comment into a single markdown body.
Every descriptor keeps its exact text and line terminator, so joining them
back reproduces the input byte for byte.
"""

import re
from dataclasses import dataclass

from ..constants import DOC_COMMENT_PREFIX
from ..errors import SourceParseError

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")


@dataclass(frozen=True)
class SourceLine:
    """One physical line of a source file.

    Attributes:
        text: Line content without its terminator.
        terminator: "\\n", "\\r\\n", or "" for a final unterminated line.
        start: Offset of the line in the source text.
        doc: De-prefixed documentation content, None for opaque lines.
        prefix: Text preceding `doc` on documentation lines.
    """

    text: str
    terminator: str
    start: int
    doc: str | None = None
    prefix: str = ""

    @property
    def is_doc(self) -> bool:
        return self.doc is not None

    @property
    def raw(self) -> str:
        return self.text + self.terminator

    @property
    def end(self) -> int:
        return self.start + len(self.raw)

    @property
    def indent(self) -> str:
        return self.text[: len(self.text) - len(self.text.lstrip())]


@dataclass(frozen=True)
class HarvestedSource:
    """A source file decomposed into lines plus its doc-comment body.

    Attributes:
        lines: All lines of the source, in order.
        shebang: True if lines[0] is an interpreter directive.
        doc_lines: Indices into `lines` of the documentation lines, in order.
        body: Doc contents, each followed by "\\n".
        body_offsets: Offset in `body` of each doc line, plus len(body).
    """

    lines: list[SourceLine]
    shebang: bool
    doc_lines: list[int]
    body: str
    body_offsets: list[int]

    def doc_index_at(self, offset: int) -> int:
        """Return the doc line index starting at a body offset."""
        try:
            return self.body_offsets.index(offset)
        except ValueError:
            raise ValueError(f"offset {offset} is not at a doc line boundary") from None

    def doc_line(self, doc_index: int) -> SourceLine:
        return self.lines[self.doc_lines[doc_index]]

    def render(self) -> str:
        return "".join(line.raw for line in self.lines)


def split_lines(source: str) -> list[SourceLine]:
    """Split source text into lines that keep their terminators."""
    lines = []
    for match in _LINE_RE.finditer(source):
        raw = match.group()
        if raw.endswith("\r\n"):
            text, terminator = raw[:-2], "\r\n"
        elif raw.endswith("\n"):
            text, terminator = raw[:-1], "\n"
        else:
            text, terminator = raw, ""
        lines.append(SourceLine(text=text, terminator=terminator, start=match.start()))
    return lines


def is_shebang(line: str) -> bool:
    """Check whether a first line is an interpreter directive, not `#![attr]`."""
    return line.startswith("#!") and not line[2:].lstrip().startswith("[")


def _doc_content(text: str) -> tuple[str, str] | None:
    """Split a `//!` line into (prefix, content), or None for other lines."""
    stripped = text.lstrip()
    if not stripped.startswith(DOC_COMMENT_PREFIX):
        return None
    prefix_len = len(text) - len(stripped) + len(DOC_COMMENT_PREFIX)
    content = text[prefix_len:].lstrip(" ")
    return text[: len(text) - len(content)], content


def _is_plain_comment(stripped: str) -> bool:
    # `///` is an outer doc comment and attaches to the next item; `////` is plain.
    return stripped.startswith("//") and (
        not stripped.startswith("///") or stripped.startswith("////")
    )


def _block_comment_depth(text: str, depth: int) -> int:
    """Track nesting of `/* */` comments across a line."""
    i = 0
    while i < len(text) - 1:
        pair = text[i : i + 2]
        if pair == "/*":
            depth += 1
            i += 2
        elif pair == "*/" and depth > 0:
            depth -= 1
            i += 2
            if depth == 0:
                return 0
        else:
            i += 1
    return depth


def _bracket_depth(text: str, depth: int) -> int:
    """Track `[ ]` nesting of an inner attribute, ignoring string literals."""
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return 0
    return depth


def harvest(source: str) -> HarvestedSource:
    """Decompose source text and collect its leading doc comment.

    The header after an optional interpreter directive may mix `//!` lines with
    blank lines, plain comments, block comments and `#![...]` attributes. It
    ends at the first line of any other kind.

    Args:
        source: Full text of a Rust source file

    Returns:
        HarvestedSource with line descriptors and the markdown body

    Raises:
        SourceParseError: If a block comment or inner attribute in the header
            is never closed
    """
    lines = split_lines(source)
    shebang = bool(lines) and is_shebang(lines[0].text)

    doc_lines: list[int] = []
    body_parts: list[str] = []
    body_offsets: list[int] = []
    offset = 0

    comment_depth = 0
    attr_depth = 0
    opened_at = 0

    for i in range(1 if shebang else 0, len(lines)):
        line = lines[i]
        if comment_depth:
            comment_depth = _block_comment_depth(line.text, comment_depth)
            continue
        if attr_depth:
            attr_depth = _bracket_depth(line.text, attr_depth)
            continue

        stripped = line.text.lstrip()
        doc = _doc_content(line.text)
        if doc is not None:
            prefix, content = doc
            lines[i] = SourceLine(line.text, line.terminator, line.start, content, prefix)
            doc_lines.append(i)
            body_offsets.append(offset)
            body_parts.append(content + "\n")
            offset += len(content) + 1
        elif not stripped or _is_plain_comment(stripped):
            continue
        elif stripped.startswith("/*"):
            opened_at = i
            comment_depth = _block_comment_depth(stripped, 0)
        elif stripped.startswith("#!["):
            opened_at = i
            attr_depth = _bracket_depth(stripped[2:], 0)
        else:
            break

    if comment_depth:
        raise SourceParseError(
            "unterminated block comment", opened_at + 1, lines[opened_at].text
        )
    if attr_depth:
        raise SourceParseError(
            "unterminated inner attribute", opened_at + 1, lines[opened_at].text
        )

    body_offsets.append(offset)
    return HarvestedSource(
        lines=lines,
        shebang=shebang,
        doc_lines=doc_lines,
        body="".join(body_parts),
        body_offsets=body_offsets,
    )
