"""Convert between script form and package form.

A script carries its manifest in a `cargo` fenced block inside the leading
`//!` doc comment. `replace` swaps that block's content and re-emits the file
with every other character untouched; `extract` is `replace` without writing.
"""

from typing import NamedTuple

from ..constants import DEFAULT_MANIFEST, DOC_COMMENT_PREFIX, MANIFEST_MARKER
from .doc_comments import HarvestedSource, SourceLine, harvest
from .markdown_block import locate_block

NOT_FOUND_MESSAGE = f"could not find the `{MANIFEST_MARKER}` code block"


class PackageArtifact(NamedTuple):
    """A package in package form."""

    manifest: str
    source: str


def normalize_manifest(text: str) -> str:
    """Terminate a non-empty manifest with a newline."""
    if not text or text.endswith("\n"):
        return text
    return text + "\n"


def _render_doc_line(anchor: SourceLine, content: str, newline: str) -> str:
    content = content.removesuffix("\r")
    marker = anchor.indent + DOC_COMMENT_PREFIX
    if not content:
        return marker + newline
    return f"{marker} {content}{newline}"


def _splice(harvested: HarvestedSource, first: int, last: int, manifest: str) -> str:
    """Replace doc lines [first, last) with the lines of `manifest`.

    Opaque lines between the replaced doc lines keep their relative order. A
    new line equal to the old doc line at the same position reuses the old
    line's exact bytes.
    """
    segments = manifest.split("\n")[:-1] if manifest else []
    anchor = harvested.doc_line(first - 1)
    newline = anchor.terminator or "\n"

    region_start = harvested.doc_lines[first]
    region_end = harvested.doc_lines[last - 1] + 1

    emitted: list[str] = [line.raw for line in harvested.lines[:region_start]]
    k = 0
    for line in harvested.lines[region_start:region_end]:
        if not line.is_doc:
            emitted.append(line.raw)
            continue
        if k < len(segments):
            if line.doc == segments[k]:
                emitted.append(line.raw)
            else:
                emitted.append(_render_doc_line(anchor, segments[k], newline))
            k += 1
    emitted.extend(_render_doc_line(anchor, seg, newline) for seg in segments[k:])
    emitted.extend(line.raw for line in harvested.lines[region_end:])

    # A reused final line may lack a terminator once other lines follow it.
    for i in range(len(emitted) - 1):
        if not emitted[i].endswith("\n"):
            emitted[i] += newline
    return "".join(emitted)


def replace(source: str, manifest: str, on_not_found: str = NOT_FOUND_MESSAGE) -> tuple[str, str]:
    """Replace the manifest embedded in a script.

    Args:
        source: Full script text
        manifest: New manifest text (a trailing newline is added if missing)
        on_not_found: Message used when the manifest block is missing

    Returns:
        Tuple of (rewritten source, manifest text that was replaced)

    Raises:
        SourceParseError: If the source header cannot be decomposed
        ManifestBlockNotFoundError: If there is no `cargo` block
    """
    harvested = harvest(source)
    start, end = locate_block(harvested.body, MANIFEST_MARKER, on_not_found)
    old_manifest = harvested.body[start:end]
    first = harvested.doc_index_at(start)
    last = harvested.doc_index_at(end)
    new_source = _splice(harvested, first, last, normalize_manifest(manifest))
    return new_source, old_manifest


def extract(source: str, on_not_found: str = NOT_FOUND_MESSAGE) -> str:
    """Return the manifest embedded in a script."""
    harvested = harvest(source)
    start, end = locate_block(harvested.body, MANIFEST_MARKER, on_not_found)
    return harvested.body[start:end]


def replace_with_default(source: str) -> tuple[str, str]:
    """Swap the embedded manifest for the placeholder manifest.

    Returns:
        Tuple of (source with placeholder manifest, original manifest)
    """
    return replace(source, DEFAULT_MANIFEST)


def to_package(script: str) -> PackageArtifact:
    """Split a script into a manifest and a bin source."""
    source, manifest = replace_with_default(script)
    return PackageArtifact(manifest=manifest, source=source)


def to_script(source: str, manifest: str, on_not_found: str = NOT_FOUND_MESSAGE) -> str:
    """Embed a manifest into a bin source, producing a script."""
    script, _ = replace(source, manifest, on_not_found)
    return script
