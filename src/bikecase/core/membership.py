"""Workspace membership maintenance.

Edits the `workspace.members` and `workspace.exclude` arrays of a virtual
manifest. Entries are matched by path equality after joining them to the
workspace root, so `./foo` and `foo` name the same member. Edits go through
tomlkit so the rest of the manifest keeps its formatting.
"""

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.items import Array

from ..constants import MANIFEST_FILE_NAME
from ..errors import MalformedManifestError, PathNotRepresentableError
from ..services import filesystem

logger = logging.getLogger(__name__)

PARAMS = ("members", "exclude")


@dataclass
class MembershipReport:
    """Changes made (or planned, in dry-run mode) to a workspace manifest."""

    manifest_path: Path
    added: dict[str, list[str]] = field(default_factory=lambda: {p: [] for p in PARAMS})
    removed: dict[str, list[str]] = field(default_factory=lambda: {p: [] for p in PARAMS})

    @property
    def changed(self) -> bool:
        return any(self.added.values()) or any(self.removed.values())


def relative_to_root(workspace_root: Path, path: Path) -> str:
    """Express a path relative to the workspace root as UTF-8 text.

    Paths outside the root are kept as given.

    Raises:
        PathNotRepresentableError: If the path is not valid UTF-8
    """
    try:
        path = path.relative_to(workspace_root)
    except ValueError:
        pass
    text = path.as_posix()
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise PathNotRepresentableError(f"{text!r} is not a valid UTF-8 path") from None
    return text


def same_path(workspace_root: Path, entry: object, target: str) -> bool:
    """Compare a manifest entry with a target path, relative to the root."""
    if not isinstance(entry, str):
        return False
    return workspace_root / entry == workspace_root / target


def _array(manifest: MutableMapping, param: str, create: bool) -> Array | None:
    workspace = manifest.get("workspace")
    if workspace is None:
        if not create:
            return None
        workspace = tomlkit.table()
        manifest["workspace"] = workspace
    if not isinstance(workspace, MutableMapping):
        raise MalformedManifestError("`workspace` must be a table")

    array = workspace.get(param)
    if array is None:
        if not create:
            return None
        workspace[param] = tomlkit.array()
        array = workspace[param]
    if not isinstance(array, Array):
        raise MalformedManifestError(f"`workspace.{param}` must be an array")
    return array


def modify_members(
    workspace_root: Path,
    add_member: Path | None = None,
    add_exclude: Path | None = None,
    remove_member: Path | None = None,
    remove_exclude: Path | None = None,
    dry_run: bool = False,
) -> MembershipReport:
    """Add or remove paths in `workspace.members` and `workspace.exclude`.

    Adding a path that is already listed and removing one that is not are
    no-ops. In dry-run mode the same changes are computed and reported, but
    the manifest is not written.

    Args:
        workspace_root: Directory containing the virtual manifest
        add_member: Path to add to `workspace.members`
        add_exclude: Path to add to `workspace.exclude`
        remove_member: Path to remove from `workspace.members`
        remove_exclude: Path to remove from `workspace.exclude`
        dry_run: If True, do not write the manifest

    Returns:
        MembershipReport listing the entries added and removed

    Raises:
        MalformedManifestError: If `members` or `exclude` is not an array
        PathNotRepresentableError: If a path is not valid UTF-8
    """
    manifest_path = workspace_root / MANIFEST_FILE_NAME
    original = filesystem.read(manifest_path)
    try:
        manifest = tomlkit.parse(original)
    except ParseError as e:
        raise MalformedManifestError(f"failed to parse {manifest_path}") from e

    report = MembershipReport(manifest_path=manifest_path)
    prefix = "[dry-run] " if dry_run else ""

    for param, add, remove in (
        ("members", add_member, remove_member),
        ("exclude", add_exclude, remove_exclude),
    ):
        if add is None and remove is None:
            continue
        array = _array(manifest, param, create=add is not None)
        if array is None:
            continue

        if add is not None:
            target = relative_to_root(workspace_root, add)
            if any(same_path(workspace_root, entry, target) for entry in array):
                logger.info(f"{target!r} is already in `workspace.{param}`")
            else:
                array.append(target)
                report.added[param].append(target)
                logger.info(f"{prefix}Added {target!r} to `workspace.{param}`")

        if remove is not None:
            target = relative_to_root(workspace_root, remove)
            index = next(
                (i for i, entry in enumerate(array) if same_path(workspace_root, entry, target)),
                None,
            )
            if index is None:
                logger.debug(f"{target!r} is not in `workspace.{param}`")
            else:
                del array[index]
                report.removed[param].append(target)
                logger.info(f"{prefix}Removed {target!r} from `workspace.{param}`")

    updated = tomlkit.dumps(manifest)
    if updated == original:
        logger.info(f"{manifest_path} is up to date")
    else:
        filesystem.write(manifest_path, updated, dry_run)
    return report
