"""Reconcile a package with the gist it is published to.

The remote side of a package is in one of three states:

- `UpToDate`: the gist holds exactly the local script
- `Forward`: the gist exists but differs from the local script
- `NotExist`: no gist id is registered for the package

`push` and `pull` match over these states. Gist ids are kept in a plain
`dict` registry (package name to gist id) that the caller persists.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..diff import log_diff
from ..errors import ManifestBlockNotFoundError, SourceParseError, UpstreamNotSetError
from ..models import Package, RemoteRecord
from ..services import GistClient, filesystem
from .transcoder import PackageArtifact, to_package
from .workspace import find_default_bin, import_script

logger = logging.getLogger(__name__)

UPSTREAM_HINT = "to create a new gist, enable `--set-upstream`"


@dataclass(frozen=True)
class UpToDate:
    """The gist already holds the local script."""


@dataclass(frozen=True)
class Forward:
    """The gist exists and will be overwritten by the local script."""

    gist_id: str
    remote: RemoteRecord


@dataclass(frozen=True)
class NotExist:
    """No gist is registered for the package."""


RemoteState = UpToDate | Forward | NotExist


def determine_state(
    gist_id: str | None,
    local_script: str,
    fetch: Callable[[str], RemoteRecord],
    description: str | None = None,
) -> RemoteState:
    """Compare a local script with its registered gist.

    Args:
        gist_id: Registered gist id, if any
        local_script: Script built from the local package
        fetch: Retrieves a gist record by id
        description: Requested gist description; None keeps the remote one

    Returns:
        The remote state
    """
    if gist_id is None:
        return NotExist()
    remote = fetch(gist_id)
    if remote.content == local_script and description in (None, remote.description):
        return UpToDate()
    return Forward(gist_id=gist_id, remote=remote)


def _package_form(script: str) -> PackageArtifact:
    try:
        return to_package(script)
    except (ManifestBlockNotFoundError, SourceParseError):
        # Shown as a source-only diff
        return PackageArtifact(manifest="", source=script)


def push(
    client: GistClient,
    gist_ids: dict[str, str],
    package: str,
    local_script: str,
    set_upstream: bool = False,
    private: bool = False,
    description: str | None = None,
    dry_run: bool = False,
) -> RemoteState:
    """Publish a local script to its gist.

    Args:
        client: Gist API client
        gist_ids: Registry of gist ids, updated when a gist is created
        package: Package name
        local_script: Script built from the local package
        set_upstream: Create a gist when none is registered
        private: Create the gist as secret
        description: Gist description
        dry_run: If True, compute and report without writing

    Returns:
        The state the push started from

    Raises:
        UpstreamNotSetError: If no gist is registered and `set_upstream` is off
    """
    state = determine_state(gist_ids.get(package), local_script, client.retrieve, description)
    prefix = "[dry-run] " if dry_run else ""

    match state:
        case UpToDate():
            logger.info("Up to date")
        case Forward(gist_id=gist_id, remote=remote):
            if dry_run:
                logger.info(f"{prefix}PATCH gists/{gist_id}")
            else:
                client.update(
                    gist_id,
                    remote.filename,
                    local_script,
                    description if description is not None else remote.description,
                )
            old = _package_form(remote.content)
            new = _package_form(local_script)
            log_diff("Cargo.toml", old.manifest, new.manifest)
            log_diff(remote.filename, old.source, new.source)
        case NotExist():
            if not set_upstream:
                raise UpstreamNotSetError(UPSTREAM_HINT)
            if dry_run:
                logger.info(f"{prefix}POST gists")
            else:
                gist_id = client.create(f"{package}.rs", local_script, description or "", not private)
                logger.info(f"`gist_ids.{package}`: None → Some({gist_id!r})")
                gist_ids[package] = gist_id
    return state


def pull(
    client: GistClient,
    gist_id: str,
    package: Package,
    dry_run: bool = False,
) -> list[Path]:
    """Overwrite a local package with the script stored in its gist.

    Only files whose content differs are written.

    Returns:
        Paths that were (or, in dry-run mode, would be) written
    """
    remote = client.retrieve(gist_id)
    artifact = to_package(remote.content)
    src_path, manifest = find_default_bin(package)

    changed: dict[Path, str] = {}
    for path, local, pulled in (
        (src_path, filesystem.read(src_path), artifact.source),
        (package.manifest_path, manifest, artifact.manifest),
    ):
        if log_diff(str(path), local, pulled):
            changed[path] = pulled

    if changed:
        filesystem.write_files(changed, dry_run)
    return list(changed)


def clone(
    client: GistClient,
    gist_id: str,
    workspace_root: Path,
    gist_ids: dict[str, str],
    path_for: Callable[[str], Path],
    dry_run: bool = False,
) -> str:
    """Import a gist as a new package and register its id.

    Returns:
        The package name
    """
    remote = client.retrieve(gist_id)
    name = import_script(workspace_root, remote.content, path_for, dry_run)
    logger.info(f"`gist_ids.{name}`: {gist_ids.get(name)!r} → {gist_id!r}")
    gist_ids[name] = gist_id
    return name
