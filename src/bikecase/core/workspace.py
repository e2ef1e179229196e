"""Package workflows on a virtual Cargo workspace.

Creating workspaces and packages, importing scripts as packages and keeping
a script's package in sync before it is run.
"""

import logging
import tomllib
from collections.abc import Callable
from pathlib import Path

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import ParseError

from ..config import BikecaseConfig
from ..constants import (
    MANIFEST_FILE_NAME,
    TEMPLATE_SCRIPT_WITH_SHEBANG,
    TEMPLATE_WORKSPACE_MANIFEST,
    VIRTUAL_MANIFEST,
)
from ..errors import MalformedManifestError, WorkspaceError
from ..models import CargoMetadata, Package
from ..services import filesystem, run_cargo
from .membership import modify_members
from .transcoder import to_package

logger = logging.getLogger(__name__)

# Directories never copied out of a template package
SKIPPED_TEMPLATE_DIRS = frozenset({"target", ".git"})


def create_workspace(directory: Path, dry_run: bool = False) -> None:
    """Create a directory holding an empty virtual manifest."""
    filesystem.create_dir_all(directory, dry_run)
    filesystem.write(directory / MANIFEST_FILE_NAME, VIRTUAL_MANIFEST, dry_run)
    logger.info(f"Created a new workspace: {directory}")


def raise_unless_virtual(workspace_root: Path) -> None:
    """Ensure the workspace manifest has no `[package]` section.

    Raises:
        WorkspaceError: If the manifest is not a virtual one
    """
    manifest_path = workspace_root / MANIFEST_FILE_NAME
    if "package" in filesystem.read_toml(manifest_path):
        raise WorkspaceError(f"the target manifest must be a virtual one: {manifest_path}")


def package_name(manifest: str) -> str:
    """Read `package.name` from manifest text.

    Raises:
        MalformedManifestError: If the manifest cannot be parsed or has no name
    """
    try:
        data = tomllib.loads(manifest)
    except tomllib.TOMLDecodeError as e:
        raise MalformedManifestError("failed to parse the manifest") from e
    package = data.get("package")
    name = package.get("name") if isinstance(package, dict) else None
    if not isinstance(name, str):
        raise MalformedManifestError("`package.name` is missing")
    return name


def find_default_bin(package: Package) -> tuple[Path, str]:
    """Find a package's script source, honoring `package.default-run`.

    Returns:
        Tuple of (bin source path, manifest text)
    """
    manifest = filesystem.read(package.manifest_path)
    try:
        section = tomllib.loads(manifest).get("package", {})
    except tomllib.TOMLDecodeError as e:
        raise MalformedManifestError(
            f"failed to parse the TOML file at {package.manifest_path}"
        ) from e
    default_run = section.get("default-run") if isinstance(section, dict) else None
    return package.default_bin(default_run).src_path, manifest


def rename_package(manifest: TOMLDocument, name: str) -> None:
    """Set `package.name` in a manifest document.

    Raises:
        MalformedManifestError: If `package.name` is not a string
    """
    package = manifest.get("package")
    old_name = package.get("name") if package is not None else None
    if not isinstance(old_name, str):
        raise MalformedManifestError("`package.name` must be a string")
    package["name"] = name
    logger.info(f"`package.name`: {old_name!r} → {name!r}")


def write_unless_up_to_date(path: Path, content: str, dry_run: bool = False) -> bool:
    """Write a file only if its content differs. Returns True if written."""
    if path.exists() and filesystem.read(path) == content:
        logger.info(f"{path} is up to date")
        return False
    filesystem.write(path, content, dry_run)
    return True


def register_script(
    metadata: CargoMetadata,
    manifest: str,
    script: str,
    bin_name: str | None = None,
    dry_run: bool = False,
) -> str:
    """Store a script as a workspace member so it can be run with cargo.

    An existing member with the same package name is updated in place;
    otherwise a new package directory named after the package is created,
    added to `workspace.members` and dropped from `workspace.exclude`.

    Args:
        metadata: Metadata of the target workspace
        manifest: Manifest extracted from the script
        script: Full script text, stored as the bin source
        bin_name: Store the script as `src/bin/<bin_name>.rs` instead of
            `src/main.rs`
        dry_run: If True, do not write anything

    Returns:
        The package name
    """
    name = package_name(manifest)
    existing = metadata.find_member(name)
    if existing is not None:
        logger.info(f"`{name}` already exists: {metadata.workspace_root}")
        manifest_path = existing.manifest_path
    else:
        package_dir = metadata.workspace_root / name
        if package_dir.exists():
            raise WorkspaceError(f"{package_dir} exists")
        modify_members(
            metadata.workspace_root,
            add_member=package_dir,
            remove_exclude=package_dir,
            dry_run=dry_run,
        )
        manifest_path = package_dir / MANIFEST_FILE_NAME

    src_dir = manifest_path.parent / "src"
    bin_path = src_dir / "bin" / f"{bin_name}.rs" if bin_name else src_dir / "main.rs"

    filesystem.create_dir_all(bin_path.parent, dry_run)
    write_unless_up_to_date(manifest_path, manifest, dry_run)
    write_unless_up_to_date(bin_path, script, dry_run)
    return name


def import_script(
    workspace_root: Path,
    script: str,
    path_for: Callable[[str], Path],
    dry_run: bool = False,
) -> str:
    """Convert a script to a package and add it to the workspace.

    Args:
        workspace_root: Root of the target workspace
        script: Script text
        path_for: Maps the package name to the package directory
        dry_run: If True, do not write anything

    Returns:
        The package name
    """
    artifact = to_package(script)
    name = package_name(artifact.manifest)
    path = path_for(name)

    filesystem.create_dir_all(path / "src", dry_run)
    filesystem.write_files(
        {
            path / MANIFEST_FILE_NAME: artifact.manifest,
            path / "src" / "main.rs": artifact.source,
        },
        dry_run,
    )
    modify_members(workspace_root, add_member=path, dry_run=dry_run)
    return name


def _template_sources(base: Path) -> list[Path]:
    sources = []
    for src in sorted(base.rglob("*")):
        relative = src.relative_to(base)
        if src.is_dir() or relative.parts[0] in SKIPPED_TEMPLATE_DIRS:
            continue
        if relative == Path(MANIFEST_FILE_NAME):
            continue
        sources.append(src)
    return sources


def new_package(
    workspace_root: Path,
    path: Path,
    config: BikecaseConfig,
    name: str | None = None,
    template_package: Path | None = None,
    dry_run: bool = False,
) -> str:
    """Create a workspace member from a template.

    The template is the workspace's template package when one is given,
    otherwise the `template` table of the configuration.

    Returns:
        The new package name
    """
    if name is None:
        name = path.name
    if not name:
        raise WorkspaceError(f"could not derive a package name from {path}")

    if template_package is not None:
        for src in _template_sources(template_package):
            dst = path / src.relative_to(template_package)
            filesystem.create_dir_all(dst.parent, dry_run)
            filesystem.copy(src, dst, dry_run)
        manifest = filesystem.read_toml_document(template_package / MANIFEST_FILE_NAME)
    else:
        for dst, content in config.template_files(path).items():
            if dst == path / MANIFEST_FILE_NAME:
                continue
            filesystem.create_dir_all(dst.parent, dry_run)
            filesystem.write(dst, content, dry_run)
        try:
            manifest = tomlkit.parse(config.template_manifest())
        except ParseError as e:
            raise MalformedManifestError(f'failed to parse `template."{MANIFEST_FILE_NAME}"`') from e

    rename_package(manifest, name)
    filesystem.create_dir_all(path, dry_run)
    filesystem.write(path / MANIFEST_FILE_NAME, tomlkit.dumps(manifest), dry_run)
    modify_members(workspace_root, add_member=path, dry_run=dry_run)
    return name


def init_workspace(path: Path, dry_run: bool = False) -> Path:
    """Create a workspace with a `template` package in an existing directory.

    Returns:
        Path of the template package
    """
    template = path / "template"
    filesystem.create_dir_all(path, dry_run)
    filesystem.write(path / MANIFEST_FILE_NAME, TEMPLATE_WORKSPACE_MANIFEST, dry_run)
    run_cargo(["new", "--vcs", "none", str(template)], dry_run=dry_run)

    if not dry_run:
        manifest_path = template / MANIFEST_FILE_NAME
        manifest = filesystem.read_toml_document(manifest_path)
        package = manifest["package"]
        logger.info(f"`package.version`: {package.get('version', '')!r} → '0.0.0'")
        package["version"] = "0.0.0"
        logger.info(f"`package.publish`: {package.get('publish')!r} → False")
        package["publish"] = False
        filesystem.write(manifest_path, tomlkit.dumps(manifest))

    filesystem.create_dir_all(template / "src", dry_run)
    filesystem.write(template / "src" / "main.rs", TEMPLATE_SCRIPT_WITH_SHEBANG, dry_run)
    return template
