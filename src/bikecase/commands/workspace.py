"""Workspace command implementations: init-workspace, new, rm, include, exclude."""

from pathlib import Path

import typer

from ..config import compress_home, expand_home, save_config
from ..core import init_workspace, modify_members, new_package
from ..errors import BikecaseError
from ..output import get_output_context
from ..services import filesystem
from .common import MANIFEST_PATH_HELP, config_path, load_settings, workspace_metadata


def init_workspace_cmd(
    path: Path = typer.Argument(Path("."), help="Directory of the new workspace"),
) -> None:
    """Create a new workspace in an existing directory."""
    ctx = get_output_context()
    path = Path.cwd() / path

    try:
        config = load_settings()
        template = init_workspace(path, ctx.dry_run)
        workspace = config.workspace_or_default(path)
        workspace.template_package = compress_home(template)
        save_config(config, config_path(), ctx.dry_run)
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    ctx.success(f"Initialized a workspace: {path}")


def new(
    path: Path = typer.Argument(..., help="Directory of the new package"),
    name: str | None = typer.Option(None, "--name", help="Package name (default: directory name)"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Create a new workspace member from the template package."""
    ctx = get_output_context()
    path = Path.cwd() / path

    try:
        metadata = workspace_metadata(manifest_path)
        config = load_settings()
        workspace = config.workspace(metadata.workspace_root)
        template_package = None
        if workspace is not None and workspace.template_package is not None:
            template_package = metadata.workspace_root / expand_home(workspace.template_package)
        name = new_package(
            metadata.workspace_root,
            path,
            config,
            name=name,
            template_package=template_package,
            dry_run=ctx.dry_run,
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    ctx.success(f"Created `{name}`: {path}")


def rm(
    package: str = typer.Argument(..., help="Package to remove"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Remove a workspace member and delete its directory."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        directory = metadata.find_package(package).directory
        modify_members(
            metadata.workspace_root,
            remove_member=directory,
            remove_exclude=directory,
            dry_run=ctx.dry_run,
        )
        filesystem.remove_dir_all(directory, ctx.dry_run)
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None


def include(
    path: Path = typer.Argument(..., help="Package directory"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Add a path to `workspace.members` and remove it from `workspace.exclude`."""
    ctx = get_output_context()
    path = Path.cwd() / path

    try:
        metadata = workspace_metadata(manifest_path)
        report = modify_members(
            metadata.workspace_root,
            add_member=path,
            remove_exclude=path,
            dry_run=ctx.dry_run,
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    if not report.changed:
        ctx.print("Nothing to do", style="dim")


def exclude(
    path: Path = typer.Argument(..., help="Package directory"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Add a path to `workspace.exclude` and remove it from `workspace.members`."""
    ctx = get_output_context()
    path = Path.cwd() / path

    try:
        metadata = workspace_metadata(manifest_path)
        report = modify_members(
            metadata.workspace_root,
            add_exclude=path,
            remove_member=path,
            dry_run=ctx.dry_run,
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    if not report.changed:
        ctx.print("Nothing to do", style="dim")
