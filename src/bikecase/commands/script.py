"""Script conversion commands: import and export."""

from pathlib import Path

import typer

from ..core import find_default_bin, import_script, to_script
from ..errors import BikecaseError
from ..output import get_output_context
from ..services import filesystem
from .common import MANIFEST_PATH_HELP, read_script, workspace_metadata


def import_cmd(
    file: Path | None = typer.Argument(None, help="Script to import (default: stdin)"),
    path: Path | None = typer.Option(
        None, "--path", help="Directory of the new package (default: <workspace>/<name>)"
    ),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Import a script as a package."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        script = read_script(file)
        root = metadata.workspace_root
        name = import_script(
            root,
            script,
            lambda name: Path.cwd() / path if path is not None else root / name,
            ctx.dry_run,
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    ctx.success(f"Imported `{name}`")


def export(
    package: str = typer.Argument(..., help="Package to export"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Print a package as a script."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        src_path, manifest = find_default_bin(metadata.find_package(package))
        script = to_script(
            filesystem.read(src_path),
            manifest,
            f"could not find the `cargo` code block: {src_path}",
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    ctx.write_stdout(script)
