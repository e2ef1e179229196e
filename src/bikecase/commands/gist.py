"""Gist command implementations: clone, pull and push."""

from pathlib import Path

import typer

from ..config import save_config
from ..core import Forward, NotExist, UpToDate, clone, find_default_bin, pull, push, to_script
from ..errors import BikecaseError, ConfigError
from ..output import get_output_context
from ..services import filesystem
from .common import MANIFEST_PATH_HELP, config_path, gist_client, load_settings, workspace_metadata

gist_app = typer.Typer(help="Sync packages with GitHub Gists", no_args_is_help=True)


@gist_app.command("clone")
def gist_clone(
    gist_id: str = typer.Argument(..., help="Gist ID"),
    path: Path | None = typer.Option(
        None, "--path", help="Directory of the new package (default: <workspace>/<name>)"
    ),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Clone a gist as a new workspace member."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        root = metadata.workspace_root
        config = load_settings()
        gist_ids = config.workspace_or_default(root).gist_ids
        with gist_client(config) as client:
            name = clone(
                client,
                gist_id,
                root,
                gist_ids,
                lambda name: Path.cwd() / path if path is not None else root / name,
                ctx.dry_run,
            )
        save_config(config, config_path(), ctx.dry_run)
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    ctx.success(f"Cloned `{gist_id}` as `{name}`")


@gist_app.command("pull")
def gist_pull(
    package: str = typer.Argument(..., help="Package to update"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Overwrite a package with the content of its gist."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        target = metadata.find_package(package)
        config = load_settings()
        workspace = config.workspace(metadata.workspace_root)
        gist_id = workspace.gist_ids.get(target.name) if workspace is not None else None
        if gist_id is None:
            raise ConfigError(f"could not find the `gist_id` for {target.name!r}")
        with gist_client(config) as client:
            written = pull(client, gist_id, target, ctx.dry_run)
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    if not written:
        ctx.success("Already up to date")


@gist_app.command("push")
def gist_push(
    package: str = typer.Argument(..., help="Package to publish"),
    set_upstream: bool = typer.Option(
        False, "--set-upstream", "-u", help="Create a new gist when `gist_ids.<package>` is not set"
    ),
    private: bool = typer.Option(
        False, "--private", help="Make the gist private when `--set-upstream` is enabled"
    ),
    description: str | None = typer.Option(None, "--description", help="Description of the gist"),
    manifest_path: Path | None = typer.Option(None, "--manifest-path", help=MANIFEST_PATH_HELP),
) -> None:
    """Publish a package to its gist."""
    ctx = get_output_context()

    try:
        metadata = workspace_metadata(manifest_path)
        config = load_settings()
        src_path, manifest = find_default_bin(metadata.find_package(package))
        script = to_script(
            filesystem.read(src_path),
            manifest,
            f"could not find the `cargo` code block: {src_path}",
        )
        gist_ids = config.workspace_or_default(metadata.workspace_root).gist_ids
        with gist_client(config, authenticated=True) as client:
            state = push(
                client,
                gist_ids,
                package,
                script,
                set_upstream=set_upstream,
                private=private,
                description=description,
                dry_run=ctx.dry_run,
            )
        save_config(config, config_path(), ctx.dry_run)
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    match state:
        case UpToDate():
            ctx.success("Up to date")
        case Forward(gist_id=gist_id):
            ctx.success(f"Updated `{gist_id}`")
        case NotExist():
            ctx.success(f"Created a gist for `{package}`")
