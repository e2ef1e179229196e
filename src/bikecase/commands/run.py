"""The `bikecase` script runner."""

from pathlib import Path

import typer

from .. import __version__
from ..config import expand_home
from ..constants import MANIFEST_FILE_NAME
from ..core import create_workspace, extract, raise_unless_virtual, register_script
from ..errors import BikecaseError, ConfigError, WorkspaceError
from ..logging import ColorChoice, configure_logging
from ..output import OutputContext, set_output_context
from ..services import cargo_metadata, run_cargo
from .common import config_path, load_settings, read_script


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bikecase {__version__}")
        raise typer.Exit()


def cargo_run_args(
    package: str,
    manifest_path: Path,
    script_args: list[str],
    jobs: int | None = None,
    bin: str | None = None,
    release: bool = False,
    profile: str | None = None,
    features: list[str] | None = None,
    all_features: bool = False,
    no_default_features: bool = False,
    target: str | None = None,
    message_format: list[str] | None = None,
    verbose: int = 0,
    frozen: bool = False,
    locked: bool = False,
    offline: bool = False,
) -> list[str]:
    """Build the arguments of `cargo run` for a registered script."""
    args = ["run", "-p", package, "--manifest-path", str(manifest_path)]
    if jobs is not None:
        args += ["--jobs", str(jobs)]
    if bin is not None:
        args += ["--bin", bin]
    if release:
        args.append("--release")
    if profile is not None:
        args += ["--profile", profile]
    for feature in features or []:
        args += ["--features", feature]
    if all_features:
        args.append("--all-features")
    if no_default_features:
        args.append("--no-default-features")
    if target is not None:
        args += ["--target", target]
    for fmt in message_format or []:
        args += ["--message-format", fmt]
    if verbose > 0:
        args.append("-" + "v" * verbose)
    if frozen:
        args.append("--frozen")
    if locked:
        args.append("--locked")
    if offline:
        args.append("--offline")
    return [*args, "--", *script_args]


def run_script(
    file: Path | None = typer.Argument(None, help="Script to run (default: stdin)"),
    args: list[str] | None = typer.Argument(None, help="Arguments for the script"),
    jobs: int | None = typer.Option(None, "--jobs", "-j", help="[cargo] Number of parallel jobs"),
    bin: str | None = typer.Option(None, "--bin", help="[cargo] Name of the bin target"),
    release: bool = typer.Option(False, "--release", help="[cargo] Build in release mode"),
    profile: str | None = typer.Option(None, "--profile", help="[cargo] Build profile"),
    features: list[str] | None = typer.Option(None, "--features", help="[cargo] Features to activate"),
    all_features: bool = typer.Option(
        False, "--all-features", help="[cargo] Activate all available features"
    ),
    no_default_features: bool = typer.Option(
        False, "--no-default-features", help="[cargo] Do not activate the `default` feature"
    ),
    target: str | None = typer.Option(None, "--target", help="[cargo] Target triple"),
    message_format: list[str] | None = typer.Option(
        None, "--message-format", help="[cargo] Error format"
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="[cargo] Use verbose output"),
    frozen: bool = typer.Option(False, "--frozen", help="[cargo] Require Cargo.lock and cache up to date"),
    locked: bool = typer.Option(False, "--locked", help="[cargo] Require Cargo.lock up to date"),
    offline: bool = typer.Option(False, "--offline", help="[cargo] Run without accessing the network"),
    manifest_path: Path | None = typer.Option(
        None, "--manifest-path", help="Path to the Cargo.toml of the workspace to use"
    ),
    color: ColorChoice = typer.Option(ColorChoice.AUTO, "--color", help="Coloring"),
    config: Path | None = typer.Option(
        None, "--config", envvar="BIKECASE_CONFIG", help="Path to the config file"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Run a Rust script in a Cargo workspace."""
    console = configure_logging(color=color)
    ctx = OutputContext(console=console, color=color.value, config_path=config)
    set_output_context(ctx)
    cwd = Path.cwd()

    try:
        script = read_script(file)
        manifest = extract(script, "could not find the `cargo` code block")
        settings = load_settings()

        if manifest_path is not None:
            manifest_path = cwd / manifest_path
            if manifest_path.name != MANIFEST_FILE_NAME:
                raise WorkspaceError("the manifest-path must be a path to a Cargo.toml file")
            workspace_root = manifest_path.parent
        elif settings.default is not None:
            workspace_root = expand_home(settings.default)
            manifest_path = workspace_root / MANIFEST_FILE_NAME
        else:
            raise ConfigError(f"`default` or `--manifest-path` is required: {config_path()}")

        if not workspace_root.exists():
            create_workspace(workspace_root)

        metadata = cargo_metadata(manifest_path, ctx.color, cwd)
        raise_unless_virtual(metadata.workspace_root)
        package = register_script(metadata, manifest, script, bin)

        code = run_cargo(
            cargo_run_args(
                package,
                manifest_path,
                args or [],
                jobs=jobs,
                bin=bin,
                release=release,
                profile=profile,
                features=features,
                all_features=all_features,
                no_default_features=no_default_features,
                target=target,
                message_format=message_format,
                verbose=verbose,
                frozen=frozen,
                locked=locked,
                offline=offline,
            ),
            check=False,
        )
    except BikecaseError as e:
        ctx.report(e)
        raise typer.Exit(1) from None

    raise typer.Exit(code)
