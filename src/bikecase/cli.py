"""bikecase CLI: Rust scripts backed by a Cargo workspace."""

from pathlib import Path

import typer

from bikecase import __version__

from .commands import (
    exclude,
    export,
    gist_app,
    import_cmd,
    include,
    init_workspace_cmd,
    new,
    rm,
    run_script,
)
from .logging import ColorChoice, configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cargo-bikecase {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="cargo-bikecase",
    help="Manage Rust scripts as members of a virtual Cargo workspace",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    color: ColorChoice = typer.Option(
        ColorChoice.AUTO,
        "--color",
        help="Coloring",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without writing anything",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="BIKECASE_CONFIG",
        help="Path to the config file",
    ),
) -> None:
    """Manage Rust scripts as members of a virtual Cargo workspace."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        color=color,
    )
    set_output_context(
        OutputContext(
            console=console,
            dry_run=dry_run,
            color=color.value,
            config_path=config,
        )
    )


app.command("init-workspace")(init_workspace_cmd)
app.command("new")(new)
app.command("rm")(rm)
app.command("include")(include)
app.command("exclude")(exclude)
app.command("import")(import_cmd)
app.command("export")(export)
app.add_typer(gist_app, name="gist")

# `cargo bikecase ...` runs `cargo-bikecase bikecase ...`
cargo_app = typer.Typer(name="cargo", no_args_is_help=True, add_completion=False)
cargo_app.add_typer(app, name="bikecase")

runner_app = typer.Typer(name="bikecase", add_completion=False)
runner_app.command()(run_script)


def cargo_main() -> None:
    """Entry point of `cargo-bikecase`."""
    cargo_app()


def run_main() -> None:
    """Entry point of `bikecase`."""
    runner_app()


if __name__ == "__main__":
    app()
