"""Helpers shared by the command implementations."""

import sys
from pathlib import Path

import typer

from ..config import BikecaseConfig, default_config_path, load_or_create_config
from ..errors import ConfigError
from ..models import CargoMetadata
from ..output import get_output_context
from ..services import GistClient, cargo_metadata, filesystem

MANIFEST_PATH_HELP = "Path to Cargo.toml"


def config_path() -> Path:
    """Get the config file path selected on the command line."""
    return get_output_context().config_path or default_config_path()


def load_settings() -> BikecaseConfig:
    """Load the configuration, creating it on first use."""
    ctx = get_output_context()
    return load_or_create_config(config_path(), ctx.dry_run)


def workspace_metadata(manifest_path: Path | None) -> CargoMetadata:
    """Run `cargo metadata` for the selected workspace."""
    ctx = get_output_context()
    return cargo_metadata(manifest_path, ctx.color, Path.cwd())


def read_script(file: Path | None) -> str:
    """Read a script from a file, or from stdin when no file is given."""
    if file is None:
        return sys.stdin.read()
    return filesystem.read(Path.cwd() / file)


def gist_client(config: BikecaseConfig, authenticated: bool = False) -> GistClient:
    """Build a gist client, loading the GitHub token when one is required."""
    if not authenticated:
        return GistClient()
    if config.github_token is None:
        raise ConfigError(f"missing `github_token`: {config_path()}")
    token = config.github_token.load_or_ask(
        lambda label: typer.prompt(label, hide_input=True),
        get_output_context().dry_run,
    )
    return GistClient(token=token)
