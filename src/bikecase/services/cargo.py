"""Cargo invocation for bikecase."""

import logging
import os
import shlex
import subprocess
from pathlib import Path

from pydantic import ValidationError

from ..constants import CARGO_METADATA_TIMEOUT
from ..errors import CargoError, WorkspaceError
from ..models import CargoMetadata

logger = logging.getLogger(__name__)


def cargo_program() -> str:
    """Return the cargo executable, honoring the CARGO environment variable."""
    return os.environ.get("CARGO", "cargo")


def _describe(command: list[str], dry_run: bool = False) -> str:
    prefix = "[dry-run] " if dry_run else ""
    return f"{prefix}Running `{shlex.join(command)}`"


def cargo_metadata(
    manifest_path: Path | None,
    color: str,
    cwd: Path,
    timeout: int | None = None,
) -> CargoMetadata:
    """Run `cargo metadata --no-deps` and parse its output.

    Args:
        manifest_path: Optional path to a Cargo.toml, relative to cwd
        color: Value for `--color` (auto, always, never)
        cwd: Working directory
        timeout: Optional timeout in seconds (default: CARGO_METADATA_TIMEOUT)

    Returns:
        Parsed workspace metadata

    Raises:
        CargoError: If cargo fails or prints something unexpected
        WorkspaceError: If the manifest is not a virtual one
    """
    command = [
        cargo_program(),
        "metadata",
        "--no-deps",
        "--format-version",
        "1",
        "--color",
        color,
        "--frozen",
    ]
    if manifest_path is not None:
        command += ["--manifest-path", str(cwd / manifest_path)]

    logger.info(_describe(command))
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout or CARGO_METADATA_TIMEOUT,
        )
    except FileNotFoundError:
        raise CargoError(f"Command not found: {command[0]}") from None
    except subprocess.TimeoutExpired as e:
        raise CargoError(f"`cargo metadata` timed out after {e.timeout} seconds") from e

    if result.returncode != 0:
        raise CargoError(
            f"`cargo metadata` exited with {result.returncode}: {result.stderr.strip()}"
        )

    try:
        metadata = CargoMetadata.model_validate_json(result.stdout)
    except ValidationError as e:
        raise CargoError("could not parse the output of `cargo metadata`") from e

    if metadata.resolve is not None and metadata.resolve.root is not None:
        raise WorkspaceError("the target package must be a virtual manifest")
    return metadata


def run_cargo(
    args: list[str],
    cwd: Path | None = None,
    dry_run: bool = False,
    check: bool = True,
) -> int:
    """Run a cargo subcommand with inherited stdio.

    Args:
        args: Arguments after the cargo executable
        cwd: Working directory
        dry_run: If True, only log the command
        check: If True, a non-zero exit status raises CargoError

    Returns:
        Exit status of cargo (0 in dry-run mode)
    """
    command = [cargo_program(), *args]
    logger.info(_describe(command, dry_run))
    if dry_run:
        return 0

    try:
        result = subprocess.run(command, cwd=cwd)
    except FileNotFoundError:
        raise CargoError(f"Command not found: {command[0]}") from None

    if check and result.returncode != 0:
        raise CargoError(f"`{shlex.join(command)}` exited with {result.returncode}")
    return result.returncode
