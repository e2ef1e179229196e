"""File operations for bikecase.

Every mutating helper takes a `dry_run` flag, logs what it did (or would
have done) and raises FileOperationError naming the operation and the path.
"""

import contextlib
import logging
import os
import shutil
import tempfile
import tomllib
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import ParseError

from ..errors import FileOperationError

logger = logging.getLogger(__name__)


def _dry(dry_run: bool) -> str:
    return "[dry-run] " if dry_run else ""


def read(path: Path) -> str:
    """Read a UTF-8 text file."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileOperationError(f"{path} is not valid UTF-8") from e
    except OSError as e:
        raise FileOperationError(f"failed to read {path}") from e


def read_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file into plain Python values."""
    try:
        return tomllib.loads(read(path))
    except tomllib.TOMLDecodeError as e:
        raise FileOperationError(f"failed to parse the TOML file at {path}") from e


def read_toml_document(path: Path) -> TOMLDocument:
    """Read a TOML file as a format-preserving document."""
    try:
        return tomlkit.parse(read(path))
    except ParseError as e:
        raise FileOperationError(f"failed to parse the TOML file at {path}") from e


def write(path: Path, content: str, dry_run: bool = False) -> None:
    """Write a text file."""
    if not dry_run:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileOperationError(f"failed to write {path}") from e
    logger.info(f"{_dry(dry_run)}Wrote {path}")


def write_files(files: dict[Path, str], dry_run: bool = False) -> None:
    """Write several files so that either all of them change or none does.

    Each file is first written to a temporary sibling. Only when every file is
    staged are the temporaries renamed into place. If a rename fails, the
    temporaries not yet moved are removed.

    Args:
        files: Mapping of destination path to content
        dry_run: If True, only log the writes
    """
    if dry_run:
        for path in files:
            logger.info(f"{_dry(dry_run)}Wrote {path}")
        return

    staged: list[tuple[Path, Path]] = []
    try:
        for path, content in files.items():
            fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            staged.append((Path(tmp), path))
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
    except OSError as e:
        for tmp, _ in staged:
            with contextlib.suppress(OSError):
                tmp.unlink()
        raise FileOperationError(f"failed to stage {len(files)} file(s) for writing") from e

    for i, (tmp, path) in enumerate(staged):
        try:
            os.replace(tmp, path)
        except OSError as e:
            for leftover, _ in staged[i:]:
                with contextlib.suppress(OSError):
                    leftover.unlink()
            raise FileOperationError(f"failed to write {path}") from e
        logger.info(f"Wrote {path}")


def copy(src: Path, dst: Path, dry_run: bool = False) -> None:
    """Copy a file."""
    if not dry_run:
        try:
            shutil.copyfile(src, dst)
        except OSError as e:
            raise FileOperationError(f"failed to copy `{src}` to `{dst}`") from e
    logger.info(f"{_dry(dry_run)}Copied {src} to {dst}")


def create_dir_all(path: Path, dry_run: bool = False) -> None:
    """Create a directory and its parents."""
    if not dry_run:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"failed to create directory `{path}`") from e


def remove_dir_all(path: Path, dry_run: bool = False) -> None:
    """Remove a directory tree."""
    if not dry_run:
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise FileOperationError(f"failed to remove `{path}`") from e
    logger.info(f"{_dry(dry_run)}Removed {path}")
