"""Shared test fixtures for bikecase tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from bikecase.constants import VIRTUAL_MANIFEST
from bikecase.models import CargoMetadata, Package, Target

SCRIPT = """#!/usr/bin/env bikecase
//! ```cargo
//! [package]
//! name = "hello"
//! version = "0.1.0"
//! edition = "2018"
//! ```

fn main() {
    println!("Hello, world!");
}
"""

SCRIPT_MANIFEST = """[package]
name = "hello"
version = "0.1.0"
edition = "2018"
"""

SCRIPT_SOURCE = """#!/usr/bin/env bikecase
//! ```cargo
//! # Leave blank.
//! ```

fn main() {
    println!("Hello, world!");
}
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a directory holding an empty virtual manifest."""
    root = tmp_path / "ws"
    root.mkdir()
    (root / "Cargo.toml").write_text(VIRTUAL_MANIFEST)
    return root


@pytest.fixture
def make_package() -> Callable[..., Package]:
    """Build a Package model for a directory, optionally writing its files."""

    def make(
        directory: Path,
        name: str = "hello",
        manifest: str | None = None,
        source: str | None = None,
    ) -> Package:
        if manifest is not None:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / "Cargo.toml").write_text(manifest)
        if source is not None:
            (directory / "src").mkdir(parents=True, exist_ok=True)
            (directory / "src" / "main.rs").write_text(source)
        return Package(
            id=f"{name} 0.1.0 (path+file://{directory})",
            name=name,
            manifest_path=directory / "Cargo.toml",
            targets=[Target(name=name, kind=["bin"], src_path=directory / "src" / "main.rs")],
        )

    return make


@pytest.fixture
def hello_package(workspace: Path, make_package: Callable[..., Package]) -> Package:
    """A `hello` member of the workspace in package form."""
    (workspace / "Cargo.toml").write_text('[workspace]\nmembers = ["hello"]\nexclude = []\n')
    return make_package(workspace / "hello", manifest=SCRIPT_MANIFEST, source=SCRIPT_SOURCE)


@pytest.fixture
def metadata_for() -> Callable[..., CargoMetadata]:
    """Build workspace metadata listing the given packages as members."""

    def make(workspace_root: Path, *packages: Package) -> CargoMetadata:
        return CargoMetadata(
            packages=list(packages),
            workspace_members=[p.id for p in packages],
            workspace_root=workspace_root,
        )

    return make


@pytest.fixture
def script() -> str:
    """A script carrying a `hello` package manifest."""
    return SCRIPT


@pytest.fixture
def script_manifest() -> str:
    """The manifest embedded in `script`."""
    return SCRIPT_MANIFEST


@pytest.fixture
def script_source() -> str:
    """`script` with its manifest replaced by the placeholder."""
    return SCRIPT_SOURCE
