"""Models for the output of `cargo metadata --format-version 1`.

Only the fields bikecase reads are declared; everything else in the JSON is
ignored.
"""

from pathlib import Path

from pydantic import BaseModel, Field

from ..errors import PackageNotFoundError


class Target(BaseModel):
    """A build target of a package."""

    name: str
    kind: list[str] = Field(default_factory=list)
    src_path: Path


class Package(BaseModel):
    """A package listed by cargo metadata."""

    id: str
    name: str
    manifest_path: Path
    targets: list[Target] = Field(default_factory=list)

    @property
    def directory(self) -> Path:
        return self.manifest_path.parent

    def default_bin(self, default_run: str | None = None) -> Target:
        """Pick the single bin target, restricted to `default_run` if given.

        Raises:
            PackageNotFoundError: If there is no bin target or the choice is
                ambiguous
        """
        bins = [
            t
            for t in self.targets
            if "bin" in t.kind and (default_run is None or t.name == default_run)
        ]
        if not bins:
            raise PackageNotFoundError(f"no `bin` targets found in {self.name!r}")
        if len(bins) > 1:
            raise PackageNotFoundError(
                f"could not determine which `bin` target of {self.name!r} to use"
            )
        return bins[0]


class Resolve(BaseModel):
    """Dependency resolution section; only the root is of interest."""

    root: str | None = None


class CargoMetadata(BaseModel):
    """Workspace metadata reported by cargo."""

    packages: list[Package] = Field(default_factory=list)
    workspace_members: list[str] = Field(default_factory=list)
    workspace_root: Path
    resolve: Resolve | None = None

    @property
    def manifest_path(self) -> Path:
        return self.workspace_root / "Cargo.toml"

    def find_package(self, name: str) -> Package:
        """Find a package by name.

        Raises:
            PackageNotFoundError: If no package has this name
        """
        for package in self.packages:
            if package.name == name:
                return package
        raise PackageNotFoundError(f"no such package: {name!r}")

    def find_member(self, name: str) -> Package | None:
        """Find a workspace member by name."""
        for package in self.packages:
            if package.id in self.workspace_members and package.name == name:
                return package
        return None
