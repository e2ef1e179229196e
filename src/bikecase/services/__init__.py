"""External collaborators of bikecase.

This package provides interfaces to the outside world:
- filesystem: File reads and dry-run aware writes
- cargo: `cargo metadata`, `cargo new` and `cargo run`
- gist: GitHub Gist REST API
"""

from . import filesystem
from .cargo import cargo_metadata, cargo_program, run_cargo
from .gist import GistClient, select_rust_file

__all__ = [
    "GistClient",
    "cargo_metadata",
    "cargo_program",
    "filesystem",
    "run_cargo",
    "select_rust_file",
]
