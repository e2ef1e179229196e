"""CLI command implementations for bikecase.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .gist import gist_app, gist_clone, gist_pull, gist_push
from .run import cargo_run_args, run_script
from .script import export, import_cmd
from .workspace import exclude, include, init_workspace_cmd, new, rm

__all__ = [
    "cargo_run_args",
    "exclude",
    "export",
    "gist_app",
    "gist_clone",
    "gist_pull",
    "gist_push",
    "import_cmd",
    "include",
    "init_workspace_cmd",
    "new",
    "rm",
    "run_script",
]
