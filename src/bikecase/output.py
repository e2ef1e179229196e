"""Output formatting for bikecase CLI."""

import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape


def _cause(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    return None if error.__suppress_context__ else error.__context__


@dataclass
class OutputContext:
    """Context for output formatting and global CLI options."""

    console: Console
    dry_run: bool = False
    color: str = "auto"
    config_path: Path | None = None

    def print(self, message: str, style: str | None = None) -> None:
        """Print message to the console."""
        self.console.print(message, style=style)

    def error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def report(self, error: BaseException) -> None:
        """Print an error followed by its chain of causes."""
        self.error(str(error))
        cause = _cause(error)
        while cause is not None:
            self.console.print(f"[red]Caused by:[/red] {escape(str(cause) or type(cause).__name__)}")
            cause = _cause(cause)

    def success(self, message: str) -> None:
        """Print success message."""
        prefix = "[cyan][DRY RUN][/cyan] " if self.dry_run else ""
        self.console.print(f"{prefix}[green]{escape(message)}[/green]")

    def write_stdout(self, text: str) -> None:
        """Write raw text to standard output, bypassing the console."""
        sys.stdout.write(text)
        sys.stdout.flush()


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console(stderr=True))
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx

