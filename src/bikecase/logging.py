"""Logging configuration for bikecase."""

import logging
from enum import Enum, IntEnum
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


class LogLevel(IntEnum):
    """Log level enumeration."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


class ColorChoice(str, Enum):
    """When to color output, as cargo's `--color`."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    color: ColorChoice = ColorChoice.AUTO,
    stream: TextIO | None = None,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=normal, 1+=debug)
        quiet: Suppress non-error output (takes precedence over verbosity)
        color: Whether to color output
        stream: Output stream for logs (default: standard error)

    Returns:
        Configured Rich console for output
    """
    if quiet:
        level = LogLevel.QUIET
    elif verbosity >= 1:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    console = Console(
        file=stream,
        stderr=stream is None,
        force_terminal=True if color is ColorChoice.ALWAYS else None,
        no_color=color is ColorChoice.NEVER,
    )

    handler = RichHandler(
        console=console,
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
        markup=False,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO; the gist client logs its own lines
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return console
