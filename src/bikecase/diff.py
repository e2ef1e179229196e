"""Line diffs shown when a package and its gist are reconciled."""

import difflib
import logging

logger = logging.getLogger(__name__)


def diff_lines(old: str, new: str) -> list[str]:
    """Build a full line diff, one `-`, `+` or ` ` prefixed line per entry.

    Args:
        old: Previous content
        new: Updated content

    Returns:
        Diff lines without terminators
    """
    a = old.splitlines()
    b = new.splitlines()
    lines = []
    for tag, i1, i2, j1, j2 in difflib.SequenceMatcher(None, a, b, autojunk=False).get_opcodes():
        if tag == "equal":
            lines.extend(f" {line}" for line in a[i1:i2])
            continue
        lines.extend(f"-{line}" for line in a[i1:i2])
        lines.extend(f"+{line}" for line in b[j1:j2])
    return lines


def log_diff(label: str, old: str, new: str) -> bool:
    """Log the diff between two versions of a file.

    Returns:
        True if the versions differ
    """
    if old == new:
        logger.info(f"No changes: {label}")
        return False
    logger.info(f"`{label}`:")
    for line in diff_lines(old, new):
        logger.info(f"│{line}")
    return True
