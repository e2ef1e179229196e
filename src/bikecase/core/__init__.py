"""Core logic for bikecase.

- doc_comments: Splits a script into its leading doc comment and the rest
- markdown_block: Finds the `cargo` fenced block in a doc comment
- transcoder: Converts between script form and package form
- membership: Edits `workspace.members` and `workspace.exclude`
- workspace: Package workflows on a virtual workspace
- reconcile: Push, pull and clone against GitHub Gists
"""

from .doc_comments import HarvestedSource, SourceLine, harvest, split_lines
from .markdown_block import Event, EventKind, iter_events, locate_block
from .membership import MembershipReport, modify_members
from .reconcile import (
    Forward,
    NotExist,
    RemoteState,
    UpToDate,
    clone,
    determine_state,
    pull,
    push,
)
from .transcoder import (
    PackageArtifact,
    extract,
    replace,
    replace_with_default,
    to_package,
    to_script,
)
from .workspace import (
    create_workspace,
    find_default_bin,
    import_script,
    init_workspace,
    new_package,
    package_name,
    raise_unless_virtual,
    register_script,
)

__all__ = [
    "Event",
    "EventKind",
    "Forward",
    "HarvestedSource",
    "MembershipReport",
    "NotExist",
    "PackageArtifact",
    "RemoteState",
    "SourceLine",
    "UpToDate",
    "clone",
    "create_workspace",
    "determine_state",
    "extract",
    "find_default_bin",
    "harvest",
    "import_script",
    "init_workspace",
    "iter_events",
    "locate_block",
    "modify_members",
    "new_package",
    "package_name",
    "pull",
    "push",
    "raise_unless_virtual",
    "register_script",
    "replace",
    "replace_with_default",
    "split_lines",
    "to_package",
    "to_script",
]
