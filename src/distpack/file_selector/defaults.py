"""
Ignore file names and their precedence.

Exactly one ignore file is used per run: the first of these that exists in
the project root.
"""

from __future__ import annotations

# Secondary packaging-ignore file (as used by `wp dist-archive` and friends).
DIST_IGNORE_FILE = ".distignore"

# Version control ignore file, used when nothing more specific is present.
VCS_IGNORE_FILE = ".gitignore"

COMMENT_PREFIX = "#"


def tool_ignore_file(tool_name: str) -> str:
    """Project-specific ignore file name, e.g. `.distpackignore`."""
    return f".{tool_name}ignore"


def ignore_file_candidates(tool_name: str, ignore_file: str | None = None) -> list[str]:
    """
    Ignore file names in precedence order. `ignore_file` replaces the
    tool-specific name when set.
    """
    first = ignore_file if ignore_file else tool_ignore_file(tool_name)
    return [first, DIST_IGNORE_FILE, VCS_IGNORE_FILE]
