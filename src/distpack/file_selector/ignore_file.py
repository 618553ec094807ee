"""Locating and reading the one ignore file that applies to a project."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from distpack.file_selector.defaults import COMMENT_PREFIX
from distpack.file_selector.patterns import PatternList
from distpack.file_selector.types import SelectorConfig

log = logging.getLogger(__name__)


class IgnoreFileError(Exception):
    """An ignore file exists but could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read ignore file {path}: {reason}")
        self.path = path


def find_ignore_file(root: Path, candidates: Sequence[str]) -> Path | None:
    """
    Return the first of `candidates` that is a file directly in `root`, or `None`.
    """
    for name in candidates:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def read_ignore_lines(path: Path) -> list[str]:
    """
    Read pattern lines from an ignore file: trimmed, with blank and comment
    lines dropped. Duplicates are kept.

    Raises `IgnoreFileError` if the file can't be read or isn't UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise IgnoreFileError(path, str(e)) from e
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line and not line.startswith(COMMENT_PREFIX)]


def load_patterns(root: Path, config: SelectorConfig) -> PatternList:
    """
    Build the pattern list for `root`: lines from the highest-precedence ignore
    file present (if any), followed by `config.extend_exclude`.
    """
    lines: list[str] = []
    ignore_path = find_ignore_file(root, config.ignore_candidates)
    if ignore_path is None:
        log.debug("No ignore file found in %s", root)
    else:
        lines = read_ignore_lines(ignore_path)
        log.debug("Using %d patterns from %s", len(lines), ignore_path)
    lines.extend(line.strip() for line in config.extend_exclude if line.strip())
    return PatternList.from_lines(lines)
