"""
FileSelector: main entry point for file selection.

Walks a project root depth-first and returns every regular file that no
ignore pattern excludes. Directories that match a pattern are pruned, so
nothing below them is ever listed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from distpack.file_selector.ignore_file import load_patterns
from distpack.file_selector.patterns import PatternList
from distpack.file_selector.types import SelectorConfig

log = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A directory on the traversal stack."""

    entries: Iterator[os.DirEntry[str]]
    key: tuple[int, int]
    rel_prefix: str


def _dir_key(st: os.stat_result) -> tuple[int, int]:
    return (st.st_dev, st.st_ino)


def _scan(directory: str | Path) -> Iterator[os.DirEntry[str]]:
    """List a directory in native order, closing the handle before returning."""
    with os.scandir(directory) as it:
        return iter(list(it))


class FileSelector:
    """
    Selects the files of a project to package, honoring the project's ignore file.

    Traversal uses an explicit stack rather than recursion, so deep trees don't
    hit the interpreter's recursion limit. Any `OSError` while listing aborts
    the whole selection.
    """

    def __init__(self, config: SelectorConfig | None = None) -> None:
        self._config: SelectorConfig = config if config is not None else SelectorConfig()

    def select(self, root: str | Path, patterns: PatternList | None = None) -> list[Path]:
        """
        Return absolute paths of all included files under `root`, in pre-order
        traversal order.

        `patterns` defaults to the pattern list loaded from `root`'s ignore file.
        Raises `FileNotFoundError` if `root` doesn't exist and `NotADirectoryError`
        if it isn't a directory.
        """
        root_path = Path(root)
        if not root_path.exists():
            raise FileNotFoundError(f"Path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")
        root_path = root_path.absolute()

        if patterns is None:
            patterns = load_patterns(root_path, self._config)

        # Materialize fully so a mid-walk failure never yields a partial result.
        selected = list(self._walk(root_path, patterns))
        log.debug("Selected %d files under %s", len(selected), root_path)
        return selected

    def _walk(self, root: Path, patterns: PatternList) -> Iterable[Path]:
        stack = [_Frame(_scan(root), _dir_key(root.stat()), "")]

        while stack:
            frame = stack[-1]
            entry = next(frame.entries, None)
            if entry is None:
                stack.pop()
                continue

            rel_path = frame.rel_prefix + entry.name
            is_dir = entry.is_dir()

            matched = patterns.first_match(rel_path, entry.name, is_dir)
            if matched is not None:
                if is_dir:
                    log.debug("Pruning %s/ (matched %r)", rel_path, matched.text)
                continue

            if is_dir:
                key = _dir_key(entry.stat())
                if any(f.key == key for f in stack):
                    log.warning("Skipping %s: symlink loops back to a parent directory", rel_path)
                    continue
                stack.append(_Frame(_scan(entry.path), key, rel_path + "/"))
            elif entry.is_file():
                yield Path(entry.path)
            else:
                log.debug("Skipping %s: not a regular file", rel_path)
