"""
Compiled ignore patterns.

Two kinds of pattern are supported:

- Anchored (`/dist`): a literal prefix of the root-relative path. Only matches
  entries whose path starts at the project root.
- Unanchored (`*.zip`, `node_modules`): a gitignore-style glob compiled with
  `pathspec`, matched against the entry's base name at any depth. If the glob
  contains a `/` other than a trailing one it is matched against the
  root-relative path instead.

A trailing `/` limits a pattern to directories: directories are tested with a
trailing slash appended, files without.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import pathspec

log = logging.getLogger(__name__)

ANCHOR = "/"
NEGATION = "!"


@dataclass(frozen=True)
class IgnorePattern:
    """One ignore rule. `spec` is `None` for unanchored rules that can never match."""

    text: str
    anchored: bool
    body: str
    match_path: bool = False
    spec: pathspec.PathSpec | None = field(default=None, compare=False, repr=False)

    def matches(self, rel_path: str, name: str, is_dir: bool) -> bool:
        """
        Test an entry given its POSIX root-relative path and base name.
        """
        suffix = "/" if is_dir else ""
        if self.anchored:
            return (rel_path + suffix).startswith(self.body)
        if self.spec is None:
            return False
        target = rel_path if self.match_path else name
        return self.spec.match_file(target + suffix)


def compile_pattern(line: str) -> IgnorePattern | None:
    """
    Compile a single (already trimmed, non-comment) ignore line.

    Returns `None` for lines that carry no rule at all. Malformed globs and
    negations compile to a pattern that never matches.
    """
    if line.startswith(ANCHOR):
        body = line[len(ANCHOR) :]
        if not body:
            log.warning("Ignoring anchored pattern with no path: %r", line)
            return None
        return IgnorePattern(text=line, anchored=True, body=body)

    if line.startswith(NEGATION):
        log.warning("Negated patterns are not supported, ignoring: %r", line)
        return IgnorePattern(text=line, anchored=False, body=line)

    match_path = "/" in line.rstrip("/")
    try:
        spec = pathspec.PathSpec.from_lines("gitignore", [line])
    except (ValueError, re.error) as e:
        log.warning("Malformed ignore pattern %r will never match: %s", line, e)
        return IgnorePattern(text=line, anchored=False, body=line, match_path=match_path)

    return IgnorePattern(text=line, anchored=False, body=line, match_path=match_path, spec=spec)


@dataclass(frozen=True)
class PatternList:
    """Ordered, immutable list of ignore patterns. Any match excludes."""

    patterns: tuple[IgnorePattern, ...] = ()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> PatternList:
        compiled = (compile_pattern(line) for line in lines)
        return cls(tuple(p for p in compiled if p is not None))

    def first_match(self, rel_path: str, name: str, is_dir: bool) -> IgnorePattern | None:
        """Return the first pattern matching the entry, or `None`."""
        for pattern in self.patterns:
            if pattern.matches(rel_path, name, is_dir):
                return pattern
        return None

    def __iter__(self) -> Iterator[IgnorePattern]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
