"""
Self-contained file selection module: picks the files of a project directory
to package, according to a single ignore file.

No imports from `distpack` outside this package.

Usage::

    from distpack.file_selector import FileSelector, SelectorConfig

    config = SelectorConfig(extend_exclude=["*.zip"])
    files = FileSelector(config).select("path/to/project")

The ignore file is the first present of `.distpackignore`, `.distignore` and
`.gitignore` in the project root.
"""

from distpack.file_selector.ignore_file import IgnoreFileError, load_patterns
from distpack.file_selector.patterns import IgnorePattern, PatternList, compile_pattern
from distpack.file_selector.selector import FileSelector
from distpack.file_selector.types import SelectorConfig

__all__ = [
    "FileSelector",
    "IgnoreFileError",
    "IgnorePattern",
    "PatternList",
    "SelectorConfig",
    "compile_pattern",
    "load_patterns",
]
