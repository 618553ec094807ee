"""
distpack: select a project's files using its ignore file and pack them
into a ZIP archive for distribution.
"""

from distpack.archive import ArchiveEntry, build_entries, write_archive
from distpack.file_selector import FileSelector, SelectorConfig

__all__ = [
    "ArchiveEntry",
    "FileSelector",
    "SelectorConfig",
    "build_entries",
    "write_archive",
]
