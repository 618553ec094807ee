"""Writing the selected files into a ZIP archive."""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath
from typing import NamedTuple

from strif import atomic_output_file

log = logging.getLogger(__name__)


class ArchiveEntry(NamedTuple):
    """A file to store: absolute source path and its path inside the archive."""

    source: Path
    arcname: str


def build_entries(
    root: Path,
    files: Iterable[Path],
    prefix: str | None = None,
    exclude: Iterable[Path] = (),
) -> list[ArchiveEntry]:
    """
    Pair each file with its archive path: relative to `root`, POSIX separators,
    under `prefix/` if given. Files in `exclude` (compared after resolving) are dropped.
    """
    root = root.absolute()
    skip = {p.resolve() for p in exclude}
    base = PurePosixPath(prefix.strip("/")) if prefix and prefix.strip("/") else None

    entries: list[ArchiveEntry] = []
    for path in files:
        if skip and path.resolve() in skip:
            log.debug("Not archiving %s", path)
            continue
        rel = PurePosixPath(path.absolute().relative_to(root).as_posix())
        arcname = base / rel if base else rel
        entries.append(ArchiveEntry(path, str(arcname)))
    return entries


def write_archive(output: Path, entries: Sequence[ArchiveEntry]) -> int:
    """
    Write `entries` to a deflate-compressed ZIP at `output`, atomically.
    Parent directories are created. Returns the number of entries written.
    """
    with atomic_output_file(output, make_parents=True) as tmp_path:
        with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry in entries:
                zf.write(entry.source, arcname=entry.arcname)
    log.info("Wrote %d files to %s", len(entries), output)
    return len(entries)
