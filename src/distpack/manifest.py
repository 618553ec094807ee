"""
Project manifest reading, used to name the archive.

The package name comes from `package.json` (npm scope stripped), else from
`[project].name` in `pyproject.toml`, else from the root directory name.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

ARCHIVE_SUFFIX = ".zip"


class ManifestError(Exception):
    """A manifest file exists but is malformed."""


def _name_from_package_json(path: Path) -> str | None:
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ManifestError(f"Invalid {path.name}: {e}") from e
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        return None
    # "@scope/pkg" -> "pkg"
    return name.rsplit("/", 1)[-1]


def _name_from_pyproject(path: Path) -> str | None:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ManifestError(f"Invalid {path.name}: {e}") from e
    project = data.get("project")
    name = project.get("name") if isinstance(project, dict) else None
    return name if isinstance(name, str) and name else None


def read_package_name(root: Path) -> str:
    """Return the package name for the project at `root`."""
    package_json = root / "package.json"
    if package_json.is_file():
        name = _name_from_package_json(package_json)
        if name:
            return name
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        name = _name_from_pyproject(pyproject)
        if name:
            return name
    return root.absolute().name


def default_archive_path(root: Path) -> Path:
    """Default output: `<root>/<package name>.zip`."""
    return root / f"{read_package_name(root)}{ARCHIVE_SUFFIX}"
