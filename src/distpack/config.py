"""
TOML-based config file loading for distpack.

Searches for `.distpack.toml`, `distpack.toml`, or `pyproject.toml [tool.distpack]`
walking up from the project root. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


class ConfigError(Exception):
    """A config file exists but can't be parsed."""


@dataclass
class DistpackConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge logic can tell "not configured" from "explicitly set".
    """

    # Archive
    output: str | None = None
    prefix: str | None = None
    # File selection
    ignore_file: str | None = None
    extend_exclude: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".distpack.toml", "distpack.toml", "pyproject.toml"]

_KEBAB_TO_SNAKE: dict[str, str] = {
    "ignore-file": "ignore_file",
    "extend-exclude": "extend_exclude",
}

_VALID_FIELDS = {f.name for f in fields(DistpackConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.distpack.toml` >
    `distpack.toml` > `pyproject.toml` (only if it has `[tool.distpack]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_distpack_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_distpack_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "distpack" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> DistpackConfig:
    """
    Load a `DistpackConfig` from a TOML file. Supports standalone
    `distpack.toml` / `.distpack.toml` and `pyproject.toml` (`[tool.distpack]`).
    TOML kebab-case keys are mapped to Python snake_case.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("distpack", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> DistpackConfig:
    """Parse a flat or sectioned TOML dict into DistpackConfig."""
    # Sections like [archive] and [files] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    for name in _STRING_FIELDS:
        value = mapped.get(name)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{_key_name(name)} must be a string, got {value!r}")

    extend_exclude = mapped.get("extend_exclude")
    if extend_exclude is not None and not (
        isinstance(extend_exclude, list)
        and all(isinstance(p, str) for p in cast(list[Any], extend_exclude))
    ):
        raise ConfigError(
            f"extend-exclude must be a list of pattern strings, got {extend_exclude!r}"
        )

    return DistpackConfig(**mapped)


_STRING_FIELDS = ("output", "prefix", "ignore_file")


def _key_name(field_name: str) -> str:
    """TOML spelling of a config field, for error messages."""
    return field_name.replace("_", "-")


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: DistpackConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(DistpackConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
