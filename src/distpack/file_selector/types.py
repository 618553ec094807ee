"""Configuration types for file selection."""

from __future__ import annotations

from dataclasses import dataclass, field

from distpack.file_selector.defaults import ignore_file_candidates


@dataclass
class SelectorConfig:
    """
    Configuration for file selection.

    `tool_name` determines the project-specific ignore file name (e.g., `.distpackignore`).
    `ignore_file` overrides that name; the `.distignore` and `.gitignore` fallbacks still apply.
    `extend_exclude` patterns are added to whatever the ignore file provides.
    """

    tool_name: str = "distpack"
    ignore_file: str | None = None
    extend_exclude: list[str] = field(default_factory=list)

    @property
    def ignore_candidates(self) -> list[str]:
        """Ignore file names to look for, highest precedence first."""
        return ignore_file_candidates(self.tool_name, self.ignore_file)
