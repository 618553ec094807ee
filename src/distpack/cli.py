#!/usr/bin/env python3
"""
distpack: package a project directory into a distributable ZIP

Common usage:
  distpack                      # package the current directory
  distpack path/to/plugin
  distpack -o dist/plugin.zip --prefix plugin .
  distpack --list-files .

Files are excluded using the first ignore file found in the project root:
`.distpackignore`, then `.distignore`, then `.gitignore`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from distpack.archive import build_entries, write_archive
from distpack.config import ConfigError, find_config_file, load_config, merge_cli_with_config
from distpack.file_selector import FileSelector, IgnoreFileError, SelectorConfig
from distpack.manifest import ManifestError, default_archive_path

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the distpack tool."""

    root: str
    output: str | None
    prefix: str | None
    ignore_file: str | None
    extend_exclude: list[str] | None
    list_files: bool
    verbose: bool
    version: bool


# Options that can also come from a config file. They all default to None on
# the command line, so any non-None value was given explicitly.
_CONFIGURABLE = ("output", "prefix", "ignore_file", "extend_exclude")


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` names the
    configurable options the user passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="distpack",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project directory to package (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Archive to write (default: <root>/<package name>.zip)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        metavar="DIR",
        help="Store all files under this directory inside the archive",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=None,
        dest="ignore_file",
        metavar="NAME",
        help="Project-specific ignore file name to look for first (default: .distpackignore)",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Additional ignore pattern (e.g., '*.zip'). Can be repeated",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected file paths instead of writing an archive",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log which ignore file is used and which directories are pruned",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags = {name for name in _CONFIGURABLE if getattr(opts, name) is not None}

    return (
        Options(
            root=opts.root,
            output=opts.output,
            prefix=opts.prefix,
            ignore_file=opts.ignore_file,
            extend_exclude=opts.extend_exclude,
            list_files=opts.list_files,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _apply_config(options: Options, root: Path, explicit_flags: set[str]) -> None:
    """Merge settings from the nearest config file, if any, into `options`."""
    config_path = find_config_file(root)
    if not config_path:
        return
    log.debug("Using config file %s", config_path)
    config = load_config(config_path)
    merge_cli_with_config(options, config, explicit_flags)
    # A relative output in a config file is relative to that file.
    if "output" not in explicit_flags and config.output is not None:
        options.output = str(config_path.parent / config.output)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the distpack CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage or configuration errors,
        2 for file system errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("distpack")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    root = Path(options.root)
    if not root.is_dir():
        print(f"Error: Not a directory: {options.root}", file=sys.stderr)
        return 1

    try:
        _apply_config(options, root, explicit_flags)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    selector = FileSelector(
        SelectorConfig(
            ignore_file=options.ignore_file,
            extend_exclude=list(options.extend_exclude or []),
        )
    )

    try:
        files = selector.select(root)
    except IgnoreFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.list_files:
        for f in files:
            print(f)
        return 0

    try:
        output = Path(options.output) if options.output else default_archive_path(root)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    entries = build_entries(root, files, prefix=options.prefix, exclude=[output])
    try:
        write_archive(output, entries)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
