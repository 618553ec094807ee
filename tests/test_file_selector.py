"""Tests for the file_selector module."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from distpack.file_selector import (
    FileSelector,
    IgnoreFileError,
    PatternList,
    SelectorConfig,
)


def _rel_names(root: Path, paths: list[Path]) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in paths)


def _make_tree(root: Path) -> None:
    """Create a small plugin-like project tree."""
    (root / "plugin.php").write_text("<?php\n")
    (root / "readme.txt").write_text("readme\n")
    src = root / "src"
    src.mkdir()
    (src / "index.js").write_text("export {}\n")
    vendor_src = root / "vendor" / "pkg" / "src"
    vendor_src.mkdir(parents=True)
    (vendor_src / "index.js").write_text("module.exports = {}\n")
    build = root / "build"
    build.mkdir()
    (build / "out.zip").write_bytes(b"PK")
    (build / "index.js").write_text("built\n")


def test_select_no_ignore_file_returns_everything(tmp_path: Path):
    _make_tree(tmp_path)

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == [
        "build/index.js",
        "build/out.zip",
        "plugin.php",
        "readme.txt",
        "src/index.js",
        "vendor/pkg/src/index.js",
    ]


def test_select_returns_absolute_regular_files(tmp_path: Path):
    _make_tree(tmp_path)

    result = FileSelector().select(tmp_path)
    assert all(p.is_absolute() for p in result)
    assert all(p.is_file() for p in result)


def test_select_relative_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)

    result = FileSelector().select(".")
    assert all(p.is_absolute() for p in result)
    assert len(result) == 6


def test_select_unanchored_glob_excludes_by_name(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.log").write_text("b")
    (tmp_path / ".gitignore").write_text("*.log\n.gitignore\n")

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == ["a.txt"]


def test_select_unanchored_glob_matches_at_any_depth(tmp_path: Path):
    _make_tree(tmp_path)
    (tmp_path / "out.zip").write_bytes(b"PK")

    result = FileSelector().select(tmp_path, PatternList.from_lines(["*.zip"]))
    names = _rel_names(tmp_path, result)
    assert "out.zip" not in names
    assert "build/out.zip" not in names
    assert "build/index.js" in names


def test_select_anchored_pattern_only_matches_at_root(tmp_path: Path):
    _make_tree(tmp_path)

    result = FileSelector().select(tmp_path, PatternList.from_lines(["/src"]))
    names = _rel_names(tmp_path, result)
    assert "src/index.js" not in names
    assert "vendor/pkg/src/index.js" in names


def test_select_anchored_pattern_with_subpath(tmp_path: Path):
    _make_tree(tmp_path)

    result = FileSelector().select(tmp_path, PatternList.from_lines(["/vendor/pkg"]))
    names = _rel_names(tmp_path, result)
    assert not any(n.startswith("vendor/") for n in names)
    assert "src/index.js" in names


def test_select_anchored_pattern_is_literal_prefix(tmp_path: Path):
    (tmp_path / "srcmap.js").write_text("x")
    (tmp_path / "main.js").write_text("x")

    result = FileSelector().select(tmp_path, PatternList.from_lines(["/src"]))
    assert _rel_names(tmp_path, result) == ["main.js"]


def test_select_plain_name_excludes_directory_at_any_depth(tmp_path: Path):
    _make_tree(tmp_path)

    result = FileSelector().select(tmp_path, PatternList.from_lines(["src"]))
    names = _rel_names(tmp_path, result)
    assert "src/index.js" not in names
    assert "vendor/pkg/src/index.js" not in names
    assert "build/index.js" in names


def test_select_matched_directory_is_pruned(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    (tmp_path / "node_modules" / "dep" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "lib" / "keep.txt").write_text("x")

    listed: list[str] = []
    real_scandir = os.scandir

    def tracking_scandir(path):  # type: ignore[no-untyped-def]
        listed.append(Path(path).name)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", tracking_scandir)

    result = FileSelector().select(tmp_path, PatternList.from_lines(["node_modules"]))
    assert not any("node_modules" in str(p) for p in result)
    # The pruned directory and everything below it were never listed.
    assert "node_modules" not in listed
    assert "dep" not in listed
    assert "lib" not in listed


def test_select_directory_only_pattern_keeps_same_named_file(tmp_path: Path):
    (tmp_path / "cache").write_text("a file named cache")
    sub = tmp_path / "sub" / "cache"
    sub.mkdir(parents=True)
    (sub / "data.bin").write_bytes(b"x")

    result = FileSelector().select(tmp_path, PatternList.from_lines(["cache/"]))
    assert _rel_names(tmp_path, result) == ["cache"]


def test_select_pattern_with_inner_slash_matches_relative_path(tmp_path: Path):
    docs = tmp_path / "docs" / "internal"
    docs.mkdir(parents=True)
    (docs / "notes.md").write_text("x")
    (tmp_path / "docs" / "guide.md").write_text("x")
    other = tmp_path / "other" / "internal"
    other.mkdir(parents=True)
    (other / "keep.md").write_text("x")

    result = FileSelector().select(tmp_path, PatternList.from_lines(["docs/internal"]))
    assert _rel_names(tmp_path, result) == ["docs/guide.md", "other/internal/keep.md"]


def test_select_inclusion_iff_no_pattern_matches(tmp_path: Path):
    _make_tree(tmp_path)
    patterns = PatternList.from_lines(["*.zip", "/src", "readme.*"])

    result = set(FileSelector().select(tmp_path, patterns))
    for dirpath, _dirnames, filenames in os.walk(tmp_path):
        for filename in filenames:
            path = Path(dirpath) / filename
            rel = path.relative_to(tmp_path).as_posix()
            excluded = any(
                patterns.first_match(prefix, Path(prefix).name, prefix != rel) is not None
                for prefix in _prefixes(rel)
            )
            assert (path in result) is not excluded, rel


def _prefixes(rel: str) -> list[str]:
    parts = rel.split("/")
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]


def test_select_empty_directories_contribute_nothing(tmp_path: Path):
    (tmp_path / "empty" / "deeper").mkdir(parents=True)
    (tmp_path / "file.txt").write_text("x")

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == ["file.txt"]


def test_select_extend_exclude(tmp_path: Path):
    _make_tree(tmp_path)
    (tmp_path / ".gitignore").write_text("/build\n")

    config = SelectorConfig(extend_exclude=["vendor", ".gitignore"])
    result = FileSelector(config).select(tmp_path)
    assert _rel_names(tmp_path, result) == ["plugin.php", "readme.txt", "src/index.js"]


def test_select_project_ignore_takes_precedence(tmp_path: Path):
    _make_tree(tmp_path)
    (tmp_path / ".distpackignore").write_text("/build\n.*\n")
    (tmp_path / ".gitignore").write_text("*.php\n")

    result = FileSelector().select(tmp_path)
    names = _rel_names(tmp_path, result)
    # .gitignore patterns are not applied at all
    assert "plugin.php" in names
    assert not any(n.startswith("build/") for n in names)


def test_select_distignore_before_gitignore(tmp_path: Path):
    (tmp_path / "keep.php").write_text("x")
    (tmp_path / "notes.md").write_text("x")
    (tmp_path / ".distignore").write_text("*.md\n.*\n")
    (tmp_path / ".gitignore").write_text("*.php\n")

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == ["keep.php"]


def test_select_custom_ignore_file_name(tmp_path: Path):
    (tmp_path / "keep.php").write_text("x")
    (tmp_path / "notes.md").write_text("x")
    (tmp_path / ".bundleignore").write_text("*.md\n.*\n")
    (tmp_path / ".gitignore").write_text("*.php\n")

    result = FileSelector(SelectorConfig(ignore_file=".bundleignore")).select(tmp_path)
    assert _rel_names(tmp_path, result) == ["keep.php"]


def test_select_malformed_pattern_fails_open(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "z.txt").write_text("z")
    (tmp_path / "debug.log").write_text("log")

    result = FileSelector().select(tmp_path, PatternList.from_lines(["[z-a]", "*.log"]))
    assert _rel_names(tmp_path, result) == ["a.txt", "z.txt"]


def test_select_root_not_found(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        FileSelector().select(tmp_path / "missing")


def test_select_root_is_a_file(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x")
    with pytest.raises(NotADirectoryError):
        FileSelector().select(f)


def test_select_unreadable_ignore_file_is_fatal(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / ".distpackignore").write_bytes(b"\x80\x81\xff\xfe")
    (tmp_path / ".gitignore").write_text("*.txt\n")

    with pytest.raises(IgnoreFileError):
        FileSelector().select(tmp_path)


def test_select_io_error_aborts_traversal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_tree(tmp_path)
    real_scandir = os.scandir

    def failing_scandir(path):  # type: ignore[no-untyped-def]
        if Path(path).name == "pkg":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", failing_scandir)

    with pytest.raises(PermissionError):
        FileSelector().select(tmp_path)


def test_select_follows_file_symlinks(tmp_path: Path):
    target = tmp_path / "real.txt"
    target.write_text("x")
    (tmp_path / "link.txt").symlink_to(target)
    (tmp_path / "dangling.txt").symlink_to(tmp_path / "missing.txt")

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == ["link.txt", "real.txt"]


def test_select_symlink_cycle_terminates(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "file.txt").write_text("x")
    (sub / "loop").symlink_to(tmp_path, target_is_directory=True)

    result = FileSelector().select(tmp_path)
    assert _rel_names(tmp_path, result) == ["sub/file.txt"]
    assert "loops back" in caplog.text


def test_select_deep_tree_without_recursion_limit(tmp_path: Path):
    current = tmp_path
    for i in range(300):
        current = current / f"d{i % 10}"
    current.mkdir(parents=True)
    (current / "leaf.txt").write_text("x")

    result = FileSelector().select(tmp_path)
    assert len(result) == 1
    assert result[0].name == "leaf.txt"


def test_select_preorder_files_of_directory_before_later_siblings(tmp_path: Path):
    a = tmp_path / "a"
    a.mkdir()
    (a / "inner.txt").write_text("x")

    result = FileSelector().select(tmp_path)
    assert result == [a / "inner.txt"]
