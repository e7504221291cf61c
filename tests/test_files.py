"""
Tests for file enumeration and the target registry.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from watchrun.exceptions import RootPathError
from watchrun.utils.files import collect_files
from watchrun.watcher.registry import TargetRegistry


class TestCollectFiles:
    """Test cases for collect_files."""

    def test_filters_by_extension(self, watch_dir: Path):
        """Test that only matching files are returned, recursively."""
        files = collect_files(watch_dir, [".txt"])

        assert files == sorted(
            [watch_dir / "a.txt", watch_dir / "b.txt", watch_dir / "nested" / "c.txt"]
        )

    def test_extensions_without_dot(self, watch_dir: Path):
        """Test that extensions may be given without a leading dot."""
        files = collect_files(watch_dir, "md, txt")

        assert watch_dir / "notes.md" in files
        assert len(files) == 4

    def test_empty_filter_matches_everything(self, watch_dir: Path):
        """Test that no extensions means every file."""
        assert len(collect_files(watch_dir, [])) == 4

    def test_paths_are_absolute(self, watch_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Test that a relative root still yields absolute paths."""
        monkeypatch.chdir(watch_dir.parent)
        files = collect_files("src", [".txt"])

        assert all(f.is_absolute() for f in files)

    def test_case_insensitive_host(self, tmp_path: Path):
        """Test that mixed-case extensions match on case-insensitive hosts."""
        (tmp_path / "upper.TXT").write_text("x")
        (tmp_path / "lower.txt").write_text("x")
        (tmp_path / "other.md").write_text("x")

        files = collect_files(tmp_path, [".txt"], case_insensitive=True)
        assert [f.name for f in files] == ["lower.txt", "upper.TXT"]

        files = collect_files(tmp_path, [".TXT"], case_insensitive=True)
        assert [f.name for f in files] == ["lower.txt", "upper.TXT"]

    def test_case_sensitive_host(self, tmp_path: Path):
        """Test that case-sensitive comparison keeps extensions apart."""
        (tmp_path / "upper.TXT").write_text("x")
        (tmp_path / "lower.txt").write_text("x")

        files = collect_files(tmp_path, [".txt"], case_insensitive=False)
        assert [f.name for f in files] == ["lower.txt"]

    def test_single_file_root(self, watch_dir: Path):
        """Test that a file given as root is watched itself."""
        target = watch_dir / "a.txt"

        assert collect_files(target, [".txt"]) == [target]
        assert collect_files(target, [".md"]) == []

    def test_missing_root_is_fatal(self, tmp_path: Path):
        """Test that an unstat-able root raises RootPathError."""
        with pytest.raises(RootPathError) as exc_info:
            collect_files(tmp_path / "nope", [".txt"])

        assert exc_info.value.path == str(tmp_path / "nope")


class TestTargetRegistry:
    """Test cases for TargetRegistry."""

    def test_order_and_duplicates(self, watch_dir: Path):
        """Test that order is kept and duplicates are dropped."""
        a = watch_dir / "a.txt"
        b = watch_dir / "b.txt"
        registry = TargetRegistry([b, a, b])

        assert [t.path for t in registry] == [b, a]
        assert len(registry) == 2

    def test_membership(self, watch_dir: Path):
        """Test path membership checks."""
        registry = TargetRegistry([watch_dir / "a.txt"])

        assert watch_dir / "a.txt" in registry
        assert str(watch_dir / "a.txt") in registry
        assert watch_dir / "b.txt" not in registry
        assert 42 not in registry

    def test_directories(self, watch_dir: Path):
        """Test that parent directories are listed once each."""
        registry = TargetRegistry(
            [watch_dir / "a.txt", watch_dir / "b.txt", watch_dir / "nested" / "c.txt"]
        )

        assert registry.directories == [watch_dir, watch_dir / "nested"]

    def test_targets_are_immutable(self, watch_dir: Path):
        """Test that the target tuple cannot be extended."""
        registry = TargetRegistry([watch_dir / "a.txt"])

        assert isinstance(registry.targets, tuple)
