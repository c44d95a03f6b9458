"""Tests for the move operations."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dirops.filesystem.access import LocalFileSystem
from dirops.filesystem.copying import copy_file
from dirops.models.criteria import SelectionCriteria
from dirops.models.errors import ConfigurationError, IncompleteCopyError, PostConditionError
from dirops.models.statistics import MoveStatistics
from dirops.traversal.operations import (
    move_directory,
    move_directory_tree,
    move_sub_directory_tree,
)


def _relative_files(root: Path) -> set[str]:
    return {str(p.relative_to(root)) for p in root.rglob("*") if not p.is_dir()}


def _failing_copier(name: str) -> Callable[[str, str], None]:
    def copier(source: str, destination: str) -> None:
        if source.endswith(name):
            raise PermissionError("denied")
        copy_file(source, destination)

    return copier


class TestMoveDirectory:
    """Tests for move_directory."""

    def test_moves_files_and_removes_source(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """A flat directory is emptied and then removed."""
        source = make_tree({"a.txt": "aa", "b.txt": "b"}, root_name="src")
        target = tmp_path / "target"

        result = move_directory(source, target)

        stats = result.value
        assert result.ok
        assert _relative_files(target) == {"a.txt", "b.txt"}
        assert stats.source_files_moved == 2
        assert stats.source_file_bytes_moved == 3
        assert stats.source_files_remaining == 0
        assert stats.source_dir_was_deleted
        assert not source.exists()

    def test_selection_keeps_source(self, sample_tree: Path, tmp_path: Path) -> None:
        """Rejected files stay and so does the source directory."""
        target = tmp_path / "target"
        criteria = SelectionCriteria(name_patterns=("*.txt",))

        stats = move_directory(sample_tree, target, criteria).value

        assert _relative_files(target) == {"a.txt"}
        assert stats.source_files_moved == 1
        assert stats.source_files_remaining == 1
        assert stats.source_file_bytes_remaining == 3
        assert not stats.source_dir_was_deleted
        assert not (sample_tree / "a.txt").exists()
        assert (sample_tree / "b.log").exists()

    def test_sub_directories_keep_source(self, sample_tree: Path, tmp_path: Path) -> None:
        """A source with sub-directories is never removed."""
        stats = move_directory(sample_tree, tmp_path / "target").value

        assert stats.source_files_moved == 2
        assert stats.num_of_sub_directories == 1
        assert not stats.source_dir_was_deleted
        assert (sample_tree / "sub" / "c.txt").exists()

    def test_sub_directory_count_matches_tree_move(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """Nested directories are counted at every depth, as a tree move counts them."""
        layout = {"f.txt": "x", "a/b/g.txt": "y"}
        flat_source = make_tree(layout, root_name="flat")
        tree_source = make_tree(layout, root_name="tree")

        flat = move_directory(flat_source, tmp_path / "flat_target").value
        tree = move_directory_tree(tree_source, tmp_path / "tree_target").value

        assert flat.num_of_sub_directories == 2
        assert flat.num_of_sub_directories == tree.num_of_sub_directories
        assert not flat.source_dir_was_deleted
        assert (flat_source / "a" / "b" / "g.txt").exists()

    def test_failed_source_removal(self, make_tree: Callable[..., Path], tmp_path: Path) -> None:
        """A file copied but not removed counts as remaining."""
        source = make_tree({"a.txt": "aa", "b.txt": "b"}, root_name="src")
        real = LocalFileSystem()
        fs = MagicMock(wraps=real)

        def remove_file(path: str) -> None:
            if path.endswith("a.txt"):
                raise PermissionError("denied")
            real.remove_file(path)

        fs.remove_file.side_effect = remove_file

        result = move_directory(source, tmp_path / "target", fs=fs)

        stats = result.value
        assert stats.source_files_moved == 1
        assert stats.source_files_remaining == 1
        assert stats.source_file_bytes_remaining == 2
        assert len(result.warnings) == 1
        assert source.is_dir()


class TestMoveDirectoryTree:
    """Tests for move_directory_tree."""

    def test_moves_whole_tree(self, deep_tree: Path, tmp_path: Path) -> None:
        """The tree is reproduced, empty directories included, and the source removed."""
        target = tmp_path / "target"

        result = move_directory_tree(deep_tree, target)

        stats = result.value
        assert not deep_tree.exists()
        assert _relative_files(target) == {
            "top.txt",
            "one/one.txt",
            "one/two/two.txt",
            "one/two/three/three.txt",
        }
        assert (target / "empty").is_dir()
        assert stats.source_files_moved == 4
        assert stats.source_file_bytes_moved == 10
        assert stats.total_dirs_processed == 5
        assert stats.source_dir_was_deleted

    def test_incomplete_copy_keeps_source(self, sample_tree: Path, tmp_path: Path) -> None:
        """If any file is left behind, nothing is removed from the source."""
        with pytest.raises(IncompleteCopyError) as exc_info:
            move_directory_tree(sample_tree, tmp_path / "target", copier=_failing_copier("c.txt"))

        error = exc_info.value
        assert isinstance(error.statistics, MoveStatistics)
        assert error.statistics.source_files_remaining == 1
        assert not error.statistics.source_dir_was_deleted
        assert len(error.warnings) == 1
        assert _relative_files(sample_tree) == {"a.txt", "b.log", "sub/c.txt"}

    def test_source_removal_failure(self, sample_tree: Path, tmp_path: Path) -> None:
        """A source tree that cannot be removed is a post-condition error."""
        fs = MagicMock(wraps=LocalFileSystem())
        fs.remove_tree.side_effect = PermissionError("denied")

        with pytest.raises(PostConditionError) as exc_info:
            move_directory_tree(sample_tree, tmp_path / "target", fs=fs)

        assert exc_info.value.statistics.source_files_moved == 3

    def test_target_inside_source(self, sample_tree: Path) -> None:
        """Moving a tree into itself is rejected and the source kept."""
        with pytest.raises(ConfigurationError) as exc_info:
            move_directory_tree(sample_tree, sample_tree / "inner")

        assert isinstance(exc_info.value.statistics, MoveStatistics)
        assert (sample_tree / "a.txt").exists()


class TestMoveSubDirectoryTree:
    """Tests for move_sub_directory_tree."""

    def test_moves_children_keeps_root_files(self, deep_tree: Path, tmp_path: Path) -> None:
        """Sub-directory trees move, the root and its files stay."""
        target = tmp_path / "target"

        result = move_sub_directory_tree(deep_tree, target)

        stats = result.value
        assert sorted(p.name for p in deep_tree.iterdir()) == ["top.txt"]
        assert _relative_files(target) == {
            "one/one.txt",
            "one/two/two.txt",
            "one/two/three/three.txt",
        }
        assert (target / "empty").is_dir()
        assert not (target / "top.txt").exists()
        assert stats.source_files_moved == 3
        assert stats.source_dir_was_deleted

    def test_incomplete_copy_keeps_children(self, deep_tree: Path, tmp_path: Path) -> None:
        """A failed copy leaves every sub-directory in place."""
        with pytest.raises(IncompleteCopyError):
            move_sub_directory_tree(
                deep_tree, tmp_path / "target", copier=_failing_copier("two.txt")
            )

        assert (deep_tree / "one" / "one.txt").exists()
        assert (deep_tree / "one" / "two" / "two.txt").exists()

    def test_child_removal_failure(self, deep_tree: Path, tmp_path: Path) -> None:
        """A sub-directory that survives removal is a post-condition error."""
        real = LocalFileSystem()
        fs = MagicMock(wraps=real)

        def remove_tree(path: str) -> None:
            if path.endswith("empty"):
                raise PermissionError("denied")
            real.remove_tree(path)

        fs.remove_tree.side_effect = remove_tree

        with pytest.raises(PostConditionError) as exc_info:
            move_sub_directory_tree(deep_tree, tmp_path / "target", fs=fs)

        assert [w.path for w in exc_info.value.warnings] == [str(deep_tree / "empty")]
