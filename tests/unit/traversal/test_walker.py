"""Unit tests for the breadth-first tree walker."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from dirops.filesystem.access import FileEntry, LocalFileSystem
from dirops.filesystem.collections import DirectoryQueue
from dirops.filesystem.descriptor import DirectoryDescriptor
from dirops.models.criteria import SelectionCriteria, TraversalOptions
from dirops.models.errors import (
    ConfigurationError,
    OperationInProgressError,
    StructuralError,
)
from dirops.models.status import IndexOutOfBounds
from dirops.traversal.actions import FindAction
from dirops.traversal.walker import TreeWalker


def _walk(root: Path, options: TraversalOptions | None = None, fs=None) -> tuple:
    action = FindAction()
    outcome = TreeWalker(str(root), options or TraversalOptions(), action, fs=fs).walk()
    return action, outcome


def _names(action: FindAction) -> set[str]:
    return set(action.files.names())


class TestTraversal:
    """Tests for directory traversal order and counting."""

    def test_recursive_pattern_scenario(self, sample_tree: Path) -> None:
        """*.txt over a two-level tree matches both text files."""
        options = TraversalOptions(selection=SelectionCriteria(name_patterns=("*.txt",)))

        action, outcome = _walk(sample_tree, options)

        assert _names(action) == {"a.txt", "c.txt"}
        assert action.statistics.total_files_processed == 3
        assert action.statistics.total_dirs_scanned == 2
        assert action.statistics.files_matched == 2
        assert action.statistics.files_not_matched == 1
        assert action.statistics.total_sub_directories == 1
        assert outcome.warnings == []

    def test_no_recursion_stays_at_root(self, sample_tree: Path) -> None:
        """Without recursion only the root's own files are visited."""
        action, outcome = _walk(sample_tree, TraversalOptions(scan_sub_directories=False))

        assert _names(action) == {"a.txt", "b.log"}
        assert action.statistics.total_dirs_scanned == 1
        assert outcome.directories.absolute_paths() == [str(sample_tree)]

    def test_skip_top_level(self, sample_tree: Path) -> None:
        """Skipping the root drops its files and its queue entry."""
        action, outcome = _walk(sample_tree, TraversalOptions(skip_top_level_directory=True))

        assert _names(action) == {"c.txt"}
        assert action.statistics.total_dirs_scanned == 1
        assert action.statistics.total_sub_directories == 1
        assert outcome.directories.absolute_paths() == [str(sample_tree / "sub")]

    def test_breadth_first_order(self, deep_tree: Path) -> None:
        """Directories are scanned level by level."""
        _, outcome = _walk(deep_tree)

        paths = outcome.directories.absolute_paths()
        depth = [Path(p).relative_to(deep_tree).parts for p in paths]
        assert paths[0] == str(deep_tree)
        assert [len(d) for d in depth] == sorted(len(d) for d in depth)
        assert len(paths) == 5

    def test_symlinked_directory_not_followed(self, sample_tree: Path) -> None:
        """A symlink to a directory is treated as a file."""
        (sample_tree / "loop").symlink_to(sample_tree)

        action, _ = _walk(sample_tree)

        assert "loop" in _names(action)
        assert action.statistics.total_dirs_scanned == 2

    def test_empty_root(self, tmp_path: Path) -> None:
        """An empty root is scanned once and yields nothing."""
        action, outcome = _walk(tmp_path)

        assert action.statistics.total_dirs_scanned == 1
        assert action.statistics.total_files_processed == 0
        assert len(outcome.directories) == 1

    def test_walker_reusable_after_walk(self, sample_tree: Path) -> None:
        """The busy flag is released when a walk ends."""
        action = FindAction()
        walker = TreeWalker(str(sample_tree), TraversalOptions(), action)

        walker.walk()
        walker.walk()

        assert action.statistics.total_files_processed == 6


class TestConfigurationErrors:
    """Tests for fatal configuration errors."""

    def test_conflicting_flags_before_io(self, sample_tree: Path) -> None:
        """Contradictory flags fail before the filesystem is touched."""
        options = TraversalOptions.model_construct(
            skip_top_level_directory=True,
            scan_sub_directories=False,
            selection=SelectionCriteria(),
        )
        fs = MagicMock()

        with pytest.raises(ConfigurationError):
            _walk(sample_tree, options, fs=fs)

        assert fs.method_calls == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root is a configuration error with empty statistics."""
        with pytest.raises(ConfigurationError) as exc_info:
            _walk(tmp_path / "missing")

        assert exc_info.value.statistics.total_files_processed == 0

    def test_root_is_file(self, tmp_path: Path) -> None:
        """A file as root is a configuration error."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(ConfigurationError):
            _walk(target)

    def test_malformed_root_path(self) -> None:
        """A malformed root path is a configuration error."""
        with pytest.raises(ConfigurationError):
            _walk(Path("/tmp/a...b"))


class TestItemErrors:
    """Tests for per-item errors that do not abort the walk."""

    def test_unreadable_sub_directory(self, sample_tree: Path) -> None:
        """A sub-directory that cannot be listed becomes a warning."""
        real = LocalFileSystem()
        fs = MagicMock(wraps=real)

        def list_directory(path: str) -> list[FileEntry]:
            if path.endswith("sub"):
                raise PermissionError("denied")
            return real.list_directory(path)

        fs.list_directory.side_effect = list_directory

        action, outcome = _walk(sample_tree, fs=fs)

        assert _names(action) == {"a.txt", "b.log"}
        assert len(outcome.warnings) == 1
        assert outcome.warnings[0].path == str(sample_tree / "sub")
        assert outcome.directories.absolute_paths() == [str(sample_tree)]

    def test_vanished_sub_directory(self, sample_tree: Path) -> None:
        """A sub-directory removed after being queued becomes a warning."""
        real = LocalFileSystem()
        fs = MagicMock(wraps=real)

        def list_directory(path: str) -> list[FileEntry]:
            entries = real.list_directory(path)
            if path == str(sample_tree):
                (sample_tree / "sub" / "c.txt").unlink()
                (sample_tree / "sub").rmdir()
            return entries

        fs.list_directory.side_effect = list_directory

        action, outcome = _walk(sample_tree, fs=fs)

        assert action.statistics.total_dirs_scanned == 1
        assert len(outcome.warnings) == 1
        assert "validated" in str(outcome.warnings[0])

    def test_unreadable_root_is_structural(self, sample_tree: Path) -> None:
        """The root failing to list aborts the walk."""
        fs = MagicMock(wraps=LocalFileSystem())
        fs.list_directory.side_effect = PermissionError("denied")

        with pytest.raises(StructuralError) as exc_info:
            _walk(sample_tree, fs=fs)

        assert exc_info.value.statistics is not None

    def test_unrecognized_entry(self, sample_tree: Path) -> None:
        """An entry whose type cannot be determined is skipped with a warning."""
        real = LocalFileSystem()
        fs = MagicMock(wraps=real)

        def list_directory(path: str) -> list[FileEntry]:
            entries = real.list_directory(path)
            if path == str(sample_tree):
                entries.append(
                    FileEntry(
                        name="ghost",
                        path=str(sample_tree / "ghost"),
                        kind=None,
                        error=FileNotFoundError("gone"),
                    )
                )
            return entries

        fs.list_directory.side_effect = list_directory

        action, outcome = _walk(sample_tree, fs=fs)

        assert action.statistics.total_files_processed == 3
        assert [w.path for w in outcome.warnings] == [str(sample_tree / "ghost")]

    def test_selection_error_counted_per_file(self, sample_tree: Path) -> None:
        """Unvalidated malformed criteria fail each file, not the walk."""
        options = TraversalOptions(
            selection=SelectionCriteria.model_construct(name_patterns=("[abc",))
        )

        action, outcome = _walk(sample_tree, options)

        assert action.statistics.total_files_processed == 3
        assert action.statistics.files_in_error == 3
        assert action.statistics.files_matched == 0
        assert len(outcome.warnings) == 3


class TestStructuralErrors:
    """Tests for walker bookkeeping failures."""

    def test_queue_failure(self, sample_tree: Path) -> None:
        """A queue status other than Ok or empty aborts the walk."""
        failure = (None, IndexOutOfBounds(index=0, length=0))

        with (
            patch.object(DirectoryQueue, "pop_first", return_value=failure),
            pytest.raises(StructuralError, match="queue"),
        ):
            _walk(sample_tree)

    def test_reentry_rejected(self, sample_tree: Path) -> None:
        """A walker cannot be entered again while it is walking."""

        class ReentrantAction(FindAction):
            walker: TreeWalker

            def on_selected(self, entry, directory, fs) -> None:
                self.walker.walk()

        action = ReentrantAction()
        action.walker = TreeWalker(str(sample_tree), TraversalOptions(), action)

        with pytest.raises(OperationInProgressError):
            action.walker.walk()


class TestDescriptorInput:
    """The walker accepts descriptors as well as paths."""

    def test_descriptor_root(self, sample_tree: Path) -> None:
        """A DirectoryDescriptor root is validated in place."""
        descriptor = DirectoryDescriptor(str(sample_tree))

        outcome = TreeWalker(descriptor, TraversalOptions(), FindAction()).walk()

        assert outcome.root is descriptor
        assert descriptor.exists
        assert outcome.directories.to_list()[0] is descriptor
