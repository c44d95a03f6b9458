"""Per-file strategies plugged into the tree walker.

The walker owns the traversal and the counters every operation shares.
A FileAction decides what happens to each selected and each rejected
file, and keeps the counters specific to its operation.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import ClassVar

from dirops.filesystem.access import EntryKind, FileEntry, FileSystemAccess
from dirops.filesystem.collections import FileRecordCollection
from dirops.filesystem.copying import CopyFile, copy_file
from dirops.filesystem.descriptor import (
    DirectoryDescriptor,
    substitute_base_path,
    validate_descriptor,
)
from dirops.models.criteria import FileTypeFilters
from dirops.models.errors import (
    ConfigurationError,
    ItemError,
    PathValidationError,
    PostConditionError,
    StructuralError,
)
from dirops.models.statistics import (
    CopyTreeStatistics,
    DeleteStatistics,
    DirectoryStatistics,
    TraversalCounters,
)

logger = logging.getLogger(__name__)


class FileAction(ABC):
    """Strategy applied by the walker to every processed file.

    Attributes:
        operation: Short operation name used in warnings.
        statistics: Counters updated by both the walker and the action.
    """

    operation: ClassVar[str] = "walk"
    statistics: TraversalCounters

    def begin(self, root: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        """Prepare for a walk of ``root``. Runs after the root was validated.

        Raises:
            OperationError: If the operation cannot start.
        """

    def enter_directory(
        self,
        directory: DirectoryDescriptor,
        *,
        is_root: bool,
        eligible: bool,
        fs: FileSystemAccess,
    ) -> None:
        """Called once per scanned directory, before its entries.

        Args:
            directory: Directory about to be listed.
            is_root: Whether this is the walk's root directory.
            eligible: Whether the directory's files will be processed.
            fs: Filesystem access layer.

        Raises:
            ItemError: To report a non-fatal problem with this directory.
        """

    @abstractmethod
    def on_selected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        """Handle a file the selection accepted.

        Raises:
            ItemError: If the file could not be handled.
        """

    @abstractmethod
    def on_rejected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        """Handle a file the selection rejected."""

    def finish(self, root: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        """Verify the outcome once every directory was scanned.

        Raises:
            OperationError: If the operation's result is not what it promises.
        """


class FindAction(FileAction):
    """Collect matching files and tally matched/unmatched bytes."""

    operation = "find"

    def __init__(self, collect: bool = True) -> None:
        """Initialize the action.

        Args:
            collect: Keep the matching entries, not just their counts.
        """
        self.statistics = DirectoryStatistics()
        self.files = FileRecordCollection()
        self._collect = collect

    def on_selected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        self.statistics.files_matched += 1
        self.statistics.file_bytes_matched += entry.size
        if self._collect:
            self.files.append(entry)

    def on_rejected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        self.statistics.files_not_matched += 1
        self.statistics.file_bytes_not_matched += entry.size


class DeleteAction(FileAction):
    """Remove every selected file; rejected files remain."""

    operation = "delete"

    def __init__(self) -> None:
        self.statistics = DeleteStatistics()
        self._touched: set[str] = set()

    def on_selected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        try:
            fs.remove_file(entry.path)
        except OSError as e:
            self._remaining(entry)
            raise ItemError(
                "Could not remove file",
                operation=self.operation,
                path=entry.path,
                directory=directory.absolute_path,
                cause=e,
            ) from e

        self.statistics.files_deleted += 1
        self.statistics.file_bytes_deleted += entry.size
        if directory.absolute_path not in self._touched:
            self._touched.add(directory.absolute_path)
            self.statistics.num_dirs_where_files_deleted += 1
        logger.debug("Deleted %s", entry.path)

    def on_rejected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        self._remaining(entry)

    def _remaining(self, entry: FileEntry) -> None:
        self.statistics.files_remaining += 1
        self.statistics.file_bytes_remaining += entry.size

    def finish(self, root: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        if not self.statistics.is_consistent():
            msg = f"Delete statistics do not add up for {root}"
            raise StructuralError(msg)


class CopyAction(FileAction):
    """Copy selected files into the mirrored location under a target root.

    Target directories are created lazily, when the first file for them is
    about to be copied. With ``copy_empty_directories`` every scanned
    directory is created up front instead.
    """

    operation = "copy"

    def __init__(
        self,
        target: DirectoryDescriptor,
        *,
        copy_empty_directories: bool = False,
        file_types: FileTypeFilters | None = None,
        copier: CopyFile = copy_file,
    ) -> None:
        """Initialize the action.

        Args:
            target: Target root; need not exist yet.
            copy_empty_directories: Create target directories even when
                nothing is copied into them.
            file_types: Which entry types may be copied.
            copier: Single-file copy primitive.
        """
        self.statistics = CopyTreeStatistics()
        self.target = target
        self._copy_empty = copy_empty_directories
        self._file_types = file_types or FileTypeFilters()
        self._copier = copier
        self._source_base = ""
        self._current_target = ""
        self._target_ready = False
        self._dir_counted = False

    def begin(self, root: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        try:
            validate_descriptor(self.target, require_exists=False, fs=fs)
        except PathValidationError as e:
            msg = f"Invalid target directory: {e}"
            raise ConfigurationError(msg) from e

        source = os.path.normcase(root.absolute_path)
        target = os.path.normcase(self.target.absolute_path)
        if target == source or target.startswith(source.rstrip(os.sep) + os.sep):
            msg = f"Target {self.target.absolute_path} lies inside source {root.absolute_path}"
            raise ConfigurationError(msg)

        self._source_base = root.absolute_path

    def enter_directory(
        self,
        directory: DirectoryDescriptor,
        *,
        is_root: bool,
        eligible: bool,
        fs: FileSystemAccess,
    ) -> None:
        try:
            self._current_target = substitute_base_path(
                directory.absolute_path, self._source_base, self.target.absolute_path
            )
        except ValueError as e:
            raise StructuralError(str(e)) from e
        self._target_ready = False
        self._dir_counted = False

        if self._copy_empty and eligible:
            self._ensure_target(directory, fs)

    def _ensure_target(self, directory: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        if self._target_ready:
            return
        try:
            created = fs.make_directory(self._current_target)
        except OSError as e:
            raise ItemError(
                "Could not create target directory",
                operation=self.operation,
                path=self._current_target,
                directory=directory.absolute_path,
                cause=e,
            ) from e

        if created:
            self.statistics.dirs_created += 1
        self._target_ready = True
        if not self._dir_counted:
            self._dir_counted = True
            self.statistics.dirs_copied += 1

    def _type_allowed(self, kind: EntryKind | None) -> bool:
        if kind == EntryKind.FILE:
            return self._file_types.regular
        if kind == EntryKind.SYMLINK:
            return self._file_types.symlink
        return self._file_types.other

    def on_selected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        self.copy_entry(entry, directory, fs)

    def copy_entry(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> bool:
        """Copy one entry into the current target directory.

        Returns:
            True if the file was copied, False if its type is filtered out.

        Raises:
            ItemError: If the copy failed or the copy is missing afterwards.
        """
        if not self._type_allowed(entry.kind):
            logger.debug("Skipping %s (%s not copied)", entry.path, entry.kind)
            self.statistics.record_not_copied(entry.size)
            return False

        try:
            self._ensure_target(directory, fs)
        except ItemError:
            self.statistics.record_not_copied(entry.size)
            raise

        destination = os.path.join(self._current_target, entry.name)
        try:
            self._copier(entry.path, destination)
        except OSError as e:
            self.statistics.record_not_copied(entry.size)
            raise ItemError(
                "Could not copy file",
                operation=self.operation,
                path=entry.path,
                directory=directory.absolute_path,
                cause=e,
            ) from e

        self.statistics.record_copied(entry.size)
        if not fs.entry_exists(destination):
            self.statistics.reclassify_as_not_copied(entry.size)
            raise ItemError(
                "Copied file is missing at destination",
                operation=self.operation,
                path=destination,
                directory=directory.absolute_path,
            )
        return True

    def on_rejected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        self.statistics.record_not_copied(entry.size)

    def finish(self, root: DirectoryDescriptor, fs: FileSystemAccess) -> None:
        if self.statistics.files_copied > 0 and not fs.stat_path(self.target.absolute_path).exists:
            msg = f"Files were copied but target {self.target.absolute_path} does not exist"
            raise PostConditionError(msg)
        if not self.statistics.is_consistent():
            msg = f"Copy statistics do not add up for {root}"
            raise StructuralError(msg)


class MoveFilesAction(CopyAction):
    """Copy each selected file, then remove it from the source.

    A file whose copy succeeded but whose source removal failed is present
    in both places; it is counted as remaining.
    """

    operation = "move"

    def __init__(
        self,
        target: DirectoryDescriptor,
        *,
        file_types: FileTypeFilters | None = None,
        copier: CopyFile = copy_file,
    ) -> None:
        super().__init__(target, file_types=file_types, copier=copier)
        self.files_left_behind = 0
        self.file_bytes_left_behind = 0

    def on_selected(
        self, entry: FileEntry, directory: DirectoryDescriptor, fs: FileSystemAccess
    ) -> None:
        if not self.copy_entry(entry, directory, fs):
            return
        try:
            fs.remove_file(entry.path)
        except OSError as e:
            self.files_left_behind += 1
            self.file_bytes_left_behind += entry.size
            raise ItemError(
                "Copied file could not be removed from source",
                operation=self.operation,
                path=entry.path,
                directory=directory.absolute_path,
                cause=e,
            ) from e
        logger.debug("Moved %s", entry.path)
