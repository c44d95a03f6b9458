"""Breadth-first directory tree walker.

The walker keeps an explicit FIFO queue of directories still to scan and
drains it until the queue reports it is empty. Sub-directories are
appended to the tail as they are found, so directories are scanned level
by level. Each file is run through the selection predicate and handed to
a FileAction.

Errors are split in two tiers. Problems with a single file or a single
descendant directory are recorded as warnings and the walk continues.
Problems with the configuration, the root, or the walker's own
bookkeeping abort the walk with an OperationError carrying the partial
statistics and warnings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dirops.filesystem.access import FileEntry, FileSystemAccess, LocalFileSystem
from dirops.filesystem.collections import DirectoryQueue
from dirops.filesystem.descriptor import DirectoryDescriptor, validate_descriptor
from dirops.models.criteria import TraversalOptions, conflicting_scan_flags
from dirops.models.errors import (
    ConfigurationError,
    InconsistentPathStateError,
    ItemError,
    OperationError,
    OperationInProgressError,
    PathValidationError,
    SelectionError,
    StructuralError,
)
from dirops.models.statistics import TraversalCounters
from dirops.traversal.actions import FileAction
from dirops.traversal.selection import matches

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalkOutcome:
    """What a completed walk produced.

    Attributes:
        root: The validated root descriptor.
        directories: Directories whose files were processed, in scan order.
        warnings: Non-fatal errors, in the order they were met.
    """

    root: DirectoryDescriptor
    directories: DirectoryQueue
    warnings: list[ItemError] = field(default_factory=list)


def as_descriptor(path: str | os.PathLike[str] | DirectoryDescriptor) -> DirectoryDescriptor:
    """Wrap a path in a descriptor, passing descriptors through."""
    if isinstance(path, DirectoryDescriptor):
        return path
    return DirectoryDescriptor(os.fspath(path))


class TreeWalker:
    """Walk one directory tree and apply a FileAction to its files.

    A walker holds per-walk state and refuses to be re-entered while a
    walk is running. Create one walker per operation call.

    Example:
        >>> action = FindAction()
        >>> outcome = TreeWalker("/tmp/data", TraversalOptions(), action).walk()
        >>> action.statistics.files_matched
        3
    """

    def __init__(
        self,
        root: str | os.PathLike[str] | DirectoryDescriptor,
        options: TraversalOptions,
        action: FileAction,
        *,
        fs: FileSystemAccess | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            root: Directory to walk.
            options: Traversal flags, selection criteria and type filters.
            action: Strategy applied to each processed file.
            fs: Filesystem access layer (defaults to the local filesystem).
        """
        self._root = as_descriptor(root)
        self._options = options
        self._action = action
        self._fs = fs or LocalFileSystem()
        self._busy = False
        self.warnings: list[ItemError] = []

    @property
    def statistics(self) -> TraversalCounters:
        return self._action.statistics

    def walk(self) -> WalkOutcome:
        """Run the walk.

        Returns:
            WalkOutcome with the scanned directories and warnings.

        Raises:
            OperationInProgressError: If this walker is already walking.
            ConfigurationError: If the flags conflict or the root is unusable.
            StructuralError: If the walker's bookkeeping fails.
            OperationError: Whatever fatal error the action raises.
        """
        if self._busy:
            msg = f"A walk of {self._root} is already in progress"
            raise OperationInProgressError(msg)

        self._busy = True
        self.warnings = []
        try:
            return self._walk()
        except OperationError as e:
            e.attach(self._action.statistics, self.warnings)
            raise
        finally:
            self._busy = False

    def _warn(self, error: ItemError) -> None:
        logger.warning("%s", error)
        self.warnings.append(error)

    def _check_configuration(self) -> None:
        conflict = conflicting_scan_flags(
            skip_top_level_directory=self._options.skip_top_level_directory,
            scan_sub_directories=self._options.scan_sub_directories,
        )
        if conflict:
            raise ConfigurationError(conflict)

    def _validate_root(self) -> None:
        try:
            validate_descriptor(self._root, require_exists=True, fs=self._fs)
        except InconsistentPathStateError as e:
            raise StructuralError(str(e)) from e
        except PathValidationError as e:
            msg = f"Invalid root directory: {e}"
            raise ConfigurationError(msg) from e

    def _refresh(self, directory: DirectoryDescriptor) -> bool:
        """Re-validate a queued descendant; False if it must be skipped."""
        try:
            validate_descriptor(directory, require_exists=True, fs=self._fs)
        except PathValidationError as e:
            self._warn(
                ItemError(
                    "Directory could not be validated",
                    operation=self._action.operation,
                    path=directory.original_path,
                    cause=e,
                )
            )
            return False
        return True

    def _list(self, directory: DirectoryDescriptor, is_root: bool) -> list[FileEntry] | None:
        try:
            return self._fs.list_directory(directory.absolute_path)
        except OSError as e:
            if is_root:
                msg = f"Cannot read root directory {directory.absolute_path}: {e}"
                raise StructuralError(msg) from e
            self._warn(
                ItemError(
                    "Directory could not be read",
                    operation=self._action.operation,
                    path=directory.absolute_path,
                    cause=e,
                )
            )
            return None

    def _walk(self) -> WalkOutcome:
        self._check_configuration()
        self._validate_root()
        self._action.begin(self._root, self._fs)

        skip_top = self._options.skip_top_level_directory
        stats = self._action.statistics
        pending = DirectoryQueue([self._root])
        scanned = DirectoryQueue()

        logger.debug("Walking %s with %s", self._root.absolute_path, type(self._action).__name__)

        while True:
            directory, status = pending.pop_first()
            if status.is_collection_empty:
                break
            if not status.is_error_free or directory is None:
                msg = f"Directory queue access failed: {status}"
                raise StructuralError(msg)

            is_root = directory is self._root
            if is_root:
                self._validate_root()
            elif not self._refresh(directory):
                continue

            entries = self._list(directory, is_root)
            if entries is None:
                continue

            eligible = not (is_root and skip_top)
            scanned.append(directory)
            if eligible:
                stats.total_dirs_scanned += 1

            try:
                self._action.enter_directory(
                    directory, is_root=is_root, eligible=eligible, fs=self._fs
                )
            except ItemError as e:
                self._warn(e)

            for entry in entries:
                self._visit(entry, directory, pending, eligible)

        if skip_top:
            _, status = scanned.pop_first()
            if not status.is_error_free:
                msg = f"Could not drop the top-level directory from the results: {status}"
                raise StructuralError(msg)

        self._action.finish(self._root, self._fs)
        logger.info(
            "%s of %s finished: %d directories, %d files, %d warnings",
            self._action.operation,
            self._root.absolute_path,
            stats.total_dirs_scanned,
            stats.total_files_processed,
            len(self.warnings),
        )
        return WalkOutcome(root=self._root, directories=scanned, warnings=list(self.warnings))

    def _visit(
        self,
        entry: FileEntry,
        directory: DirectoryDescriptor,
        pending: DirectoryQueue,
        eligible: bool,
    ) -> None:
        stats = self._action.statistics

        if not entry.is_recognized:
            self._warn(
                ItemError(
                    "Entry type could not be determined",
                    operation=self._action.operation,
                    path=entry.path,
                    directory=directory.absolute_path,
                    cause=entry.error,
                )
            )
            return

        if entry.is_directory:
            stats.total_sub_directories += 1
            if self._options.scan_sub_directories:
                pending.append(directory.child(entry.name))
            return

        if not eligible:
            return

        stats.total_files_processed += 1
        try:
            selected = matches(entry, self._options.selection, self._fs)
        except SelectionError as e:
            stats.files_in_error += 1
            self._warn(
                ItemError(
                    "Selection could not be evaluated",
                    operation=self._action.operation,
                    path=entry.path,
                    directory=directory.absolute_path,
                    cause=e,
                )
            )
            return

        try:
            if selected:
                self._action.on_selected(entry, directory, self._fs)
            else:
                self._action.on_rejected(entry, directory, self._fs)
        except ItemError as e:
            self._warn(e)
