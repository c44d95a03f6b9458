"""Public directory operations.

Every operation validates its inputs, builds a fresh TreeWalker and
FileAction, and returns an OperationResult holding its statistics and
the non-fatal errors met on the way. Fatal problems are raised as
OperationError subclasses with the partial statistics attached.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from dirops.filesystem.access import FileSystemAccess, LocalFileSystem
from dirops.filesystem.collections import DirectoryQueue, FileRecordCollection
from dirops.filesystem.copying import CopyFile, copy_file
from dirops.filesystem.descriptor import DirectoryDescriptor, validate_descriptor
from dirops.models.criteria import FileTypeFilters, SelectionCriteria, TraversalOptions
from dirops.models.errors import (
    ConfigurationError,
    IncompleteCopyError,
    ItemError,
    OperationError,
    PathValidationError,
    PostConditionError,
    StructuralError,
)
from dirops.models.statistics import (
    CopyTreeStatistics,
    DeleteStatistics,
    DirectoryStatistics,
    MoveStatistics,
    OperationResult,
)
from dirops.traversal.actions import CopyAction, DeleteAction, FindAction, MoveFilesAction
from dirops.traversal.walker import TreeWalker, as_descriptor

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str] | DirectoryDescriptor


@dataclass(slots=True)
class FindResult:
    """Outcome of a find operation.

    Attributes:
        directories: Directories whose files were examined, in scan order.
        files: Matching file entries, in discovery order.
        statistics: Match counts and byte totals.
    """

    directories: DirectoryQueue
    files: FileRecordCollection
    statistics: DirectoryStatistics


# =============================================================================
# Helpers
# =============================================================================


def _build_options(**kwargs: Any) -> TraversalOptions:
    try:
        return TraversalOptions(**kwargs)
    except ValidationError as e:
        msg = f"Invalid traversal options: {e}"
        raise ConfigurationError(msg) from e


def _patterns_criteria(patterns: str | Iterable[str]) -> SelectionCriteria:
    names = (patterns,) if isinstance(patterns, str) else tuple(patterns)
    if not any(names):
        msg = "At least one non-empty name pattern is required"
        raise ConfigurationError(msg)
    try:
        return SelectionCriteria(name_patterns=names)
    except ValidationError as e:
        msg = f"Invalid name pattern: {e}"
        raise ConfigurationError(msg) from e


def _require_directory(path: PathArg, fs: FileSystemAccess) -> DirectoryDescriptor:
    descriptor = as_descriptor(path)
    try:
        validate_descriptor(descriptor, require_exists=True, fs=fs)
    except PathValidationError as e:
        msg = f"Invalid directory: {e}"
        raise ConfigurationError(msg) from e
    return descriptor


# =============================================================================
# Find
# =============================================================================


def find_files(
    root: PathArg,
    options: TraversalOptions | None = None,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[FindResult]:
    """Find the files under ``root`` that match the selection.

    Args:
        root: Directory to search.
        options: Traversal options (defaults: recursive, match everything).
        fs: Filesystem access layer.

    Returns:
        OperationResult wrapping a FindResult.

    Raises:
        ConfigurationError: If the options conflict or the root is unusable.
        StructuralError: If the traversal's bookkeeping fails.
    """
    action = FindAction()
    outcome = TreeWalker(root, options or TraversalOptions(), action, fs=fs).walk()
    result = FindResult(
        directories=outcome.directories,
        files=action.files,
        statistics=action.statistics,
    )
    return OperationResult(result, outcome.warnings)


def find_files_by_name_pattern(
    root: PathArg,
    patterns: str | Iterable[str],
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[FindResult]:
    """Find files directly inside ``root`` whose names match a glob."""
    options = _build_options(
        scan_sub_directories=False,
        selection=_patterns_criteria(patterns),
    )
    return find_files(root, options, fs=fs)


def get_directory_tree(
    root: PathArg,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DirectoryQueue]:
    """List every directory of the tree rooted at ``root``, root first."""
    action = FindAction(collect=False)
    outcome = TreeWalker(root, TraversalOptions(), action, fs=fs).walk()
    return OperationResult(outcome.directories, outcome.warnings)


def directory_tree_stats(
    root: PathArg,
    options: TraversalOptions | None = None,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DirectoryStatistics]:
    """Count files and bytes under ``root`` without collecting entries."""
    action = FindAction(collect=False)
    outcome = TreeWalker(root, options or TraversalOptions(), action, fs=fs).walk()
    return OperationResult(action.statistics, outcome.warnings)


# =============================================================================
# Delete
# =============================================================================


def delete_files(
    root: PathArg,
    options: TraversalOptions | None = None,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Delete the files under ``root`` that match the selection.

    Directories are never removed, even when they end up empty.

    Args:
        root: Directory to clean.
        options: Traversal options (defaults: recursive, every file).
        fs: Filesystem access layer.

    Returns:
        OperationResult wrapping DeleteStatistics.

    Raises:
        ConfigurationError: If the options conflict or the root is unusable.
        StructuralError: If the statistics do not add up.
    """
    action = DeleteAction()
    outcome = TreeWalker(root, options or TraversalOptions(), action, fs=fs).walk()
    return OperationResult(action.statistics, outcome.warnings)


def delete_files_by_name_pattern(
    root: PathArg,
    patterns: str | Iterable[str],
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Delete files directly inside ``root`` whose names match a glob.

    Raises:
        ConfigurationError: If no non-empty pattern was given.
    """
    options = _build_options(
        scan_sub_directories=False,
        selection=_patterns_criteria(patterns),
    )
    return delete_files(root, options, fs=fs)


def delete_directory_tree_files(
    root: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Delete matching files anywhere in the tree."""
    options = _build_options(selection=criteria or SelectionCriteria())
    return delete_files(root, options, fs=fs)


def delete_sub_directory_tree_files(
    root: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Delete matching files in the tree, sparing the root's own files."""
    options = _build_options(
        skip_top_level_directory=True,
        selection=criteria or SelectionCriteria(),
    )
    return delete_files(root, options, fs=fs)


def delete_all_files_in_directory(
    root: PathArg,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Delete every file directly inside ``root``; sub-directories stay."""
    return delete_files(root, _build_options(scan_sub_directories=False), fs=fs)


def delete_all(
    root: PathArg,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Remove ``root`` and everything below it.

    Files are deleted one by one first so the statistics are exact, then
    the remaining directory skeleton is removed in one go.

    Raises:
        ConfigurationError: If the root is unusable.
        PostConditionError: If the directory still exists afterwards.
    """
    fs = fs or LocalFileSystem()
    descriptor = as_descriptor(root)
    action = DeleteAction()
    outcome = TreeWalker(descriptor, TraversalOptions(), action, fs=fs).walk()
    stats = action.statistics

    try:
        fs.remove_tree(descriptor.absolute_path)
    except OSError as e:
        msg = f"Could not remove {descriptor.absolute_path}: {e}"
        raise PostConditionError(msg, statistics=stats).attach(stats, outcome.warnings) from e

    if validate_descriptor(descriptor, require_exists=False, fs=fs):
        msg = f"Directory {descriptor.absolute_path} still exists after removal"
        raise PostConditionError(msg, statistics=stats).attach(stats, outcome.warnings)

    stats.directories_deleted = len(outcome.directories)
    logger.info("Removed %s (%d files)", descriptor.absolute_path, stats.files_deleted)
    return OperationResult(stats, outcome.warnings)


def delete_all_sub_directories(
    root: PathArg,
    *,
    fs: FileSystemAccess | None = None,
) -> OperationResult[DeleteStatistics]:
    """Remove every directory tree directly inside ``root``.

    Files directly inside ``root`` are left alone. A child directory that
    cannot be removed is reported as a warning.

    Raises:
        ConfigurationError: If the root is unusable.
    """
    fs = fs or LocalFileSystem()
    descriptor = _require_directory(root, fs)
    stats = DeleteStatistics(total_dirs_scanned=1)
    warnings: list[ItemError] = []

    try:
        entries = fs.list_directory(descriptor.absolute_path)
    except OSError as e:
        msg = f"Cannot read directory {descriptor.absolute_path}: {e}"
        raise StructuralError(msg, statistics=stats) from e

    for entry in entries:
        if not entry.is_directory:
            continue
        stats.total_sub_directories += 1
        try:
            fs.remove_tree(entry.path)
        except OSError as e:
            error = ItemError(
                "Could not remove directory tree",
                operation="delete",
                path=entry.path,
                directory=descriptor.absolute_path,
                cause=e,
            )
            logger.warning("%s", error)
            warnings.append(error)
            continue
        stats.directories_deleted += 1

    return OperationResult(stats, warnings)


# =============================================================================
# Copy
# =============================================================================


def copy_tree(
    source: PathArg,
    target: PathArg,
    options: TraversalOptions | None = None,
    *,
    copy_empty_directories: bool = False,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[CopyTreeStatistics]:
    """Copy the selected files under ``source`` to the same place under ``target``.

    Args:
        source: Directory to copy from.
        target: Directory to copy into; created as needed.
        options: Traversal options, including the file type filters.
        copy_empty_directories: Recreate directories with nothing to copy.
        fs: Filesystem access layer.
        copier: Single-file copy primitive.

    Returns:
        OperationResult wrapping CopyTreeStatistics.

    Raises:
        ConfigurationError: If the options conflict, the source is
            unusable, or the target is invalid or inside the source.
        StructuralError: If path substitution or the statistics fail.
        PostConditionError: If files were copied but the target is missing.
    """
    options = options or TraversalOptions()
    action = CopyAction(
        as_descriptor(target),
        copy_empty_directories=copy_empty_directories,
        file_types=options.file_types,
        copier=copier,
    )
    outcome = TreeWalker(source, options, action, fs=fs).walk()
    return OperationResult(action.statistics, outcome.warnings)


def copy_directory(
    source: PathArg,
    target: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    file_types: FileTypeFilters | None = None,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[CopyTreeStatistics]:
    """Copy matching files directly inside ``source`` into ``target``."""
    options = _build_options(
        scan_sub_directories=False,
        selection=criteria or SelectionCriteria(),
        file_types=file_types or FileTypeFilters(),
    )
    return copy_tree(source, target, options, fs=fs, copier=copier)


def copy_directory_tree(
    source: PathArg,
    target: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    copy_empty_directories: bool = False,
    file_types: FileTypeFilters | None = None,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[CopyTreeStatistics]:
    """Copy matching files of the whole tree, mirroring its layout."""
    options = _build_options(
        selection=criteria or SelectionCriteria(),
        file_types=file_types or FileTypeFilters(),
    )
    return copy_tree(
        source,
        target,
        options,
        copy_empty_directories=copy_empty_directories,
        fs=fs,
        copier=copier,
    )


def copy_sub_directory_tree(
    source: PathArg,
    target: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    copy_empty_directories: bool = False,
    file_types: FileTypeFilters | None = None,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[CopyTreeStatistics]:
    """Copy the sub-directories of ``source``, leaving its own files behind."""
    options = _build_options(
        skip_top_level_directory=True,
        selection=criteria or SelectionCriteria(),
        file_types=file_types or FileTypeFilters(),
    )
    return copy_tree(
        source,
        target,
        options,
        copy_empty_directories=copy_empty_directories,
        fs=fs,
        copier=copier,
    )


# =============================================================================
# Move
# =============================================================================


def move_directory(
    source: PathArg,
    target: PathArg,
    criteria: SelectionCriteria | None = None,
    *,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[MoveStatistics]:
    """Move matching files directly inside ``source`` into ``target``.

    Each file is copied and then removed from the source. When no file is
    left behind and the source has no sub-directories, the source
    directory itself is removed. Sub-directories are never entered for the
    move but are counted down to every depth.

    Raises:
        ConfigurationError: If the source or target is unusable.
        PostConditionError: If the emptied source could not be removed.
    """
    fs = fs or LocalFileSystem()
    source_descriptor = as_descriptor(source)
    options = _build_options(
        scan_sub_directories=False,
        selection=criteria or SelectionCriteria(),
        file_types=FileTypeFilters.everything(),
    )
    action = MoveFilesAction(as_descriptor(target), file_types=options.file_types, copier=copier)
    outcome = TreeWalker(source_descriptor, options, action, fs=fs).walk()

    copied = action.statistics
    stats = MoveStatistics.from_copy(copied)
    stats.source_files_moved = copied.files_copied - action.files_left_behind
    stats.source_file_bytes_moved = copied.file_bytes_copied - action.file_bytes_left_behind
    stats.source_files_remaining += action.files_left_behind + copied.files_in_error
    stats.source_file_bytes_remaining += action.file_bytes_left_behind
    warnings = list(outcome.warnings)
    if copied.total_sub_directories:
        tree = get_directory_tree(source_descriptor, fs=fs)
        stats.num_of_sub_directories = len(tree.value) - 1
        warnings.extend(tree.warnings)

    if stats.source_files_remaining == 0 and stats.num_of_sub_directories == 0 and not warnings:
        try:
            fs.remove_tree(source_descriptor.absolute_path)
        except OSError as e:
            msg = f"Could not remove emptied source {source_descriptor.absolute_path}: {e}"
            raise PostConditionError(msg, statistics=stats).attach(stats, warnings) from e
        if validate_descriptor(source_descriptor, require_exists=False, fs=fs):
            msg = f"Source {source_descriptor.absolute_path} still exists after removal"
            raise PostConditionError(msg, statistics=stats).attach(stats, warnings)
        stats.source_dir_was_deleted = True

    return OperationResult(stats, warnings)


def _copy_phase(
    source: DirectoryDescriptor,
    target: PathArg,
    *,
    skip_top: bool,
    fs: FileSystemAccess,
    copier: CopyFile,
) -> MoveStatistics:
    options = _build_options(
        skip_top_level_directory=skip_top,
        file_types=FileTypeFilters.everything(),
    )
    try:
        result = copy_tree(
            source, target, options, copy_empty_directories=True, fs=fs, copier=copier
        )
    except OperationError as e:
        if isinstance(e.statistics, CopyTreeStatistics):
            e.statistics = MoveStatistics.from_copy(e.statistics)
        raise

    copied = result.value
    stats = MoveStatistics.from_copy(copied)
    if copied.files_not_copied or copied.files_in_error or result.warnings:
        msg = (
            f"Copy of {source.absolute_path} left {copied.files_not_copied} files "
            f"behind with {len(result.warnings)} warnings; source kept"
        )
        raise IncompleteCopyError(msg, statistics=stats).attach(stats, result.warnings)

    stats.source_files_moved = copied.files_copied
    stats.source_file_bytes_moved = copied.file_bytes_copied
    return stats


def move_directory_tree(
    source: PathArg,
    target: PathArg,
    *,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[MoveStatistics]:
    """Move a whole directory tree.

    The tree is copied first, including empty directories and every kind
    of entry. The source is removed only if nothing was left behind.

    Raises:
        ConfigurationError: If the source or target is unusable.
        IncompleteCopyError: If the copy phase missed any file; the source
            is left untouched.
        PostConditionError: If the source still exists after removal.
    """
    fs = fs or LocalFileSystem()
    source_descriptor = as_descriptor(source)
    stats = _copy_phase(source_descriptor, target, skip_top=False, fs=fs, copier=copier)

    try:
        fs.remove_tree(source_descriptor.absolute_path)
    except OSError as e:
        msg = f"Could not remove source tree {source_descriptor.absolute_path}: {e}"
        raise PostConditionError(msg, statistics=stats) from e
    if validate_descriptor(source_descriptor, require_exists=False, fs=fs):
        msg = f"Source tree {source_descriptor.absolute_path} still exists after removal"
        raise PostConditionError(msg, statistics=stats)

    stats.source_dir_was_deleted = True
    logger.info("Moved %s (%d files)", source_descriptor.absolute_path, stats.source_files_moved)
    return OperationResult(stats, [])


def move_sub_directory_tree(
    source: PathArg,
    target: PathArg,
    *,
    fs: FileSystemAccess | None = None,
    copier: CopyFile = copy_file,
) -> OperationResult[MoveStatistics]:
    """Move every sub-directory tree of ``source``; its own files stay.

    Raises:
        ConfigurationError: If the source or target is unusable.
        IncompleteCopyError: If the copy phase missed any file; the source
            is left untouched.
        PostConditionError: If a source sub-directory survives removal.
    """
    fs = fs or LocalFileSystem()
    source_descriptor = as_descriptor(source)
    stats = _copy_phase(source_descriptor, target, skip_top=True, fs=fs, copier=copier)

    removed = delete_all_sub_directories(source_descriptor, fs=fs)
    if removed.warnings:
        msg = f"Could not remove every sub-directory of {source_descriptor.absolute_path}"
        raise PostConditionError(msg, statistics=stats).attach(stats, removed.warnings)
    leftovers = [e.path for e in fs.list_directory(source_descriptor.absolute_path) if e.is_directory]
    if leftovers:
        msg = f"Sub-directories still present after removal: {', '.join(leftovers)}"
        raise PostConditionError(msg, statistics=stats)

    stats.source_dir_was_deleted = True
    logger.info(
        "Moved sub-directories of %s (%d files)",
        source_descriptor.absolute_path,
        stats.source_files_moved,
    )
    return OperationResult(stats, [])
