"""Per-operation statistics and the structured operation result.

Counters only ever grow, with one exception: a copy that was counted as
successful and is later found to be missing on disk is reclassified,
moving both its file and byte counts to the not-copied side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from dirops.models.errors import ItemError

T = TypeVar("T")


@dataclass(slots=True)
class TraversalCounters:
    """Counters shared by every traversal-based operation.

    Attributes:
        total_dirs_scanned: Directories whose files were eligible for selection.
        total_sub_directories: Directory entries encountered while scanning.
        total_files_processed: Files handed to the selection predicate.
        files_in_error: Files skipped because the predicate failed on them.
    """

    total_dirs_scanned: int = 0
    total_sub_directories: int = 0
    total_files_processed: int = 0
    files_in_error: int = 0


@dataclass(slots=True)
class DirectoryStatistics(TraversalCounters):
    """Statistics for find and directory statistics operations."""

    files_matched: int = 0
    file_bytes_matched: int = 0
    files_not_matched: int = 0
    file_bytes_not_matched: int = 0

    @property
    def total_file_bytes(self) -> int:
        """Bytes of every processed file, matched or not."""
        return self.file_bytes_matched + self.file_bytes_not_matched


@dataclass(slots=True)
class DeleteStatistics(TraversalCounters):
    """Statistics for file deletion operations.

    Files that did not match the selection and files whose removal failed
    both count as remaining.
    """

    files_deleted: int = 0
    file_bytes_deleted: int = 0
    files_remaining: int = 0
    file_bytes_remaining: int = 0
    num_dirs_where_files_deleted: int = 0
    directories_deleted: int = 0

    def is_consistent(self) -> bool:
        """Check that every processed file landed in exactly one bucket."""
        return self.total_files_processed == (
            self.files_deleted + self.files_remaining + self.files_in_error
        )


@dataclass(slots=True)
class CopyTreeStatistics(TraversalCounters):
    """Statistics for directory and directory tree copies.

    Files the selection rejected stay behind in the source and are counted
    as not copied, together with files whose copy failed and files whose
    type was filtered out.
    """

    dirs_copied: int = 0
    dirs_created: int = 0
    files_copied: int = 0
    file_bytes_copied: int = 0
    files_not_copied: int = 0
    file_bytes_not_copied: int = 0

    def record_copied(self, size: int) -> None:
        self.files_copied += 1
        self.file_bytes_copied += size

    def record_not_copied(self, size: int) -> None:
        self.files_not_copied += 1
        self.file_bytes_not_copied += size

    def reclassify_as_not_copied(self, size: int) -> None:
        """Move one file counted as copied over to the not-copied side."""
        self.files_copied -= 1
        self.file_bytes_copied -= size
        self.record_not_copied(size)

    def is_consistent(self) -> bool:
        """Check that every processed file landed in exactly one bucket."""
        return self.total_files_processed == (
            self.files_copied + self.files_not_copied + self.files_in_error
        )


@dataclass(slots=True)
class MoveStatistics:
    """Statistics for move operations.

    Attributes:
        total_src_files_processed: Source files examined.
        source_files_moved: Files now present in the target.
        source_file_bytes_moved: Bytes of moved files.
        source_files_remaining: Files still in the source.
        source_file_bytes_remaining: Bytes of remaining files.
        total_dirs_processed: Directories scanned in the source.
        dirs_created: Directories created in the target.
        num_of_sub_directories: Directories strictly below the source root.
        source_dir_was_deleted: Whether the source (tree) was removed.
    """

    total_src_files_processed: int = 0
    source_files_moved: int = 0
    source_file_bytes_moved: int = 0
    source_files_remaining: int = 0
    source_file_bytes_remaining: int = 0
    total_dirs_processed: int = 0
    dirs_created: int = 0
    num_of_sub_directories: int = 0
    source_dir_was_deleted: bool = False

    @classmethod
    def from_copy(cls, copy_stats: CopyTreeStatistics) -> MoveStatistics:
        """Seed move statistics from the copy phase of a tree move."""
        return cls(
            total_src_files_processed=copy_stats.total_files_processed,
            source_files_remaining=copy_stats.files_not_copied,
            source_file_bytes_remaining=copy_stats.file_bytes_not_copied,
            total_dirs_processed=copy_stats.total_dirs_scanned,
            dirs_created=copy_stats.dirs_created,
            num_of_sub_directories=copy_stats.total_sub_directories,
        )


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Outcome of an operation that finished without a fatal error.

    Attributes:
        value: Statistics (or find result) produced by the operation.
        warnings: Items that were skipped, in the order they were met.
    """

    value: T
    warnings: list[ItemError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no item was skipped."""
        return not self.warnings
