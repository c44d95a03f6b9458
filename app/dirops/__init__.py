"""dirops - directory-tree traversal and bulk file operations.

Walk a directory tree breadth-first, select files with composable
criteria, and find, copy, move or delete them while collecting
per-file statistics.
"""

from dirops.models.criteria import CombineMode, FileTypeFilters, SelectionCriteria, TraversalOptions
from dirops.models.errors import DirOpsError, ItemError, OperationError
from dirops.models.statistics import OperationResult
from dirops.traversal.operations import (
    FindResult,
    copy_directory,
    copy_directory_tree,
    copy_sub_directory_tree,
    delete_all,
    delete_files,
    directory_tree_stats,
    find_files,
    move_directory,
    move_directory_tree,
    move_sub_directory_tree,
)

__version__ = "0.1.0"

__all__ = [
    "CombineMode",
    "DirOpsError",
    "FileTypeFilters",
    "FindResult",
    "ItemError",
    "OperationError",
    "OperationResult",
    "SelectionCriteria",
    "TraversalOptions",
    "__version__",
    "copy_directory",
    "copy_directory_tree",
    "copy_sub_directory_tree",
    "delete_all",
    "delete_files",
    "directory_tree_stats",
    "find_files",
    "move_directory",
    "move_directory_tree",
    "move_sub_directory_tree",
]
