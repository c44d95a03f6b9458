"""Tree traversal and the public directory operations."""

from dirops.traversal.actions import (
    CopyAction,
    DeleteAction,
    FileAction,
    FindAction,
    MoveFilesAction,
)
from dirops.traversal.operations import (
    FindResult,
    copy_directory,
    copy_directory_tree,
    copy_sub_directory_tree,
    copy_tree,
    delete_all,
    delete_all_files_in_directory,
    delete_all_sub_directories,
    delete_directory_tree_files,
    delete_files,
    delete_files_by_name_pattern,
    delete_sub_directory_tree_files,
    directory_tree_stats,
    find_files,
    find_files_by_name_pattern,
    get_directory_tree,
    move_directory,
    move_directory_tree,
    move_sub_directory_tree,
)
from dirops.traversal.selection import criterion_results, matches
from dirops.traversal.walker import TreeWalker, WalkOutcome

__all__ = [
    "CopyAction",
    "DeleteAction",
    "FileAction",
    "FindAction",
    "FindResult",
    "MoveFilesAction",
    "TreeWalker",
    "WalkOutcome",
    "copy_directory",
    "copy_directory_tree",
    "copy_sub_directory_tree",
    "copy_tree",
    "criterion_results",
    "delete_all",
    "delete_all_files_in_directory",
    "delete_all_sub_directories",
    "delete_directory_tree_files",
    "delete_files",
    "delete_files_by_name_pattern",
    "delete_sub_directory_tree_files",
    "directory_tree_stats",
    "find_files",
    "find_files_by_name_pattern",
    "get_directory_tree",
    "matches",
    "move_directory",
    "move_directory_tree",
    "move_sub_directory_tree",
]
