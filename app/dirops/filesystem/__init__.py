"""Filesystem boundary for dirops.

This module provides the directory descriptor and validator, the
filesystem access layer, the single-file copy primitive, and the
collections used during traversal.
"""

from dirops.filesystem.access import (
    EntryKind,
    FileEntry,
    FileSystemAccess,
    LocalFileSystem,
    PathStat,
)
from dirops.filesystem.collections import (
    DirectoryQueue,
    FileRecordCollection,
    IndexedCollection,
)
from dirops.filesystem.copying import copy_file
from dirops.filesystem.descriptor import (
    DirectoryDescriptor,
    substitute_base_path,
    validate_descriptor,
)

__all__ = [
    "DirectoryDescriptor",
    "DirectoryQueue",
    "EntryKind",
    "FileEntry",
    "FileRecordCollection",
    "FileSystemAccess",
    "IndexedCollection",
    "LocalFileSystem",
    "PathStat",
    "copy_file",
    "substitute_base_path",
    "validate_descriptor",
]
