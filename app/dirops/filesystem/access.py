"""Filesystem access layer used by the traversal engine.

The engine never touches ``os`` directly. It goes through a
FileSystemAccess implementation, which keeps the disk boundary in one
place and lets tests inject failures.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from dirops.models.criteria import check_glob_pattern
from dirops.models.errors import SelectionError

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Type of a directory entry, determined without following symlinks.

    Attributes:
        DIRECTORY: Regular directory.
        FILE: Regular file.
        SYMLINK: Symbolic link (live or dead).
        OTHER: FIFO, socket, or device node.
    """

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One entry returned by a directory listing.

    Attributes:
        name: Base name of the entry.
        path: Full path of the entry.
        kind: Entry type, None if it could not be determined.
        size: Size in bytes from lstat (0 when unknown).
        mtime: Modification time as a POSIX timestamp (0.0 when unknown).
        mode: Full st_mode from lstat (0 when unknown).
        error: Reason the entry type could not be determined.
    """

    name: str
    path: str
    kind: EntryKind | None
    size: int = 0
    mtime: float = 0.0
    mode: int = 0
    error: OSError | None = None

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_recognized(self) -> bool:
        return self.kind is not None

    @property
    def permission_bits(self) -> int:
        """Permission bits (including setuid/setgid/sticky)."""
        return stat.S_IMODE(self.mode)


@dataclass(frozen=True, slots=True)
class PathStat:
    """Result of probing a single path.

    Attributes:
        exists: Whether anything exists at the path.
        is_directory: Whether the path is a directory (following symlinks).
        metadata: stat result, None when the path does not exist.
    """

    exists: bool
    is_directory: bool
    metadata: os.stat_result | None = None


def kind_from_mode(mode: int) -> EntryKind:
    """Classify an lstat mode."""
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


class FileSystemAccess(Protocol):
    """Disk operations the traversal engine depends on."""

    def list_directory(self, path: str) -> list[FileEntry]:
        """List a directory's entries in the order the OS returns them."""
        ...

    def stat_path(self, path: str) -> PathStat:
        """Probe a path, following symlinks."""
        ...

    def entry_exists(self, path: str) -> bool:
        """Check for an entry without following symlinks."""
        ...

    def remove_file(self, path: str) -> None:
        """Remove a single non-directory entry."""
        ...

    def glob_match(self, pattern: str, name: str) -> bool:
        """Match a base name against a glob pattern."""
        ...

    def make_directory(self, path: str) -> bool:
        """Create a directory and its parents; True if it was created."""
        ...

    def remove_tree(self, path: str) -> None:
        """Remove a directory and everything below it."""
        ...


class LocalFileSystem:
    """FileSystemAccess backed by the local operating system."""

    def list_directory(self, path: str) -> list[FileEntry]:
        """List a directory without following symlinks.

        Entries whose lstat fails (for instance because they vanished
        after the listing) are returned with ``kind=None`` and the error,
        so the caller can report them individually.

        Raises:
            OSError: If the directory itself cannot be read.
        """
        entries: list[FileEntry] = []
        with os.scandir(path) as it:
            for dir_entry in it:
                try:
                    st = dir_entry.stat(follow_symlinks=False)
                except OSError as e:
                    entries.append(
                        FileEntry(name=dir_entry.name, path=dir_entry.path, kind=None, error=e)
                    )
                    continue
                entries.append(
                    FileEntry(
                        name=dir_entry.name,
                        path=dir_entry.path,
                        kind=kind_from_mode(st.st_mode),
                        size=st.st_size,
                        mtime=st.st_mtime,
                        mode=st.st_mode,
                    )
                )
        return entries

    def stat_path(self, path: str) -> PathStat:
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return PathStat(exists=False, is_directory=False)
        return PathStat(exists=True, is_directory=stat.S_ISDIR(st.st_mode), metadata=st)

    def entry_exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def remove_file(self, path: str) -> None:
        os.remove(path)

    def glob_match(self, pattern: str, name: str) -> bool:
        """Case-sensitive glob match of a base name.

        Raises:
            SelectionError: If the pattern is malformed.
        """
        try:
            check_glob_pattern(pattern)
        except ValueError as e:
            raise SelectionError(str(e)) from e
        return fnmatch.fnmatchcase(name, pattern)

    def make_directory(self, path: str) -> bool:
        if os.path.isdir(path):
            return False
        os.makedirs(path, exist_ok=True)
        logger.debug("Created directory %s", path)
        return True

    def remove_tree(self, path: str) -> None:
        shutil.rmtree(path)
