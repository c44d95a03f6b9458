"""Directory descriptor and its validator.

A DirectoryDescriptor wraps one raw directory path together with the
forms derived from it and what was learned about it on disk. Validation
is a refresh: it re-derives every path form from the raw string and
re-probes the disk, overwriting whatever was cached before.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dirops.filesystem.access import FileSystemAccess, LocalFileSystem
from dirops.models.errors import (
    InconsistentPathStateError,
    InvalidPathError,
    PathNotFoundError,
    PathTypeMismatchError,
)

logger = logging.getLogger(__name__)

_default_fs = LocalFileSystem()


@dataclass(slots=True)
class DirectoryDescriptor:
    """One directory path plus cached existence and metadata.

    Only ``original_path`` is supplied by the caller. Every other field is
    filled in by :func:`validate_descriptor`. The path forms are pure string
    derivations of ``original_path``, rebuilt on every validation, and stay
    valid when the directory is missing. Only the existence flags and
    ``metadata`` describe the disk.

    Attributes:
        original_path: Path exactly as supplied.
        normalized_path: Original path with ``~`` expanded and normalized.
        absolute_path: Absolute form of the normalized path.
        parent_path: Absolute path of the parent directory.
        leaf_name: Final path component.
        volume_name: Drive or UNC share ("" on POSIX).
        path_exists: Whether the normalized form exists.
        absolute_path_exists: Whether the absolute form exists.
        metadata: stat result from the last successful probe.
    """

    original_path: str
    normalized_path: str = field(default="", init=False)
    absolute_path: str = field(default="", init=False)
    parent_path: str = field(default="", init=False)
    leaf_name: str = field(default="", init=False)
    volume_name: str = field(default="", init=False)
    path_exists: bool = field(default=False, init=False)
    absolute_path_exists: bool = field(default=False, init=False)
    metadata: os.stat_result | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.original_path = os.fspath(self.original_path)

    def __str__(self) -> str:
        return self.absolute_path or self.original_path

    @property
    def exists(self) -> bool:
        """Existence as of the last validation."""
        return self.path_exists and self.absolute_path_exists

    def reset_disk_state(self) -> None:
        """Forget everything learned from the disk.

        Clears the existence flags and ``metadata``. The path forms are not
        disk state and are kept, so a missing directory can still be named
        and recreated by its absolute path.
        """
        self.path_exists = False
        self.absolute_path_exists = False
        self.metadata = None

    def child(self, name: str) -> DirectoryDescriptor:
        """Descriptor for a sub-directory of this directory."""
        base = self.absolute_path or self.original_path
        return DirectoryDescriptor(os.path.join(base, name))

    def parent(self) -> DirectoryDescriptor:
        """Descriptor for the parent directory.

        Raises:
            InvalidPathError: If this descriptor's path is malformed.
        """
        if not self.absolute_path:
            _derive_paths(self)
        return DirectoryDescriptor(self.parent_path)

    def equal_paths(self, other: DirectoryDescriptor) -> bool:
        """Compare the absolute forms of two descriptors."""
        if not self.absolute_path:
            _derive_paths(self)
        if not other.absolute_path:
            _derive_paths(other)
        return os.path.normcase(self.absolute_path) == os.path.normcase(other.absolute_path)


def _has_doubled_separator(path: str) -> bool:
    separators = [os.sep] + ([os.altsep] if os.altsep else [])
    # A leading pair is a valid POSIX root and a Windows UNC prefix.
    body = path[1:]
    return any(a + b in body for a in separators for b in separators)


def _derive_paths(descriptor: DirectoryDescriptor) -> None:
    """Fill in every path form from the raw path, without touching the disk."""
    raw = descriptor.original_path

    if not raw or not raw.strip():
        msg = "Directory path is empty or blank"
        raise InvalidPathError(msg)
    if "\x00" in raw:
        msg = f"Directory path contains a NUL byte: {raw!r}"
        raise InvalidPathError(msg)
    if "..." in raw:
        msg = f"Directory path contains a triple-dot sequence: {raw!r}"
        raise InvalidPathError(msg)
    if _has_doubled_separator(raw):
        msg = f"Directory path contains doubled separators: {raw!r}"
        raise InvalidPathError(msg)

    normalized = os.path.normpath(os.path.expanduser(raw.strip()))
    absolute = os.path.abspath(normalized)
    volume, _ = os.path.splitdrive(absolute)
    parent, leaf = os.path.split(absolute)

    descriptor.normalized_path = normalized
    descriptor.absolute_path = absolute
    descriptor.volume_name = volume
    descriptor.parent_path = parent
    descriptor.leaf_name = leaf


def validate_descriptor(
    descriptor: DirectoryDescriptor,
    *,
    require_exists: bool,
    fs: FileSystemAccess | None = None,
) -> bool:
    """Refresh a descriptor from its raw path and the disk.

    Args:
        descriptor: Descriptor to refresh in place.
        require_exists: Treat a missing directory as an error.
        fs: Filesystem access layer (defaults to the local filesystem).

    Returns:
        True if the directory exists, False if it does not and
        ``require_exists`` is False.

    Raises:
        InvalidPathError: If the raw path is blank or malformed.
        PathTypeMismatchError: If the path exists but is not a directory.
        InconsistentPathStateError: If the absolute form exists but the
            normalized form does not.
        PathNotFoundError: If ``require_exists`` is True and the
            directory is missing.
    """
    fs = fs or _default_fs

    _derive_paths(descriptor)

    probe = fs.stat_path(descriptor.absolute_path)
    if not probe.exists:
        descriptor.reset_disk_state()
        if require_exists:
            msg = f"Directory does not exist: {descriptor.absolute_path}"
            raise PathNotFoundError(msg)
        return False

    if not probe.is_directory:
        descriptor.reset_disk_state()
        msg = f"Path exists but is not a directory: {descriptor.absolute_path}"
        raise PathTypeMismatchError(msg)

    original_probe = fs.stat_path(descriptor.normalized_path)
    if not original_probe.exists:
        descriptor.reset_disk_state()
        msg = (
            f"Absolute path {descriptor.absolute_path} exists but "
            f"{descriptor.normalized_path} does not"
        )
        raise InconsistentPathStateError(msg)

    descriptor.absolute_path_exists = True
    descriptor.path_exists = True
    descriptor.metadata = probe.metadata
    logger.debug("Validated directory %s", descriptor.absolute_path)
    return True


def _strip_trailing_separators(path: str) -> str:
    stripped = path.rstrip(os.sep + (os.altsep or ""))
    if not stripped:
        return path[:1]
    if os.path.splitdrive(stripped)[1] == "":
        # bare drive such as "C:", keep its separator
        return path[: len(stripped) + 1]
    return stripped


def substitute_base_path(path: str, old_base: str, new_base: str) -> str:
    """Replace the leading ``old_base`` segment of ``path`` with ``new_base``.

    The replacement works on whole path components, so ``/data/abc`` is
    not considered to start with ``/data/a``. Trailing separators on
    either base are ignored.

    Args:
        path: Path to rewrite.
        old_base: Directory ``path`` is expected to start with.
        new_base: Directory to put in its place.

    Returns:
        Rewritten path.

    Raises:
        ValueError: If ``path`` does not start with ``old_base``.
    """
    base = _strip_trailing_separators(old_base)
    target = _strip_trailing_separators(new_base)
    candidate = _strip_trailing_separators(path)

    if os.path.normcase(candidate) == os.path.normcase(base):
        return target

    prefix = base if base.endswith(os.sep) else base + os.sep
    if not os.path.normcase(candidate).startswith(os.path.normcase(prefix)):
        msg = f"Path {path!r} does not start with base directory {old_base!r}"
        raise ValueError(msg)

    return os.path.join(target, candidate[len(prefix) :])
