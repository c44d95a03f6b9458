"""Index-addressable collections used during traversal.

DirectoryQueue holds the directories still to scan (and, separately, the
directories that were scanned). FileRecordCollection holds the entries a
find operation matched. Both report every indexed access through a
CollectionStatus instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from dirops.filesystem.access import FileEntry
from dirops.filesystem.descriptor import DirectoryDescriptor
from dirops.models.status import (
    EMPTY,
    OK,
    CollectionStatus,
    IndexOutOfBounds,
    ProcessingFailure,
)

T = TypeVar("T")


class IndexedCollection(Generic[T]):
    """Ordered sequence with bounds-checked peek and pop.

    Example:
        >>> queue = DirectoryQueue()
        >>> queue.append(DirectoryDescriptor("/tmp"))
        >>> item, status = queue.pop_first()
        >>> status.is_error_free
        True
    """

    def __init__(self, items: Iterable[T] | None = None) -> None:
        self._items: list[T] = list(items) if items is not None else []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def append(self, item: T) -> None:
        """Add an item at the tail."""
        self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        """Add several items at the tail, keeping their order."""
        self._items.extend(items)

    def to_list(self) -> list[T]:
        """Return a shallow copy of the items."""
        return list(self._items)

    def insert_at(self, index: int, item: T) -> CollectionStatus:
        """Insert an item before position ``index``.

        An index equal to the current length appends. Anything outside
        ``0..len`` is reported as out of bounds and nothing is inserted.
        """
        length = len(self._items)
        if index < 0 or index > length:
            return IndexOutOfBounds(index=index, length=length)
        self._items.insert(index, item)
        return OK

    def peek_or_pop(self, index: int, delete: bool) -> tuple[T | None, CollectionStatus]:
        """Return the item at ``index``, removing it when ``delete`` is set.

        Bounds are checked before anything is mutated. Removal keeps the
        relative order of the remaining items.

        Args:
            index: Position of the item.
            delete: Remove the item from the collection.

        Returns:
            Tuple of (item or None, status).
        """
        length = len(self._items)
        if length == 0:
            return None, EMPTY

        try:
            if index < 0 or index >= length:
                return None, IndexOutOfBounds(index=index, length=length)
            item = self._items[index]
            if delete:
                if index == 0:
                    self._items = self._items[1:]
                elif index == length - 1:
                    self._items = self._items[:index]
                else:
                    self._items = self._items[:index] + self._items[index + 1 :]
        except (IndexError, TypeError) as e:
            return None, ProcessingFailure(error=e)

        return item, OK

    def peek_first(self) -> tuple[T | None, CollectionStatus]:
        return self.peek_or_pop(0, delete=False)

    def peek_last(self) -> tuple[T | None, CollectionStatus]:
        return self.peek_or_pop(len(self._items) - 1, delete=False)

    def pop_first(self) -> tuple[T | None, CollectionStatus]:
        return self.peek_or_pop(0, delete=True)

    def pop_last(self) -> tuple[T | None, CollectionStatus]:
        return self.peek_or_pop(len(self._items) - 1, delete=True)


class DirectoryQueue(IndexedCollection[DirectoryDescriptor]):
    """Ordered directories; FIFO during traversal."""

    def append_path(self, path: str) -> DirectoryDescriptor:
        """Create a descriptor for ``path`` and add it at the tail."""
        descriptor = DirectoryDescriptor(path)
        self.append(descriptor)
        return descriptor

    def absolute_paths(self) -> list[str]:
        """Absolute paths of the queued directories, in order."""
        return [d.absolute_path or d.original_path for d in self._items]


class FileRecordCollection(IndexedCollection[FileEntry]):
    """Matched file entries, in discovery order."""

    def paths(self) -> list[str]:
        return [entry.path for entry in self._items]

    def names(self) -> list[str]:
        return [entry.name for entry in self._items]

    def total_bytes(self) -> int:
        return sum(entry.size for entry in self._items)
