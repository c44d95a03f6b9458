"""Collection access status.

Every indexed access to a DirectoryQueue or FileRecordCollection reports
one of four outcomes. The traversal engine relies on the distinction
between an exhausted queue (clean termination) and a processing failure
(must propagate).
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CollectionStatus:
    """Base for the four mutually exclusive access outcomes.

    Subclasses override exactly one of the predicates below, so a status
    instance always answers True to exactly one of them.
    """

    @property
    def is_error_free(self) -> bool:
        """Access succeeded."""
        return False

    @property
    def is_index_out_of_bounds(self) -> bool:
        """Index was negative or past the last element."""
        return False

    @property
    def is_collection_empty(self) -> bool:
        """Collection holds no elements."""
        return False

    @property
    def is_processing_error(self) -> bool:
        """An unexpected failure occurred during the access."""
        return False

    @property
    def processing_error(self) -> Exception | None:
        """The failure, present only for ProcessingFailure."""
        return None


@dataclass(frozen=True, slots=True)
class Ok(CollectionStatus):
    """The access completed without error."""

    @property
    def is_error_free(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class IndexOutOfBounds(CollectionStatus):
    """The requested index lies outside the collection.

    Attributes:
        index: Index that was requested.
        length: Collection length at the time of the access.
    """

    index: int
    length: int

    @property
    def is_index_out_of_bounds(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"Index {self.index} is out of range for a collection of length {self.length}"


@dataclass(frozen=True, slots=True)
class CollectionEmpty(CollectionStatus):
    """The collection has no elements to return."""

    @property
    def is_collection_empty(self) -> bool:
        return True

    def __str__(self) -> str:
        return "Collection is empty"


@dataclass(frozen=True, slots=True)
class ProcessingFailure(CollectionStatus):
    """The access failed for a reason other than bounds or emptiness.

    Attributes:
        error: Underlying exception.
    """

    error: Exception

    @property
    def is_processing_error(self) -> bool:
        return True

    @property
    def processing_error(self) -> Exception | None:
        return self.error

    def __str__(self) -> str:
        return f"Processing error: {self.error}"


OK = Ok()
EMPTY = CollectionEmpty()
