"""Data models for dirops.

This module exports the selection, status, statistics and error types
used throughout the library.
"""

from dirops.models.criteria import (
    CombineMode,
    FileTypeFilters,
    SelectionCriteria,
    TraversalOptions,
)
from dirops.models.errors import (
    ConfigurationError,
    DirOpsError,
    IncompleteCopyError,
    InconsistentPathStateError,
    InvalidPathError,
    ItemError,
    OperationError,
    OperationInProgressError,
    PathNotFoundError,
    PathTypeMismatchError,
    PathValidationError,
    PostConditionError,
    SelectionError,
    StructuralError,
)
from dirops.models.statistics import (
    CopyTreeStatistics,
    DeleteStatistics,
    DirectoryStatistics,
    MoveStatistics,
    OperationResult,
)
from dirops.models.status import (
    CollectionEmpty,
    CollectionStatus,
    IndexOutOfBounds,
    Ok,
    ProcessingFailure,
)

__all__ = [
    "CollectionEmpty",
    "CollectionStatus",
    "CombineMode",
    "ConfigurationError",
    "CopyTreeStatistics",
    "DeleteStatistics",
    "DirOpsError",
    "DirectoryStatistics",
    "FileTypeFilters",
    "IncompleteCopyError",
    "InconsistentPathStateError",
    "IndexOutOfBounds",
    "InvalidPathError",
    "ItemError",
    "MoveStatistics",
    "Ok",
    "OperationError",
    "OperationInProgressError",
    "OperationResult",
    "PathNotFoundError",
    "PathTypeMismatchError",
    "PathValidationError",
    "PostConditionError",
    "ProcessingFailure",
    "SelectionCriteria",
    "SelectionError",
    "StructuralError",
    "TraversalOptions",
]
