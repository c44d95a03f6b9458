"""Exception hierarchy for directory operations.

Two tiers:

- OperationError and its subclasses are fatal. They abort the running
  operation and carry whatever statistics and warnings were accumulated
  up to that point. Those statistics are not guaranteed to be complete.
- ItemError is non-fatal. It describes a single file or directory that
  was skipped; operations collect these as warnings and keep going.

Path validation and selection errors are raised by the lower layers and
are translated into one of the two tiers by the traversal engine.
"""

from __future__ import annotations

from typing import Any


class DirOpsError(Exception):
    """Base exception for all dirops errors."""


# =============================================================================
# Fatal errors
# =============================================================================


class OperationError(DirOpsError):
    """Fatal error that aborted an operation.

    Attributes:
        statistics: Partial statistics at the time of failure, if any.
        warnings: Non-fatal errors recorded before the failure.
    """

    def __init__(self, message: str, *, statistics: Any = None) -> None:
        super().__init__(message)
        self.statistics = statistics
        self.warnings: list[ItemError] = []

    def attach(self, statistics: Any, warnings: list[ItemError]) -> OperationError:
        """Attach partial results unless a deeper layer already did.

        Returns:
            The same exception, for use in ``raise exc.attach(...)``.
        """
        if self.statistics is None:
            self.statistics = statistics
        if not self.warnings:
            self.warnings = list(warnings)
        return self


class ConfigurationError(OperationError):
    """Contradictory flags, invalid inputs, or malformed criteria."""


class StructuralError(OperationError):
    """The operation's own bookkeeping failed."""


class PostConditionError(OperationError):
    """Every step ran, yet the advertised outcome was not reached."""


class IncompleteCopyError(OperationError):
    """A move's copy phase left files behind, so the source was kept."""


class OperationInProgressError(OperationError):
    """A walker was re-entered while a walk was still running."""


# =============================================================================
# Path validation
# =============================================================================


class PathValidationError(DirOpsError):
    """Base exception for directory descriptor validation."""


class InvalidPathError(PathValidationError):
    """The raw path is blank or malformed."""


class PathTypeMismatchError(PathValidationError):
    """The path exists but is not a directory."""


class PathNotFoundError(PathValidationError):
    """The path was required to exist but does not."""


class InconsistentPathStateError(PathValidationError):
    """The absolute and original path forms disagree on existence."""


# =============================================================================
# Per-file errors
# =============================================================================


class SelectionError(DirOpsError):
    """A glob pattern or regular expression could not be evaluated."""


class ItemError(DirOpsError):
    """Non-fatal error for a single file or directory.

    Attributes:
        operation: Operation that was running (e.g. "copy", "delete").
        path: File or directory the error relates to.
        directory: Directory being scanned when the error occurred.
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        path: str,
        directory: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.path = path
        self.directory = directory
        self.cause = cause

    def __str__(self) -> str:
        text = f"[{self.operation}] {self.args[0]}: {self.path}"
        if self.cause is not None:
            text += f" ({self.cause})"
        return text
