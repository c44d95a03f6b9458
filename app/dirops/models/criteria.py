"""Pydantic models for file selection and traversal options.

SelectionCriteria describes which files take part in an operation,
FileTypeFilters which kinds of selected entries a copy actually copies,
and TraversalOptions ties both to the directory scanning flags.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CombineMode(str, Enum):
    """How active selection criteria are combined.

    Attributes:
        AND: A file must satisfy every active criterion.
        OR: A file must satisfy at least one active criterion.
    """

    AND = "and"
    OR = "or"


def check_glob_pattern(pattern: str) -> None:
    """Reject glob patterns with an unterminated character class.

    Args:
        pattern: Glob pattern (fnmatch syntax).

    Raises:
        ValueError: If a '[' is never closed by a ']'.
    """
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                msg = f"Malformed glob pattern (unterminated '['): {pattern!r}"
                raise ValueError(msg)
            i = j
        i += 1


def conflicting_scan_flags(*, skip_top_level_directory: bool, scan_sub_directories: bool) -> str | None:
    """Describe why a pair of scan flags cannot be honored, if it cannot."""
    if skip_top_level_directory and not scan_sub_directories:
        return (
            "skip_top_level_directory=True with scan_sub_directories=False "
            "can never select a file"
        )
    return None


class SelectionCriteria(BaseModel):
    """Composable file selection predicate.

    A criterion left at its default (empty tuple or None) is inactive and
    never rejects a file. With every criterion inactive, all files match
    regardless of the combine mode.

    Attributes:
        name_patterns: Glob patterns matched against the file's base name.
        older_than: Select files modified strictly before this moment.
        newer_than: Select files modified strictly after this moment.
        permission_mask: Select files whose permission bits equal this value.
        regex: Regular expression searched in the file's base name.
        combine_mode: AND or OR combination of the active criteria.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name_patterns: Annotated[
        tuple[str, ...],
        Field(description="Glob patterns matched against file base names"),
    ] = ()
    older_than: Annotated[
        datetime | None,
        Field(description="Select files modified before this time"),
    ] = None
    newer_than: Annotated[
        datetime | None,
        Field(description="Select files modified after this time"),
    ] = None
    permission_mask: Annotated[
        int | None,
        Field(ge=0, le=0o7777, description="Permission bits a file must have"),
    ] = None
    regex: Annotated[
        str | None,
        Field(description="Regular expression searched in file base names"),
    ] = None
    combine_mode: Annotated[
        CombineMode,
        Field(description="Combination of active criteria"),
    ] = CombineMode.AND

    @field_validator("name_patterns")
    @classmethod
    def validate_patterns(cls, patterns: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that every glob pattern is well formed."""
        for pattern in patterns:
            check_glob_pattern(pattern)
        return patterns

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, regex: str | None) -> str | None:
        """Validate that the regular expression compiles."""
        if regex:
            try:
                re.compile(regex)
            except re.error as e:
                msg = f"Invalid regular expression {regex!r}: {e}"
                raise ValueError(msg) from e
        return regex

    @property
    def are_patterns_active(self) -> bool:
        return any(self.name_patterns)

    @property
    def is_older_than_active(self) -> bool:
        return self.older_than is not None

    @property
    def is_newer_than_active(self) -> bool:
        return self.newer_than is not None

    @property
    def is_permission_active(self) -> bool:
        return self.permission_mask is not None

    @property
    def is_regex_active(self) -> bool:
        return bool(self.regex)

    @property
    def is_active(self) -> bool:
        """True if at least one criterion can reject a file."""
        return (
            self.are_patterns_active
            or self.is_older_than_active
            or self.is_newer_than_active
            or self.is_permission_active
            or self.is_regex_active
        )


class FileTypeFilters(BaseModel):
    """Kinds of selected entries a copy operation will copy.

    Attributes:
        regular: Copy regular files.
        symlink: Copy symbolic links (as links, not their targets).
        other: Copy other non-regular entries (FIFOs, sockets, devices).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    regular: bool = True
    symlink: bool = True
    other: bool = False

    @classmethod
    def everything(cls) -> FileTypeFilters:
        """Filters that let every kind of entry through."""
        return cls(regular=True, symlink=True, other=True)


class TraversalOptions(BaseModel):
    """Options recognized by every traversal-based operation.

    Attributes:
        skip_top_level_directory: Ignore the files directly inside the root.
        scan_sub_directories: Descend into sub-directories.
        selection: File selection criteria.
        file_types: Kinds of entries copied by copy operations.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    skip_top_level_directory: bool = False
    scan_sub_directories: bool = True
    selection: Annotated[
        SelectionCriteria,
        Field(default_factory=SelectionCriteria),
    ]
    file_types: Annotated[
        FileTypeFilters,
        Field(default_factory=FileTypeFilters),
    ]

    @model_validator(mode="after")
    def validate_scan_flags(self) -> TraversalOptions:
        """Reject flag combinations that can never select a file."""
        conflict = conflicting_scan_flags(
            skip_top_level_directory=self.skip_top_level_directory,
            scan_sub_directories=self.scan_sub_directories,
        )
        if conflict:
            raise ValueError(conflict)
        return self
