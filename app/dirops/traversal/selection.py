"""Selection predicate evaluation.

Each active criterion contributes one boolean; inactive criteria are
skipped entirely. With no active criterion every file matches.
"""

import re
from datetime import datetime

from dirops.filesystem.access import FileEntry, FileSystemAccess, LocalFileSystem
from dirops.models.criteria import CombineMode, SelectionCriteria
from dirops.models.errors import SelectionError

_default_fs = LocalFileSystem()


def _pattern_match(entry: FileEntry, patterns: tuple[str, ...], fs: FileSystemAccess) -> bool:
    for pattern in patterns:
        if pattern and fs.glob_match(pattern, entry.name):
            return True
    return False


def _regex_match(entry: FileEntry, regex: str) -> bool:
    try:
        return re.search(regex, entry.name) is not None
    except re.error as e:
        msg = f"Invalid regular expression {regex!r}: {e}"
        raise SelectionError(msg) from e


def _timestamp(moment: datetime) -> float:
    # Naive datetimes are taken as local time, like datetime.timestamp().
    return moment.timestamp()


def criterion_results(
    entry: FileEntry,
    criteria: SelectionCriteria,
    fs: FileSystemAccess | None = None,
) -> list[bool]:
    """Evaluate every active criterion against one entry.

    Returns:
        One boolean per active criterion, in a fixed order (patterns,
        older-than, newer-than, permission bits, regex).

    Raises:
        SelectionError: If a glob pattern or the regex is malformed.
    """
    fs = fs or _default_fs
    results: list[bool] = []

    if criteria.are_patterns_active:
        results.append(_pattern_match(entry, criteria.name_patterns, fs))
    if criteria.older_than is not None:
        results.append(entry.mtime < _timestamp(criteria.older_than))
    if criteria.newer_than is not None:
        results.append(entry.mtime > _timestamp(criteria.newer_than))
    if criteria.permission_mask is not None:
        results.append(entry.permission_bits == criteria.permission_mask)
    if criteria.regex:
        results.append(_regex_match(entry, criteria.regex))

    return results


def matches(
    entry: FileEntry,
    criteria: SelectionCriteria,
    fs: FileSystemAccess | None = None,
) -> bool:
    """Decide whether an entry is selected.

    Args:
        entry: Directory entry to test.
        criteria: Selection criteria.
        fs: Filesystem access layer providing glob matching.

    Returns:
        True if the entry is selected.

    Raises:
        SelectionError: If a glob pattern or the regex is malformed.
    """
    results = criterion_results(entry, criteria, fs)
    if not results:
        return True
    if criteria.combine_mode == CombineMode.OR:
        return any(results)
    return all(results)
