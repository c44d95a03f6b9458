"""Unit tests for selection predicate evaluation."""

import stat
from datetime import datetime

import pytest
from dirops.filesystem.access import EntryKind, FileEntry
from dirops.models.criteria import CombineMode, SelectionCriteria
from dirops.models.errors import SelectionError
from dirops.traversal.selection import criterion_results, matches

MOMENT = datetime(2024, 6, 1, 12, 0, 0)


def _entry(name: str = "report.txt", mtime: datetime = MOMENT, mode: int = 0o644) -> FileEntry:
    return FileEntry(
        name=name,
        path=f"/data/{name}",
        kind=EntryKind.FILE,
        size=10,
        mtime=mtime.timestamp(),
        mode=stat.S_IFREG | mode,
    )


class TestMatches:
    """Tests for matches function."""

    @pytest.mark.parametrize("mode", [CombineMode.AND, CombineMode.OR])
    def test_default_criteria_match_everything(self, mode: CombineMode) -> None:
        """With no active criterion every file matches in both modes."""
        criteria = SelectionCriteria(combine_mode=mode)

        assert matches(_entry("anything.bin"), criteria)
        assert criterion_results(_entry(), criteria) == []

    def test_any_pattern_matches(self) -> None:
        """One matching pattern out of several is enough."""
        criteria = SelectionCriteria(name_patterns=("*.log", "*.txt"))

        assert matches(_entry("a.txt"), criteria)
        assert not matches(_entry("a.csv"), criteria)

    def test_empty_patterns_ignored(self) -> None:
        """Empty pattern strings never match but do not reject either."""
        criteria = SelectionCriteria(name_patterns=("", "*.txt"))

        assert matches(_entry("a.txt"), criteria)

    def test_older_than_is_strict(self) -> None:
        """A file modified exactly at the boundary is not older."""
        assert not matches(_entry(mtime=MOMENT), SelectionCriteria(older_than=MOMENT))
        assert matches(
            _entry(mtime=datetime(2024, 5, 1)), SelectionCriteria(older_than=MOMENT)
        )

    def test_newer_than_is_strict(self) -> None:
        """A file modified exactly at the boundary is not newer."""
        assert not matches(_entry(mtime=MOMENT), SelectionCriteria(newer_than=MOMENT))
        assert matches(
            _entry(mtime=datetime(2024, 7, 1)), SelectionCriteria(newer_than=MOMENT)
        )

    def test_permission_mask(self) -> None:
        """Permission bits must equal the mask."""
        criteria = SelectionCriteria(permission_mask=0o644)

        assert matches(_entry(mode=0o644), criteria)
        assert not matches(_entry(mode=0o600), criteria)

    def test_regex_searches_base_name(self) -> None:
        """The regex may match anywhere in the base name."""
        criteria = SelectionCriteria(regex=r"\d{3}")

        assert matches(_entry("log123.txt"), criteria)
        assert not matches(_entry("log12.txt"), criteria)

    def test_and_versus_or(self) -> None:
        """AND needs every active criterion, OR just one."""
        both = {"name_patterns": ("*.txt",), "regex": "^x"}

        entry = _entry("a.txt")

        assert not matches(entry, SelectionCriteria(**both, combine_mode=CombineMode.AND))
        assert matches(entry, SelectionCriteria(**both, combine_mode=CombineMode.OR))

    def test_results_in_fixed_order(self) -> None:
        """criterion_results lists patterns, older, newer, mask, regex."""
        criteria = SelectionCriteria(
            name_patterns=("*.txt",),
            older_than=datetime(2025, 1, 1),
            newer_than=datetime(2025, 1, 1),
            permission_mask=0o600,
            regex="report",
        )

        assert criterion_results(_entry(), criteria) == [True, True, False, False, True]


class TestMalformedCriteria:
    """Criteria that bypassed validation fail per file."""

    def test_malformed_pattern(self) -> None:
        """An unterminated class raises SelectionError at match time."""
        criteria = SelectionCriteria.model_construct(name_patterns=("[abc",))

        with pytest.raises(SelectionError):
            matches(_entry(), criteria)

    def test_malformed_regex(self) -> None:
        """A regex that does not compile raises SelectionError at match time."""
        criteria = SelectionCriteria.model_construct(regex="(unclosed")

        with pytest.raises(SelectionError):
            matches(_entry(), criteria)
