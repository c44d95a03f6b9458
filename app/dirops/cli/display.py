"""Shared Rich display functions for statistics and results.

Provides reusable table builders and summary printers used by every
traversal command.
"""

import dataclasses
from datetime import datetime
from typing import Any

from rich.table import Table

from dirops.filesystem.access import EntryKind, FileEntry
from dirops.models.errors import ItemError, OperationError
from dirops.utils.formatting import (
    console,
    create_statistics_table,
    format_size,
    print_error,
    print_warning,
)

_KIND_STYLES = {
    EntryKind.FILE: "file",
    EntryKind.SYMLINK: "symlink",
    EntryKind.DIRECTORY: "directory",
}


def _label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def statistics_rows(statistics: Any) -> list[tuple[str, str]]:
    """Turn a statistics dataclass into (label, value) rows.

    Byte counters are shown human-readable, booleans as yes/no.

    Args:
        statistics: Any of the statistics dataclasses.

    Returns:
        Rows in field declaration order.
    """
    rows: list[tuple[str, str]] = []
    for f in dataclasses.fields(statistics):
        value = getattr(statistics, f.name)
        if isinstance(value, bool):
            text = "yes" if value else "no"
        elif "bytes" in f.name:
            text = format_size(value)
        else:
            text = str(value)
        rows.append((_label(f.name), text))
    return rows


def create_statistics_view(title: str, statistics: Any) -> Table:
    """Create a Rich table for one statistics object."""
    table = create_statistics_table(title)
    for label, value in statistics_rows(statistics):
        table.add_row(label, value)
    return table


def create_files_table(files: list[FileEntry], title: str = "Matching Files") -> Table:
    """Create a Rich table listing file entries.

    Args:
        files: Entries to list.
        title: Table title.

    Returns:
        Rich Table configured for file display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Kind", width=8)
    table.add_column("Size", style="info", justify="right")
    table.add_column("Modified", style="muted")

    for entry in files:
        style = _KIND_STYLES.get(entry.kind, "text") if entry.kind else "text"
        kind = entry.kind.value if entry.kind else "?"
        modified = datetime.fromtimestamp(entry.mtime).strftime("%Y-%m-%d %H:%M")
        table.add_row(f"[{style}]{entry.path}[/]", kind, format_size(entry.size), modified)

    return table


def file_entry_to_dict(entry: FileEntry) -> dict[str, Any]:
    """Convert a file entry for JSON output."""
    return {
        "name": entry.name,
        "path": entry.path,
        "kind": entry.kind.value if entry.kind else None,
        "size_bytes": entry.size,
        "mtime": datetime.fromtimestamp(entry.mtime).isoformat(),
        "mode": oct(entry.permission_bits),
    }


def print_statistics(title: str, statistics: Any) -> None:
    """Print a statistics table."""
    console.print(create_statistics_view(title, statistics))


def print_warning_summary(warnings: list[ItemError]) -> None:
    """Print a one-line summary of skipped items.

    Individual items are logged as they happen; run with --verbose to
    see debug detail as well.
    """
    if warnings:
        print_warning(f"{len(warnings)} item(s) could not be processed")


def print_operation_error(error: OperationError) -> None:
    """Print a fatal error with whatever partial statistics it carries."""
    print_error(str(error))
    if error.statistics is not None and dataclasses.is_dataclass(error.statistics):
        console.print(create_statistics_view("Partial Statistics", error.statistics))
    print_warning_summary(error.warnings)
