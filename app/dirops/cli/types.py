"""Shared types and utilities for CLI commands.

This module provides the selection options shared by every traversal
command and the helper that turns them into TraversalOptions.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from dirops.core.options import OptionsError, load_options, options_exists
from dirops.models.criteria import CombineMode, SelectionCriteria, TraversalOptions
from dirops.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def parse_mode(value: str | None) -> int | None:
    """Parse an octal permission mode such as "644" or "0o755"."""
    if value is None:
        return None
    text = value.lower().removeprefix("0o")
    try:
        mode = int(text, 8)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not an octal permission mode") from None
    if mode > 0o7777:
        raise typer.BadParameter(f"'{value}' is out of range (max 7777)")
    return mode


RootArgument = Annotated[
    Path,
    typer.Argument(help="Directory to operate on.", show_default=False),
]
PatternOption = Annotated[
    list[str] | None,
    typer.Option("--pattern", "-p", help="Glob matched against file names (repeatable)."),
]
RegexOption = Annotated[
    str | None,
    typer.Option("--regex", "-r", help="Regular expression searched in file names."),
]
OlderThanOption = Annotated[
    datetime | None,
    typer.Option("--older-than", help="Only files modified before this time."),
]
NewerThanOption = Annotated[
    datetime | None,
    typer.Option("--newer-than", help="Only files modified after this time."),
]
ModeOption = Annotated[
    str | None,
    typer.Option("--mode", "-m", help="Only files with exactly these permission bits (octal)."),
]
AnyOption = Annotated[
    bool,
    typer.Option("--any", help="Select files matching any criterion instead of all."),
]
NoRecurseOption = Annotated[
    bool,
    typer.Option("--no-recurse", help="Only process files directly inside the directory."),
]
SkipTopOption = Annotated[
    bool,
    typer.Option("--skip-top", help="Skip files directly inside the directory."),
]
OptionsFileOption = Annotated[
    Path | None,
    typer.Option("--options", "-o", help="TOML file with default traversal options."),
]


def build_traversal_options(
    *,
    options_file: Path | None = None,
    patterns: list[str] | None = None,
    regex: str | None = None,
    older_than: datetime | None = None,
    newer_than: datetime | None = None,
    mode: str | None = None,
    match_any: bool = False,
    no_recurse: bool = False,
    skip_top: bool = False,
) -> TraversalOptions:
    """Merge command line flags over the options file.

    The explicit ``--options`` file is used when given, otherwise the
    default options file if one exists. Flags given on the command line
    override the values from the file.

    Returns:
        Validated TraversalOptions.

    Raises:
        typer.Exit: If the options file or the combined options are invalid.
    """
    try:
        if options_file is not None:
            base = load_options(options_file)
        elif options_exists():
            base = load_options()
        else:
            base = TraversalOptions()
    except OptionsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    selection: dict[str, Any] = base.selection.model_dump()
    if patterns:
        selection["name_patterns"] = tuple(patterns)
    if regex is not None:
        selection["regex"] = regex
    if older_than is not None:
        selection["older_than"] = older_than
    if newer_than is not None:
        selection["newer_than"] = newer_than
    if mode is not None:
        selection["permission_mask"] = parse_mode(mode)
    if match_any:
        selection["combine_mode"] = CombineMode.OR

    try:
        return TraversalOptions(
            skip_top_level_directory=base.skip_top_level_directory or skip_top,
            scan_sub_directories=base.scan_sub_directories and not no_recurse,
            selection=SelectionCriteria(**selection),
            file_types=base.file_types,
        )
    except ValidationError as e:
        print_error(f"Invalid options: {e}")
        raise typer.Exit(code=1) from e
