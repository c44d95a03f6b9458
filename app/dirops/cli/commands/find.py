"""Find and stats command implementations.

Lists matching files, or only counts them, without changing anything.
"""

import json
from typing import Annotated

import typer

from dirops.cli.display import (
    create_files_table,
    file_entry_to_dict,
    print_operation_error,
    print_statistics,
    print_warning_summary,
)
from dirops.cli.types import (
    AnyOption,
    ModeOption,
    NewerThanOption,
    NoRecurseOption,
    OlderThanOption,
    OptionsFileOption,
    OutputFormat,
    PatternOption,
    RegexOption,
    RootArgument,
    SkipTopOption,
    build_traversal_options,
)
from dirops.models.errors import OperationError
from dirops.traversal.operations import directory_tree_stats, find_files
from dirops.utils.formatting import console, format_size, print_info


def find_command(
    root: RootArgument,
    patterns: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    no_recurse: NoRecurseOption = False,
    skip_top: SkipTopOption = False,
    options_file: OptionsFileOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Limit number of results."),
    ] = None,
) -> None:
    """Find files matching the selection criteria."""
    options = build_traversal_options(
        options_file=options_file,
        patterns=patterns,
        regex=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
        no_recurse=no_recurse,
        skip_top=skip_top,
    )

    try:
        result = find_files(root, options)
    except OperationError as e:
        print_operation_error(e)
        raise typer.Exit(code=1) from e

    found = result.value
    files = found.files.to_list()
    display_files = files[:limit] if limit else files

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([file_entry_to_dict(f) for f in display_files]))
        return

    if not files:
        print_info("No matching files found.")
        print_warning_summary(result.warnings)
        return

    console.print(create_files_table(display_files))
    size_str = format_size(found.statistics.file_bytes_matched)
    console.print(
        f"\n[muted]Found {len(files)} files ({size_str}) in "
        f"{found.statistics.total_dirs_scanned} directories[/muted]"
    )
    if limit and len(display_files) < len(files):
        console.print(f"[muted](showing {len(display_files)} of {len(files)}, limited to {limit})[/muted]")
    print_warning_summary(result.warnings)


def stats_command(
    root: RootArgument,
    patterns: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    no_recurse: NoRecurseOption = False,
    skip_top: SkipTopOption = False,
    options_file: OptionsFileOption = None,
) -> None:
    """Show file counts and sizes for a directory tree."""
    options = build_traversal_options(
        options_file=options_file,
        patterns=patterns,
        regex=regex,
        older_than=older_than,
        newer_than=newer_than,
        mode=mode,
        match_any=match_any,
        no_recurse=no_recurse,
        skip_top=skip_top,
    )

    try:
        result = directory_tree_stats(root, options)
    except OperationError as e:
        print_operation_error(e)
        raise typer.Exit(code=1) from e

    print_statistics(f"Statistics for {root}", result.value)
    print_warning_summary(result.warnings)
