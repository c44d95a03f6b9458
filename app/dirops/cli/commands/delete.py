"""Delete command implementation.

Deletes matching files, or a whole directory tree with --all.
"""

from typing import Annotated

import typer

from dirops.cli.display import print_operation_error, print_statistics, print_warning_summary
from dirops.cli.types import (
    AnyOption,
    ModeOption,
    NewerThanOption,
    NoRecurseOption,
    OlderThanOption,
    OptionsFileOption,
    PatternOption,
    RegexOption,
    RootArgument,
    SkipTopOption,
    build_traversal_options,
)
from dirops.models.errors import OperationError
from dirops.traversal.operations import delete_all, delete_files, directory_tree_stats
from dirops.utils.formatting import format_size, print_error, print_info, print_success


def delete_command(
    ctx: typer.Context,
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
    remove_all: Annotated[
        bool,
        typer.Option("--all", help="Remove the directory itself and everything below it."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete files matching the selection criteria."""
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
    if remove_all and (options.selection.is_active or no_recurse or skip_top):
        print_error("--all cannot be combined with selection or scan options.")
        raise typer.Exit(code=1)

    try:
        if not yes:
            preview = directory_tree_stats(root, options).value
            if preview.files_matched == 0 and not remove_all:
                print_info("No matching files to delete.")
                return
            target = f"{root} and everything below it" if remove_all else f"{preview.files_matched} file(s)"
            confirmed = typer.confirm(
                f"Delete {target} ({format_size(preview.file_bytes_matched)})?",
                default=False,
            )
            if not confirmed:
                print_info("Aborted.")
                raise typer.Exit(code=0)

        result = delete_all(root) if remove_all else delete_files(root, options)
    except OperationError as e:
        print_operation_error(e)
        raise typer.Exit(code=1) from e

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    if not quiet:
        print_statistics("Delete Results", result.value)
    print_warning_summary(result.warnings)

    if result.warnings:
        raise typer.Exit(code=1)
    if not quiet:
        print_success(f"Deleted {result.value.files_deleted} file(s).")
