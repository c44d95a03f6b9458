"""Copy and move command implementations.

Both commands mirror the source layout under the target directory.
"""

from pathlib import Path
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
from dirops.models.criteria import FileTypeFilters
from dirops.models.errors import OperationError
from dirops.traversal.operations import (
    copy_tree,
    move_directory,
    move_directory_tree,
    move_sub_directory_tree,
)
from dirops.utils.formatting import print_error, print_success

TargetArgument = Annotated[
    Path,
    typer.Argument(help="Directory to copy into; created as needed.", show_default=False),
]


def _is_quiet(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("quiet"))


def copy_command(
    ctx: typer.Context,
    source: RootArgument,
    target: TargetArgument,
    patterns: PatternOption = None,
    regex: RegexOption = None,
    older_than: OlderThanOption = None,
    newer_than: NewerThanOption = None,
    mode: ModeOption = None,
    match_any: AnyOption = False,
    no_recurse: NoRecurseOption = False,
    skip_top: SkipTopOption = False,
    options_file: OptionsFileOption = None,
    empty_dirs: Annotated[
        bool,
        typer.Option("--empty-dirs", help="Recreate directories even when nothing is copied into them."),
    ] = False,
    no_symlinks: Annotated[
        bool,
        typer.Option("--no-symlinks", help="Do not copy symbolic links."),
    ] = False,
    special: Annotated[
        bool,
        typer.Option("--special", help="Also copy FIFOs, sockets and device nodes."),
    ] = False,
) -> None:
    """Copy files matching the selection criteria to another directory."""
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
    file_types = FileTypeFilters(
        regular=options.file_types.regular,
        symlink=options.file_types.symlink and not no_symlinks,
        other=options.file_types.other or special,
    )
    options = options.model_copy(update={"file_types": file_types})

    try:
        result = copy_tree(source, target, options, copy_empty_directories=empty_dirs)
    except OperationError as e:
        print_operation_error(e)
        raise typer.Exit(code=1) from e

    if not _is_quiet(ctx):
        print_statistics("Copy Results", result.value)
    print_warning_summary(result.warnings)
    if result.warnings:
        raise typer.Exit(code=1)
    if not _is_quiet(ctx):
        print_success(f"Copied {result.value.files_copied} file(s) to {target}.")


def move_command(
    ctx: typer.Context,
    source: RootArgument,
    target: TargetArgument,
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
    """Move files or whole directory trees to another directory.

    With --no-recurse only the files directly inside SOURCE are moved and
    the selection criteria apply. Otherwise the whole tree is moved (only
    its sub-directories with --skip-top) and SOURCE is removed once every
    file has been copied.
    """
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
    if options.scan_sub_directories and options.selection.is_active:
        print_error("Selection criteria only apply together with --no-recurse.")
        raise typer.Exit(code=1)

    try:
        if not options.scan_sub_directories:
            result = move_directory(source, target, options.selection)
        elif options.skip_top_level_directory:
            result = move_sub_directory_tree(source, target)
        else:
            result = move_directory_tree(source, target)
    except OperationError as e:
        print_operation_error(e)
        raise typer.Exit(code=1) from e

    if not _is_quiet(ctx):
        print_statistics("Move Results", result.value)
    print_warning_summary(result.warnings)
    if result.warnings:
        raise typer.Exit(code=1)
    if not _is_quiet(ctx):
        print_success(f"Moved {result.value.source_files_moved} file(s) to {target}.")
