"""Options file commands.

Creates and shows the default traversal options file.
"""

from pathlib import Path
from typing import Annotated

import typer

from dirops.core.options import (
    OptionsError,
    OptionsNotFoundError,
    load_options,
    options_exists,
    save_options,
)
from dirops.core.paths import get_options_path
from dirops.models.criteria import TraversalOptions
from dirops.utils.formatting import (
    console,
    create_statistics_table,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage the default traversal options file.",
    no_args_is_help=True,
)

PathOption = Annotated[
    Path | None,
    typer.Option("--path", help="Options file to use instead of the default."),
]


@app.command()
def init(
    path: PathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing options file."),
    ] = False,
) -> None:
    """Write an options file with the default settings."""
    options_path = path or get_options_path()
    if options_exists(options_path) and not force:
        print_warning(f"Options file already exists: {options_path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_options(TraversalOptions(), options_path)
    except OptionsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Options written to {saved}")


@app.command()
def show(path: PathOption = None) -> None:
    """Show the effective traversal options."""
    options_path = path or get_options_path()
    try:
        options = load_options(options_path)
    except OptionsNotFoundError:
        print_info(f"No options file at {options_path}; showing defaults.")
        options = TraversalOptions()
    except OptionsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = create_statistics_table("Traversal Options")
    table.add_row("Skip top level directory", "yes" if options.skip_top_level_directory else "no")
    table.add_row("Scan sub directories", "yes" if options.scan_sub_directories else "no")
    selection = options.selection
    table.add_row("Name patterns", ", ".join(selection.name_patterns) or "-")
    table.add_row("Regex", selection.regex or "-")
    table.add_row("Older than", selection.older_than.isoformat() if selection.older_than else "-")
    table.add_row("Newer than", selection.newer_than.isoformat() if selection.newer_than else "-")
    mask = selection.permission_mask
    table.add_row("Permission mask", oct(mask) if mask is not None else "-")
    table.add_row("Combine mode", selection.combine_mode.value)
    file_types = options.file_types
    for label, enabled in (
        ("Copy regular files", file_types.regular),
        ("Copy symlinks", file_types.symlink),
        ("Copy other entries", file_types.other),
    ):
        table.add_row(label, "yes" if enabled else "no")
    console.print(table)
