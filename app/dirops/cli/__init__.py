"""CLI package for dirops.

This package contains the Typer application and all subcommands.
"""

from dirops.cli.main import app

__all__ = ["app"]
