"""CLI commands for dirops.

This package contains all subcommand implementations.
"""

from dirops.cli.commands import config, delete, find, transfer

__all__ = ["config", "delete", "find", "transfer"]
