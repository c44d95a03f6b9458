"""Utility modules for dirops.

This module exports commonly used utility functions.
"""

from dirops.utils.formatting import (
    console,
    create_statistics_table,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_statistics_table",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
