"""Utility modules for cleanrec.

This module exports commonly used utility functions.
"""

from cleanrec.utils.formatting import (
    console,
    err_console,
    print_captured_output,
    print_checking,
    print_error,
    print_info,
    print_summary,
    print_warning,
)
from cleanrec.utils.shell import spawn_captured

__all__ = [
    "console",
    "err_console",
    "print_captured_output",
    "print_checking",
    "print_error",
    "print_info",
    "print_summary",
    "print_warning",
    "spawn_captured",
]
