"""Utility modules for stalesweep.

This module exports commonly used utility functions.
"""

from stalesweep.utils.duration import format_duration, parse_duration
from stalesweep.utils.formatting import (
    console,
    create_outcome_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_outcome_table",
    "err_console",
    "format_duration",
    "parse_duration",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
