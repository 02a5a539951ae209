"""CLI commands for stalesweep.

This package contains all subcommand implementations.
"""

from stalesweep.cli.commands import clean, history, init

__all__ = ["clean", "history", "init"]
