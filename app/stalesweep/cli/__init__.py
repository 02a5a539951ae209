"""CLI package for stalesweep.

This package contains the Typer application and all subcommands.
"""

from stalesweep.cli.main import app

__all__ = ["app"]
