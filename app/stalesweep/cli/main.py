"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from stalesweep import __version__
from stalesweep.cli.commands import clean, history, init
from stalesweep.utils.logging_utils import configure_logging

# Create main Typer app
app = typer.Typer(
    name="stalesweep",
    help="Move files older than a given age to the trash.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"stalesweep version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """stalesweep - move old files to the trash.

    Scans target folders for files whose age exceeds a threshold and
    moves them to the trash, optionally removing folders left empty.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(clean.app, name="clean")
app.add_typer(init.app, name="init")
app.add_typer(history.app, name="history")


if __name__ == "__main__":
    app()
