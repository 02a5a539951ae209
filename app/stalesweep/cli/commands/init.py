"""Init command implementation.

Writes a settings file holding default options for `stalesweep clean`.
"""

from pathlib import Path
from typing import Annotated

import typer

from stalesweep.cli.types import parse_timestamp_kinds, split_csv
from stalesweep.core.paths import get_settings_path
from stalesweep.core.settings import SweepSettings, save_settings
from stalesweep.errors import ConfigurationError
from stalesweep.models.config import AgePolicy
from stalesweep.utils.duration import parse_duration
from stalesweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create a settings file with default clean options.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    delete_before: Annotated[
        str,
        typer.Option("--delete-before", "-d", metavar="TIME", help="Default minimum file age."),
    ],
    target_folders: Annotated[
        list[str],
        typer.Option("--target-folders", "-t", metavar="PATH", help="Default target folders."),
    ],
    file_date_types: Annotated[
        str | None,
        typer.Option("--file-date-types", help="Default file date types."),
    ] = None,
    ignored_paths: Annotated[
        list[str] | None,
        typer.Option("--ignored-paths", "-i", metavar="PATHS", help="Default ignored paths."),
    ] = None,
    delete_empty_folders: Annotated[
        bool,
        typer.Option("--delete-empty-folders", help="Delete empty folders by default."),
    ] = False,
    age_policy: Annotated[
        AgePolicy | None,
        typer.Option("--age-policy", case_sensitive=False, help="Default age policy."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Settings file to write."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Create a settings file so that `stalesweep clean` needs no flags."""
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or get_settings_path()
    if output_path.exists() and not force:
        print_error(f"Settings file already exists: {output_path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        parse_duration(delete_before)
        kinds = parse_timestamp_kinds([file_date_types]) if file_date_types else None
        settings = SweepSettings(
            delete_before=delete_before,
            target_folders=[str(Path(p).expanduser().resolve()) for p in split_csv(target_folders)],
            file_date_types=sorted(k.value for k in kinds) if kinds else None,
            ignored_paths=[str(Path(p).expanduser().resolve()) for p in split_csv(ignored_paths)],
            delete_empty_folders=delete_empty_folders or None,
            age_policy=age_policy,
        )
        path = save_settings(settings, output_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {path}")
    console.print(f"[muted]Run 'stalesweep clean' to use them, or pass --config {path}.[/]")
