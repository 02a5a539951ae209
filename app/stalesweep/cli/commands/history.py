"""History command for viewing past runs.

This module provides the `stalesweep history` command for viewing
previous cleanup runs recorded in the history file.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from stalesweep.core.history import HistoryStore, RunRecord
from stalesweep.models.outcome import OutcomeKind
from stalesweep.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of cleanup runs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of cleanup runs.

    Examples:
        stalesweep history              # Show last 20 runs
        stalesweep history -n 50        # Show last 50 runs
        stalesweep history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    records = HistoryStore().get_history(limit=limit)

    if not records:
        print_info("No history entries found.")
        return

    if json_output:
        console.print_json(json.dumps([r.to_dict() for r in records]))
    else:
        _print_table(records)


def _print_table(records: list[RunRecord]) -> None:
    """Print run history as a Rich table."""
    table = Table(title="Cleanup History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Folders", style="text")
    table.add_column("Deleted", justify="right", style="deleted")
    table.add_column("Errors", justify="right", style="error")

    for record in records:
        folders = escape(", ".join(record.roots[:2]))
        if len(record.roots) > 2:
            folders += f" (+{len(record.roots) - 2} more)"
        if record.cancelled:
            folders += " [warning](interrupted)[/]"

        table.add_row(
            record.id[:8],
            _format_timestamp(record.timestamp),
            folders,
            str(record.summary.get(OutcomeKind.DELETED.value, 0)),
            str(record.summary.get(OutcomeKind.ERRORED.value, 0)),
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
