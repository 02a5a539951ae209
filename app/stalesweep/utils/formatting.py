"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stalesweep.core.theme import get_theme
from stalesweep.models.outcome import OutcomeKind, OutcomeRecord


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

# Outcome kind -> (label, style)
OUTCOME_LABELS: dict[OutcomeKind, tuple[str, str]] = {
    OutcomeKind.DELETED: ("deleted", "deleted"),
    OutcomeKind.WOULD_DELETE: ("would delete", "would_delete"),
    OutcomeKind.SKIPPED_TOO_YOUNG: ("too young", "skipped"),
    OutcomeKind.SKIPPED_IGNORED: ("ignored", "skipped"),
    OutcomeKind.SKIPPED_OUT_OF_DEPTH: ("out of depth", "skipped"),
    OutcomeKind.ERRORED: ("error", "error"),
}


def create_outcome_table(title: str) -> Table:
    """Create a pre-configured table for displaying outcomes.

    Args:
        title: Table title.

    Returns:
        Rich Table with Path, Type, Outcome and Details columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="text", overflow="fold")
    table.add_column("Type", style="muted", width=9)
    table.add_column("Outcome", width=13)
    table.add_column("Details", style="muted")
    return table


def format_outcome_row(record: OutcomeRecord) -> tuple[str, str, str, str]:
    """Format an outcome record as a table row with Rich markup.

    Args:
        record: The outcome record to format.

    Returns:
        Tuple of (path, type, outcome, details).
    """
    label, style = OUTCOME_LABELS[record.outcome.kind]
    entry_type = "folder" if record.is_directory else "file"
    return (
        escape(record.path),
        entry_type,
        f"[{style}]{label}[/]",
        escape(record.outcome.reason or ""),
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
