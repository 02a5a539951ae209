"""Clean command implementation.

Moves files older than a given age to the trash, honouring ignored
paths, depth bounds and dry-run mode, and optionally removes folders
left empty afterwards.
"""

import json
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, TypeVar

import typer

from stalesweep.cli.types import OutputFormat, parse_timestamp_kinds, split_csv
from stalesweep.core.engine import CleanupEngine
from stalesweep.core.history import HistoryStore, RunRecord
from stalesweep.core.report import Report
from stalesweep.core.settings import SweepSettings, load_settings
from stalesweep.errors import ConfigurationError
from stalesweep.models.config import (
    DEFAULT_TIMESTAMP_KINDS,
    AgePolicy,
    ScanConfig,
    build_config,
    compute_cutoff,
)
from stalesweep.models.entry import TimestampKind, creation_time_available
from stalesweep.models.outcome import OutcomeKind
from stalesweep.utils.duration import format_duration, parse_duration
from stalesweep.utils.formatting import (
    OUTCOME_LABELS,
    console,
    create_outcome_table,
    format_outcome_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Move old files to the trash.",
    invoke_without_command=True,
)

# Exit code for a run stopped by Ctrl-C
EXIT_INTERRUPTED = 130

T = TypeVar("T")


@app.callback(invoke_without_command=True)
def clean(
    ctx: typer.Context,
    delete_before: Annotated[
        str | None,
        typer.Option(
            "--delete-before",
            "-d",
            metavar="TIME",
            help="Delete files older than this, e.g. 30d or 1y6M2w3d.",
        ),
    ] = None,
    target_folders: Annotated[
        list[str] | None,
        typer.Option(
            "--target-folders",
            "-t",
            metavar="PATH",
            help="Folder to delete files from (repeatable, comma-separated).",
        ),
    ] = None,
    file_date_types: Annotated[
        str | None,
        typer.Option(
            "--file-date-types",
            help="Timestamps to compare: created (c), modified (m), accessed (a). "
            "Default: created,modified.",
        ),
    ] = None,
    ignored_paths: Annotated[
        list[str] | None,
        typer.Option(
            "--ignored-paths",
            "-i",
            metavar="PATHS",
            help="File or folder that is never deleted (repeatable, comma-separated).",
        ),
    ] = None,
    min_depth: Annotated[
        int | None,
        typer.Option(
            "--min-depth", min=0, metavar="DEPTH", help="Minimum depth to delete files at."
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=0, metavar="DEPTH", help="Maximum depth to search."),
    ] = None,
    delete_empty_folders: Annotated[
        bool | None,
        typer.Option(
            "--delete-empty-folders/--keep-empty-folders",
            help="Delete folders left empty after deleting files.",
            show_default=False,
        ),
    ] = None,
    follow_symbolic_links: Annotated[
        bool | None,
        typer.Option(
            "--follow-symbolic-links/--no-follow-symbolic-links",
            help="Follow symbolic links to folders.",
            show_default=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option(
            "--dry-run/--no-dry-run",
            help="Only show which files would be deleted.",
            show_default=False,
        ),
    ] = None,
    age_policy: Annotated[
        AgePolicy | None,
        typer.Option(
            "--age-policy",
            help="Require all (default) or any of the file date types to be old.",
            case_sensitive=False,
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Target folders processed in parallel."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/stalesweep/config.toml).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
    no_history: Annotated[
        bool,
        typer.Option("--no-history", help="Do not record this run in the history."),
    ] = False,
) -> None:
    """Move files older than --delete-before to the trash."""
    if ctx.invoked_subcommand is not None:
        return

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    try:
        settings = load_settings(config_path)
        config = _build_config(
            settings,
            delete_before=delete_before,
            target_folders=target_folders,
            file_date_types=file_date_types,
            ignored_paths=ignored_paths,
            min_depth=min_depth,
            max_depth=max_depth,
            delete_empty_folders=delete_empty_folders,
            follow_symbolic_links=follow_symbolic_links,
            dry_run=dry_run,
            age_policy=age_policy,
            workers=workers,
        )
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    as_json = output_format == OutputFormat.JSON
    if not quiet and not as_json:
        _print_arguments(config, settings.delete_before if delete_before is None else delete_before)
    _warn_if_creation_time_unavailable(config)

    engine = CleanupEngine()
    with _cancel_on_interrupt(engine):
        report = engine.run(config)

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
    else:
        _print_report(report, config, quiet=quiet, verbose=verbose)

    if not config.dry_run and not no_history:
        _record_history(config, report)

    if report.cancelled:
        print_warning("Interrupted; no further files were deleted.")
        raise typer.Exit(code=EXIT_INTERRUPTED)


def _build_config(
    settings: SweepSettings,
    *,
    delete_before: str | None,
    target_folders: list[str] | None,
    file_date_types: str | None,
    ignored_paths: list[str] | None,
    min_depth: int | None,
    max_depth: int | None,
    delete_empty_folders: bool | None,
    follow_symbolic_links: bool | None,
    dry_run: bool | None,
    age_policy: AgePolicy | None,
    workers: int | None,
) -> ScanConfig:
    """Merge command-line options over settings and build a ScanConfig.

    Raises:
        ConfigurationError: If a required option is missing or any value is invalid.
    """
    duration_text = delete_before if delete_before is not None else settings.delete_before
    if duration_text is None:
        raise ConfigurationError("Missing option '--delete-before' (or delete_before in settings)")

    roots = split_csv(target_folders) or settings.target_folders
    if not roots:
        raise ConfigurationError(
            "Missing option '--target-folders' (or target_folders in settings)"
        )

    if file_date_types is not None:
        kinds = parse_timestamp_kinds([file_date_types])
    elif settings.file_date_types is not None:
        kinds = parse_timestamp_kinds(settings.file_date_types)
    else:
        kinds = DEFAULT_TIMESTAMP_KINDS

    # Cutoff is fixed here, once, before anything is walked
    cutoff = compute_cutoff(parse_duration(duration_text))

    return build_config(
        roots=roots,
        ignored_paths=split_csv(ignored_paths) or settings.ignored_paths,
        timestamp_kinds=kinds,
        cutoff=cutoff,
        min_depth=_first(min_depth, settings.min_depth, 0),
        max_depth=_first(max_depth, settings.max_depth, None),
        delete_empty_folders=_first(delete_empty_folders, settings.delete_empty_folders, False),
        follow_symlinks=_first(follow_symbolic_links, settings.follow_symbolic_links, False),
        dry_run=_first(dry_run, settings.dry_run, False),
        age_policy=_first(age_policy, settings.age_policy, AgePolicy.ALL),
        workers=_first(workers, settings.workers, 1),
    )


def _first(option: T | None, setting: T | None, default: T) -> T:
    """Return the command-line value, else the settings value, else the default."""
    if option is not None:
        return option
    if setting is not None:
        return setting
    return default


@contextmanager
def _cancel_on_interrupt(engine: CleanupEngine) -> Iterator[None]:
    """Turn Ctrl-C into a cooperative cancel of the engine."""

    def handler(signum: int, frame: object) -> None:
        engine.cancel()

    try:
        previous = signal.signal(signal.SIGINT, handler)
    except ValueError:
        # Not in the main thread; Ctrl-C keeps its default behaviour
        yield
        return

    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _warn_if_creation_time_unavailable(config: ScanConfig) -> None:
    if TimestampKind.CREATED not in config.timestamp_kinds:
        return
    try:
        available = all(creation_time_available(root) for root in config.roots)
    except OSError:
        # unreadable roots are reported by the walk
        return
    if not available:
        print_warning(
            "Creation time is not available on this platform; files will be reported as"
            " errors. Use --file-date-types modified to compare modification time only."
        )


def _record_history(config: ScanConfig, report: Report) -> None:
    """Append the run to the history file, warning on failure."""
    try:
        HistoryStore().record_run(RunRecord.from_report(config, report))
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record run to history: {e}")


# === Private display helpers ===


def _print_arguments(config: ScanConfig, delete_before: str | None) -> None:
    """Display the effective arguments of the run."""
    age = format_duration(parse_duration(delete_before)) if delete_before else "-"
    kinds = ", ".join(k.value for k in sorted(config.timestamp_kinds, key=lambda k: k.value))

    console.print("[header]These are the arguments you provided:[/]")
    console.print(f"  Delete before: {age} (cutoff {config.cutoff:%Y-%m-%d %H:%M:%S %Z})")
    console.print(f"  Target folders: {', '.join(str(r) for r in config.roots)}")
    console.print(f"  Finding files to delete by their: {kinds} ({config.age_policy.value})")
    if config.ignored_paths:
        console.print(f"  Ignored paths: {', '.join(str(p) for p in config.ignored_paths)}")
    if config.min_depth:
        console.print(f"  Min depth: {config.min_depth}")
    if config.max_depth is not None:
        console.print(f"  Max depth: {config.max_depth}")
    console.print(f"  Delete empty folders: {config.delete_empty_folders}")
    console.print(f"  Follow symbolic links: {config.follow_symlinks}")
    console.print(f"  Dry run: {config.dry_run}")
    console.print()


def _print_report(report: Report, config: ScanConfig, *, quiet: bool, verbose: bool) -> None:
    """Display run results and the per-outcome summary.

    Removals and errors are listed by default; verbose mode lists
    every recorded entry.
    """
    shown = [r for r in report.records if verbose or r.outcome.kind.is_removal]
    if shown and not quiet:
        title = "Cleanup Results (dry-run)" if config.dry_run else "Cleanup Results"
        table = create_outcome_table(title)
        for record in shown:
            table.add_row(*format_outcome_row(record))
        console.print(table)

    console.print("\n[bold_header]Summary[/]")
    for kind in OutcomeKind:
        label, style = OUTCOME_LABELS[kind]
        console.print(f"  [{style}]{label}[/]: {report.count(kind)}")

    errors = report.errors
    if errors:
        console.print(f"\n[error]{len(errors)} error(s):[/]")
        for record in errors:
            console.print(
                f"  {record.path}: {record.outcome.reason}", markup=False, highlight=False
            )

    removed = len(report.removed_paths)
    if config.dry_run:
        print_info(f"Dry-run: {removed} path(s) would be deleted.")
    elif removed:
        print_success(f"Moved {removed} path(s) to the trash.")
    else:
        print_info("No files qualified for deletion.")
