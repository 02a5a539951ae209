"""Cleanup orchestration.

The engine drives the tree walker over every target root, applies the
ignore rules, depth range and age policy to each entry, moves
qualifying files to the trash (or only reports them in dry-run mode),
and finally removes directories left empty, deepest first.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from stalesweep.core.age import is_older_than
from stalesweep.core.matcher import PathMatcher
from stalesweep.core.report import Report, ReportCollector
from stalesweep.core.trash import Send2TrashMover, TrashMover
from stalesweep.core.walker import TreeWalker
from stalesweep.errors import TrashError, TraversalError
from stalesweep.models.config import ScanConfig
from stalesweep.models.entry import Entry, EntryKind, Timestamps, WalkError, read_timestamps
from stalesweep.models.outcome import ActionOutcome, OutcomeKind

logger = logging.getLogger(__name__)

TimestampReader = Callable[..., Timestamps]

_SKIPPED_IGNORED = ActionOutcome(kind=OutcomeKind.SKIPPED_IGNORED)
_SKIPPED_OUT_OF_DEPTH = ActionOutcome(kind=OutcomeKind.SKIPPED_OUT_OF_DEPTH)
_SKIPPED_TOO_YOUNG = ActionOutcome(kind=OutcomeKind.SKIPPED_TOO_YOUNG)


class CleanupEngine:
    """Runs the traversal-filter-act pipeline for a ScanConfig.

    Per-entry failures are recorded as ERRORED outcomes and never stop
    the run. Cancellation is cooperative: :meth:`cancel` is checked
    between entries, after which no new deletions are issued and the
    run goes straight to its summary.

    Args:
        trash: Trash collaborator. Defaults to send2trash.
        reader: Timestamp reader, called as ``reader(path, follow_symlinks=...)``.
        cancel_event: Event used for cooperative cancellation.
    """

    def __init__(
        self,
        trash: TrashMover | None = None,
        *,
        reader: TimestampReader = read_timestamps,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._trash: TrashMover = trash if trash is not None else Send2TrashMover()
        self._reader = reader
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def cancel(self) -> None:
        """Request the run to stop issuing deletions."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._cancel_event.is_set()

    def run(self, config: ScanConfig) -> Report:
        """Run a cleanup over every target root.

        Roots are processed sequentially, or by ``config.workers``
        threads. Each root records into its own collector; collectors
        are merged in root order.

        Args:
            config: Validated run configuration.

        Returns:
            Report of every outcome.
        """
        logger.debug(
            "Starting cleanup of %d root(s), cutoff %s, dry_run=%s",
            len(config.roots),
            config.cutoff.isoformat(),
            config.dry_run,
        )

        if config.workers > 1 and len(config.roots) > 1:
            with ThreadPoolExecutor(max_workers=config.workers) as pool:
                collectors = list(pool.map(lambda root: self._run_root(root, config), config.roots))
        else:
            collectors = [self._run_root(root, config) for root in config.roots]

        merged = ReportCollector()
        merged.merge(collectors)
        if self.cancelled:
            merged.mark_cancelled()
        return merged.summary()

    def _run_root(self, root: Path, config: ScanConfig) -> ReportCollector:
        """Walk one root, act on its files and then on its empty directories."""
        collector = ReportCollector()
        matcher = PathMatcher(config.ignored_paths)
        walker = TreeWalker(
            matcher,
            max_depth=config.max_depth,
            follow_symlinks=config.follow_symlinks,
        )

        directories: list[Entry] = []
        removed: set[str] = set()
        unreadable: set[str] = set()

        logger.debug("Walking %s", root)
        for item in walker.walk(root):
            if self.cancelled:
                logger.info("Cancelled; stopping walk of %s", root)
                collector.mark_cancelled()
                return collector

            if isinstance(item, WalkError):
                collector.record(item.path, ActionOutcome.errored(item.reason))
                unreadable.add(str(item.path))
                continue

            if matcher.is_ignored(item.path):
                collector.record(item.path, _SKIPPED_IGNORED, is_directory=item.is_dir)
                continue

            if item.is_dir:
                # Directories are only acted on in the empty-folder pass
                if not item.is_root and not item.is_symlink:
                    directories.append(item)
                continue

            if not config.in_depth_range(item.depth):
                collector.record(item.path, _SKIPPED_OUT_OF_DEPTH)
                continue

            outcome = self._process_file(item, config)
            collector.record(item.path, outcome)
            if outcome.kind.is_removal:
                removed.add(str(item.path))

        if config.delete_empty_folders:
            self._remove_empty_directories(
                [d for d in directories if str(d.path) not in unreadable],
                removed,
                config,
                collector,
            )

        return collector

    def _process_file(self, entry: Entry, config: ScanConfig) -> ActionOutcome:
        """Evaluate a file or symlink and trash it if it qualifies."""
        try:
            timestamps = self._reader(entry.path, follow_symlinks=entry.kind != EntryKind.SYMLINK)
        except OSError as e:
            logger.warning("Failed to read metadata of %s: %s", entry.path, e)
            return ActionOutcome.errored(f"Failed to read metadata: {e}")

        try:
            old_enough = is_older_than(
                timestamps,
                config.timestamp_kinds,
                config.cutoff,
                config.age_policy,
            )
        except TraversalError as e:
            logger.warning("Cannot evaluate age of %s: %s", entry.path, e)
            return ActionOutcome.errored(str(e))

        if not old_enough:
            return _SKIPPED_TOO_YOUNG

        return self._remove(entry.path, config.dry_run, label="file")

    def _remove(self, path: Path, dry_run: bool, *, label: str) -> ActionOutcome:
        """Trash a path, or only report it in dry-run mode."""
        if dry_run:
            logger.info("Would delete %s: %s", label, path)
            return ActionOutcome.removal(dry_run=True)

        logger.info("Deleting %s: %s", label, path)
        try:
            self._trash.move_to_trash(path)
        except TrashError as e:
            logger.warning("%s", e)
            return ActionOutcome.errored(str(e))
        return ActionOutcome.removal(dry_run=False)

    def _remove_empty_directories(
        self,
        directories: list[Entry],
        removed: set[str],
        config: ScanConfig,
        collector: ReportCollector,
    ) -> None:
        """Remove directories that are empty after the file pass.

        Candidates are processed deepest first so that removing a
        directory can empty its parent in turn. Emptiness is re-derived
        by listing; in dry-run mode, paths already reported as removed
        are subtracted from the listing instead.
        """
        logger.debug("Checking %d director(ies) for emptiness", len(directories))

        for entry in sorted(directories, key=lambda e: e.depth, reverse=True):
            if self.cancelled:
                collector.mark_cancelled()
                return

            path = str(entry.path)
            try:
                children = [os.path.join(path, name) for name in os.listdir(path)]
            except OSError as e:
                logger.warning("Failed to read directory %s: %s", path, e)
                collector.record(
                    path,
                    ActionOutcome.errored(f"Failed to read directory: {e}"),
                    is_directory=True,
                )
                continue

            # Simulated removals are still on disk in dry-run mode
            if config.dry_run:
                remaining = [child for child in children if child not in removed]
            else:
                remaining = children

            if remaining:
                continue

            outcome = self._remove(entry.path, config.dry_run, label="empty folder")
            collector.record(path, outcome, is_directory=True)
            if outcome.kind.is_removal:
                removed.add(path)
