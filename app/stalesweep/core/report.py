"""Outcome collection and run summaries."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from stalesweep.models.outcome import ActionOutcome, OutcomeKind, OutcomeRecord


@dataclass(frozen=True, slots=True)
class Report:
    """Summary of a finished (or cancelled) run.

    Attributes:
        records: Every recorded outcome in traversal and pass order.
        cancelled: Whether the run was interrupted before completion.
    """

    records: tuple[OutcomeRecord, ...] = ()
    cancelled: bool = False

    @property
    def counts(self) -> Mapping[OutcomeKind, int]:
        """Read-only per-kind counts, including kinds never recorded."""
        counts = dict.fromkeys(OutcomeKind, 0)
        for record in self.records:
            counts[record.outcome.kind] += 1
        return MappingProxyType(counts)

    @property
    def errors(self) -> list[OutcomeRecord]:
        """Errored records, in recording order."""
        return [r for r in self.records if r.outcome.kind == OutcomeKind.ERRORED]

    @property
    def removed_paths(self) -> list[str]:
        """Paths that were deleted or would be deleted."""
        return [r.path for r in self.records if r.outcome.kind.is_removal]

    def count(self, kind: OutcomeKind) -> int:
        """Number of records with the given outcome kind."""
        return self.counts[kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "cancelled": self.cancelled,
            "summary": {kind.value: count for kind, count in self.counts.items()},
            "records": [r.to_dict() for r in self.records],
            "errors": [r.to_dict() for r in self.errors],
        }


class ReportCollector:
    """Append-only collector of per-entry outcomes.

    One collector is used per target root, so roots processed in
    parallel never share one. Collectors are merged after all roots
    complete.
    """

    def __init__(self) -> None:
        self._records: list[OutcomeRecord] = []
        self._cancelled = False

    def record(
        self,
        path: Path | str,
        outcome: ActionOutcome,
        *,
        is_directory: bool = False,
    ) -> None:
        """Record the outcome for an entry.

        Args:
            path: Path of the entry.
            outcome: Decision taken for it.
            is_directory: True if the entry is a directory.
        """
        self._records.append(
            OutcomeRecord(path=str(path), outcome=outcome, is_directory=is_directory)
        )

    def mark_cancelled(self) -> None:
        """Flag the collected run as interrupted."""
        self._cancelled = True

    def merge(self, others: Iterable["ReportCollector"]) -> None:
        """Append the records of other collectors, in the given order."""
        for other in others:
            self._records.extend(other._records)
            self._cancelled = self._cancelled or other._cancelled

    def summary(self) -> Report:
        """Build an immutable Report from the collected outcomes."""
        return Report(records=tuple(self._records), cancelled=self._cancelled)

    def __len__(self) -> int:
        return len(self._records)
