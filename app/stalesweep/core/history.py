"""Run history tracking.

This module provides the RunRecord model and the HistoryStore class for
persisting a record of each real cleanup run in a JSONL file.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from stalesweep.core.paths import ensure_dir, get_state_dir
from stalesweep.core.report import Report
from stalesweep.models.config import ScanConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Record of a single cleanup run.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the run finished (ISO 8601 with timezone).
        roots: Target folders of the run.
        cutoff: Cutoff instant used (ISO 8601).
        dry_run: Whether the run was a dry-run.
        cancelled: Whether the run was interrupted.
        summary: Outcome counts keyed by outcome kind value.
        removed: Paths moved to the trash.
    """

    id: str
    timestamp: str
    roots: tuple[str, ...]
    cutoff: str
    dry_run: bool = False
    cancelled: bool = False
    summary: dict[str, int] = field(default_factory=lambda: {})
    removed: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            msg = "Run record ID cannot be empty"
            raise ValueError(msg)
        if not self.roots:
            msg = "Run record must have at least one root"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "roots": list(self.roots),
            "cutoff": self.cutoff,
            "dry_run": self.dry_run,
            "cancelled": self.cancelled,
            "summary": self.summary,
            "removed": list(self.removed),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            roots=tuple(data["roots"]),
            cutoff=data["cutoff"],
            dry_run=data.get("dry_run", False),
            cancelled=data.get("cancelled", False),
            summary=dict(data.get("summary", {})),
            removed=tuple(data.get("removed", ())),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> RunRecord:
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))

    @classmethod
    def from_report(cls, config: ScanConfig, report: Report) -> RunRecord:
        """Create a record for a finished run."""
        return cls(
            id=uuid.uuid4().hex[:12],
            timestamp=datetime.now(UTC).isoformat(),
            roots=tuple(str(root) for root in config.roots),
            cutoff=config.cutoff.isoformat(),
            dry_run=config.dry_run,
            cancelled=report.cancelled,
            summary={kind.value: count for kind, count in report.counts.items()},
            removed=tuple(report.removed_paths),
        )


class HistoryStore:
    """Append-only run history in a JSONL file.

    Storage location: ~/.local/state/stalesweep/history.jsonl
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize HistoryStore.

        Args:
            state_dir: Optional override for the state directory.
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to the history file within the state directory."""
        return self._state_dir / self.HISTORY_FILENAME

    def record_run(self, record: RunRecord) -> None:
        """Append a run record to the history file.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        ensure_dir(self._state_dir, "state")
        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(record.to_json_line() + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[RunRecord]:
        """Read run records, newest first.

        Corrupt lines are logged and skipped.

        Args:
            limit: Maximum number of records to return (None = all).

        Returns:
            List of RunRecord, newest first. Empty if no history exists.
        """
        if not self.history_path.exists():
            return []

        records: list[RunRecord] = []
        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(RunRecord.from_json_line(line))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, e)

        records.reverse()
        if limit is not None:
            return records[:limit]
        return records
