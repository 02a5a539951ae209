"""Outcome models for per-entry cleanup decisions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    """What happened to a single walked entry.

    Attributes:
        DELETED: Moved to the trash.
        WOULD_DELETE: Would have been moved to the trash (dry-run).
        SKIPPED_TOO_YOUNG: Not old enough per the age policy.
        SKIPPED_IGNORED: Matches an ignored path.
        SKIPPED_OUT_OF_DEPTH: Outside the configured depth range.
        ERRORED: Could not be inspected or trashed.
    """

    DELETED = "deleted"
    WOULD_DELETE = "would_delete"
    SKIPPED_TOO_YOUNG = "skipped_too_young"
    SKIPPED_IGNORED = "skipped_ignored"
    SKIPPED_OUT_OF_DEPTH = "skipped_out_of_depth"
    ERRORED = "errored"

    @property
    def is_removal(self) -> bool:
        """Check if the outcome is a real or simulated removal."""
        return self in (OutcomeKind.DELETED, OutcomeKind.WOULD_DELETE)


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Decision taken for an entry.

    Attributes:
        kind: Outcome kind.
        reason: Error message, set only for ERRORED outcomes.
    """

    kind: OutcomeKind
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate outcome data after initialization."""
        if self.kind == OutcomeKind.ERRORED and not self.reason:
            msg = "Errored outcome requires a reason"
            raise ValueError(msg)
        if self.kind != OutcomeKind.ERRORED and self.reason is not None:
            msg = f"Only errored outcomes carry a reason, got {self.kind.value}"
            raise ValueError(msg)

    @classmethod
    def errored(cls, reason: str) -> "ActionOutcome":
        """Create an ERRORED outcome with the given reason."""
        return cls(kind=OutcomeKind.ERRORED, reason=reason)

    @classmethod
    def removal(cls, dry_run: bool) -> "ActionOutcome":
        """Create a DELETED or WOULD_DELETE outcome depending on dry-run."""
        return cls(kind=OutcomeKind.WOULD_DELETE if dry_run else OutcomeKind.DELETED)


@dataclass(frozen=True, slots=True)
class OutcomeRecord:
    """An outcome together with the path it applies to.

    Attributes:
        path: Absolute path of the entry.
        outcome: Decision taken for it.
        is_directory: True if the entry was a directory.
    """

    path: str
    outcome: ActionOutcome
    is_directory: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "path": self.path,
            "outcome": self.outcome.kind.value,
            "is_directory": self.is_directory,
        }
        if self.outcome.reason is not None:
            data["reason"] = self.outcome.reason
        return data
