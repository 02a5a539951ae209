"""Exception hierarchy for stalesweep.

Configuration errors are fatal and raised before any filesystem
mutation. Traversal and action errors are per-entry: the engine
records them in the report and keeps going.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stalesweep.models.entry import TimestampKind


class StalesweepError(Exception):
    """Base exception for stalesweep errors."""


class ConfigurationError(StalesweepError):
    """Raised when the run configuration is invalid."""


class DurationParseError(ConfigurationError):
    """Raised when a human-readable duration cannot be parsed."""


class SettingsError(ConfigurationError):
    """Raised when the settings file cannot be read or validated."""


class TraversalError(StalesweepError):
    """Raised when a directory entry cannot be inspected during a walk."""


class ActionError(StalesweepError):
    """Raised when an action on a single path fails."""


class TrashError(ActionError):
    """Raised when a path cannot be moved to the trash.

    Attributes:
        path: Path that could not be trashed.
        reason: Underlying error message.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to move '{path}' to trash: {reason}")
        self.path = path
        self.reason = reason


class TimestampUnavailableError(TraversalError):
    """Raised when an enabled timestamp kind cannot be read for an entry."""

    def __init__(self, kind: TimestampKind) -> None:
        super().__init__(f"{kind.value} timestamp is not available on this platform/filesystem")
        self.kind = kind
