"""Data models for stalesweep.

This module exports the entry, outcome and configuration models.
"""

from stalesweep.models.config import (
    DEFAULT_TIMESTAMP_KINDS,
    AgePolicy,
    ScanConfig,
    build_config,
    compute_cutoff,
)
from stalesweep.models.entry import (
    Entry,
    EntryKind,
    Timestamps,
    TimestampKind,
    WalkError,
    creation_time_available,
    read_timestamps,
)
from stalesweep.models.outcome import ActionOutcome, OutcomeKind, OutcomeRecord

__all__ = [
    "DEFAULT_TIMESTAMP_KINDS",
    "ActionOutcome",
    "AgePolicy",
    "Entry",
    "EntryKind",
    "OutcomeKind",
    "OutcomeRecord",
    "ScanConfig",
    "TimestampKind",
    "Timestamps",
    "WalkError",
    "build_config",
    "compute_cutoff",
    "creation_time_available",
    "read_timestamps",
]
