"""Run configuration model.

This module defines the immutable ScanConfig built once before any
traversal begins, together with the helpers that compute the cutoff
instant and turn validation failures into ConfigurationError.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta
from enum import Enum
from itertools import combinations
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from stalesweep.errors import ConfigurationError
from stalesweep.models.entry import TimestampKind

DEFAULT_TIMESTAMP_KINDS: frozenset[TimestampKind] = frozenset(
    {TimestampKind.CREATED, TimestampKind.MODIFIED}
)


class AgePolicy(str, Enum):
    """How several enabled timestamp kinds are combined.

    Attributes:
        ALL: Every enabled timestamp must be older than the cutoff.
        ANY: At least one enabled timestamp must be older than the cutoff.
    """

    ALL = "all"
    ANY = "any"


def _normalize(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()


def _normalize_ignored(path: Path | str) -> Path:
    # Resolve the parent only, so an ignored symlink keeps matching the link itself.
    absolute = Path(os.path.abspath(Path(path).expanduser()))
    if not absolute.name:
        return absolute
    return absolute.parent.resolve() / absolute.name


class ScanConfig(BaseModel):
    """Immutable configuration of a cleanup run.

    Attributes:
        roots: Target folders, each walked independently, in order.
        ignored_paths: Paths never deleted and never descended into.
        timestamp_kinds: Timestamp kinds checked against the cutoff.
        cutoff: Entries older than this instant qualify for deletion.
        min_depth: Inclusive lower depth bound for deletion.
        max_depth: Inclusive upper depth bound (None = unbounded).
        follow_symlinks: Traverse symlinks to directories.
        delete_empty_folders: Remove directories left empty after the file pass.
        dry_run: Report decisions without touching the filesystem.
        age_policy: Combination rule for several timestamp kinds.
        workers: Number of roots processed concurrently.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    roots: Annotated[tuple[Path, ...], Field(min_length=1, description="Target folders")]
    ignored_paths: Annotated[
        tuple[Path, ...], Field(default_factory=tuple, description="Ignored paths")
    ]
    timestamp_kinds: Annotated[
        frozenset[TimestampKind],
        Field(default=DEFAULT_TIMESTAMP_KINDS, description="Timestamp kinds to check"),
    ]
    cutoff: Annotated[datetime, Field(description="Cutoff instant")]
    min_depth: Annotated[int, Field(ge=0, description="Minimum depth")] = 0
    max_depth: Annotated[int | None, Field(ge=0, description="Maximum depth")] = None
    follow_symlinks: bool = False
    delete_empty_folders: bool = False
    dry_run: bool = False
    age_policy: AgePolicy = AgePolicy.ALL
    workers: Annotated[int, Field(ge=1, description="Roots processed concurrently")] = 1

    @field_validator("roots", mode="after")
    @classmethod
    def validate_roots(cls, roots: tuple[Path, ...]) -> tuple[Path, ...]:
        """Resolve roots, drop duplicates and reject missing or nested ones."""
        unique: list[Path] = []
        for raw in roots:
            root = _normalize(raw)
            if not root.exists():
                msg = f"The target folder does not exist: {raw}"
                raise ValueError(msg)
            if not root.is_dir():
                msg = f"The target folder is not a directory: {raw}"
                raise ValueError(msg)
            if root not in unique:
                unique.append(root)

        for a, b in combinations(unique, 2):
            if a.is_relative_to(b) or b.is_relative_to(a):
                msg = f"Target folders must not be nested: {a} and {b}"
                raise ValueError(msg)

        return tuple(unique)

    @field_validator("ignored_paths", mode="after")
    @classmethod
    def validate_ignored_paths(cls, paths: tuple[Path, ...]) -> tuple[Path, ...]:
        """Resolve ignored paths and reject ones that do not exist."""
        resolved: list[Path] = []
        for raw in paths:
            path = _normalize_ignored(raw)
            if not path.exists() and not path.is_symlink():
                msg = f"The ignored path does not exist: {raw}"
                raise ValueError(msg)
            if path not in resolved:
                resolved.append(path)
        return tuple(resolved)

    @field_validator("timestamp_kinds", mode="after")
    @classmethod
    def validate_timestamp_kinds(cls, kinds: frozenset[TimestampKind]) -> frozenset[TimestampKind]:
        """Require at least one timestamp kind."""
        if not kinds:
            msg = "At least one file date type must be provided"
            raise ValueError(msg)
        return kinds

    @field_validator("cutoff", mode="after")
    @classmethod
    def validate_cutoff(cls, cutoff: datetime) -> datetime:
        """Require a timezone-aware cutoff."""
        if cutoff.tzinfo is None:
            msg = "Cutoff must be timezone-aware"
            raise ValueError(msg)
        return cutoff

    @model_validator(mode="after")
    def validate_depth_range(self) -> ScanConfig:
        """Validate that min_depth does not exceed max_depth."""
        if self.max_depth is not None and self.min_depth > self.max_depth:
            msg = "The minimum depth must be less than or equal to the maximum depth"
            raise ValueError(msg)
        return self

    def in_depth_range(self, depth: int) -> bool:
        """Check if a depth lies within [min_depth, max_depth]."""
        if depth < self.min_depth:
            return False
        return self.max_depth is None or depth <= self.max_depth


def compute_cutoff(delete_before: timedelta, now: datetime | None = None) -> datetime:
    """Compute the cutoff instant for a run.

    Called exactly once per run; the result is stored in ScanConfig so
    that a long scan does not drift with wall-clock time.

    Args:
        delete_before: Minimum age of files to delete.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        Timezone-aware cutoff instant.

    Raises:
        ConfigurationError: If the duration reaches before the minimum datetime.
    """
    reference = now if now is not None else datetime.now(UTC)
    try:
        return reference - delete_before
    except OverflowError as e:
        raise ConfigurationError(f"Duration is too large: {delete_before}") from e


def build_config(**values: Any) -> ScanConfig:
    """Build and validate a ScanConfig.

    Args:
        **values: ScanConfig fields.

    Returns:
        Validated ScanConfig.

    Raises:
        ConfigurationError: If any field is invalid.
    """
    try:
        return ScanConfig(**values)
    except ValidationError as e:
        messages = "; ".join(_format_error(err) for err in e.errors())
        raise ConfigurationError(messages) from e


def _format_error(error: Any) -> str:
    message = str(error["msg"]).removeprefix("Value error, ")
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location and error["type"] != "value_error":
        return f"{location}: {message}"
    return message
