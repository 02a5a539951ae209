"""Filesystem entry models produced by the tree walker.

This module defines the data structures describing a single step of
a directory walk: what kind of entry was found, how deep it sits below
its root, and which timestamps could be read for it.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path


class TimestampKind(str, Enum):
    """Timestamp used to judge the age of a file.

    Attributes:
        CREATED: Birth time of the file (not available everywhere).
        MODIFIED: Last content modification time.
        ACCESSED: Last access time.
    """

    CREATED = "created"
    MODIFIED = "modified"
    ACCESSED = "accessed"

    @property
    def short(self) -> str:
        """Single-letter alias accepted on the command line."""
        return self.value[0]

    @classmethod
    def parse(cls, value: str) -> TimestampKind:
        """Parse a timestamp kind from its name or single-letter alias.

        Matching is case-insensitive and ignores surrounding whitespace.

        Args:
            value: Text such as "created", "M" or " accessed ".

        Returns:
            The matching TimestampKind.

        Raises:
            ValueError: If the value names no known kind.
        """
        trimmed = value.strip()
        lowered = trimmed.lower()
        for kind in cls:
            if lowered in (kind.value, kind.short):
                return kind
        choices = ", ".join(f"{k.value} ({k.short})" for k in cls)
        msg = f"Unsupported file date type: {trimmed}. Please use one of the following: {choices}"
        raise ValueError(msg)


class EntryKind(str, Enum):
    """Type of a walked filesystem entry.

    Attributes:
        FILE: Regular file (or a followed symlink to one).
        DIRECTORY: Directory (or a followed symlink to one).
        SYMLINK: Symbolic link visited as a leaf.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


@dataclass(frozen=True, slots=True)
class Timestamps:
    """Timestamps read for a single entry.

    Each field is None when the platform or filesystem does not
    provide that timestamp.
    """

    created: datetime | None = None
    modified: datetime | None = None
    accessed: datetime | None = None

    def get(self, kind: TimestampKind) -> datetime | None:
        """Return the timestamp for a kind, or None if unavailable."""
        if kind is TimestampKind.CREATED:
            return self.created
        if kind is TimestampKind.MODIFIED:
            return self.modified
        return self.accessed

    @classmethod
    def from_stat(cls, st: os.stat_result) -> Timestamps:
        """Build timestamps from an ``os.stat`` result.

        Creation time comes from ``st_birthtime`` where the platform
        exposes it. On Windows, ``st_ctime`` is the creation time.
        Elsewhere ``st_ctime`` is the inode change time, so creation
        time is reported as unavailable.
        """
        birth: float | None = getattr(st, "st_birthtime", None)
        if birth is None and sys.platform == "win32":
            birth = st.st_ctime

        return cls(
            created=_to_datetime(birth),
            modified=_to_datetime(st.st_mtime),
            accessed=_to_datetime(st.st_atime),
        )


def _to_datetime(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, UTC)


def creation_time_available(path: Path) -> bool:
    """Check whether creation time can be read on the filesystem holding a path.

    Args:
        path: Existing path, typically a target root.

    Returns:
        True on Windows or where ``st_birthtime`` is exposed.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    if sys.platform == "win32":
        return True
    return getattr(os.stat(path), "st_birthtime", None) is not None


def read_timestamps(path: Path, *, follow_symlinks: bool = True) -> Timestamps:
    """Read the timestamps of a path from the filesystem.

    Args:
        path: Path to inspect.
        follow_symlinks: If False, report the link itself rather than its target.

    Returns:
        Timestamps for the path.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    return Timestamps.from_stat(os.stat(path, follow_symlinks=follow_symlinks))


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry yielded by the tree walker.

    Attributes:
        path: Absolute path of the entry (not resolved through symlinks).
        kind: Entry kind (file, directory, symlink).
        depth: Levels below the root; the root itself is depth 0.
        root: Target root the entry was reached from.
        is_symlink: True if the path itself is a symbolic link.
    """

    path: Path
    kind: EntryKind
    depth: int
    root: Path
    is_symlink: bool = False

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if self.depth < 0:
            msg = f"Depth cannot be negative, got {self.depth}"
            raise ValueError(msg)

    @property
    def is_root(self) -> bool:
        """Check if this entry is the target root itself."""
        return self.depth == 0

    @property
    def is_dir(self) -> bool:
        """Check if this entry is walked as a directory."""
        return self.kind == EntryKind.DIRECTORY


@dataclass(frozen=True, slots=True)
class WalkError:
    """A failure encountered while walking a tree.

    Yielded in place of (or after) an entry when a directory cannot be
    listed, an entry cannot be inspected, or a symlink cycle is found.

    Attributes:
        path: Path the failure relates to.
        depth: Depth of that path below its root.
        reason: Human-readable error message.
    """

    path: Path
    depth: int
    reason: str
