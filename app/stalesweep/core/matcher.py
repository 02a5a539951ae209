"""Ignored path matching.

A path is ignored if it equals, or lies below, any configured ignored
path. Comparison is done on path components, so the rule ``/foo/bar``
does not match ``/foo/barbaz``.
"""

import os
from collections.abc import Iterable
from pathlib import Path, PurePath


def normalize_path(path: PurePath | str) -> PurePath:
    """Normalize a path lexically (absolute, no ``.``/``..``, consistent separators)."""
    return PurePath(os.path.normpath(os.path.abspath(path)))


class PathMatcher:
    """Decides whether a path falls under one of the ignored paths.

    Matching is pure string computation over normalized paths; the
    filesystem is never consulted.

    Attributes:
        _ignored: Normalized ignored paths.
    """

    def __init__(self, ignored_paths: Iterable[Path | str] = ()) -> None:
        """Initialize the PathMatcher.

        Args:
            ignored_paths: Paths whose whole subtree is ignored.
        """
        self._ignored: tuple[PurePath, ...] = tuple(
            dict.fromkeys(normalize_path(p) for p in ignored_paths)
        )

    @property
    def ignored_paths(self) -> tuple[PurePath, ...]:
        """Normalized ignored paths, in configuration order."""
        return self._ignored

    def is_ignored(self, path: Path | str) -> bool:
        """Check if a path equals or is a descendant of an ignored path.

        Args:
            path: Path to check.

        Returns:
            True if the path is ignored.
        """
        if not self._ignored:
            return False
        candidate = normalize_path(path)
        return any(candidate.is_relative_to(ignored) for ignored in self._ignored)

    def __bool__(self) -> bool:
        return bool(self._ignored)
