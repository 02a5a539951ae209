"""Depth- and symlink-aware directory traversal.

The walker produces a lazy, depth-first sequence of entries for one
target root. It keeps an explicit stack of open directories instead of
recursing, so deep trees do not exhaust the interpreter stack and the
consumer can stop between any two yields.
"""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from stalesweep.core.matcher import PathMatcher
from stalesweep.models.entry import Entry, EntryKind, WalkError

logger = logging.getLogger(__name__)

# (st_dev, st_ino) of a directory after following symlinks
DirectoryIdentity = tuple[int, int]


@dataclass(slots=True)
class _Frame:
    """A directory currently open on the traversal stack."""

    identity: DirectoryIdentity
    children: Iterator[Entry | WalkError]


class TreeWalker:
    """Walks a directory tree depth-first.

    Children of a directory are visited in name order. The walker
    descends into a directory only if it is not ignored and its depth
    is below ``max_depth``. Symlinks are leaves unless
    ``follow_symlinks`` is set, in which case a link to a directory is
    walked as that directory. Re-entering a directory that is already
    open on the current path is reported as a WalkError instead of
    looping.

    Failures never abort the walk: an unreadable directory or entry is
    yielded as a WalkError and traversal continues with its siblings.

    Args:
        matcher: Ignored path matcher used to prune the walk.
        max_depth: Inclusive depth horizon (None = unbounded).
        follow_symlinks: If True, traverse symlinks to directories.
    """

    def __init__(
        self,
        matcher: PathMatcher | None = None,
        *,
        max_depth: int | None = None,
        follow_symlinks: bool = False,
    ) -> None:
        self._matcher = matcher or PathMatcher()
        self._max_depth = max_depth
        self._follow_symlinks = follow_symlinks

    def walk(self, root: Path) -> Iterator[Entry | WalkError]:
        """Walk a single target root.

        The root itself is yielded first with depth 0.

        Args:
            root: Target directory to walk.

        Yields:
            Entry for every visited path, WalkError for every failure.
        """
        root_entry = Entry(
            path=root,
            kind=EntryKind.DIRECTORY,
            depth=0,
            root=root,
            is_symlink=root.is_symlink(),
        )
        yield root_entry

        if not self._should_descend(root_entry):
            return

        opened = self._open(root_entry)
        if isinstance(opened, WalkError):
            yield opened
            return

        open_dirs: set[DirectoryIdentity] = {opened.identity}
        stack: list[_Frame] = [opened]

        while stack:
            frame = stack[-1]
            item = next(frame.children, None)
            if item is None:
                stack.pop()
                open_dirs.discard(frame.identity)
                continue

            yield item

            if isinstance(item, WalkError) or not self._should_descend(item):
                continue

            child = self._open(item)
            if isinstance(child, WalkError):
                yield child
                continue

            if child.identity in open_dirs:
                logger.warning("Symbolic link cycle detected at %s", item.path)
                yield WalkError(
                    path=item.path,
                    depth=item.depth,
                    reason=f"Symbolic link cycle: {item.path} leads back to an open directory",
                )
                continue

            open_dirs.add(child.identity)
            stack.append(child)

    def _should_descend(self, entry: Entry) -> bool:
        """Check whether the walker should list an entry's children."""
        if not entry.is_dir:
            return False
        if self._matcher.is_ignored(entry.path):
            return False
        return self._max_depth is None or entry.depth < self._max_depth

    def _open(self, parent: Entry) -> _Frame | WalkError:
        """List a directory and wrap its children in a stack frame.

        Args:
            parent: Directory entry to list.

        Returns:
            A frame over the sorted children, or a WalkError if the
            directory cannot be read.
        """
        try:
            st = os.stat(parent.path)
            with os.scandir(parent.path) as it:
                dir_entries = sorted(it, key=lambda d: d.name)
        except OSError as e:
            logger.warning("Failed to read directory %s: %s", parent.path, e)
            return WalkError(
                path=parent.path,
                depth=parent.depth,
                reason=f"Failed to read directory: {e}",
            )

        depth = parent.depth + 1
        children: list[Entry | WalkError] = []
        for dir_entry in dir_entries:
            path = parent.path / dir_entry.name
            try:
                kind, is_symlink = self._classify(dir_entry)
            except OSError as e:
                logger.warning("Failed to read entry %s: %s", path, e)
                children.append(
                    WalkError(path=path, depth=depth, reason=f"Failed to read entry: {e}")
                )
                continue
            children.append(
                Entry(path=path, kind=kind, depth=depth, root=parent.root, is_symlink=is_symlink)
            )

        return _Frame(identity=(st.st_dev, st.st_ino), children=iter(children))

    def _classify(self, dir_entry: os.DirEntry[str]) -> tuple[EntryKind, bool]:
        """Determine the kind of a directory entry.

        Returns:
            Tuple of (entry kind, whether the path is a symlink).

        Raises:
            OSError: If the entry cannot be inspected.
        """
        is_symlink = dir_entry.is_symlink()
        if is_symlink and not self._follow_symlinks:
            return EntryKind.SYMLINK, True
        if dir_entry.is_dir():
            return EntryKind.DIRECTORY, is_symlink
        if is_symlink and not dir_entry.is_file():
            # Dangling link
            return EntryKind.SYMLINK, True
        return EntryKind.FILE, is_symlink
