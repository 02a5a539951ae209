"""Trash collaborator.

Moves paths to the platform trash instead of deleting them. The
default implementation uses the ``send2trash`` library; tests and
embedding applications can supply anything with a matching
``move_to_trash`` method.
"""

import logging
from pathlib import Path
from typing import Protocol

from send2trash import send2trash

from stalesweep.errors import TrashError

logger = logging.getLogger(__name__)


class TrashMover(Protocol):
    """Anything that can move a single path to the trash."""

    def move_to_trash(self, path: Path) -> None:
        """Move a path to the trash.

        Raises:
            TrashError: If the path could not be moved.
        """
        ...


class Send2TrashMover:
    """Moves paths to the desktop trash through send2trash."""

    def move_to_trash(self, path: Path) -> None:
        """Move a file, symlink or empty directory to the trash.

        Args:
            path: Path to trash.

        Raises:
            TrashError: If send2trash fails.
        """
        logger.debug("Moving to trash: %s", path)
        try:
            send2trash(str(path))
        except OSError as e:
            raise TrashError(str(path), str(e)) from e
