"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from stalesweep.errors import TrashError
from stalesweep.models.config import ScanConfig, build_config
from stalesweep.models.entry import TimestampKind

DAY = 24 * 60 * 60


class FakeTrash:
    """Trash mover that records calls and removes paths directly.

    Paths listed in ``fail_on`` raise TrashError instead of being removed.
    """

    def __init__(self) -> None:
        self.moved: list[Path] = []
        self.fail_on: set[Path] = set()

    def move_to_trash(self, path: Path) -> None:
        if path in self.fail_on:
            raise TrashError(str(path), "Permission denied")
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        else:
            path.unlink()
        self.moved.append(path)


@pytest.fixture
def fake_trash() -> FakeTrash:
    """A recording trash mover that never touches the real trash."""
    return FakeTrash()


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Create a file whose access and modification times lie in the past.

    Usage: ``make_file(path, days_old=40)``; parent folders are created.
    """

    def _make(path: Path, days_old: float = 0, content: str = "data") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        stamp = time.time() - days_old * DAY
        os.utime(path, (stamp, stamp))
        return path

    return _make


@pytest.fixture
def make_config() -> Callable[..., ScanConfig]:
    """Build a ScanConfig with a cutoff 30 days ago, checking modification time.

    Keyword arguments override any ScanConfig field.
    """

    def _make(*roots: Path, **overrides: object) -> ScanConfig:
        values: dict[str, object] = {
            "roots": roots,
            "timestamp_kinds": {TimestampKind.MODIFIED},
            "cutoff": datetime.now(UTC) - timedelta(days=30),
        }
        values.update(overrides)
        return build_config(**values)

    return _make
