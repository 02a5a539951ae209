"""Unit tests for the clean command.

Runs the full CLI against temporary trees. The trash is patched so
nothing reaches the desktop trash, and XDG directories point into
the test's temporary directory.
"""

import json
import os
import time
from pathlib import Path
from unittest.mock import PropertyMock, patch

import pytest
from stalesweep.cli.main import app
from stalesweep.core.engine import CleanupEngine
from stalesweep.core.history import HistoryStore
from typer.testing import CliRunner

runner = CliRunner()

DAY = 24 * 60 * 60


@pytest.fixture(autouse=True)
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and state directories at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A target folder with an old file, a new file and an empty folder."""
    root = tmp_path / "target"
    root.mkdir()
    for name, days in (("old.txt", 40), ("new.txt", 2)):
        path = root / name
        path.write_text("data")
        stamp = time.time() - days * DAY
        os.utime(path, (stamp, stamp))
    (root / "empty").mkdir()
    return root


def _unlink(path: str) -> None:
    target = Path(path)
    if target.is_dir():
        target.rmdir()
    else:
        target.unlink()


class TestCleanDryRun:
    """Tests for dry-run invocations."""

    def test_dry_run_reports_without_deleting(self, tree: Path) -> None:
        """Dry-run lists candidates and leaves the tree untouched."""
        result = runner.invoke(
            app,
            ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m", "--dry-run"],
        )

        assert result.exit_code == 0
        assert "These are the arguments you provided:" in result.output
        assert "Dry-run: 1 path(s) would be deleted." in result.output
        assert (tree / "old.txt").exists()

    def test_dry_run_with_empty_folders(self, tree: Path) -> None:
        """The empty-folder pass is simulated in dry-run."""
        result = runner.invoke(
            app,
            [
                "clean",
                "-d",
                "30d",
                "-t",
                str(tree),
                "--file-date-types",
                "modified",
                "--delete-empty-folders",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0
        assert "Dry-run: 2 path(s) would be deleted." in result.output
        assert (tree / "empty").is_dir()

    def test_json_output(self, tree: Path) -> None:
        """JSON output carries the summary and every record."""
        result = runner.invoke(
            app,
            ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m", "--dry-run"]
            + ["-f", "json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["cancelled"] is False
        assert data["summary"]["would_delete"] == 1
        assert data["summary"]["skipped_too_young"] == 1

    def test_dry_run_not_recorded(self, tree: Path, xdg_dirs: Path) -> None:
        """Dry runs do not write history."""
        runner.invoke(
            app, ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m", "--dry-run"]
        )

        assert HistoryStore(xdg_dirs / "state" / "stalesweep").get_history() == []


class TestCleanRealRun:
    """Tests for runs that move files to the trash."""

    def test_moves_old_files(self, tree: Path, xdg_dirs: Path) -> None:
        """Old files and empty folders go to the trash and the run is recorded."""
        with patch("stalesweep.core.trash.send2trash", side_effect=_unlink) as send:
            result = runner.invoke(
                app,
                [
                    "clean",
                    "-d",
                    "30d",
                    "-t",
                    str(tree),
                    "--file-date-types",
                    "m",
                    "--delete-empty-folders",
                ],
            )

        assert result.exit_code == 0
        assert "Moved 2 path(s) to the trash." in result.output
        assert send.call_count == 2
        assert not (tree / "old.txt").exists()
        assert (tree / "new.txt").exists()
        assert not (tree / "empty").exists()

        records = HistoryStore(xdg_dirs / "state" / "stalesweep").get_history()
        assert len(records) == 1
        assert records[0].summary["deleted"] == 2

    def test_no_history_flag(self, tree: Path, xdg_dirs: Path) -> None:
        """--no-history skips recording."""
        with patch("stalesweep.core.trash.send2trash", side_effect=_unlink):
            runner.invoke(
                app,
                ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m", "--no-history"],
            )

        assert HistoryStore(xdg_dirs / "state" / "stalesweep").get_history() == []

    def test_nothing_qualifies(self, tree: Path) -> None:
        """A long threshold deletes nothing."""
        with patch("stalesweep.core.trash.send2trash") as send:
            result = runner.invoke(
                app, ["clean", "-d", "1y", "-t", str(tree), "--file-date-types", "m"]
            )

        assert result.exit_code == 0
        assert "No files qualified for deletion." in result.output
        send.assert_not_called()

    def test_interrupted_run_exits_130(self, tree: Path) -> None:
        """A cancelled run exits with the interrupt code."""
        with patch.object(CleanupEngine, "cancelled", new_callable=PropertyMock, return_value=True):
            result = runner.invoke(
                app, ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m"]
            )

        assert result.exit_code == 130
        assert "Interrupted" in result.output
        assert (tree / "old.txt").exists()


class TestCleanSettings:
    """Tests for settings file defaults."""

    def test_options_from_settings_file(self, tree: Path, tmp_path: Path) -> None:
        """A settings file can supply every required option."""
        settings = tmp_path / "sweep.toml"
        settings.write_text(
            "[sweep]\n"
            'delete_before = "30d"\n'
            f'target_folders = ["{tree}"]\n'
            'file_date_types = ["m"]\n'
            "dry_run = true\n"
        )

        result = runner.invoke(app, ["clean", "--config", str(settings)])

        assert result.exit_code == 0
        assert "Dry-run: 1 path(s) would be deleted." in result.output

    def test_cli_overrides_settings(self, tree: Path, tmp_path: Path) -> None:
        """Command-line options win over the settings file."""
        settings = tmp_path / "sweep.toml"
        settings.write_text(
            "[sweep]\n"
            'delete_before = "1y"\n'
            f'target_folders = ["{tree}"]\n'
            'file_date_types = ["m"]\n'
            "dry_run = true\n"
        )

        result = runner.invoke(app, ["clean", "--config", str(settings), "-d", "30d"])

        assert result.exit_code == 0
        assert "Dry-run: 1 path(s) would be deleted." in result.output

    def test_missing_settings_file(self, tree: Path, tmp_path: Path) -> None:
        """An explicit settings file that does not exist is an error."""
        result = runner.invoke(
            app, ["clean", "-d", "30d", "-t", str(tree), "--config", str(tmp_path / "nope.toml")]
        )

        assert result.exit_code == 1
        assert "Settings file not found" in result.output


class TestCleanErrors:
    """Tests for configuration errors."""

    def test_missing_delete_before(self, tree: Path) -> None:
        """--delete-before is required."""
        result = runner.invoke(app, ["clean", "-t", str(tree)])

        assert result.exit_code == 1
        assert "--delete-before" in result.output

    def test_missing_target_folders(self) -> None:
        """--target-folders is required."""
        result = runner.invoke(app, ["clean", "-d", "30d"])

        assert result.exit_code == 1
        assert "--target-folders" in result.output

    def test_invalid_duration(self, tree: Path) -> None:
        """An unknown unit is rejected before anything is walked."""
        result = runner.invoke(app, ["clean", "-d", "30q", "-t", str(tree)])

        assert result.exit_code == 1
        assert "Unknown time unit" in result.output
        assert (tree / "old.txt").exists()

    def test_invalid_file_date_type(self, tree: Path) -> None:
        """Unknown file date types list the valid choices."""
        result = runner.invoke(
            app, ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "x", "--dry-run"]
        )

        assert result.exit_code == 1
        assert "Unsupported file date type" in result.output

    def test_min_depth_above_max_depth(self, tree: Path) -> None:
        """Inconsistent depth bounds are rejected."""
        result = runner.invoke(
            app,
            ["clean", "-d", "30d", "-t", str(tree), "--dry-run"]
            + ["--min-depth", "3", "--max-depth", "1"],
        )

        assert result.exit_code == 1
        assert "minimum depth" in result.output

    def test_missing_target_folder(self, tmp_path: Path) -> None:
        """A target folder that does not exist is rejected."""
        result = runner.invoke(
            app, ["clean", "-d", "30d", "-t", str(tmp_path / "missing"), "--dry-run"]
        )

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_duration_too_large(self, tree: Path) -> None:
        """An out-of-range duration is a configuration error, not a crash."""
        result = runner.invoke(app, ["clean", "-d", "9" * 400 + "ns", "-t", str(tree)])

        assert result.exit_code == 1
        assert "too large" in result.output
        assert isinstance(result.exception, SystemExit)
        assert (tree / "old.txt").exists()


class TestCreationTimeWarning:
    """Tests for the warning shown when creation time cannot be read."""

    def test_warns_once_when_unavailable(self, tree: Path) -> None:
        """Default date types warn once before the run."""
        with patch(
            "stalesweep.cli.commands.clean.creation_time_available", return_value=False
        ):
            result = runner.invoke(app, ["clean", "-d", "30d", "-t", str(tree), "--dry-run"])

        assert result.output.count("Creation time is not available") == 1
        assert "--file-date-types modified" in result.output

    def test_no_warning_when_available(self, tree: Path) -> None:
        """No warning when the platform exposes creation time."""
        with patch("stalesweep.cli.commands.clean.creation_time_available", return_value=True):
            result = runner.invoke(app, ["clean", "-d", "30d", "-t", str(tree), "--dry-run"])

        assert "Creation time is not available" not in result.output

    def test_no_warning_without_created(self, tree: Path) -> None:
        """Modification time only never triggers the warning."""
        with patch(
            "stalesweep.cli.commands.clean.creation_time_available", return_value=False
        ) as available:
            result = runner.invoke(
                app,
                ["clean", "-d", "30d", "-t", str(tree), "--file-date-types", "m", "--dry-run"],
            )

        assert result.exit_code == 0
        assert "Creation time is not available" not in result.output
        available.assert_not_called()
