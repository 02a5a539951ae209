"""Unit tests for settings file I/O."""

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
from stalesweep.core.settings import SweepSettings, load_settings, save_settings
from stalesweep.errors import SettingsError
from stalesweep.models.config import AgePolicy


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_default_file_gives_empty_settings(self, tmp_path: Path) -> None:
        """A missing default settings file is not an error."""
        with patch(
            "stalesweep.core.settings.get_settings_path",
            return_value=tmp_path / "config.toml",
        ):
            settings = load_settings()

        assert settings == SweepSettings()

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """An explicitly given file must exist."""
        with pytest.raises(SettingsError, match="Settings file not found"):
            load_settings(tmp_path / "missing.toml")

    def test_loads_sweep_table(self, tmp_path: Path) -> None:
        """Values are read from the [sweep] table."""
        path = tmp_path / "config.toml"
        path.write_text(
            "[sweep]\n"
            'delete_before = "30d"\n'
            'target_folders = ["/data/downloads"]\n'
            'file_date_types = ["m"]\n'
            "max_depth = 3\n"
            'age_policy = "any"\n'
        )

        settings = load_settings(path)

        assert settings.delete_before == "30d"
        assert settings.target_folders == ["/data/downloads"]
        assert settings.file_date_types == ["m"]
        assert settings.max_depth == 3
        assert settings.age_policy == AgePolicy.ANY
        assert settings.dry_run is None

    def test_relative_paths_anchored_at_file(self, tmp_path: Path) -> None:
        """Relative paths are resolved against the settings file directory."""
        path = tmp_path / "config.toml"
        path.write_text(
            "[sweep]\n"
            'target_folders = ["downloads"]\n'
            'ignored_paths = ["downloads/keep"]\n'
        )

        settings = load_settings(path)

        assert settings.target_folders == [str(tmp_path.resolve() / "downloads")]
        assert settings.ignored_paths == [str(tmp_path.resolve() / "downloads" / "keep")]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML is a SettingsError."""
        path = tmp_path / "config.toml"
        path.write_text("[sweep\n")

        with pytest.raises(SettingsError, match="Invalid TOML syntax"):
            load_settings(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        path = tmp_path / "config.toml"
        path.write_text("[sweep]\nrecursive = true\n")

        with pytest.raises(SettingsError, match="Invalid settings"):
            load_settings(path)

    def test_sweep_must_be_table(self, tmp_path: Path) -> None:
        """A non-table [sweep] value is rejected."""
        path = tmp_path / "config.toml"
        path.write_text('sweep = "nope"\n')

        with pytest.raises(SettingsError, match="must be a table"):
            load_settings(path)


class TestSaveSettings:
    """Tests for save_settings."""

    def test_writes_only_set_values(self, tmp_path: Path) -> None:
        """Unset options are omitted from the file."""
        path = tmp_path / "nested" / "config.toml"
        settings = SweepSettings(delete_before="1y", target_folders=["/data"], dry_run=True)

        result = save_settings(settings, path)

        assert result == path
        data = tomllib.loads(path.read_text())
        assert data == {
            "sweep": {"delete_before": "1y", "target_folders": ["/data"], "dry_run": True}
        }

    def test_roundtrip(self, tmp_path: Path) -> None:
        """Saved settings load back unchanged."""
        path = tmp_path / "config.toml"
        settings = SweepSettings(
            delete_before="2w",
            target_folders=["/data"],
            age_policy=AgePolicy.ANY,
            workers=2,
        )

        save_settings(settings, path)

        assert load_settings(path) == settings

    def test_write_failure(self, tmp_path: Path) -> None:
        """Write errors become SettingsError and leave no temp file behind."""
        path = tmp_path / "config.toml"

        with (
            patch("stalesweep.core.settings.os.replace", side_effect=OSError("disk full")),
            pytest.raises(SettingsError, match="Failed to write settings"),
        ):
            save_settings(SweepSettings(delete_before="1d"), path)

        assert list(tmp_path.iterdir()) == []
