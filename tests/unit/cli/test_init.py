"""Unit tests for init command."""

import tomllib
from pathlib import Path

from stalesweep.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestInitCommand:
    """Tests for the init command."""

    def test_writes_settings(self, tmp_path: Path) -> None:
        """Options are written to the [sweep] table."""
        target = tmp_path / "downloads"
        target.mkdir()
        output = tmp_path / "config.toml"

        result = runner.invoke(
            app,
            [
                "init",
                "-d",
                "30d",
                "-t",
                str(target),
                "--file-date-types",
                "m,a",
                "--delete-empty-folders",
                "--age-policy",
                "any",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0
        assert "Settings written to" in result.output
        data = tomllib.loads(output.read_text())["sweep"]
        assert data["delete_before"] == "30d"
        assert data["target_folders"] == [str(target.resolve())]
        assert data["file_date_types"] == ["accessed", "modified"]
        assert data["delete_empty_folders"] is True
        assert data["age_policy"] == "any"

    def test_default_location(self, tmp_path: Path, monkeypatch) -> None:
        """Without --output the XDG config directory is used."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        result = runner.invoke(app, ["init", "-d", "1w", "-t", str(tmp_path)])

        assert result.exit_code == 0
        assert (tmp_path / "stalesweep" / "config.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path) -> None:
        """An existing file is kept unless --force is given."""
        output = tmp_path / "config.toml"
        output.write_text("# mine\n")

        result = runner.invoke(app, ["init", "-d", "30d", "-t", str(tmp_path), "-o", str(output)])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert output.read_text() == "# mine\n"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        """--force replaces an existing file."""
        output = tmp_path / "config.toml"
        output.write_text("# mine\n")

        result = runner.invoke(
            app, ["init", "-d", "30d", "-t", str(tmp_path), "-o", str(output), "--force"]
        )

        assert result.exit_code == 0
        assert "delete_before" in output.read_text()

    def test_invalid_duration(self, tmp_path: Path) -> None:
        """Invalid durations are rejected and nothing is written."""
        output = tmp_path / "config.toml"

        result = runner.invoke(app, ["init", "-d", "soon", "-t", str(tmp_path), "-o", str(output)])

        assert result.exit_code == 1
        assert not output.exists()
