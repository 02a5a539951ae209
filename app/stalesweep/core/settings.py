"""Settings file I/O.

The settings file provides defaults for ``stalesweep clean`` options so
that a recurring cleanup can be run without repeating every flag::

    [sweep]
    delete_before = "30d"
    target_folders = ["~/Downloads"]
    file_date_types = ["modified"]
    delete_empty_folders = true

Options given on the command line take precedence over the file.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stalesweep.core.paths import get_settings_path
from stalesweep.errors import SettingsError
from stalesweep.models.config import AgePolicy

SETTINGS_TABLE = "sweep"


class SweepSettings(BaseModel):
    """Defaults for the clean command, all optional.

    Attributes mirror the command-line options of ``stalesweep clean``.
    Relative paths are interpreted relative to the settings file.
    """

    model_config = ConfigDict(extra="forbid")

    delete_before: Annotated[str | None, Field(description="Minimum file age")] = None
    target_folders: Annotated[list[str], Field(default_factory=list, description="Target folders")]
    file_date_types: Annotated[list[str] | None, Field(description="Timestamp kinds")] = None
    ignored_paths: Annotated[list[str], Field(default_factory=list, description="Ignored paths")]
    min_depth: Annotated[int | None, Field(ge=0)] = None
    max_depth: Annotated[int | None, Field(ge=0)] = None
    delete_empty_folders: bool | None = None
    follow_symbolic_links: bool | None = None
    dry_run: bool | None = None
    age_policy: AgePolicy | None = None
    workers: Annotated[int | None, Field(ge=1)] = None

    def with_base_dir(self, base: Path) -> "SweepSettings":
        """Return a copy with relative paths anchored at ``base``."""

        def anchor(raw: str) -> str:
            path = Path(raw).expanduser()
            return str(path if path.is_absolute() else base / path)

        return self.model_copy(
            update={
                "target_folders": [anchor(p) for p in self.target_folders],
                "ignored_paths": [anchor(p) for p in self.ignored_paths],
            }
        )


def load_settings(path: Path | None = None) -> SweepSettings:
    """Load settings from a TOML file.

    When no path is given, the default settings file is used if it
    exists and empty settings are returned otherwise. An explicitly
    given path must exist.

    Args:
        path: Settings file to load, or None for the default location.

    Returns:
        Validated SweepSettings.

    Raises:
        SettingsError: If the file is missing (explicit path only),
            unreadable, not valid TOML, or does not match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        if path is not None:
            raise SettingsError(f"Settings file not found: {settings_path}")
        return SweepSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings {settings_path}: {e}") from e

    section = data.get(SETTINGS_TABLE, {})
    if not isinstance(section, dict):
        raise SettingsError(f"[{SETTINGS_TABLE}] in {settings_path} must be a table")

    try:
        settings = SweepSettings.model_validate(section)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e

    return settings.with_base_dir(settings_path.resolve().parent)


def save_settings(settings: SweepSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically through a temporary file in the
    same directory. Unset options are omitted.

    Args:
        settings: Settings to save.
        path: Destination. Defaults to the default settings file.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data: dict[str, Any] = {
        SETTINGS_TABLE: settings.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    }

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, settings_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
