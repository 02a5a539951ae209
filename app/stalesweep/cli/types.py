"""Shared option parsing for CLI commands.

Helpers that turn raw option values (which may be repeated and/or
comma-separated) into the types the engine expects.
"""

from collections.abc import Iterable
from enum import Enum

from stalesweep.errors import ConfigurationError
from stalesweep.models.entry import TimestampKind


class OutputFormat(str, Enum):
    """Output format options for cleanup results."""

    TABLE = "table"
    JSON = "json"


def split_csv(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated and comma-separated option values.

    Empty items are dropped, so ``["a,b", "c,"]`` becomes ``["a", "b", "c"]``.
    """
    items: list[str] = []
    for value in values or ():
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def parse_timestamp_kinds(values: Iterable[str]) -> frozenset[TimestampKind]:
    """Parse file date types such as ``created,modified`` or ``c,m``.

    Raises:
        ConfigurationError: If a value names no known timestamp kind or none is given.
    """
    kinds: set[TimestampKind] = set()
    for value in split_csv(values):
        try:
            kinds.add(TimestampKind.parse(value))
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    if not kinds:
        raise ConfigurationError("At least one file date type must be provided")
    return frozenset(kinds)
