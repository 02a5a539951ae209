"""Human-readable duration parsing and formatting.

Durations are written as one or more ``<number><unit>`` groups, either
run together (``1y6M2w3d``) or separated by spaces (``2h 30min``).
Units are case-sensitive where it matters: ``m`` is minutes and ``M``
is months.
"""

import re
from datetime import timedelta

from stalesweep.errors import DurationParseError

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
# Average Gregorian month and Julian year
_MONTH = 2_630_016
_YEAR = 31_557_600

# Unit suffix -> length in seconds
UNIT_SECONDS: dict[str, float] = {
    **dict.fromkeys(("nsec", "ns"), 1e-9),
    **dict.fromkeys(("usec", "us"), 1e-6),
    **dict.fromkeys(("msec", "ms"), 1e-3),
    **dict.fromkeys(("seconds", "second", "secs", "sec", "s"), 1),
    **dict.fromkeys(("minutes", "minute", "mins", "min", "m"), _MINUTE),
    **dict.fromkeys(("hours", "hour", "hrs", "hr", "h"), _HOUR),
    **dict.fromkeys(("days", "day", "d"), _DAY),
    **dict.fromkeys(("weeks", "week", "w"), 7 * _DAY),
    **dict.fromkeys(("months", "month", "M"), _MONTH),
    **dict.fromkeys(("years", "year", "y"), _YEAR),
}

_GROUP_RE = re.compile(r"\s*(\d+)\s*([A-Za-z]+)")

# Largest unit first, for formatting
_FORMAT_UNITS: tuple[tuple[str, int], ...] = (
    ("y", _YEAR),
    ("M", _MONTH),
    ("d", _DAY),
    ("h", _HOUR),
    ("m", _MINUTE),
    ("s", 1),
)


def parse_duration(text: str) -> timedelta:
    """Parse a human-readable duration.

    Args:
        text: Duration text such as "30d", "1y6M2w3d" or "2h 30min".

    Returns:
        The parsed duration.

    Raises:
        DurationParseError: If the text is empty, has an unknown unit,
            or contains a number without a unit.
    """
    stripped = text.strip()
    if not stripped:
        raise DurationParseError("Duration cannot be empty")

    total = 0.0
    pos = 0
    while pos < len(stripped):
        match = _GROUP_RE.match(stripped, pos)
        if match is None:
            rest = stripped[pos:].strip()
            if rest.isdigit():
                raise DurationParseError(f"Missing time unit after '{rest}' in duration '{text}'")
            raise DurationParseError(f"Invalid duration '{text}' near '{rest}'")

        number, unit = match.groups()
        if unit not in UNIT_SECONDS:
            raise DurationParseError(f"Unknown time unit '{unit}' in duration '{text}'")
        try:
            total += int(number) * UNIT_SECONDS[unit]
        except OverflowError as e:
            raise DurationParseError(f"Duration is too large: '{text}'") from e
        pos = match.end()
        while pos < len(stripped) and stripped[pos].isspace():
            pos += 1

    try:
        return timedelta(seconds=total)
    except OverflowError as e:
        raise DurationParseError(f"Duration is too large: '{text}'") from e


def format_duration(duration: timedelta) -> str:
    """Format a duration compactly, e.g. ``1y 6M 3d``.

    Sub-second remainders are dropped. A zero duration formats as ``0s``.
    """
    remaining = int(duration.total_seconds())
    parts: list[str] = []
    for suffix, seconds in _FORMAT_UNITS:
        value, remaining = divmod(remaining, seconds)
        if value:
            parts.append(f"{value}{suffix}")
    return " ".join(parts) or "0s"
