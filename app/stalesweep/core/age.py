"""Age evaluation of walked entries.

Decides whether an entry is older than the cutoff instant for the
enabled timestamp kinds. Timestamps are supplied already read; this
module performs no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from stalesweep.errors import TimestampUnavailableError
from stalesweep.models.config import AgePolicy
from stalesweep.models.entry import Timestamps, TimestampKind

# Fixed evaluation order so the reported missing kind is deterministic.
_KIND_ORDER: tuple[TimestampKind, ...] = tuple(TimestampKind)


def is_older_than(
    timestamps: Timestamps,
    enabled_kinds: Iterable[TimestampKind],
    cutoff: datetime,
    policy: AgePolicy = AgePolicy.ALL,
) -> bool:
    """Check whether an entry's timestamps are older than the cutoff.

    With ``AgePolicy.ALL`` every enabled timestamp must be strictly older
    than the cutoff; with ``AgePolicy.ANY`` one is enough. Under either
    policy an enabled timestamp that is unavailable makes the entry
    unevaluable rather than old or young.

    Args:
        timestamps: Timestamps read for the entry.
        enabled_kinds: Timestamp kinds to check (must not be empty).
        cutoff: Cutoff instant.
        policy: How several kinds are combined.

    Returns:
        True if the entry qualifies for deletion.

    Raises:
        TimestampUnavailableError: If an enabled kind has no timestamp.
        ValueError: If no kind is enabled.
    """
    kinds = set(enabled_kinds)
    if not kinds:
        msg = "At least one timestamp kind must be enabled"
        raise ValueError(msg)

    results: list[bool] = []
    for kind in _KIND_ORDER:
        if kind not in kinds:
            continue
        value = timestamps.get(kind)
        if value is None:
            raise TimestampUnavailableError(kind)
        results.append(value < cutoff)

    if policy is AgePolicy.ANY:
        return any(results)
    return all(results)
