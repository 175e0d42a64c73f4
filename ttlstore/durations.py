"""Named durations, in seconds, for lifespans passed to the store."""
from __future__ import annotations

import math
from numbers import Real

from .errors import InvalidArgument


ONE_MINUTE = 60
FIVE_MINUTES = ONE_MINUTE * 5
TEN_MINUTES = FIVE_MINUTES * 2
FIFTEEN_MINUTES = FIVE_MINUTES * 3
THIRTY_MINUTES = FIFTEEN_MINUTES * 2
ONE_HOUR = THIRTY_MINUTES * 2
ONE_DAY = ONE_HOUR * 24
ONE_WEEK = ONE_DAY * 7

NANOS_PER_SECOND = 1_000_000_000


def require_duration(seconds: float, name: str = "duration") -> float:
    """Check that ``seconds`` is a finite number of seconds, sign unchecked."""

    # bool is a Real subclass, but a flag is never a duration
    if isinstance(seconds, bool) or not isinstance(seconds, Real):
        raise InvalidArgument(f"{name} must be a number of seconds, got {seconds!r}")
    if not math.isfinite(seconds):
        raise InvalidArgument(f"{name} must be finite, got {seconds!r}")
    return seconds


def require_non_negative(seconds: float, name: str = "duration") -> float:
    require_duration(seconds, name)
    if seconds < 0:
        raise InvalidArgument(f"{name} must not be negative: {seconds}")
    return seconds


def to_nanos(seconds: float) -> int:
    """Convert a duration in seconds to integer nanoseconds."""

    require_duration(seconds)
    return int(round(seconds * NANOS_PER_SECOND))


__all__ = [
    "ONE_MINUTE",
    "FIVE_MINUTES",
    "TEN_MINUTES",
    "FIFTEEN_MINUTES",
    "THIRTY_MINUTES",
    "ONE_HOUR",
    "ONE_DAY",
    "ONE_WEEK",
    "NANOS_PER_SECOND",
    "require_duration",
    "require_non_negative",
    "to_nanos",
]
