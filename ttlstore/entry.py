"""A single cached value together with its expiry bookkeeping."""
from __future__ import annotations

import time
from typing import Any, Callable, Generic, Optional, TypeVar

from .durations import NANOS_PER_SECOND, require_non_negative, to_nanos
from .errors import InvalidArgument, InvariantViolation


V = TypeVar("V")

Clock = Callable[[], int]
ExpiryCallback = Callable[..., Any]


class Entry(Generic[V]):
    """Value wrapper owned by a :class:`~ttlstore.store.TTLStore`.

    The entry only answers whether it is expired; it never terminates itself.
    The store decides when an entry dies so that the expiry callback, the
    removal from the mapping and the termination happen as one step.
    """

    __slots__ = ("_value", "_birth", "_lifespan", "_callback", "_terminated", "_clock")

    def __init__(
        self,
        value: V,
        lifespan: float,
        callback: Optional[ExpiryCallback] = None,
        *,
        clock: Clock = time.monotonic_ns,
    ) -> None:
        self._clock = clock
        self._birth = clock()
        if value is None:
            raise InvariantViolation("Entry value is None")
        if lifespan < 0:
            raise InvariantViolation(f"Entry lifespan is negative: {lifespan}")
        self._value: Optional[V] = value
        self._lifespan = to_nanos(lifespan)
        self._callback = callback
        self._terminated = False

    def __repr__(self) -> str:
        if self._terminated:
            return "Entry(<terminated>)"
        return f"Entry(value={self._value!r}, lifespan_ns={self._lifespan})"

    def _check_alive(self) -> None:
        if self._terminated:
            raise InvariantViolation("Entry already terminated")

    def _elapsed(self) -> int:
        return self._clock() - self._birth

    @property
    def terminated(self) -> bool:
        return self._terminated

    @property
    def callback(self) -> Optional[ExpiryCallback]:
        return self._callback

    def is_expired(self) -> bool:
        self._check_alive()
        return self._elapsed() > self._lifespan

    def get(self) -> V:
        self._check_alive()
        return self._value  # type: ignore[return-value]

    def update(self, new_value: V) -> None:
        self._check_alive()
        if new_value is None:
            raise InvalidArgument("New value must not be None")
        self._value = new_value

    def extend(self, delta: float) -> None:
        """Lengthen or shorten the lifespan. A net negative lifespan is allowed."""

        self._check_alive()
        self._lifespan += to_nanos(delta)

    def reset_remaining(self, new_remaining: float) -> None:
        """Make the entry live exactly ``new_remaining`` seconds from now."""

        self._check_alive()
        require_non_negative(new_remaining, "remaining lifespan")
        self._lifespan = self._elapsed() + to_nanos(new_remaining)

    def remaining_seconds(self) -> int:
        self._check_alive()
        return (self._birth + self._lifespan - self._clock()) // NANOS_PER_SECOND

    def age_seconds(self) -> int:
        self._check_alive()
        return round(self._elapsed() / NANOS_PER_SECOND)

    def terminate(self) -> None:
        self._check_alive()
        self._value = None
        self._callback = None
        self._lifespan = -1
        self._terminated = True


__all__ = ["Clock", "Entry", "ExpiryCallback"]
