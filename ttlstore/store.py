"""In-memory key/value store whose values expire lazily."""
from __future__ import annotations

from contextlib import nullcontext
import logging
import threading
import time
from typing import (
    Any,
    ContextManager,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Set,
    TypeVar,
    Union,
)

from .durations import FIFTEEN_MINUTES, require_duration, require_non_negative
from .entry import Clock, Entry, ExpiryCallback
from .errors import InvalidArgument
from .expiry_log import ExpiryLogger
from .models import StoreSettings


_LOGGER = logging.getLogger("ttlstore")

K = TypeVar("K")
V = TypeVar("V")
D = TypeVar("D")


class _Missing:
    def __repr__(self) -> str:
        return "<default>"


_DEFAULT: Any = _Missing()


def _require_value(value: Any, name: str = "value") -> None:
    if value is None:
        raise InvalidArgument(f"{name} must not be None")


def _require_callback(callback: Any) -> None:
    if callback is not None and not callable(callback):
        raise InvalidArgument(f"callback must be callable or None, got {callback!r}")


class TTLStore(Generic[K, V]):
    """Mapping whose values are forgotten once their lifespan has elapsed.

    Nothing runs in the background.  A value is only checked when an
    operation touches it (``get``, ``is_alive``, ``size`` and so on); if its
    lifespan has elapsed by then it is removed, its expiry callback is called
    and the operation behaves as if the key was never there.  The guarantee is
    therefore "a query made after the lifespan will not see the value", not
    "the callback fires as soon as the lifespan is over".

    Expiry callbacks are called as ``callback(value, store, total_lifetime,
    callback)`` where ``total_lifetime`` is the entry's age in whole seconds.
    They run synchronously on the thread that discovered the expiry.  In
    serialized mode that thread holds the store lock, which is not
    reentrant: a callback that calls back into the same store deadlocks.

    With ``serialized=False`` no locking is done at all and the store must
    not be shared between threads.
    """

    def __init__(
        self,
        default_lifespan: float = FIFTEEN_MINUTES,
        default_callback: Optional[ExpiryCallback] = None,
        serialized: bool = True,
        *,
        clock: Clock = time.monotonic_ns,
    ) -> None:
        require_non_negative(default_lifespan, "default_lifespan")
        _require_callback(default_callback)
        self._default_lifespan = default_lifespan
        self._default_callback = default_callback
        self._serialized = serialized
        self._clock = clock
        self._lock = threading.Lock()
        self._cache: Dict[K, Entry[V]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: StoreSettings,
        default_callback: Optional[ExpiryCallback] = None,
        *,
        clock: Clock = time.monotonic_ns,
    ) -> "TTLStore[K, V]":
        if default_callback is None and settings.log_expirations:
            default_callback = ExpiryLogger()
        return cls(
            settings.default_lifespan,
            default_callback,
            settings.serialized,
            clock=clock,
        )

    def __repr__(self) -> str:
        return (
            f"TTLStore(default_lifespan={self._default_lifespan}, "
            f"serialized={self._serialized})"
        )

    # -- internals -------------------------------------------------------

    def _guard(self) -> ContextManager[Any]:
        if self._serialized:
            return self._lock
        return nullcontext()

    def _terminate(self, key: K, entry: Entry[V]) -> None:
        """Run the entry's callback, then finalise it. Caller holds the lock."""

        callback = entry.callback
        try:
            if callback is not None:
                value = entry.get()
                age = entry.age_seconds()
                callback(value, self, age, callback)
        finally:
            _LOGGER.debug("Entry for key %r terminated", key)
            entry.terminate()

    @staticmethod
    def _discard(entry: Entry[V]) -> None:
        """Finalise an entry the caller is deleting on purpose."""

        entry.terminate()

    def _resolve(self, key: K) -> Optional[Entry[V]]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._cache[key]
            self._terminate(key, entry)
            return None
        return entry

    def _sweep(self) -> int:
        alive = 0
        for key in list(self._cache):
            # an unserialized callback may already have removed it
            entry = self._cache.get(key)
            if entry is None:
                continue
            if entry.is_expired():
                del self._cache[key]
                self._terminate(key, entry)
            else:
                alive += 1
        return alive

    def _store(
        self,
        key: K,
        value: V,
        lifespan: float,
        callback: Optional[ExpiryCallback],
    ) -> bool:
        _require_value(value)
        require_non_negative(lifespan, "lifespan")
        _require_callback(callback)
        previous = self._resolve(key)
        self._cache[key] = Entry(value, lifespan, callback, clock=self._clock)
        if previous is not None:
            self._discard(previous)
            return False
        return True

    # -- writes ----------------------------------------------------------

    def put(self, key: K, value: V) -> bool:
        """Store ``value`` with the default lifespan and callback.

        Returns ``True`` if ``key`` was new, ``False`` if a live value was
        replaced.  A replaced value is dropped without calling its callback.
        """
        with self._guard():
            return self._store(key, value, self._default_lifespan, self._default_callback)

    def cache(
        self,
        key: K,
        value: V,
        lifespan: float,
        callback: Union[Optional[ExpiryCallback], _Missing] = _DEFAULT,
    ) -> bool:
        """Store ``value`` for ``lifespan`` seconds.

        Leaving out ``callback`` uses the store's default callback; passing
        ``None`` explicitly stores the value without one.
        """
        with self._guard():
            if callback is _DEFAULT:
                callback = self._default_callback
            return self._store(key, value, lifespan, callback)

    def update(self, key: K, new_value: V) -> bool:
        with self._guard():
            _require_value(new_value, "new_value")
            entry = self._resolve(key)
            if entry is None:
                return False
            entry.update(new_value)
            return True

    def extend(self, key: K, delta: float) -> bool:
        """Add ``delta`` seconds (possibly negative) to the key's lifespan."""

        with self._guard():
            require_duration(delta, "delta")
            entry = self._resolve(key)
            if entry is None:
                return False
            entry.extend(delta)
            return True

    def set_remaining_lifespan(self, key: K, new_remaining: float) -> bool:
        """Make the key live exactly ``new_remaining`` more seconds."""

        with self._guard():
            require_non_negative(new_remaining, "new_remaining")
            entry = self._resolve(key)
            if entry is None:
                return False
            entry.reset_remaining(new_remaining)
            return True

    def remove(self, key: K) -> Optional[V]:
        """Forget ``key`` and return its value.

        Explicit removal is not expiry, so the callback is not called.
        """
        with self._guard():
            entry = self._resolve(key)
            if entry is None:
                return None
            del self._cache[key]
            value = entry.get()
            self._discard(entry)
            return value

    def clear(self) -> int:
        """Forget everything and return how many values were still alive.

        Values still alive get their callback called, as their life is ended
        early.  Values that had already expired but were not yet noticed are
        treated as dead already: no callback, not counted.
        """
        with self._guard():
            entries = list(self._cache.items())
            self._cache.clear()
            alive = 0
            error: Optional[BaseException] = None
            for key, entry in entries:
                if entry.is_expired():
                    self._discard(entry)
                    continue
                alive += 1
                try:
                    self._terminate(key, entry)
                except Exception as exc:
                    # keep finalising the rest, report the first failure
                    if error is None:
                        error = exc
            _LOGGER.debug("Cleared store: %d alive, %d stale", alive, len(entries) - alive)
            if error is not None:
                raise error
            return alive

    # -- reads -----------------------------------------------------------

    def get(self, key: K, default: Optional[D] = None) -> Union[V, D, None]:
        with self._guard():
            entry = self._resolve(key)
            if entry is None:
                return default
            return entry.get()

    def is_alive(self, key: K) -> bool:
        with self._guard():
            return self._resolve(key) is not None

    contains_key = is_alive

    def remaining_seconds(self, key: K) -> int:
        """Whole seconds the key has left, rounded down, or ``-1`` if absent."""

        with self._guard():
            entry = self._resolve(key)
            if entry is None:
                return -1
            # the clock may cross the boundary after the expiry check
            return max(0, entry.remaining_seconds())

    def size(self) -> int:
        with self._guard():
            return self._sweep()

    def is_empty(self) -> bool:
        return self.size() == 0

    def keys(self) -> Set[K]:
        with self._guard():
            self._sweep()
            return set(self._cache)

    def values(self) -> List[V]:
        with self._guard():
            self._sweep()
            return [entry.get() for entry in self._cache.values()]

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return self.is_alive(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    # -- defaults --------------------------------------------------------

    @property
    def serialized(self) -> bool:
        return self._serialized

    @property
    def default_lifespan(self) -> float:
        with self._guard():
            return self._default_lifespan

    @default_lifespan.setter
    def default_lifespan(self, lifespan: float) -> None:
        with self._guard():
            self._default_lifespan = require_non_negative(lifespan, "default_lifespan")

    @property
    def default_callback(self) -> Optional[ExpiryCallback]:
        with self._guard():
            return self._default_callback

    @default_callback.setter
    def default_callback(self, callback: Optional[ExpiryCallback]) -> None:
        with self._guard():
            _require_callback(callback)
            self._default_callback = callback


__all__ = ["TTLStore"]
