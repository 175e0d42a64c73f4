"""Expiry reporting callback.

:class:`ExpiryLogger` is a ready-made expiry callback.  Plug it in as the
store's default callback (or pass it to ``cache()``) and every entry the store
finds expired is emitted as one structured JSON record through the standard
``logging`` module.  Values are rendered with ``repr`` unless a custom
``render`` function is supplied, so arbitrary objects never break the log line.
"""
from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Any, Callable, Dict, Optional


_LOGGER = logging.getLogger("ttlstore.expiry")


class ExpiryLogger:
    """Expiry callback that writes one ``entry_expired`` log record per call.

    The instance keeps a running ``count`` of the expiries it has seen, which
    is handy for tests and for simple dashboards.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        level: int = logging.INFO,
        render: Callable[[Any], Any] = repr,
    ) -> None:
        self._logger = logger or _LOGGER
        self._level = level
        self._render = render
        self.count = 0

    def __call__(self, value: Any, store: Any, total_lifetime: int, callback: Any) -> None:
        self.count += 1
        payload: Dict[str, Any] = {
            "value": self._render(value),
            "lifetime_sec": total_lifetime,
            "store_id": id(store),
            "logged_at": datetime.now(timezone.utc).isoformat(),
        }
        # ``ensure_ascii=False`` keeps non-latin values readable, ``sort_keys``
        # keeps the output stable for diffing.
        message = json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str)
        self._logger.log(self._level, "entry_expired %s", message)


__all__ = ["ExpiryLogger"]
