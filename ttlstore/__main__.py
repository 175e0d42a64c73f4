"""Small demo for running with ``python -m ttlstore``.

Two values are cached for one and two seconds with an :class:`ExpiryLogger`
attached, and the store size is printed as they expire.  Nothing is logged
until ``size()`` touches the store, which is the whole point of lazy expiry.

Set ``LOG_LEVEL=DEBUG`` to also see the store's own termination messages and
``TTLSTORE_CONFIG_PATH`` to build the store from another YAML file.
"""
from __future__ import annotations

import logging
import os
import sys
import time

from .config import load_settings
from .expiry_log import ExpiryLogger
from .store import TTLStore


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def main() -> None:
    """Cache two values and watch them expire."""

    _configure_logging()
    store: TTLStore[str, int] = TTLStore.from_settings(load_settings())
    on_expiry = ExpiryLogger()

    store.cache("first", 1, 1, on_expiry)
    store.cache("second", 2, 2, on_expiry)

    print(f"size={store.size()}")
    time.sleep(1.1)
    print(f"size={store.size()}")
    time.sleep(1.0)
    print(f"size={store.size()}")
    print(f"expired={on_expiry.count}")


if __name__ == "__main__":
    main()
