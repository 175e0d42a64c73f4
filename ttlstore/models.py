"""Configuration models for the store."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .durations import FIFTEEN_MINUTES


class StoreSettings(BaseModel):
    """Construction-time options of a :class:`~ttlstore.store.TTLStore`."""

    default_lifespan: float = Field(
        FIFTEEN_MINUTES,
        ge=0,
        allow_inf_nan=False,
        description="Lifespan in seconds for values stored with put()",
    )
    serialized: bool = Field(
        True, description="Whether every operation takes the store-wide lock"
    )
    log_expirations: bool = Field(
        False, description="Attach an ExpiryLogger as the default expiry callback"
    )


__all__ = ["StoreSettings"]
