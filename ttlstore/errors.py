"""Exceptions raised by the store."""
from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a caller passes a negative duration or a missing value."""


class InvariantViolation(AssertionError):
    """Raised when the store's own bookkeeping touches a terminated entry.

    This is never a user error: it means an entry was kept or used after it
    was finalised, and the operation must not continue.
    """


__all__ = ["InvalidArgument", "InvariantViolation"]
