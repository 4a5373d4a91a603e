"""Utility functions."""

from .datetime import from_epoch_ms, now_utc, to_epoch_ms
from .truncate import truncate

__all__ = [
    "from_epoch_ms",
    "now_utc",
    "to_epoch_ms",
    "truncate",
]
