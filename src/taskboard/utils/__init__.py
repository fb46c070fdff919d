"""Shared helpers."""

from .datetime import from_timestamp, now_timestamp, now_utc, to_timestamp
from .ids import generate_uid

__all__ = [
    "from_timestamp",
    "generate_uid",
    "now_timestamp",
    "now_utc",
    "to_timestamp",
]
