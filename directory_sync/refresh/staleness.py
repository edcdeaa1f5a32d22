"""Utilities for computing data staleness from epoch-millisecond timestamps."""

from __future__ import annotations

from directory_sync.core.clock import MILLIS_PER_HOUR, MILLIS_PER_MINUTE

CACHE_TTL_HOURS = 24
CACHE_TTL_MILLIS = CACHE_TTL_HOURS * MILLIS_PER_HOUR


def elapsed_millis(since_millis: int, now_millis: int) -> int:
    return now_millis - since_millis


def minutes_since(since_millis: int, now_millis: int) -> int:
    """Whole minutes elapsed, truncated toward zero."""
    return int(elapsed_millis(since_millis, now_millis) / MILLIS_PER_MINUTE)


def is_expired(last_sync_millis: int, now_millis: int, ttl_millis: int = CACHE_TTL_MILLIS) -> bool:
    """A zero timestamp means never synced and is always expired; the TTL bound is inclusive."""
    if last_sync_millis == 0:
        return True
    return elapsed_millis(last_sync_millis, now_millis) >= ttl_millis


def describe_age(last_sync_millis: int, now_millis: int) -> str:
    """Human-readable "last synced" label."""

    if last_sync_millis <= 0:
        return "never"

    minutes = minutes_since(last_sync_millis, now_millis)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"

    hours = minutes // 60
    return f"{hours} hour{'s' if hours != 1 else ''} ago"


__all__ = [
    "CACHE_TTL_HOURS",
    "CACHE_TTL_MILLIS",
    "elapsed_millis",
    "minutes_since",
    "is_expired",
    "describe_age",
]
