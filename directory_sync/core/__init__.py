"""Core building blocks shared by the cache, cooldown and refresh layers."""

from .clock import SystemClock
from .errors import ConfigError, PersistenceError, RemoteFetchError, SyncError
from .kv_store import JsonFileStore

__all__ = [
    "SystemClock",
    "SyncError",
    "RemoteFetchError",
    "PersistenceError",
    "ConfigError",
    "JsonFileStore",
]
