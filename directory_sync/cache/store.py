"""Local persisted cache of the most recent full record set."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from directory_sync.core.clock import MILLIS_PER_HOUR, SystemClock
from directory_sync.core.errors import PersistenceError
from directory_sync.core.kv_store import JsonFileStore
from directory_sync.models.school import SchoolRecord
from directory_sync.refresh.staleness import CACHE_TTL_MILLIS, describe_age, is_expired
from directory_sync.utils.logger import get_logger

log = get_logger(__name__)

KEY_RECORDS = "records_cache"
KEY_LAST_SYNC_TIME = "last_sync_time"


@dataclass(frozen=True, slots=True)
class CacheInfo:
    has_data: bool
    last_synced: int
    is_expired: bool
    age: str = "never"


class LocalCacheStore:
    """Persist the last fetched record set together with its sync timestamp.

    ``save`` writes the serialized records and the timestamp in one atomic
    replace. None of the operations raise on I/O or decode failures: a failed
    save leaves the previous entry untouched and an unreadable entry loads as
    an empty list.
    """

    def __init__(
        self,
        store: JsonFileStore,
        *,
        clock: Optional[SystemClock] = None,
        ttl_millis: int = CACHE_TTL_MILLIS,
        decoder: Callable[[Mapping[str, Any]], Any] = SchoolRecord.from_dict,
    ) -> None:
        if ttl_millis <= 0:
            raise ValueError("ttl_millis must be positive")
        self.store = store
        self.clock = clock or SystemClock()
        self.ttl_millis = ttl_millis
        self.decoder = decoder

    def save(self, records: Sequence[Any]) -> bool:
        try:
            payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
            self.store.write({KEY_RECORDS: payload, KEY_LAST_SYNC_TIME: self.clock.now_millis()})
        except (PersistenceError, TypeError, ValueError, AttributeError) as exc:
            log.error(f"Failed to cache {len(records)} records: {exc}")
            return False

        log.info(f"Cached {len(records)} records")
        return True

    def load(self) -> List[Any]:
        try:
            raw = self.store.get_str(KEY_RECORDS)
            if not raw:
                return []
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("cached payload is not a list")
            records = [self.decoder(item) for item in items]
        except (PersistenceError, ValueError, TypeError, AttributeError) as exc:
            log.warning(f"Failed to load cached records: {exc}")
            return []

        log.debug(f"Loaded {len(records)} records from cache")
        return records

    def last_sync_millis(self) -> int:
        try:
            return self.store.get_int(KEY_LAST_SYNC_TIME, 0)
        except PersistenceError as exc:
            log.warning(f"Cache timestamp unreadable, treating as never synced: {exc}")
            return 0

    def is_expired(self) -> bool:
        return is_expired(self.last_sync_millis(), self.clock.now_millis(), self.ttl_millis)

    def info(self) -> CacheInfo:
        last_sync = self.last_sync_millis()
        try:
            has_data = bool(self.store.get_str(KEY_RECORDS))
        except PersistenceError:
            has_data = False

        now = self.clock.now_millis()
        return CacheInfo(
            has_data=has_data,
            last_synced=last_sync,
            is_expired=is_expired(last_sync, now, self.ttl_millis),
            age=describe_age(last_sync, now),
        )

    def clear(self) -> None:
        try:
            self.store.clear()
        except PersistenceError as exc:
            log.error(f"Failed to clear cache: {exc}")
            return
        log.info("Cache cleared")

    def expire(self) -> None:
        """Backdate the sync timestamp past the TTL, keeping the records."""
        expired_at = self.clock.now_millis() - self.ttl_millis - MILLIS_PER_HOUR
        try:
            self.store.write({KEY_LAST_SYNC_TIME: max(expired_at, 1)})
        except PersistenceError as exc:
            log.error(f"Failed to expire cache: {exc}")


__all__ = ["CacheInfo", "LocalCacheStore", "KEY_RECORDS", "KEY_LAST_SYNC_TIME"]
