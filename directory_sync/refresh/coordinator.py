"""Refresh coordinator: cache-first, cooldown-aware fetch orchestration.

``smart_refresh`` serves a fresh, non-empty cache without touching the
remote; otherwise it defers to the cooldown and finally to
``force_refresh``. ``force_refresh`` skips the freshness check but never the
cooldown. A failed fetch falls back to whatever the cache holds, expired or
not. Neither method raises: every path ends in one ``RefreshOutcome``.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, List, Optional

from directory_sync.refresh.cooldown import CooldownTracker, SyncClass
from directory_sync.refresh.outcome import CooldownOutcome, ErrorOutcome, RefreshOutcome, SuccessOutcome
from directory_sync.sources.base import RemoteSource
from directory_sync.utils.logger import get_logger

if TYPE_CHECKING:
    from directory_sync.cache.store import LocalCacheStore

log = get_logger(__name__)


class RefreshCoordinator:
    def __init__(
        self,
        cache: "LocalCacheStore",
        cooldown: CooldownTracker,
        source: RemoteSource,
        *,
        sync_class: SyncClass = SyncClass.SCHOOLS,
        record_failed_attempts: bool = False,
    ) -> None:
        self.cache = cache
        self.cooldown = cooldown
        self.source = source
        self.sync_class = SyncClass(sync_class)
        # When true a failed fetch also starts the cooldown window.
        self.record_failed_attempts = record_failed_attempts
        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Task] = None

    @property
    def in_progress(self) -> bool:
        return self._lock.locked() or (self._pending is not None and not self._pending.done())

    def is_sync_allowed(self) -> bool:
        return self.cooldown.can_sync(self.sync_class)

    def remaining_cooldown_minutes(self) -> int:
        return self.cooldown.minutes_remaining(self.sync_class)

    async def smart_refresh(self) -> RefreshOutcome:
        async with self._lock:
            await self._wait_for_pending()
            try:
                if not self.cache.is_expired():
                    cached = await asyncio.to_thread(self.cache.load)
                    if cached:
                        log.info(f"Serving {len(cached)} {self.sync_class.value} records from fresh cache")
                        return SuccessOutcome(
                            records=tuple(cached),
                            served_from_cache=True,
                            message="Loaded from cache",
                        )

                if not self.cooldown.can_sync(self.sync_class):
                    return self._cooldown_outcome()
            except Exception as exc:  # noqa: BLE001
                log.error(f"Smart refresh of {self.sync_class.value} failed: {exc}")
                return ErrorOutcome(message=f"Smart refresh failed: {exc}", error=exc)

            return await self._fetch()

    async def force_refresh(self) -> RefreshOutcome:
        async with self._lock:
            await self._wait_for_pending()
            try:
                if not self.cooldown.can_sync(self.sync_class):
                    return self._cooldown_outcome()
            except Exception as exc:  # noqa: BLE001
                log.error(f"Cooldown check for {self.sync_class.value} failed: {exc}")
                return ErrorOutcome(message=f"Refresh failed: {exc}", error=exc)

            return await self._fetch()

    def _cooldown_outcome(self) -> CooldownOutcome:
        minutes = self.cooldown.minutes_remaining(self.sync_class)
        log.info(f"{self.sync_class.value} sync in cooldown ({minutes} min remaining)")
        return CooldownOutcome(
            minutes_remaining=minutes,
            message=f"Sync paused for {self.cooldown.cooldown_minutes} minutes. Try again in {minutes} min.",
        )

    async def _wait_for_pending(self) -> None:
        # A previous caller was cancelled while its fetch kept running.
        pending = self._pending
        if pending is not None and not pending.done():
            log.debug(f"Waiting for in-flight {self.sync_class.value} fetch to finish")
            await asyncio.wait([pending])

    async def _fetch(self) -> RefreshOutcome:
        # Shielded so cache write and cooldown stamp land together even if the caller goes away.
        self._pending = asyncio.ensure_future(self._fetch_and_persist())
        return await asyncio.shield(self._pending)

    async def _fetch_and_persist(self) -> RefreshOutcome:
        start = time.perf_counter()
        try:
            records: List = list(await self.source.fetch_all())
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Remote fetch of {self.sync_class.value} failed: {exc}")
            return await self._fallback(exc)

        try:
            await asyncio.to_thread(self.cache.save, records)
            self.cooldown.record_attempt(self.sync_class)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Persisting {self.sync_class.value} records failed: {exc}")

        log.info(
            f"Synced {len(records)} {self.sync_class.value} records from remote in {time.perf_counter() - start:.2f}s"
        )
        return SuccessOutcome(records=tuple(records), served_from_cache=False, message="Data synchronized")

    async def _fallback(self, exc: Exception) -> RefreshOutcome:
        try:
            if self.record_failed_attempts:
                self.cooldown.record_attempt(self.sync_class)
            cached = await asyncio.to_thread(self.cache.load)
        except Exception as cache_exc:  # noqa: BLE001
            log.error(f"Cache fallback for {self.sync_class.value} failed: {cache_exc}")
            cached = []

        if cached:
            log.info(f"Falling back to {len(cached)} cached {self.sync_class.value} records")
            return SuccessOutcome(
                records=tuple(cached),
                served_from_cache=True,
                message="Remote unavailable, loaded from cache",
            )

        return ErrorOutcome(message=f"Failed to load data: {exc}", error=exc)


__all__ = ["RefreshCoordinator"]
