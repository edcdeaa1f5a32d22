"""Cooldown logic to prevent hammering the remote source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from directory_sync.core.clock import MILLIS_PER_MINUTE, SystemClock
from directory_sync.core.errors import PersistenceError
from directory_sync.core.kv_store import JsonFileStore
from directory_sync.refresh.staleness import elapsed_millis, minutes_since
from directory_sync.utils.logger import get_logger

log = get_logger(__name__)

COOLDOWN_MINUTES = 30
COOLDOWN_MILLIS = COOLDOWN_MINUTES * MILLIS_PER_MINUTE


class SyncClass(str, Enum):
    SCHOOLS = "schools"
    EMERGENCY = "emergency"

    @property
    def storage_key(self) -> str:
        return f"last_{self.value}_sync_time"


@dataclass(frozen=True, slots=True)
class CooldownStatus:
    can_sync: bool
    minutes_remaining: int


class CooldownTracker:
    """Track the last initiated remote fetch per sync-class.

    Each class is throttled independently. An unreadable state file fails
    closed: the class is treated as if it had just been attempted.
    """

    def __init__(
        self,
        store: JsonFileStore,
        *,
        clock: Optional[SystemClock] = None,
        cooldown_millis: int = COOLDOWN_MILLIS,
    ) -> None:
        if cooldown_millis <= 0:
            raise ValueError("cooldown_millis must be positive")
        self.store = store
        self.clock = clock or SystemClock()
        self.cooldown_millis = cooldown_millis

    @property
    def cooldown_minutes(self) -> int:
        return self.cooldown_millis // MILLIS_PER_MINUTE

    def _last_attempt(self, sync_class: SyncClass, now_ms: int) -> int:
        try:
            return self.store.get_int(SyncClass(sync_class).storage_key, 0)
        except PersistenceError as exc:
            log.warning(f"Cooldown state unreadable for {SyncClass(sync_class).value}, blocking sync: {exc}")
            return now_ms

    def can_sync(self, sync_class: SyncClass) -> bool:
        now_ms = self.clock.now_millis()
        last_attempt = self._last_attempt(sync_class, now_ms)
        if last_attempt == 0:
            return True
        return elapsed_millis(last_attempt, now_ms) >= self.cooldown_millis

    def record_attempt(self, sync_class: SyncClass) -> None:
        sync_class = SyncClass(sync_class)
        try:
            self.store.write({sync_class.storage_key: self.clock.now_millis()})
        except PersistenceError as exc:
            log.error(f"Failed to record {sync_class.value} sync attempt: {exc}")

    def minutes_remaining(self, sync_class: SyncClass) -> int:
        now_ms = self.clock.now_millis()
        last_attempt = self._last_attempt(sync_class, now_ms)
        if last_attempt == 0:
            return 0
        return max(0, self.cooldown_minutes - minutes_since(last_attempt, now_ms))

    def reset(self, sync_classes: Optional[Iterable[SyncClass]] = None) -> bool:
        """Forget recorded attempts for the given classes (all when omitted).

        Returns False when the state file could not be rewritten.
        """
        targets = list(SyncClass) if sync_classes is None else [SyncClass(item) for item in sync_classes]
        try:
            self.store.remove(*(item.storage_key for item in targets))
        except PersistenceError as exc:
            log.error(f"Failed to reset cooldown: {exc}")
            return False
        log.info(f"Cooldown reset for {', '.join(item.value for item in targets)}")
        return True

    def status(self) -> Dict[SyncClass, CooldownStatus]:
        return {
            item: CooldownStatus(
                can_sync=self.can_sync(item),
                minutes_remaining=self.minutes_remaining(item),
            )
            for item in SyncClass
        }


__all__ = [
    "COOLDOWN_MINUTES",
    "COOLDOWN_MILLIS",
    "SyncClass",
    "CooldownStatus",
    "CooldownTracker",
]
