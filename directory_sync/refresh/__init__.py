"""Refresh orchestration: staleness, cooldown and the coordinator."""

from .cooldown import COOLDOWN_MILLIS, COOLDOWN_MINUTES, CooldownStatus, CooldownTracker, SyncClass
from .coordinator import RefreshCoordinator
from .outcome import CooldownOutcome, ErrorOutcome, RefreshOutcome, SuccessOutcome
from .staleness import CACHE_TTL_MILLIS, describe_age, is_expired

__all__ = [
    "COOLDOWN_MILLIS",
    "COOLDOWN_MINUTES",
    "CooldownStatus",
    "CooldownTracker",
    "SyncClass",
    "RefreshCoordinator",
    "RefreshOutcome",
    "SuccessOutcome",
    "CooldownOutcome",
    "ErrorOutcome",
    "CACHE_TTL_MILLIS",
    "describe_age",
    "is_expired",
]
