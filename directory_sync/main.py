"""Command-line entry point for inspecting and driving directory sync.

Examples:
    directory-sync status
    directory-sync refresh
    directory-sync --dataset emergency refresh --force
    directory-sync reset-cooldown --class schools
"""

from __future__ import annotations

import argparse
import asyncio
import copy
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from directory_sync.cache.store import LocalCacheStore
from directory_sync.core.clock import MILLIS_PER_HOUR, MILLIS_PER_MINUTE, SystemClock
from directory_sync.core.config import SyncSettings, get_sync_settings
from directory_sync.core.errors import ConfigError
from directory_sync.core.kv_store import JsonFileStore
from directory_sync.models.contact import EmergencyContact
from directory_sync.models.school import SchoolRecord
from directory_sync.refresh.cooldown import CooldownTracker, SyncClass
from directory_sync.refresh.coordinator import RefreshCoordinator
from directory_sync.refresh.outcome import CooldownOutcome, ErrorOutcome, RefreshOutcome, SuccessOutcome
from directory_sync.sources.base import RemoteSource
from directory_sync.sources.firebase import FirebaseRestSource
from directory_sync.utils.logger import get_logger, setup_logging

RECORD_TYPES: Dict[SyncClass, Any] = {
    SyncClass.SCHOOLS: SchoolRecord,
    SyncClass.EMERGENCY: EmergencyContact,
}


def build_cache_store(
    settings: SyncSettings,
    sync_class: SyncClass,
    clock: Optional[SystemClock] = None,
) -> LocalCacheStore:
    decoder: Callable[[Mapping[str, Any]], Any] = RECORD_TYPES[sync_class].from_dict
    return LocalCacheStore(
        JsonFileStore(settings.cache_path(sync_class.value)),
        clock=clock,
        ttl_millis=int(settings.cache_ttl_hours * MILLIS_PER_HOUR),
        decoder=decoder,
    )


def build_cooldown_tracker(settings: SyncSettings, clock: Optional[SystemClock] = None) -> CooldownTracker:
    return CooldownTracker(
        JsonFileStore(settings.cooldown_path),
        clock=clock,
        cooldown_millis=settings.cooldown_minutes * MILLIS_PER_MINUTE,
    )


def build_source(settings: SyncSettings, sync_class: SyncClass) -> FirebaseRestSource:
    settings.validate(require_remote=True)
    return FirebaseRestSource(
        settings.remote_url,
        settings.remote_path(sync_class.value),
        record_factory=RECORD_TYPES[sync_class].from_snapshot,
        auth_token=settings.auth_token,
        timeout=settings.http_timeout,
        max_retries=settings.http_max_retries,
    )


def build_coordinator(
    settings: SyncSettings,
    sync_class: SyncClass,
    source: RemoteSource,
    clock: Optional[SystemClock] = None,
) -> RefreshCoordinator:
    return RefreshCoordinator(
        build_cache_store(settings, sync_class, clock),
        build_cooldown_tracker(settings, clock),
        source,
        sync_class=sync_class,
        record_failed_attempts=settings.record_failed_attempts,
    )


def format_outcome(outcome: RefreshOutcome) -> str:
    if isinstance(outcome, SuccessOutcome):
        origin = "cache" if outcome.served_from_cache else "remote"
        return f"OK: {len(outcome.records)} records from {origin}"
    if isinstance(outcome, CooldownOutcome):
        return f"COOLDOWN: {outcome.minutes_remaining} min remaining"
    return f"ERROR: {outcome.message}"


async def _run_refresh(settings: SyncSettings, sync_class: SyncClass, force: bool) -> RefreshOutcome:
    async with build_source(settings, sync_class) as source:
        coordinator = build_coordinator(settings, sync_class, source)
        if force:
            return await coordinator.force_refresh()
        return await coordinator.smart_refresh()


def cmd_status(settings: SyncSettings, sync_class: SyncClass, args: argparse.Namespace) -> int:
    info = build_cache_store(settings, sync_class).info()
    print(f"Dataset: {sync_class.value}")
    print(f"  Cached data: {'yes' if info.has_data else 'no'}")
    print(f"  Last synced: {info.age}")
    print(f"  Expired: {'yes' if info.is_expired else 'no'}")
    print("Cooldown:")
    for item, status in build_cooldown_tracker(settings).status().items():
        state = "allowed" if status.can_sync else f"cooldown ({status.minutes_remaining} min remaining)"
        print(f"  {item.value}: {state}")
    return 0


def cmd_refresh(settings: SyncSettings, sync_class: SyncClass, args: argparse.Namespace) -> int:
    try:
        outcome = asyncio.run(_run_refresh(settings, sync_class, args.force))
    except ConfigError as exc:
        print(f"ERROR: {exc.message}")
        return 1
    print(format_outcome(outcome))
    return 1 if isinstance(outcome, ErrorOutcome) else 0


def cmd_reset_cooldown(settings: SyncSettings, sync_class: SyncClass, args: argparse.Namespace) -> int:
    classes = [SyncClass(item) for item in args.classes] if args.classes else None
    if not build_cooldown_tracker(settings).reset(classes):
        print("ERROR: cooldown state could not be reset")
        return 1
    print("Cooldown reset")
    return 0


def cmd_clear_cache(settings: SyncSettings, sync_class: SyncClass, args: argparse.Namespace) -> int:
    build_cache_store(settings, sync_class).clear()
    print(f"Cache cleared for {sync_class.value}")
    return 0


def cmd_expire_cache(settings: SyncSettings, sync_class: SyncClass, args: argparse.Namespace) -> int:
    build_cache_store(settings, sync_class).expire()
    print(f"Cache expired for {sync_class.value}")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Directory cache-first sync")
    parser.add_argument(
        "--dataset",
        choices=[item.value for item in SyncClass],
        default=SyncClass.SCHOOLS.value,
        help="Data set (sync-class) to operate on.",
    )
    parser.add_argument("--data-dir", type=Path, help="Override the directory holding cache and cooldown files.")
    parser.add_argument("--log-level", help="Override the configured log level.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Show cache freshness and cooldown state.")
    status.set_defaults(handler=cmd_status)

    refresh = subparsers.add_parser("refresh", help="Refresh from cache or remote.")
    refresh.add_argument("--force", action="store_true", help="Bypass cache freshness (cooldown still applies).")
    refresh.set_defaults(handler=cmd_refresh)

    reset = subparsers.add_parser("reset-cooldown", help="Clear recorded sync attempts.")
    reset.add_argument(
        "--class",
        dest="classes",
        action="append",
        choices=[item.value for item in SyncClass],
        help="Sync-class to reset. Repeat for multiple; defaults to all.",
    )
    reset.set_defaults(handler=cmd_reset_cooldown)

    clear = subparsers.add_parser("clear-cache", help="Delete the cached records.")
    clear.set_defaults(handler=cmd_clear_cache)

    expire = subparsers.add_parser("expire-cache", help="Mark the cache as expired, keeping its records.")
    expire.set_defaults(handler=cmd_expire_cache)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    if args.log_level:
        setup_logging(level=args.log_level)
    log = get_logger(__name__)

    try:
        settings = get_sync_settings()
        if args.data_dir is not None:
            # The cached instance is shared; override on a copy.
            settings = copy.copy(settings)
            settings.data_dir = args.data_dir
        settings.validate()
    except ConfigError as exc:
        log.error(f"Invalid configuration: {exc.message}")
        return 1

    return args.handler(settings, SyncClass(args.dataset), args)


if __name__ == "__main__":
    raise SystemExit(main())
