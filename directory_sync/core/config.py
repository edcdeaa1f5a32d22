"""Configuration: shipped YAML defaults overlaid with environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from directory_sync.core.errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.yaml"


class Config:
    _config: Optional[Dict[str, Any]] = None

    @classmethod
    def load(cls, path: Path | str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
        if cls._config is None:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    cls._config = yaml.safe_load(f) or {}
            except FileNotFoundError as exc:
                raise ConfigError(f"Settings file not found: {path}", key=str(path)) from exc
            except yaml.YAMLError as exc:
                raise ConfigError(f"Settings file is not valid YAML: {exc}", key=str(path)) from exc
        return cls._config

    @classmethod
    def get(cls, *keys, default=None):
        cfg = cls.load()
        for key in keys:
            if not isinstance(cfg, dict):
                return default
            cfg = cfg.get(key)
        return cfg if cfg is not None else default

    @classmethod
    def reset(cls) -> None:
        cls._config = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: Any, cast) -> Any:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}", key=name) from exc


class SyncSettings:
    """Effective runtime settings for the sync subsystem."""

    def __init__(self) -> None:
        self.remote_url: str = os.getenv("SYNC_REMOTE_URL") or Config.get("remote", "base_url", default="")
        self.auth_token: str | None = os.getenv("SYNC_AUTH_TOKEN") or None
        self.remote_paths: Dict[str, str] = dict(Config.get("remote", "paths", default={}))
        self.http_timeout: float = _env_number(
            "SYNC_HTTP_TIMEOUT", float(Config.get("remote", "timeout_seconds", default=15.0)), float
        )
        self.http_max_retries: int = _env_number(
            "SYNC_HTTP_MAX_RETRIES", int(Config.get("remote", "max_retries", default=2)), int
        )
        self.data_dir: Path = Path(os.getenv("SYNC_DATA_DIR") or Config.get("storage", "data_dir", default="data/sync"))
        self.cache_ttl_hours: float = _env_number(
            "SYNC_CACHE_TTL_HOURS", float(Config.get("sync", "cache_ttl_hours", default=24)), float
        )
        self.cooldown_minutes: int = _env_number(
            "SYNC_COOLDOWN_MINUTES", int(Config.get("sync", "cooldown_minutes", default=30)), int
        )
        self.record_failed_attempts: bool = _env_bool(
            "SYNC_RECORD_FAILED_ATTEMPTS", bool(Config.get("sync", "record_failed_attempts", default=False))
        )

    def remote_path(self, sync_class: str) -> str:
        return self.remote_paths.get(sync_class, sync_class)

    def cache_path(self, sync_class: str) -> Path:
        return self.data_dir / f"{sync_class}_cache.json"

    @property
    def cooldown_path(self) -> Path:
        return self.data_dir / "sync_cooldown.json"

    def validate(self, *, require_remote: bool = False) -> None:
        if self.cache_ttl_hours <= 0:
            raise ConfigError("cache_ttl_hours must be positive", key="cache_ttl_hours", section="sync")
        if self.cooldown_minutes <= 0:
            raise ConfigError("cooldown_minutes must be positive", key="cooldown_minutes", section="sync")
        if self.http_timeout < 0:
            raise ConfigError("timeout_seconds must not be negative", key="timeout_seconds", section="remote")
        if self.http_max_retries < 1:
            raise ConfigError("max_retries must be at least 1", key="max_retries", section="remote")
        if require_remote and not self.remote_url:
            raise ConfigError("A remote base URL is required (SYNC_REMOTE_URL)", key="base_url", section="remote")


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """Return cached sync settings instance."""

    return SyncSettings()


__all__ = ["Config", "SyncSettings", "get_sync_settings", "DEFAULT_CONFIG_PATH"]
