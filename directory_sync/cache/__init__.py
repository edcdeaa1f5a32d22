from .store import CacheInfo, LocalCacheStore

__all__ = ["CacheInfo", "LocalCacheStore"]
