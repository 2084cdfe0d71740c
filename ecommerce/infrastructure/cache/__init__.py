"""Cache store backends."""

from .stores import CacheStore, MemoryCacheStore, RedisCacheStore

__all__ = ["CacheStore", "MemoryCacheStore", "RedisCacheStore"]
