"""
Cache Stores

Key/value backends behind ``CacheManager``. Stores deal only in
serialized payloads; they raise ``CacheStoreUnavailableException`` when
the backend cannot be reached and leave degradation to the manager.
"""

import fnmatch
import logging
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from ...core.config import Settings
from ...core.exceptions import CacheStoreUnavailableException

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 500


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> int: ...

    async def delete_pattern(self, pattern: str) -> int: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


class RedisCacheStore:
    """
    Redis backed store.

    Keys are written with an optional prefix so several deployments can
    share one Redis database; patterns are matched with SCAN.
    """

    def __init__(self, client: Redis, key_prefix: str = ""):
        self._redis = client
        self._key_prefix = key_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCacheStore":
        pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        return cls(Redis(connection_pool=pool), key_prefix=settings.CACHE_KEY_PREFIX)

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(self._make_key(key))
        except RedisError as e:
            raise CacheStoreUnavailableException("get", key=key, original_error=e)

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(self._make_key(key), payload, ex=ttl_seconds)
        except RedisError as e:
            raise CacheStoreUnavailableException("set", key=key, original_error=e)

    async def delete(self, key: str) -> int:
        try:
            return await self._redis.delete(self._make_key(key))
        except RedisError as e:
            raise CacheStoreUnavailableException("delete", key=key, original_error=e)

    async def delete_pattern(self, pattern: str) -> int:
        removed = 0
        batch: List[str] = []
        try:
            async for key in self._redis.scan_iter(match=self._make_key(pattern), count=DELETE_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= DELETE_BATCH_SIZE:
                    removed += await self._redis.delete(*batch)
                    batch = []
            if batch:
                removed += await self._redis.delete(*batch)
        except RedisError as e:
            raise CacheStoreUnavailableException("delete_pattern", key=pattern, original_error=e)
        return removed

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._redis.aclose()


class MemoryCacheStore:
    """
    Process-local store.

    Entries expire passively on read. The clock is injectable so tests can
    move time forward without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return payload

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        self._entries[key] = (payload, self._clock() + ttl_seconds)

    async def delete(self, key: str) -> int:
        return 1 if self._entries.pop(key, None) is not None else 0

    async def delete_pattern(self, pattern: str) -> int:
        matches = [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]
        for key in matches:
            del self._entries[key]
        return len(matches)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        """Keys currently held, expired or not."""
        return list(self._entries)
