"""
Cache Manager Service

Typed get/set/remove on top of a ``CacheStore``. Values are serialized as
JSON through pydantic ``TypeAdapter``s. The cache is an optimization
only: every store or serialization fault is logged and degrades to a miss
or a skipped write.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any, Optional, Type, TypeVar, Union

from opentelemetry import trace
from pydantic import TypeAdapter, ValidationError

from ...core import metrics
from ...domain.cache.value_objects import TTL, CacheKey
from ...infrastructure.cache.stores import CacheStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")

KeyLike = Union[CacheKey, str]
DurationLike = Union[TTL, timedelta, int]


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _seconds(duration: DurationLike) -> int:
    if isinstance(duration, TTL):
        return duration.seconds
    if isinstance(duration, timedelta):
        return max(1, int(duration.total_seconds()))
    return int(duration)


class CacheManager:
    """
    Typed cache facade used by the caching behavior and by handlers that
    invalidate entries after writes.
    """

    def __init__(self, store: CacheStore, default_ttl: DurationLike = TTL.hours(1)):
        self.store = store
        self.default_ttl = default_ttl

    async def get(self, key: KeyLike, response_type: Type[T]) -> Optional[T]:
        """
        Read a cached value.

        Args:
            key: Cache key
            response_type: Type the stored JSON is validated against

        Returns:
            The cached value, or None when missing, expired, unreadable or
            when the store is unavailable
        """
        key = str(key)
        with tracer.start_as_current_span("cache_manager.get") as span:
            span.set_attribute("cache.key", key)
            try:
                payload = await self.store.get(key)
            except Exception as e:
                logger.error(f"Cache read failed for {key}: {e}")
                metrics.cache_errors_total.labels(operation="get").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return None

            if payload is None:
                span.set_attribute("cache.hit", False)
                return None

            try:
                value = _adapter(response_type).validate_json(payload)
            except ValidationError as e:
                logger.warning(
                    f"Cached entry for {key} does not match {response_type!r}, treating as miss: "
                    f"{e.error_count()} error(s)"
                )
                metrics.cache_errors_total.labels(operation="deserialize").inc()
                span.set_attribute("cache.hit", False)
                return None

            span.set_attribute("cache.hit", True)
            return value

    async def set(self, key: KeyLike, value: Any, duration: Optional[DurationLike] = None) -> bool:
        """
        Store a value, overwriting any previous entry.

        Args:
            key: Cache key
            value: Value serializable by pydantic
            duration: Time to live (uses the default TTL if not provided)

        Returns:
            True if the entry was written
        """
        key = str(key)
        ttl_seconds = _seconds(duration if duration is not None else self.default_ttl)
        with tracer.start_as_current_span("cache_manager.set") as span:
            span.set_attribute("cache.key", key)
            span.set_attribute("cache.ttl_seconds", ttl_seconds)
            try:
                payload = _adapter(type(value)).dump_json(value).decode("utf-8")
            except Exception as e:
                logger.error(f"Failed to serialize cache entry {key}: {e}")
                metrics.cache_errors_total.labels(operation="serialize").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

            try:
                await self.store.set(key, payload, ttl_seconds)
                return True
            except Exception as e:
                logger.error(f"Cache write failed for {key}: {e}")
                metrics.cache_errors_total.labels(operation="set").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

    async def remove(self, key: KeyLike) -> bool:
        """Delete exactly one key. Returns True if an entry was removed."""
        key = str(key)
        with tracer.start_as_current_span("cache_manager.remove") as span:
            span.set_attribute("cache.key", key)
            try:
                removed = await self.store.delete(key)
            except Exception as e:
                logger.error(f"Cache remove failed for {key}: {e}")
                metrics.cache_errors_total.labels(operation="remove").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

            if removed:
                metrics.cache_invalidations_total.labels(kind="key").inc(removed)
            return bool(removed)

    async def remove_by_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern such as ``"products:*"``.

        Returns:
            Number of removed entries
        """
        with tracer.start_as_current_span("cache_manager.remove_by_pattern") as span:
            span.set_attribute("cache.pattern", pattern)
            try:
                removed = await self.store.delete_pattern(pattern)
            except Exception as e:
                logger.error(f"Cache pattern removal failed for {pattern}: {e}")
                metrics.cache_errors_total.labels(operation="remove_by_pattern").inc()
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return 0

            span.set_attribute("cache.removed", removed)
            if removed:
                metrics.cache_invalidations_total.labels(kind="pattern").inc(removed)
            logger.debug(f"Removed {removed} cache entries matching {pattern}")
            return removed

    async def health_check(self) -> bool:
        return await self.store.ping()
