"""
Request Contracts

Commands and queries are frozen dataclasses. Cross-cutting behavior is
opted into with capability mixins:

- ``CacheableRequest``: the pipeline serves the result from the cache,
  keyed by ``cache_key`` and kept for ``cache_duration``
- ``TransactionalRequest``: the handler runs inside one unit of work

The registry checks the capability contract when a handler is registered.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Optional

from .cache.value_objects import TTL, CacheKey


class RequestKind(StrEnum):
    COMMAND = "command"
    QUERY = "query"


@dataclass(frozen=True)
class Request:
    kind: ClassVar[RequestKind]

    @property
    def request_name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Command(Request):
    kind: ClassVar[RequestKind] = RequestKind.COMMAND


@dataclass(frozen=True)
class Query(Request):
    kind: ClassVar[RequestKind] = RequestKind.QUERY


class CacheableRequest:
    """Mixin for requests whose successful results may be cached.

    Subclasses set ``cache_duration`` and ``response_type`` (the Result
    type used to deserialize a cached entry) and implement ``cache_key``
    from their field values only.
    """

    cache_duration: ClassVar[Optional[TTL]] = None
    response_type: ClassVar[Any] = None

    @property
    def cache_key(self) -> CacheKey:
        raise NotImplementedError


class TransactionalRequest:
    """Marker mixin: the handler runs inside ``UnitOfWork.execute_in_transaction``."""


def is_cacheable(request_type: type) -> bool:
    return issubclass(request_type, CacheableRequest)


def is_transactional(request_type: type) -> bool:
    return issubclass(request_type, TransactionalRequest)
