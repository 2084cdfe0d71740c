"""
Request Mediator

Explicit handler registry plus the dispatcher that runs a request through
the behavior chain. Capability mixins on the request type decide which
behaviors apply; the contract is checked once, at registration time.
"""

import dataclasses
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Dict, Generic, Iterable, Iterator, Optional, Tuple, Type, TypeVar

import structlog
from opentelemetry.trace import Tracer

from ..core import metrics
from ..core.exceptions import HandlerNotRegisteredException, RequestRegistrationException
from ..domain.cache.value_objects import TTL
from ..domain.requests import (
    CacheableRequest,
    Request,
    RequestKind,
    is_cacheable,
    is_transactional,
)
from ..domain.result import Result
from .behaviors import (
    CachingBehavior,
    PipelineBehavior,
    TracingBehavior,
    TransactionalBehavior,
    ValidationBehavior,
)
from .context import RequestContext
from .validation import RequestValidator

logger = structlog.get_logger()

RequestT = TypeVar("RequestT", bound=Request)


class RequestHandler(ABC, Generic[RequestT]):
    """Business logic for one request type. Unaware of caching and transactions."""

    def __init__(self, ctx: RequestContext):
        self.ctx = ctx

    @property
    def localizer(self):
        return self.ctx.localizer

    @abstractmethod
    async def handle(self, request: RequestT) -> Result:
        """Produce the outcome for one request."""


@dataclass(frozen=True)
class HandlerRegistration:
    request_type: Type[Request]
    handler_type: Type[RequestHandler]
    validator_types: Tuple[Type[RequestValidator], ...] = ()
    cacheable: bool = False
    transactional: bool = False


class HandlerRegistry:
    """Request type -> handler mapping built once at startup."""

    def __init__(self):
        self._registrations: Dict[Type[Request], HandlerRegistration] = {}

    def register(
        self,
        request_type: Type[Request],
        handler_type: Type[RequestHandler],
        validators: Iterable[Type[RequestValidator]] = (),
    ) -> HandlerRegistration:
        """
        Register the handler and validators for one request type.

        Raises:
            RequestRegistrationException: If the request type breaks its
                capability contract or is already registered
        """
        self._check_contract(request_type)
        if request_type in self._registrations:
            raise RequestRegistrationException(request_type, "already registered")
        if not (isinstance(handler_type, type) and issubclass(handler_type, RequestHandler)):
            raise RequestRegistrationException(request_type, "handler must be a RequestHandler subclass")

        registration = HandlerRegistration(
            request_type=request_type,
            handler_type=handler_type,
            validator_types=tuple(validators),
            cacheable=is_cacheable(request_type),
            transactional=is_transactional(request_type),
        )
        self._registrations[request_type] = registration
        logger.debug(
            "Handler registered",
            request_type=request_type.__name__,
            handler=handler_type.__name__,
            validators=len(registration.validator_types),
            cacheable=registration.cacheable,
            transactional=registration.transactional,
        )
        return registration

    @staticmethod
    def _check_contract(request_type: type) -> None:
        if not (isinstance(request_type, type) and issubclass(request_type, Request)):
            raise RequestRegistrationException(request_type, "must subclass Command or Query")
        if not dataclasses.is_dataclass(request_type) or not request_type.__dataclass_params__.frozen:
            raise RequestRegistrationException(request_type, "must be a frozen dataclass")
        if not hasattr(request_type, "kind"):
            raise RequestRegistrationException(request_type, "must declare a request kind")

        if is_cacheable(request_type):
            if request_type.kind is not RequestKind.QUERY:
                raise RequestRegistrationException(request_type, "only queries can be cacheable")
            if not isinstance(request_type.cache_duration, TTL):
                raise RequestRegistrationException(request_type, "cache_duration must be a TTL")
            if request_type.response_type is None:
                raise RequestRegistrationException(request_type, "response_type is required")
            if request_type.cache_key is CacheableRequest.cache_key:
                raise RequestRegistrationException(request_type, "cache_key is not implemented")

    def get(self, request_type: Type[Request]) -> HandlerRegistration:
        try:
            return self._registrations[request_type]
        except KeyError:
            raise HandlerNotRegisteredException(request_type) from None

    def __contains__(self, request_type: object) -> bool:
        return request_type in self._registrations

    def __iter__(self) -> Iterator[HandlerRegistration]:
        return iter(self._registrations.values())

    def __len__(self) -> int:
        return len(self._registrations)


class RequestPipeline:
    """Dispatch requests through Tracing, Validation, Caching and Transactional stages."""

    def __init__(
        self,
        registry: HandlerRegistry,
        context: RequestContext,
        tracer: Optional[Tracer] = None,
    ):
        self.registry = registry
        self.context = context
        self.tracer = tracer

    def _behaviors(self, registration: HandlerRegistration) -> list[PipelineBehavior]:
        behaviors: list[PipelineBehavior] = [
            TracingBehavior(self.tracer),
            ValidationBehavior([v(self.context) for v in registration.validator_types]),
        ]
        if registration.cacheable:
            behaviors.append(CachingBehavior(self.context.cache))
        if registration.transactional:
            behaviors.append(TransactionalBehavior(self.context.unit_of_work))
        return behaviors

    async def dispatch(self, request: Request) -> Result:
        """
        Run one request through its behavior chain.

        Returns:
            The handler's Result, a cached Result or an Invalid Result

        Raises:
            HandlerNotRegisteredException: If no handler is registered
            Exception: Any unexpected fault from validators or the handler
        """
        registration = self.registry.get(type(request))
        handler = registration.handler_type(self.context)

        async def invoke_handler() -> Result:
            return await handler.handle(request)

        stage = invoke_handler
        for behavior in reversed(self._behaviors(registration)):
            stage = partial(behavior.handle, request, stage)

        request_name = type(request).__name__
        outcome = "exception"
        start_time = time.perf_counter()
        try:
            result = await stage()
            outcome = result.status.value
            return result
        finally:
            metrics.pipeline_requests_total.labels(request_type=request_name, outcome=outcome).inc()
            metrics.pipeline_request_duration.labels(request_type=request_name).observe(
                time.perf_counter() - start_time
            )
