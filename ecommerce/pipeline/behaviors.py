"""
Pipeline Behaviors

Cross-cutting stages wrapped around every handler. Each behavior receives
the request and a zero-argument coroutine function for the rest of the
chain. The mediator composes them outermost first:

    Tracing -> Validation -> Caching -> Transactional -> Handler
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, Tracer

from ..constants import PIPELINE_INSTRUMENTATION_NAME
from ..core import metrics
from ..domain.requests import CacheableRequest, Request
from ..domain.result import Result
from ..services.cache.cache_manager import CacheManager
from ..services.unit_of_work import UnitOfWork
from .validation import RequestValidator

logger = structlog.get_logger()

NextStage = Callable[[], Awaitable[Result]]


class PipelineBehavior(ABC):
    @abstractmethod
    async def handle(self, request: Request, next_stage: NextStage) -> Result:
        """Run this stage and, unless it short-circuits, the rest of the chain."""


class TracingBehavior(PipelineBehavior):
    """Open one span per request; annotate and re-raise faults."""

    def __init__(self, tracer: Optional[Tracer] = None):
        self.tracer = tracer or trace.get_tracer(PIPELINE_INSTRUMENTATION_NAME)

    async def handle(self, request: Request, next_stage: NextStage) -> Result:
        request_name = type(request).__name__
        with self.tracer.start_as_current_span(
            f"pipeline.{request_name}",
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            span.set_attribute("request.type", request_name)
            span.set_attribute("request.kind", request.kind.value)
            try:
                result = await next_stage()
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.set_attribute("exception.type", type(e).__name__)
                span.set_attribute("exception.message", str(e))
                span.record_exception(e)
                raise

            span.set_attribute("response.type", type(result).__name__)
            span.set_attribute("response.status", result.status.value)
            span.set_status(Status(StatusCode.OK))
            return result


class ValidationBehavior(PipelineBehavior):
    """Run every validator; short-circuit with Invalid when any fails."""

    def __init__(self, validators: Sequence[RequestValidator]):
        self.validators = list(validators)

    async def handle(self, request: Request, next_stage: NextStage) -> Result:
        errors = []
        for validator in self.validators:
            errors.extend(await validator.validate(request))

        if errors:
            logger.info(
                "Request validation failed",
                request_type=type(request).__name__,
                error_count=len(errors),
                fields=sorted({error.identifier for error in errors}),
            )
            return Result.invalid(errors)

        return await next_stage()


class CachingBehavior(PipelineBehavior):
    """Serve cacheable requests from the cache; populate on miss.

    Only successful results are stored.
    """

    def __init__(self, cache: CacheManager):
        self.cache = cache

    async def handle(self, request: Request, next_stage: NextStage) -> Result:
        if not isinstance(request, CacheableRequest):
            return await next_stage()

        request_name = type(request).__name__
        try:
            key = request.cache_key
        except ValueError as e:
            metrics.cache_errors_total.labels(operation="key").inc()
            logger.warning(
                "Cache key could not be built, bypassing cache",
                request_type=request_name,
                error=str(e),
            )
            return await next_stage()

        cached = await self.cache.get(key, request.response_type)
        if cached is not None:
            metrics.cache_hits_total.labels(request_type=request_name).inc()
            logger.debug("Cache hit", request_type=request_name, cache_key=str(key))
            return cached

        metrics.cache_misses_total.labels(request_type=request_name).inc()
        result = await next_stage()
        if result.is_success:
            await self.cache.set(key, result, request.cache_duration)
        return result


class TransactionalBehavior(PipelineBehavior):
    """Run the rest of the chain inside one unit of work."""

    def __init__(self, unit_of_work: UnitOfWork):
        self.unit_of_work = unit_of_work

    async def handle(self, request: Request, next_stage: NextStage) -> Result:
        try:
            return await self.unit_of_work.execute_in_transaction(next_stage)
        except Exception as e:
            logger.error(
                "Transaction failed for request",
                request_type=type(request).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
