"""
Unit tests for the handler registry and the request pipeline.

Handlers here are stubs; the pipeline context is a plain namespace with
only the collaborators the behaviors touch.
"""

from dataclasses import dataclass
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ecommerce.core.exceptions import HandlerNotRegisteredException, RequestRegistrationException
from ecommerce.domain.cache.value_objects import TTL, CacheKey
from ecommerce.domain.requests import CacheableRequest, Command, Query, TransactionalRequest
from ecommerce.domain.result import Result, ResultStatus
from ecommerce.features.categories.dtos import CategoryDto
from ecommerce.features.categories.queries import GetCategoryByIdQuery
from ecommerce.features.registry import build_registry
from ecommerce.pipeline.mediator import HandlerRegistry, RequestHandler, RequestPipeline
from ecommerce.pipeline.validation import RequestValidator
from ecommerce.services.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class EchoQuery(Query, CacheableRequest):
    text: str

    cache_duration = TTL.minutes(1)
    response_type = Result[str]

    @property
    def cache_key(self) -> CacheKey:
        return CacheKey(f"echo:{self.text}")


@dataclass(frozen=True)
class SaveCommand(Command, TransactionalRequest):
    text: str


@dataclass(frozen=True)
class PlainQuery(Query):
    pass


class RecordingHandler(RequestHandler):
    async def handle(self, request) -> Result:
        self.ctx.calls.append(request)
        if request.text == "missing":
            return Result.not_found("missing")
        if request.text == "explode":
            raise RuntimeError("handler fault")
        return Result.success(request.text)


class StubCategoryHandler(RequestHandler):
    category_id = uuid4()

    async def handle(self, request) -> Result:
        self.ctx.calls.append(request)
        return Result.success(CategoryDto(id=self.category_id, name="Books"))


class NonEmptyTextValidator(RequestValidator):
    async def validate(self, request):
        if not request.text:
            return [self.error("text", "Text:IsRequired")]
        return []


@pytest.fixture
def session():
    return AsyncMock()


@pytest.fixture
def context(cache_manager, session):
    return SimpleNamespace(
        cache=cache_manager,
        unit_of_work=UnitOfWork(session, max_attempts=2, min_wait=0, max_wait=0),
        localizer=SimpleNamespace(get=lambda key, *args: key),
        calls=[],
    )


@pytest.fixture
def registry():
    registry = HandlerRegistry()
    registry.register(EchoQuery, RecordingHandler, [NonEmptyTextValidator])
    registry.register(SaveCommand, RecordingHandler, [NonEmptyTextValidator])
    return registry


@pytest.fixture
def pipeline(registry, context):
    return RequestPipeline(registry, context)


class TestHandlerRegistry:
    """Test registration contract checks."""

    def test_registration_flags(self, registry):
        assert registry.get(EchoQuery).cacheable
        assert not registry.get(EchoQuery).transactional
        assert registry.get(SaveCommand).transactional
        assert len(registry) == 2
        assert EchoQuery in registry

    def test_duplicate_registration_rejected(self, registry):
        with pytest.raises(RequestRegistrationException, match="already registered"):
            registry.register(EchoQuery, RecordingHandler)

    def test_unregistered_request_raises(self, registry):
        with pytest.raises(HandlerNotRegisteredException):
            registry.get(PlainQuery)

    def test_request_must_subclass_request(self):
        @dataclass(frozen=True)
        class Loose:
            value: int = 0

        with pytest.raises(RequestRegistrationException, match="Command or Query"):
            HandlerRegistry().register(Loose, RecordingHandler)

    def test_commands_cannot_be_cacheable(self):
        @dataclass(frozen=True)
        class CachedCommand(Command, CacheableRequest):
            cache_duration = TTL.minutes(1)
            response_type = Result[str]

            @property
            def cache_key(self) -> CacheKey:
                return CacheKey("cached")

        with pytest.raises(RequestRegistrationException, match="only queries"):
            HandlerRegistry().register(CachedCommand, RecordingHandler)

    def test_cacheable_query_needs_duration(self):
        @dataclass(frozen=True)
        class NoDurationQuery(Query, CacheableRequest):
            response_type = Result[str]

            @property
            def cache_key(self) -> CacheKey:
                return CacheKey("no-duration")

        with pytest.raises(RequestRegistrationException, match="cache_duration"):
            HandlerRegistry().register(NoDurationQuery, RecordingHandler)

    def test_cacheable_query_needs_key(self):
        @dataclass(frozen=True)
        class NoKeyQuery(Query, CacheableRequest):
            cache_duration = TTL.minutes(1)
            response_type = Result[str]

        with pytest.raises(RequestRegistrationException, match="cache_key"):
            HandlerRegistry().register(NoKeyQuery, RecordingHandler)

    def test_handler_must_be_request_handler(self):
        with pytest.raises(RequestRegistrationException, match="RequestHandler"):
            HandlerRegistry().register(PlainQuery, object)

    def test_handler_without_handle_cannot_be_built(self):
        class ForgetfulHandler(RequestHandler):
            pass

        with pytest.raises(TypeError, match="abstract"):
            ForgetfulHandler(SimpleNamespace())

    def test_validator_without_validate_cannot_be_built(self):
        class ForgetfulValidator(RequestValidator):
            pass

        with pytest.raises(TypeError, match="abstract"):
            ForgetfulValidator(SimpleNamespace())

    def test_application_registry_is_complete(self):
        registry = build_registry()

        assert len(registry) == 23
        cacheable = {registration.request_type.__name__ for registration in registry if registration.cacheable}
        assert cacheable == {
            "GetCategoryByIdQuery",
            "GetAllCategoriesQuery",
            "GetProductByIdQuery",
            "GetAllProductsQuery",
            "GetCartQuery",
            "GetOrdersByUserQuery",
        }
        assert all(r.transactional for r in registry if r.request_type.kind.value == "command")


class TestRequestPipeline:
    """Test dispatch through the behavior chain."""

    @pytest.mark.asyncio
    async def test_cacheable_query_runs_handler_once(self, pipeline, context):
        first = await pipeline.dispatch(EchoQuery("hello"))
        second = await pipeline.dispatch(EchoQuery("hello"))

        assert first.value == second.value == "hello"
        assert len(context.calls) == 1

    @pytest.mark.asyncio
    async def test_category_query_is_served_from_cache(self, context):
        registry = HandlerRegistry()
        registry.register(GetCategoryByIdQuery, StubCategoryHandler)
        pipeline = RequestPipeline(registry, context)
        query = GetCategoryByIdQuery(id=123)

        first = await pipeline.dispatch(query)
        second = await pipeline.dispatch(query)

        assert len(context.calls) == 1
        assert first.value == second.value
        assert await context.cache.get("category:123", Result[CategoryDto]) is not None

    @pytest.mark.asyncio
    async def test_failed_query_is_not_cached(self, pipeline, context):
        await pipeline.dispatch(EchoQuery("missing"))
        result = await pipeline.dispatch(EchoQuery("missing"))

        assert result.status is ResultStatus.NOT_FOUND
        assert len(context.calls) == 2

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_cache_or_handler(self, pipeline, context, cache_store):
        result = await pipeline.dispatch(EchoQuery(""))

        assert result.status is ResultStatus.INVALID
        assert result.validation_errors[0].identifier == "text"
        assert context.calls == []
        assert cache_store.keys() == []

    @pytest.mark.asyncio
    async def test_invalid_command_does_not_open_transaction(self, pipeline, session):
        result = await pipeline.dispatch(SaveCommand(""))

        assert result.status is ResultStatus.INVALID
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_command_commits_once(self, pipeline, session, context):
        result = await pipeline.dispatch(SaveCommand("value"))

        assert result.value == "value"
        assert len(context.calls) == 1
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_command_fault_rolls_back_and_propagates(self, pipeline, session):
        with pytest.raises(RuntimeError, match="handler fault"):
            await pipeline.dispatch(SaveCommand("explode"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unregistered_request_raises(self, pipeline):
        with pytest.raises(HandlerNotRegisteredException):
            await pipeline.dispatch(PlainQuery())

    @pytest.mark.asyncio
    async def test_new_handler_instance_per_dispatch(self, registry, context):
        seen = []

        class TrackingHandler(RequestHandler):
            async def handle(self, request) -> Result:
                seen.append(self)
                return Result.success()

        registry.register(PlainQuery, TrackingHandler)
        pipeline = RequestPipeline(registry, context)

        await pipeline.dispatch(PlainQuery())
        await pipeline.dispatch(PlainQuery())

        assert len(seen) == 2
        assert seen[0] is not seen[1]
