"""
Main pytest configuration for the e-commerce backend tests.

Tests run against an in-memory SQLite database and the in-process cache
store, so no external services are required.
"""

import os

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["OTEL_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"

from decimal import Decimal
from uuid import uuid4

import pytest

from ecommerce.core.config import Settings
from ecommerce.core.database import DatabaseManager
from ecommerce.core.localization import Localizer
from ecommerce.features.registry import build_registry
from ecommerce.infrastructure.cache import MemoryCacheStore
from ecommerce.models import Category, Product
from ecommerce.pipeline.context import RequestContext
from ecommerce.pipeline.mediator import RequestPipeline
from ecommerce.services.cache import CacheManager
from ecommerce.services.unit_of_work import UnitOfWork


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        CACHE_BACKEND="memory",
        OTEL_ENABLED=False,
        UOW_RETRY_MIN_WAIT_SECONDS=0.0,
        UOW_RETRY_MAX_WAIT_SECONDS=0.0,
        CART_MAX_ITEMS=3,
        CART_MAX_QUANTITY_PER_ITEM=10,
        CART_MAX_TOTAL_AMOUNT=Decimal("1000.00"),
    )


@pytest.fixture
async def database(test_settings):
    """Initialized database with the full schema."""
    manager = DatabaseManager(test_settings)
    await manager.initialize()
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(clock):
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def cache_manager(cache_store):
    return CacheManager(cache_store)


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def request_context(session, cache_manager, test_settings, user_id):
    """Request context whose unit of work retries without sleeping."""
    return RequestContext(
        session=session,
        cache=cache_manager,
        settings=test_settings,
        localizer=Localizer("en"),
        current_user_id=user_id,
        unit_of_work=UnitOfWork(session, max_attempts=3, min_wait=0, max_wait=0),
    )


@pytest.fixture
def pipeline(request_context):
    return RequestPipeline(build_registry(), request_context)


@pytest.fixture
async def category(session):
    """Committed category used by product tests."""
    category = Category(name="Electronics")
    session.add(category)
    await session.commit()
    return category


@pytest.fixture
def make_product(session, category):
    """Factory for committed products."""

    async def _make_product(
        name: str = "Laptop",
        price: str = "100.00",
        stock_quantity: int = 10,
        is_active: bool = True,
    ) -> Product:
        product = Product(
            name=name,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            is_active=is_active,
            category_id=category.id,
        )
        session.add(product)
        await session.commit()
        await session.refresh(product)
        return product

    return _make_product
