"""
Integration test configuration.

The application runs in-process behind httpx's ASGI transport with its
real lifespan, an in-memory SQLite database and the memory cache store.
"""

from uuid import uuid4

import httpx
import pytest

from ecommerce.infrastructure.cache import MemoryCacheStore
from ecommerce.main import create_app


@pytest.fixture
async def app(test_settings):
    application = create_app(test_settings, cache_store=MemoryCacheStore())
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def api_client(app):
    """HTTP client bound to the in-process application."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"X-User-Id": str(uuid4())}
