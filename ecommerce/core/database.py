"""
Database Connection Management

Async SQLAlchemy engine and session factory with:
- Connection pooling for PostgreSQL (asyncpg)
- Single shared connection for in-memory SQLite (aiosqlite, tests)
- Connection retry logic with exponential backoff
- Pool metrics collection
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from prometheus_client import Counter, Histogram
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings, get_settings

logger = structlog.get_logger()

db_connection_duration = Histogram(
    "ecommerce_db_connection_duration_seconds",
    "Time spent establishing database connections",
)
db_failed_connections = Counter(
    "ecommerce_db_failed_connections_total",
    "Total number of failed database connection attempts",
)


class DatabaseManager:
    """
    Database connection manager.

    Owns the engine and the session factory. Sessions handed out by
    ``session()`` never commit on their own; commits belong to the
    unit of work.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def _create_engine(self) -> AsyncEngine:
        url = self.settings.DATABASE_URL
        if self.settings.uses_sqlite:
            return create_async_engine(
                url,
                echo=self.settings.DATABASE_ECHO,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(
            url,
            echo=self.settings.DATABASE_ECHO,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=self.settings.DATABASE_POOL_RECYCLE,
            pool_pre_ping=True,
            pool_timeout=30,
            connect_args={
                "command_timeout": 60,
                "server_settings": {"application_name": "ecommerce_api"},
            },
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, ConnectionError, OSError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _verify_connection(self) -> None:
        start_time = time.time()
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                result.scalar_one()
            db_connection_duration.observe(time.time() - start_time)
        except Exception as e:
            db_failed_connections.inc()
            logger.error(
                "Database connection check failed",
                error=str(e),
                duration_seconds=time.time() - start_time,
            )
            raise

    async def initialize(self) -> None:
        """Create the engine and session factory and verify connectivity."""
        if self.engine is not None:
            return

        self.engine = self._create_engine()
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        try:
            await self._verify_connection()
        except Exception:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            raise

        logger.info(
            "Database initialized",
            sqlite=self.settings.uses_sqlite,
            pool_size=None if self.settings.uses_sqlite else self.settings.DATABASE_POOL_SIZE,
        )

    async def create_schema(self) -> None:
        """Create all tables known to the declarative base."""
        from ..models import Base

        if not self.engine:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created", tables=len(Base.metadata.tables))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session.

        Yields:
            AsyncSession: Session without implicit commit; rolled back when
            the body raises
        """
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.session_factory() as session:
            try:
                yield session
            except BaseException as e:
                await session.rollback()
                logger.error(
                    "Database session rolled back",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

    async def health_check(self) -> bool:
        """Return True when a trivial query succeeds."""
        if not self.engine:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database health check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")
