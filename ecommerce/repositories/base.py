"""
Base Repository

Generic data access on top of an ``AsyncSession``. Repositories never
commit; the unit of work owns the transaction.
"""

from typing import Any, Optional, Sequence, Type
from uuid import UUID

import structlog
from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from ..models import Base

logger = structlog.get_logger()

MAX_LIST_LIMIT = 100


class BaseRepository:
    """
    Base repository shared by all aggregates.

    Each repository subclass specifies its model type directly.
    """

    model: Type[Base]

    def __init__(self, session: AsyncSession, model: Optional[Type[Base]] = None):
        """
        Initialize repository with strict input validation.

        Args:
            session: AsyncSession for database operations
            model: SQLAlchemy model class (defaults to the subclass' model)

        Raises:
            TypeError: If session is not AsyncSession or model is invalid
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(
                f"session must be AsyncSession instance, got {type(session).__name__}"
            )

        model = model or getattr(self, "model", None)
        if not model or not hasattr(model, "__tablename__"):
            raise TypeError(
                f"model must be valid SQLAlchemy model with __tablename__, got {type(model).__name__}"
            )

        self.session = session
        self.model = model

    async def get_by_id(self, id: UUID) -> Optional[Base]:
        """
        Get entity by primary key.

        Raises:
            ValueError: If id is None
        """
        if id is None:
            raise ValueError("Entity id is required (cannot be None)")

        try:
            entity = await self.session.get(self.model, id)
            if entity:
                logger.debug(
                    "Repository: Entity retrieved",
                    model=self.model.__name__,
                    entity_id=str(id),
                )
            return entity

        except Exception as e:
            logger.error(
                "Repository: Failed to get entity",
                model=self.model.__name__,
                entity_id=str(id),
                error=str(e),
                exc_info=True,
            )
            raise

    async def list(
        self,
        *criteria: ColumnElement[bool],
        skip: int = 0,
        limit: int = MAX_LIST_LIMIT,
        order_by: Sequence[Any] = (),
    ) -> list[Base]:
        """
        List entities matching all criteria.

        Args:
            *criteria: SQLAlchemy filter expressions
            skip: Number of records to skip (pagination)
            limit: Maximum records to return (max 100)
            order_by: Ordering expressions

        Raises:
            ValueError: If pagination arguments are out of range
        """
        if limit > MAX_LIST_LIMIT:
            raise ValueError(f"limit cannot exceed {MAX_LIST_LIMIT}")
        if skip < 0:
            raise ValueError("skip must be non-negative")

        try:
            stmt = select(self.model).where(*criteria).order_by(*order_by).offset(skip).limit(limit)
            result = await self.session.execute(stmt)
            entities = list(result.scalars().all())

            logger.debug(
                "Repository: Entities listed",
                model=self.model.__name__,
                count=len(entities),
                skip=skip,
                limit=limit,
            )
            return entities

        except Exception as e:
            logger.error(
                "Repository: Failed to list entities",
                model=self.model.__name__,
                error=str(e),
                exc_info=True,
            )
            raise

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def exists(self, *criteria: ColumnElement[bool]) -> bool:
        stmt = select(exists().where(*criteria))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def add(self, obj: Base) -> Base:
        """
        Stage a new entity and flush it so its key is available.

        Raises:
            ValueError: If obj is None
            TypeError: If obj is not an instance of the repository model
        """
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")
        if not isinstance(obj, self.model):
            raise TypeError(
                f"Entity must be {self.model.__name__} instance, got {type(obj).__name__}"
            )

        try:
            self.session.add(obj)
            await self.session.flush()
            await self.session.refresh(obj)

            logger.info(
                "Repository: Entity created",
                model=self.model.__name__,
                entity_id=str(obj.id),
            )
            return obj

        except Exception as e:
            logger.error(
                "Repository: Failed to create entity",
                model=self.model.__name__,
                error=str(e),
                exc_info=True,
            )
            raise

    async def update(self, obj: Base) -> Base:
        """Flush pending changes of an already tracked entity."""
        if obj is None or getattr(obj, "id", None) is None:
            raise ValueError("Entity must have id set (cannot be None)")

        try:
            await self.session.flush()
            await self.session.refresh(obj)

            logger.info(
                "Repository: Entity updated",
                model=self.model.__name__,
                entity_id=str(obj.id),
            )
            return obj

        except Exception as e:
            logger.error(
                "Repository: Failed to update entity",
                model=self.model.__name__,
                entity_id=str(obj.id),
                error=str(e),
                exc_info=True,
            )
            raise

    async def delete(self, obj: Base) -> None:
        """Delete a tracked entity."""
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")

        try:
            await self.session.delete(obj)
            await self.session.flush()
            logger.info(
                "Repository: Entity deleted",
                model=self.model.__name__,
                entity_id=str(obj.id),
            )

        except Exception as e:
            logger.error(
                "Repository: Failed to delete entity",
                model=self.model.__name__,
                entity_id=str(obj.id),
                error=str(e),
                exc_info=True,
            )
            raise
