"""Generic repository pattern for database operations."""

from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from topicsync.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common CRUD operations.

    Provides a consistent interface for database operations
    across all models.
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by(self, **filters: Any) -> Optional[ModelType]:
        """
        Get the first record matching filters, lowest ID first.

        Attributes of an instance already in the session are reloaded from
        the row, so values written by bulk UPDATEs are seen.

        Args:
            **filters: Column filters

        Returns:
            Model instance or None
        """
        query = select(self.model).execution_options(populate_existing=True)

        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)

        result = await self.session.execute(query.order_by(self.model.id).limit(1))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters: Any,
    ) -> list[ModelType]:
        """
        Get multiple records with pagination and filtering.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            **filters: Column filters; None values are ignored

        Returns:
            List of model instances ordered by ID
        """
        query = select(self.model)

        for key, value in filters.items():
            if value is not None:
                query = query.where(getattr(self.model, key) == value)

        query = query.order_by(self.model.id).offset(skip).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **data: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance
