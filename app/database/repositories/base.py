"""
Base repository for common database operations
"""
from typing import Generic, TypeVar, Type, Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.database.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository with CRUD operations

    Provides common database operations for all models.
    """

    def __init__(self, model: Type[T], session: AsyncSession):
        """
        Initialize repository with model and session

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> T:
        """
        Create a new record

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        obj = self.model(**kwargs)
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def count(self, **filters: Any) -> int:
        """
        Count records matching filters

        Args:
            **filters: Field filters

        Returns:
            Number of matching records
        """
        stmt = select(func.count(self.model.id))

        for key, value in filters.items():
            if hasattr(self.model, key):
                stmt = stmt.where(getattr(self.model, key) == value)

        result = await self.session.execute(stmt)
        return result.scalar() or 0
