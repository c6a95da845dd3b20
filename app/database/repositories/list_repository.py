"""
My List repository: membership rows per user
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.base import utcnow
from app.database.models.list_item import MyListItem
from app.database.repositories.base import BaseRepository


class MyListRepository(BaseRepository[MyListItem]):
    """
    Repository for MyListItem operations
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize MyListRepository

        Args:
            session: Async database session
        """
        super().__init__(MyListItem, session)

    async def create(
        self,
        user_id: str,
        content_id: str,
        content_type: str,
        added_at: Optional[datetime] = None,
    ) -> MyListItem:
        """
        Add a membership row

        Args:
            user_id: User identifier
            content_id: Content identifier
            content_type: "movie" or "tvshow"
            added_at: Timestamp (default: now, UTC)

        Returns:
            Created item

        Raises:
            IntegrityError: If (user_id, content_id) already exists
        """
        return await super().create(
            user_id=user_id,
            content_id=content_id,
            content_type=content_type,
            added_at=added_at or utcnow(),
        )

    async def get_by_user_and_content(
        self,
        user_id: str,
        content_id: str,
    ) -> Optional[MyListItem]:
        """
        Get the membership row for a (user, content) pair

        Args:
            user_id: User identifier
            content_id: Content identifier

        Returns:
            Item or None if the content is not on the list
        """
        stmt = select(MyListItem).where(
            MyListItem.user_id == user_id,
            MyListItem.content_id == content_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_page(
        self,
        user_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> List[MyListItem]:
        """
        Get a page of a user's list, most recently added first

        Args:
            user_id: User identifier
            offset: Number of rows to skip
            limit: Maximum number of rows to return

        Returns:
            List of items ordered by added_at descending
        """
        stmt = (
            select(MyListItem)
            .where(MyListItem.user_id == user_id)
            .order_by(MyListItem.added_at.desc(), MyListItem.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_user(self, user_id: str) -> int:
        """Total number of items on a user's list"""
        return await self.count(user_id=user_id)

    async def delete_by_user_and_content(
        self,
        user_id: str,
        content_id: str,
    ) -> Optional[MyListItem]:
        """
        Find and delete a membership row in one statement

        Args:
            user_id: User identifier
            content_id: Content identifier

        Returns:
            The deleted item, or None if nothing matched
        """
        stmt = (
            delete(MyListItem)
            .where(
                MyListItem.user_id == user_id,
                MyListItem.content_id == content_id,
            )
            .returning(MyListItem)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
