"""
Content repositories: lookups against the movie and TV show tables
"""
from typing import Dict, Iterable, Optional, Type, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.content import ContentType, Movie, TVShow
from app.database.repositories.base import BaseRepository

C = TypeVar("C", Movie, TVShow)


class ContentRepository(BaseRepository[C]):
    """
    Read-only lookups by public content identifier
    """

    async def get_by_content_id(self, content_id: str) -> Optional[C]:
        """
        Get content by its public identifier

        Args:
            content_id: Content identifier

        Returns:
            Content instance or None if not found
        """
        stmt = select(self.model).where(self.model.content_id == content_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_content_ids(self, content_ids: Iterable[str]) -> Dict[str, C]:
        """
        Get many content records in one query

        Args:
            content_ids: Content identifiers (duplicates are ignored)

        Returns:
            Mapping of content_id to content instance; unknown ids are absent
        """
        ids = sorted(set(content_ids))
        if not ids:
            return {}
        stmt = select(self.model).where(self.model.content_id.in_(ids))
        result = await self.session.execute(stmt)
        return {row.content_id: row for row in result.scalars().all()}


class MovieRepository(ContentRepository[Movie]):
    """Repository for Movie lookups"""

    def __init__(self, session: AsyncSession):
        super().__init__(Movie, session)


class TVShowRepository(ContentRepository[TVShow]):
    """Repository for TVShow lookups"""

    def __init__(self, session: AsyncSession):
        super().__init__(TVShow, session)


_REPOSITORIES: Dict[ContentType, Type[Union[MovieRepository, TVShowRepository]]] = {
    ContentType.MOVIE: MovieRepository,
    ContentType.TVSHOW: TVShowRepository,
}


def content_repository_for(
    content_type: ContentType,
    session: AsyncSession,
) -> Union[MovieRepository, TVShowRepository]:
    """Repository serving the table of the given content type"""
    return _REPOSITORIES[ContentType(content_type)](session)
