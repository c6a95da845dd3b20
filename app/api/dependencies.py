"""
Request-scoped dependencies: cache handles and the My List service
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.cache.cache_service import CacheService, ListCache
from app.database.connection import get_db, get_session_factory
from app.services.mylist_service import MyListService


def get_cache_service(request: Request) -> CacheService:
    """CacheService, принадлежащий приложению (создаётся в app.main)."""
    return request.app.state.cache_service


def get_list_cache(cache_service: CacheService = Depends(get_cache_service)) -> ListCache:
    return ListCache(cache_service)


async def get_mylist_service(
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    list_cache: ListCache = Depends(get_list_cache),
) -> MyListService:
    return MyListService(db, session_factory, list_cache)
