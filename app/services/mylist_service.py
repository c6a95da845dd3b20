"""
My List service: paginated read through the page cache, add/remove with
user-scoped cache invalidation
"""
import asyncio
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.cache.cache_service import ListCache
from app.config import get_settings
from app.database.models.content import ContentType
from app.database.models.list_item import MyListItem
from app.database.repositories.content_repository import (
    MovieRepository,
    TVShowRepository,
    content_repository_for,
)
from app.database.repositories.list_repository import MyListRepository
from app.exceptions import (
    CacheBackendError,
    ConflictError,
    ContentNotFoundError,
    ListItemNotFoundError,
    ValidationError,
)
from app.monitoring.metrics import track_cache_lookup, track_invalidation, track_mutation
from app.schemas.mylist import CachedPage, ListEntry, ListItemsResponse, Pagination

logger = logging.getLogger(__name__)
settings = get_settings()

_NOT_FOUND_MESSAGES = {
    ContentType.MOVIE: "Movie not found",
    ContentType.TVSHOW: "TV Show not found",
}


def normalize_pagination(
    page: Optional[int],
    limit: Optional[int],
) -> Tuple[int, int]:
    """
    Clamp requested page/limit: page >= 1, 0 < limit <= LIST_MAX_LIMIT

    Missing, zero or negative limits fall back to LIST_DEFAULT_LIMIT.
    """
    page = max(1, page or 1)
    if not limit or limit < 1:
        limit = settings.LIST_DEFAULT_LIMIT
    return page, min(settings.LIST_MAX_LIMIT, limit)


class MyListService:
    """Сервис списка: чтение через кэш страниц, мутации с инвалидацией."""

    def __init__(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker,
        list_cache: ListCache,
        fail_open: Optional[bool] = None,
    ):
        self._session = session
        self._session_factory = session_factory
        self._items = MyListRepository(session)
        self._cache = list_cache
        self._fail_open = settings.CACHE_FAIL_OPEN if fail_open is None else fail_open

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_item(
        self,
        user_id: str,
        content_id: Optional[str],
        content_type: Optional[str],
    ) -> MyListItem:
        """
        Add content to the user's list

        Raises:
            ValidationError: Missing fields or unknown content type
            ContentNotFoundError: No content of that type with that id
            ConflictError: The content is already on the list
        """
        if not content_id or not content_type:
            raise ValidationError("contentId and contentType are required")
        try:
            ctype = ContentType(content_type)
        except ValueError:
            raise ValidationError("Invalid contentType. Must be movie or tvshow")

        content = await content_repository_for(ctype, self._session).get_by_content_id(content_id)
        if content is None:
            track_mutation("add", "content_not_found")
            raise ContentNotFoundError(_NOT_FOUND_MESSAGES[ctype])

        if await self._items.get_by_user_and_content(user_id, content_id) is not None:
            track_mutation("add", "conflict")
            raise ConflictError("Item already in My List")

        try:
            item = await self._items.create(
                user_id=user_id,
                content_id=content_id,
                content_type=ctype.value,
            )
            await self._session.commit()
        except IntegrityError:
            # A concurrent add won the unique (user_id, content_id) race.
            await self._session.rollback()
            track_mutation("add", "conflict")
            raise ConflictError("Item already in My List")

        await self._invalidate(user_id)
        track_mutation("add", "success")
        logger.info(
            f"Added {ctype.value} {content_id} to list of user {user_id}",
            extra={"user_id": user_id, "content_id": content_id},
        )
        return item

    async def remove_item(self, user_id: str, content_id: str) -> MyListItem:
        """
        Remove content from the user's list

        Raises:
            ListItemNotFoundError: The content is not on the list
        """
        item = await self._items.delete_by_user_and_content(user_id, content_id)
        if item is None:
            await self._session.rollback()
            track_mutation("remove", "not_found")
            raise ListItemNotFoundError("Item not found in My List")
        await self._session.commit()

        await self._invalidate(user_id)
        track_mutation("remove", "success")
        logger.info(
            f"Removed {content_id} from list of user {user_id}",
            extra={"user_id": user_id, "content_id": content_id},
        )
        return item

    async def _invalidate(self, user_id: str) -> None:
        # Runs only after the store commit; failures propagate to the caller.
        try:
            await self._cache.invalidate_user(user_id)
        except CacheBackendError:
            logger.error(
                f"List cache invalidation failed for user {user_id}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise
        track_invalidation()

    # ------------------------------------------------------------------
    # Paginated read
    # ------------------------------------------------------------------

    async def get_items(
        self,
        user_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ListItemsResponse:
        """
        Get one page of the user's list, from cache when possible

        On a miss the page is computed from the store, enriched with content
        and cached (longer TTL for the first page).
        """
        page, limit = normalize_pagination(page, limit)

        cached = await self._read_cache(user_id, page, limit)
        if cached is not None:
            return ListItemsResponse.model_validate({**cached, "cached": True})

        payload = await self._compute_page(user_id, page, limit)
        await self._write_cache(user_id, page, limit, payload)
        return ListItemsResponse.model_validate({**payload, "cached": False})

    async def _compute_page(self, user_id: str, page: int, limit: int) -> Dict[str, Any]:
        total = await self._items.count_by_user(user_id)
        offset = (page - 1) * limit
        # Pages past the end are empty; the offset may exceed the SQL integer range.
        rows = []
        if offset < total:
            rows = await self._items.get_page(user_id, offset=offset, limit=limit)
        movies, shows = await self._fetch_content(rows)

        lookup = {ContentType.MOVIE.value: movies, ContentType.TVSHOW.value: shows}
        entries = [
            ListEntry(
                id=row.id,
                content_id=row.content_id,
                content_type=row.content_type,
                added_at=row.added_at,
                content=lookup.get(row.content_type, {}).get(row.content_id),
            )
            for row in rows
        ]
        result = CachedPage(
            data=entries,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
        )
        return result.model_dump(by_alias=True, mode="json")

    async def _fetch_content(
        self,
        rows: List[MyListItem],
    ) -> Tuple[Dict[str, Dict[str, Any]], Dict[str, Dict[str, Any]]]:
        """Два независимых запроса к контенту, каждый в своей сессии."""
        movie_ids = {r.content_id for r in rows if r.content_type == ContentType.MOVIE.value}
        show_ids = {r.content_id for r in rows if r.content_type == ContentType.TVSHOW.value}
        movies, shows = await asyncio.gather(
            self._lookup_content(MovieRepository, movie_ids),
            self._lookup_content(TVShowRepository, show_ids),
        )
        return movies, shows

    async def _lookup_content(
        self,
        repository: Type[Union[MovieRepository, TVShowRepository]],
        content_ids: Iterable[str],
    ) -> Dict[str, Dict[str, Any]]:
        content_ids = set(content_ids)
        if not content_ids:
            return {}
        async with self._session_factory() as session:
            found = await repository(session).get_by_content_ids(content_ids)
            return {cid: record.to_dict() for cid, record in found.items()}

    async def _read_cache(self, user_id: str, page: int, limit: int) -> Optional[Dict[str, Any]]:
        try:
            cached = await self._cache.get_page(user_id, page, limit)
        except CacheBackendError:
            track_cache_lookup("error")
            if not self._fail_open:
                raise
            logger.warning(
                f"List cache read failed for user {user_id}, computing page",
                exc_info=True,
                extra={"user_id": user_id},
            )
            return None
        track_cache_lookup("hit" if cached is not None else "miss")
        logger.debug(
            f"List cache {'hit' if cached is not None else 'miss'}",
            extra={"user_id": user_id, "cache_key": ListCache.key(user_id, page, limit)},
        )
        return cached

    async def _write_cache(
        self,
        user_id: str,
        page: int,
        limit: int,
        payload: Dict[str, Any],
    ) -> None:
        try:
            await self._cache.set_page(user_id, page, limit, payload)
        except CacheBackendError:
            if not self._fail_open:
                raise
            logger.warning(
                f"List cache write failed for user {user_id}, serving uncached page",
                exc_info=True,
                extra={"user_id": user_id},
            )
