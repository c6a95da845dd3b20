"""
Redis-backed cache service and the paginated My List page cache.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config import get_settings
from app.exceptions import CacheBackendError

logger = logging.getLogger(__name__)
_settings = get_settings()

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(value: str) -> str:
    """Экранирование спецсимволов glob для SCAN MATCH."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


class CacheService:
    """
    Сервис кэширования на Redis (redis.asyncio).

    Клиент создаётся лениво при первом обращении, если connect() не был
    вызван при старте. Ошибки Redis оборачиваются в CacheBackendError.
    """

    def __init__(self, url: Optional[str] = None, client: Optional[Redis] = None) -> None:
        self._url = url or _settings.REDIS_URL
        self._redis: Optional[Redis] = client

    @property
    def connected(self) -> bool:
        return self._redis is not None

    async def connect(self) -> Redis:
        """Создание клиента и проверка соединения (PING)."""
        if self._redis is None:
            self._redis = Redis.from_url(self._url, decode_responses=True)
            try:
                await self._redis.ping()
            except RedisError as e:
                self._redis = None
                raise CacheBackendError(f"Cache backend unreachable: {e}") from e
            logger.info("Connected to Redis")
        return self._redis

    async def close(self) -> None:
        """Закрытие соединения с Redis."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed")

    async def _client(self) -> Redis:
        if self._redis is None:
            return await self.connect()
        return self._redis

    async def get(self, key: str) -> Optional[Any]:
        """Получение значения из кэша; None если ключа нет или он истёк."""
        client = await self._client()
        try:
            value = await client.get(key)
        except RedisError as e:
            raise CacheBackendError(f"Cache get failed for {key}: {e}") from e
        if value is None:
            return None
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Установка значения в кэш с TTL в секундах (перезаписывает)."""
        client = await self._client()
        serialized = json.dumps(value)
        try:
            await client.setex(key, ttl, serialized)
        except RedisError as e:
            raise CacheBackendError(f"Cache set failed for {key}: {e}") from e

    async def delete(self, *keys: str) -> int:
        """Удаление ключей из кэша."""
        if not keys:
            return 0
        client = await self._client()
        try:
            return await client.delete(*keys)
        except RedisError as e:
            raise CacheBackendError(f"Cache delete failed: {e}") from e

    async def invalidate(self, pattern: str) -> int:
        """
        Удаление всех ключей, содержащих pattern как подстроку.

        Полный проход по пространству ключей (SCAN), стоимость растёт с
        общим числом ключей в базе, а не только у одного пользователя.
        """
        client = await self._client()
        try:
            keys = [key async for key in client.scan_iter(match=f"*{escape_glob(pattern)}*")]
            if not keys:
                return 0
            return await client.delete(*keys)
        except RedisError as e:
            raise CacheBackendError(f"Cache invalidation failed for {pattern}: {e}") from e

    async def add_to_set(self, key: str, member: str, ttl: int) -> None:
        """Добавление элемента в множество с продлением TTL множества."""
        client = await self._client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.sadd(key, member)
                pipe.expire(key, ttl)
                await pipe.execute()
        except RedisError as e:
            raise CacheBackendError(f"Cache index update failed for {key}: {e}") from e

    async def pop_set(self, key: str) -> set:
        """Чтение и удаление множества."""
        client = await self._client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.smembers(key)
                pipe.delete(key)
                members, _ = await pipe.execute()
        except RedisError as e:
            raise CacheBackendError(f"Cache index read failed for {key}: {e}") from e
        return set(members or ())

    async def clear(self) -> None:
        """Очистка текущей БД Redis."""
        client = await self._client()
        try:
            await client.flushdb()
        except RedisError as e:
            raise CacheBackendError(f"Cache clear failed: {e}") from e


class ListCache:
    """
    Кэш страниц списка пользователя.

    Ключ: list:{user_id}:{page}:{limit}. Страница никогда не обновляется
    на месте: любая мутация списка удаляет все страницы пользователя.
    """

    PREFIX = "list"
    INDEX_PREFIX = "list-index"

    def __init__(
        self,
        cache_service: CacheService,
        first_page_ttl: Optional[int] = None,
        page_ttl: Optional[int] = None,
        use_key_index: Optional[bool] = None,
    ) -> None:
        self.cache = cache_service
        self.first_page_ttl = (
            _settings.CACHE_FIRST_PAGE_TTL if first_page_ttl is None else first_page_ttl
        )
        self.page_ttl = _settings.CACHE_PAGE_TTL if page_ttl is None else page_ttl
        self.use_key_index = (
            _settings.CACHE_USE_KEY_INDEX if use_key_index is None else use_key_index
        )

    @classmethod
    def key(cls, user_id: str, page: int, limit: int) -> str:
        return f"{cls.PREFIX}:{user_id}:{page}:{limit}"

    @classmethod
    def user_pattern(cls, user_id: str) -> str:
        # Trailing separator: user "u1" must not match "u10".
        return f"{cls.PREFIX}:{user_id}:"

    @classmethod
    def index_key(cls, user_id: str) -> str:
        return f"{cls.INDEX_PREFIX}:{user_id}"

    def ttl_for_page(self, page: int) -> int:
        return self.first_page_ttl if page == 1 else self.page_ttl

    async def get_page(self, user_id: str, page: int, limit: int) -> Optional[Dict[str, Any]]:
        """Получение страницы из кэша."""
        return await self.cache.get(self.key(user_id, page, limit))

    async def set_page(
        self,
        user_id: str,
        page: int,
        limit: int,
        payload: Dict[str, Any],
    ) -> int:
        """Сохранение страницы; возвращает использованный TTL."""
        key = self.key(user_id, page, limit)
        ttl = self.ttl_for_page(page)
        await self.cache.set(key, payload, ttl)
        if self.use_key_index:
            await self.cache.add_to_set(
                self.index_key(user_id), key, max(self.first_page_ttl, self.page_ttl)
            )
        return ttl

    async def invalidate_user(self, user_id: str) -> int:
        """Удаление всех закэшированных страниц пользователя."""
        if self.use_key_index:
            keys = await self.cache.pop_set(self.index_key(user_id))
            removed = await self.cache.delete(*sorted(keys))
        else:
            removed = await self.cache.invalidate(self.user_pattern(user_id))
        logger.info(
            "Invalidated %d cached list pages for user %s", removed, user_id,
            extra={"user_id": user_id},
        )
        return removed
