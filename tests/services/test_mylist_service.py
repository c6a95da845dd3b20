"""
Tests for MyListService: page cache protocol, join, mutations
"""
import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.database.models import MyListItem
from app.exceptions import (
    CacheBackendError,
    ConflictError,
    ContentNotFoundError,
    ListItemNotFoundError,
    ValidationError,
)
from app.services.mylist_service import MyListService, normalize_pagination


@pytest.fixture
def service(test_db, session_factory, list_cache):
    return MyListService(test_db, session_factory, list_cache, fail_open=True)


class TestNormalizePagination:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (None, None, (1, 20)),
            (0, 10, (1, 10)),
            (-3, 10, (1, 10)),
            (4, 100, (4, 50)),
            (1, 0, (1, 20)),
            (1, -5, (1, 20)),
            (2, 50, (2, 50)),
        ],
    )
    def test_clamping(self, page, limit, expected):
        assert normalize_pagination(page, limit) == expected


@pytest.mark.asyncio
class TestGetItems:

    async def test_miss_then_hit(self, service, seeded_content, make_list_items, fake_redis):
        await make_list_items("u1", ["movie-001"])

        first = await service.get_items("u1", 1, 20)
        second = await service.get_items("u1", 1, 20)

        assert first.cached is False
        assert second.cached is True
        assert first.model_dump(exclude={"cached"}) == second.model_dump(exclude={"cached"})
        assert await fake_redis.exists("list:u1:1:20") == 1

    async def test_first_page_cached_longer(self, service, seeded_content, make_list_items, fake_redis):
        await make_list_items("u1", ["movie-001", "movie-002", "movie-003"])

        await service.get_items("u1", 1, 1)
        await service.get_items("u1", 2, 1)

        assert 30 < await fake_redis.ttl("list:u1:1:1") <= 60
        assert 0 < await fake_redis.ttl("list:u1:2:1") <= 30

    async def test_pagination_arithmetic(self, service, seeded_content, make_list_items):
        await make_list_items("u1", [f"movie-00{i}" for i in range(1, 6)])

        page1 = await service.get_items("u1", 1, 2)
        page3 = await service.get_items("u1", 3, 2)
        page4 = await service.get_items("u1", 4, 2)

        assert page1.pagination.total == 5
        assert page1.pagination.total_pages == 3
        assert [e.content_id for e in page1.data] == ["movie-005", "movie-004"]
        assert [e.content_id for e in page3.data] == ["movie-001"]
        assert page4.data == []
        assert page4.pagination.page == 4

    async def test_page_past_the_end_skips_row_query(self, service, seeded_content, make_list_items):
        await make_list_items("u1", ["movie-001", "movie-002"])

        with patch(
            "app.services.mylist_service.MyListRepository.get_page", AsyncMock(return_value=[])
        ) as get_page:
            result = await service.get_items("u1", 2 ** 70, 20)

        get_page.assert_not_called()
        assert result.data == []
        assert result.pagination.page == 2 ** 70
        assert result.pagination.total == 2

    async def test_empty_list(self, service):
        result = await service.get_items("nobody")

        assert result.data == []
        assert result.pagination.total == 0
        assert result.pagination.total_pages == 0
        assert result.pagination.limit == 20

    async def test_join_uses_row_content_type(self, service, seeded_content, make_list_items):
        await make_list_items("u1", ["movie-001"], content_type="movie")
        await make_list_items("u1", ["tvshow-001"], content_type="tvshow")

        result = await service.get_items("u1")

        by_id = {e.content_id: e for e in result.data}
        assert by_id["movie-001"].content["type"] == "movie"
        assert by_id["movie-001"].content["director"] == "Director 1"
        assert by_id["tvshow-001"].content["type"] == "tvshow"
        assert len(by_id["tvshow-001"].content["episodes"]) == 2

    async def test_missing_content_gives_null(self, service, seeded_content, make_list_items):
        await make_list_items("u1", ["movie-999", "movie-001"])

        result = await service.get_items("u1")

        assert len(result.data) == 2
        assert result.data[0].content is not None
        assert result.data[1].content_id == "movie-999"
        assert result.data[1].content is None

    async def test_content_lookup_failure_fails_request(self, service, seeded_content, make_list_items):
        await make_list_items("u1", ["movie-001"])

        with patch(
            "app.services.mylist_service.MovieRepository.get_by_content_ids",
            AsyncMock(side_effect=RuntimeError("content store down")),
        ):
            with pytest.raises(RuntimeError):
                await service.get_items("u1")

    async def test_cache_read_failure_fails_open(self, service, seeded_content, make_list_items, list_cache):
        await make_list_items("u1", ["movie-001"])

        with patch.object(list_cache, "get_page", AsyncMock(side_effect=CacheBackendError("down"))):
            result = await service.get_items("u1")

        assert result.cached is False
        assert len(result.data) == 1

    async def test_cache_write_failure_fails_open(self, service, seeded_content, make_list_items, list_cache):
        await make_list_items("u1", ["movie-001"])

        with patch.object(list_cache, "set_page", AsyncMock(side_effect=CacheBackendError("down"))):
            result = await service.get_items("u1")

        assert len(result.data) == 1

    async def test_cache_failure_fatal_when_fail_closed(self, test_db, session_factory, list_cache):
        strict = MyListService(test_db, session_factory, list_cache, fail_open=False)

        with patch.object(list_cache, "get_page", AsyncMock(side_effect=CacheBackendError("down"))):
            with pytest.raises(CacheBackendError):
                await strict.get_items("u1")


@pytest.mark.asyncio
class TestAddItem:

    async def test_add_creates_row_and_invalidates(self, service, seeded_content, list_cache):
        await list_cache.set_page("u1", 1, 20, {"stale": True})

        item = await service.add_item("u1", "movie-001", "movie")

        assert item.content_id == "movie-001"
        assert item.content_type == "movie"
        assert await list_cache.get_page("u1", 1, 20) is None

    @pytest.mark.parametrize("content_id, content_type", [(None, "movie"), ("movie-001", None), ("", "")])
    async def test_missing_fields(self, service, content_id, content_type):
        with pytest.raises(ValidationError):
            await service.add_item("u1", content_id, content_type)

    async def test_invalid_content_type(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.add_item("u1", "movie-001", "podcast")
        assert "movie or tvshow" in exc_info.value.message

    async def test_content_must_exist_with_declared_type(self, service, seeded_content, test_db):
        with pytest.raises(ContentNotFoundError) as exc_info:
            await service.add_item("u1", "movie-001", "tvshow")
        assert exc_info.value.message == "TV Show not found"

        with pytest.raises(ContentNotFoundError) as exc_info:
            await service.add_item("u1", "movie-404", "movie")
        assert exc_info.value.message == "Movie not found"

        rows = (await test_db.execute(select(MyListItem))).scalars().all()
        assert rows == []

    async def test_duplicate_is_conflict(self, service, seeded_content):
        await service.add_item("u1", "movie-001", "movie")

        with pytest.raises(ConflictError):
            await service.add_item("u1", "movie-001", "movie")

    async def test_insert_race_maps_to_conflict(self, service, seeded_content):
        """Unique-constraint violation after a passing existence check."""
        with patch(
            "app.services.mylist_service.MyListRepository.create",
            AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))),
        ):
            with pytest.raises(ConflictError):
                await service.add_item("u1", "movie-001", "movie")

    async def test_invalidation_happens_after_commit(self, service, seeded_content, test_db, list_cache):
        order = []
        real_commit = test_db.commit

        async def commit():
            order.append("commit")
            await real_commit()

        async def invalidate(user_id):
            order.append("invalidate")
            return 0

        with patch.object(test_db, "commit", commit), \
                patch.object(list_cache, "invalidate_user", invalidate):
            await service.add_item("u1", "movie-001", "movie")
            await service.remove_item("u1", "movie-001")

        assert order == ["commit", "invalidate", "commit", "invalidate"]

    async def test_invalidation_failure_propagates(self, service, seeded_content, list_cache):
        with patch.object(list_cache, "invalidate_user", AsyncMock(side_effect=CacheBackendError("down"))):
            with pytest.raises(CacheBackendError):
                await service.add_item("u1", "movie-001", "movie")


@pytest.mark.asyncio
class TestRemoveItem:

    async def test_remove_existing(self, service, seeded_content, make_list_items, list_cache):
        await make_list_items("u1", ["movie-001"])
        await list_cache.set_page("u1", 2, 10, {"stale": True})

        await service.remove_item("u1", "movie-001")

        assert await list_cache.get_page("u1", 2, 10) is None
        assert (await service.get_items("u1")).pagination.total == 0

    async def test_remove_missing(self, service, make_list_items, list_cache):
        await make_list_items("u2", ["movie-001"])
        await list_cache.set_page("u1", 1, 20, {"kept": True})

        with pytest.raises(ListItemNotFoundError):
            await service.remove_item("u1", "movie-001")

        # nothing changed, nothing invalidated
        assert await list_cache.get_page("u1", 1, 20) == {"kept": True}

    async def test_remove_does_not_touch_other_users(self, service, seeded_content, make_list_items, list_cache):
        await make_list_items("u1", ["movie-001"])
        await list_cache.set_page("u2", 1, 20, {"other": True})

        await service.remove_item("u1", "movie-001")

        assert await list_cache.get_page("u2", 1, 20) == {"other": True}
