"""Unit tests for ListThreadsUseCase."""

from datetime import timedelta

import pytest

from evforum.application.usecase.thread import ListThreadsRequest, ListThreadsUseCase
from evforum.domain.service import ThreadService
from evforum.domain.value import TagName, ThreadFilter, ThreadSortOrder
from tests.conftest import BASE_TIME, make_thread
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


async def _seed(unit_env):
    thread_service = await unit_env.get(ThreadService)
    threads = {
        "old": make_thread(title="Old", created_at=BASE_TIME, view_count=5000),
        "new": make_thread(
            title="New",
            created_at=BASE_TIME + timedelta(days=2),
            tags=frozenset({TagName("Charging")}),
        ),
        "pinned": make_thread(
            title="Rules", created_at=BASE_TIME - timedelta(days=30), is_pinned=True
        ),
        "locked": make_thread(
            title="Locked",
            created_at=BASE_TIME + timedelta(days=1),
            is_locked=True,
            view_count=2000,
        ),
    }
    for thread in threads.values():
        await thread_service.create_thread(thread)
    return threads


class TestListThreadsUseCase:
    """Tests for ListThreadsUseCase."""

    @pytest.mark.asyncio
    async def test_default_sort_is_latest_activity_with_pinned_first(self, unit_env):
        await _seed(unit_env)
        list_threads = await unit_env.get(ListThreadsUseCase)

        response = await list_threads.execute(ListThreadsRequest())

        assert [t.title for t in response.threads] == ["Rules", "New", "Locked", "Old"]
        assert response.total == 4

    @pytest.mark.asyncio
    async def test_oldest_first(self, unit_env):
        await _seed(unit_env)
        list_threads = await unit_env.get(ListThreadsUseCase)

        response = await list_threads.execute(
            ListThreadsRequest(sort=ThreadSortOrder.OLDEST)
        )

        assert [t.title for t in response.threads] == ["Rules", "Old", "Locked", "New"]

    @pytest.mark.asyncio
    async def test_trending_needs_more_views_than_threshold(self, unit_env):
        await _seed(unit_env)
        list_threads = await unit_env.get(ListThreadsUseCase)

        response = await list_threads.execute(
            ListThreadsRequest(sort=ThreadSortOrder.TRENDING)
        )

        assert [t.title for t in response.threads] == ["Old"]

    @pytest.mark.asyncio
    async def test_filters(self, unit_env):
        await _seed(unit_env)
        list_threads = await unit_env.get(ListThreadsUseCase)

        pinned = await list_threads.execute(ListThreadsRequest(filter=ThreadFilter.PINNED))
        locked = await list_threads.execute(ListThreadsRequest(filter=ThreadFilter.LOCKED))
        tagged = await list_threads.execute(ListThreadsRequest(tag="Charging"))

        assert [t.title for t in pinned.threads] == ["Rules"]
        assert [t.title for t in locked.threads] == ["Locked"]
        assert [t.title for t in tagged.threads] == ["New"]
        assert tagged.threads[0].tags == ["Charging"]

    @pytest.mark.asyncio
    async def test_pagination(self, unit_env):
        await _seed(unit_env)
        list_threads = await unit_env.get(ListThreadsUseCase)

        response = await list_threads.execute(ListThreadsRequest(limit=2, offset=1))

        assert [t.title for t in response.threads] == ["New", "Locked"]
        assert response.total == 4
        assert (response.limit, response.offset) == (2, 1)
