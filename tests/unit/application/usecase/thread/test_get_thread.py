"""Unit tests for GetThreadUseCase."""

from datetime import timedelta
from uuid import uuid4

import pytest

from evforum.application.usecase.thread import GetThreadRequest, GetThreadUseCase
from evforum.domain.error import NotFoundError
from evforum.domain.service import ThreadService
from evforum.domain.value import ReplySortOrder
from tests.conftest import BASE_TIME, make_reply, make_thread
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


async def _seed(unit_env):
    """Thread with two top-level replies; the first has one child."""
    thread_service = await unit_env.get(ThreadService)
    tree = await thread_service.create_thread(make_thread(content="Opening **post**"))
    early = await thread_service.add_reply(
        tree, make_reply(tree.thread, created_at=BASE_TIME + timedelta(minutes=1))
    )
    late = await thread_service.add_reply(
        tree, make_reply(tree.thread, created_at=BASE_TIME + timedelta(minutes=5))
    )
    child = await thread_service.add_reply(
        tree,
        make_reply(tree.thread, early, created_at=BASE_TIME + timedelta(minutes=2)),
    )
    return tree.thread, early, late, child


class TestGetThreadUseCase:
    """Tests for GetThreadUseCase."""

    @pytest.mark.asyncio
    async def test_nested_replies_oldest_first(self, unit_env):
        # Arrange
        thread, early, late, child = await _seed(unit_env)
        get_thread = await unit_env.get(GetThreadUseCase)

        # Act
        response = await get_thread.execute(GetThreadRequest(thread_id=str(thread.id)))

        # Assert
        assert response.thread.html == "<p>Opening <strong>post</strong></p>"
        assert response.thread.reply_count == 3
        assert [r.reply_id for r in response.replies] == [str(early.id), str(late.id)]
        assert [r.reply_id for r in response.replies[0].replies] == [str(child.id)]
        assert response.replies[0].replies[0].nesting_level == 1
        assert response.replies[1].replies == []

    @pytest.mark.asyncio
    async def test_newest_first(self, unit_env):
        thread, early, late, _ = await _seed(unit_env)
        get_thread = await unit_env.get(GetThreadUseCase)

        response = await get_thread.execute(
            GetThreadRequest(thread_id=str(thread.id), sort=ReplySortOrder.NEWEST)
        )

        assert [r.reply_id for r in response.replies] == [str(late.id), str(early.id)]

    @pytest.mark.asyncio
    async def test_unknown_thread(self, unit_env):
        get_thread = await unit_env.get(GetThreadUseCase)

        with pytest.raises(NotFoundError):
            await get_thread.execute(GetThreadRequest(thread_id=str(uuid4())))
