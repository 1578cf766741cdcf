"""Unit tests for ThreadService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from evforum.domain.error import (
    InvariantViolation,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from evforum.domain.service import ThreadService
from evforum.domain.value import ReplyId, ThreadId, UserId
from tests.conftest import BASE_TIME, make_reply, make_thread
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestCheckReplyTarget:
    """Tests for where a new reply may go."""

    @pytest.mark.asyncio
    async def test_top_level_reply(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())

        assert service.check_reply_target(tree, None) == 0

    @pytest.mark.asyncio
    async def test_nested_reply_level(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())
        root = await service.add_reply(tree, make_reply(tree.thread))

        assert service.check_reply_target(tree, root.id) == 1

    @pytest.mark.asyncio
    async def test_parent_at_max_depth(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())
        level0 = await service.add_reply(tree, make_reply(tree.thread))
        level1 = await service.add_reply(tree, make_reply(tree.thread, level0))
        level2 = await service.add_reply(tree, make_reply(tree.thread, level1))

        with pytest.raises(InvariantViolation):
            service.check_reply_target(tree, level2.id)

    @pytest.mark.asyncio
    async def test_locked_thread(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread(is_locked=True))

        with pytest.raises(ValidationError, match="locked"):
            service.check_reply_target(tree, None)

    @pytest.mark.asyncio
    async def test_unknown_parent(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())

        with pytest.raises(ValidationError):
            service.check_reply_target(tree, ReplyId(uuid4()))


class TestTrees:
    """Tests for creating, finding and growing trees."""

    @pytest.mark.asyncio
    async def test_get_tree_unknown_thread(self, unit_env):
        service = await unit_env.get(ThreadService)

        with pytest.raises(NotFoundError):
            await service.get_tree(ThreadId(uuid4()))
        assert await service.find_tree(ThreadId(uuid4())) is None

    @pytest.mark.asyncio
    async def test_add_reply_updates_thread(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())
        later = BASE_TIME + timedelta(hours=2)

        reply = await service.add_reply(tree, make_reply(tree.thread, created_at=later))

        stored = await service.get_tree(tree.thread.id)
        assert stored.thread.root_reply_ids == (reply.id,)
        assert stored.thread.reply_count == 1
        assert stored.thread.last_activity == later
        assert [t.id for t in await service.list_threads()] == [tree.thread.id]


class TestEditReply:
    """Tests for editing replies."""

    @pytest.mark.asyncio
    async def test_author_may_edit(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())
        reply = await service.add_reply(tree, make_reply(tree.thread))

        editable = await service.get_editable_reply(reply.id, reply.author_id)
        edited = await service.edit_reply(editable.id, "Closer to **30%** actually.")

        assert edited.is_edited
        assert edited.parent_id == reply.parent_id
        stored = (await service.get_tree(tree.thread.id)).get(reply.id)
        assert stored.content == "Closer to **30%** actually."
        assert stored.rendered_content != reply.rendered_content

    @pytest.mark.asyncio
    async def test_non_author_rejected(self, unit_env):
        service = await unit_env.get(ThreadService)
        tree = await service.create_thread(make_thread())
        reply = await service.add_reply(tree, make_reply(tree.thread))

        with pytest.raises(NotAuthorizedError):
            await service.get_editable_reply(reply.id, UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_unknown_reply(self, unit_env):
        service = await unit_env.get(ThreadService)

        with pytest.raises(NotFoundError):
            await service.get_editable_reply(ReplyId(uuid4()), UserId(uuid4()))
        with pytest.raises(NotFoundError):
            await service.edit_reply(ReplyId(uuid4()), "Updated content")
