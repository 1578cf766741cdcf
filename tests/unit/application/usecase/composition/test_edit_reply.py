"""Unit tests for EditReplyUseCase."""

from uuid import uuid4

import pytest

from evforum.adapter.error import ForumApiError
from evforum.adapter.forum_api import MockForumBackend
from evforum.application.usecase.composition import (
    EditReplyRequest,
    EditReplyUseCase,
)
from evforum.domain.error import (
    CreationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from evforum.domain.service import ThreadService
from tests.conftest import make_reply, make_thread
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

NEW_CONTENT = "Edited: closer to **30%** in January."


async def _posted_reply(unit_env):
    thread_service = await unit_env.get(ThreadService)
    tree = await thread_service.create_thread(make_thread())
    return await thread_service.add_reply(tree, make_reply(tree.thread))


class TestEditReplyUseCase:
    """Tests for EditReplyUseCase."""

    @pytest.mark.asyncio
    async def test_author_edits_reply(self, unit_env):
        """Edits re-render the content and keep the reply in place."""
        # Arrange
        reply = await _posted_reply(unit_env)
        edit_reply = await unit_env.get(EditReplyUseCase)
        backend = await unit_env.get(MockForumBackend)

        # Act
        response = await edit_reply.execute(
            EditReplyRequest(
                reply_id=str(reply.id),
                content=NEW_CONTENT,
                author_id=str(reply.author_id),
            )
        )

        # Assert
        assert response.reply.content == NEW_CONTENT
        assert "<strong>30%</strong>" in response.reply.html
        assert response.reply.edited_at is not None
        assert response.reply.nesting_level == reply.nesting_level
        assert backend.calls == [("update_post", NEW_CONTENT)]

    @pytest.mark.asyncio
    async def test_non_author_cannot_edit(self, unit_env):
        reply = await _posted_reply(unit_env)
        edit_reply = await unit_env.get(EditReplyUseCase)
        backend = await unit_env.get(MockForumBackend)

        with pytest.raises(NotAuthorizedError):
            await edit_reply.execute(
                EditReplyRequest(
                    reply_id=str(reply.id), content=NEW_CONTENT, author_id=str(uuid4())
                )
            )

        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_edit_follows_length_rules(self, unit_env):
        reply = await _posted_reply(unit_env)
        edit_reply = await unit_env.get(EditReplyUseCase)

        with pytest.raises(ValidationError):
            await edit_reply.execute(
                EditReplyRequest(
                    reply_id=str(reply.id), content="too short", author_id=str(reply.author_id)
                )
            )

    @pytest.mark.asyncio
    async def test_unknown_reply(self, unit_env):
        edit_reply = await unit_env.get(EditReplyUseCase)

        with pytest.raises(NotFoundError):
            await edit_reply.execute(
                EditReplyRequest(
                    reply_id=str(uuid4()), content=NEW_CONTENT, author_id=str(uuid4())
                )
            )

    @pytest.mark.asyncio
    async def test_backend_failure_leaves_reply_unchanged(self, unit_env):
        reply = await _posted_reply(unit_env)
        edit_reply = await unit_env.get(EditReplyUseCase)
        backend = await unit_env.get(MockForumBackend)

        async def fail(post_id, content):
            raise ForumApiError("down", status_code=503)

        backend.update_post = fail

        with pytest.raises(CreationError):
            await edit_reply.execute(
                EditReplyRequest(
                    reply_id=str(reply.id),
                    content=NEW_CONTENT,
                    author_id=str(reply.author_id),
                )
            )

        tree = await (await unit_env.get(ThreadService)).get_tree(reply.thread_id)
        assert tree.get(reply.id).content == reply.content
