"""Unit tests for CreateThreadUseCase."""

from uuid import UUID, uuid4

import pytest

from evforum.adapter.forum_api import MockForumBackend
from evforum.application.usecase.composition import (
    AttachFilesRequest,
    AttachFilesUseCase,
    CreateThreadRequest,
    CreateThreadUseCase,
    SaveDraftRequest,
    SaveDraftUseCase,
)
from evforum.domain.error import CreationError, ValidationError
from evforum.domain.repository import DraftRepository
from evforum.domain.service import ThreadService
from evforum.domain.value import ThreadId
from tests.conftest import make_image
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

DRAFT_KEY = "thread-draft"
AUTHOR_ID = str(uuid4())


async def _save_thread_draft(unit_env, title="Heat pump range", content="", tags=None):
    save_draft = await unit_env.get(SaveDraftUseCase)
    response = await save_draft.execute(
        SaveDraftRequest(
            key=DRAFT_KEY,
            content=content or "Does the heat pump really matter below -10C?",
            title=title,
            tags=tags,
        )
    )
    return response.draft


class TestCreateThreadUseCase:
    """Tests for CreateThreadUseCase."""

    @pytest.mark.asyncio
    async def test_create_thread(self, unit_env):
        """A thread draft becomes a thread with an empty reply tree."""
        # Arrange
        await _save_thread_draft(unit_env, tags=["Model Y", "Winter"])
        create_thread = await unit_env.get(CreateThreadUseCase)
        backend = await unit_env.get(MockForumBackend)
        thread_service = await unit_env.get(ThreadService)

        # Act
        response = await create_thread.execute(
            CreateThreadRequest(draft_key=DRAFT_KEY, author_id=AUTHOR_ID)
        )

        # Assert
        assert response.thread.title == "Heat pump range"
        assert response.thread.tags == ["Model Y", "Winter"]
        assert response.thread.reply_count == 0
        assert "<p>" in response.thread.html
        post = next(iter(backend.posts.values()))
        assert post["title"] == "Heat pump range"
        assert post["thread_id"] is None
        tree = await thread_service.get_tree(ThreadId(UUID(response.thread.thread_id)))
        assert len(tree) == 0

    @pytest.mark.asyncio
    async def test_thread_images_are_bound(self, unit_env):
        await _save_thread_draft(unit_env)
        attach_files = await unit_env.get(AttachFilesUseCase)
        attached = await attach_files.execute(
            AttachFilesRequest(draft_key=DRAFT_KEY, files=[make_image("dash.png")])
        )
        create_thread = await unit_env.get(CreateThreadUseCase)

        response = await create_thread.execute(
            CreateThreadRequest(draft_key=DRAFT_KEY, author_id=AUTHOR_ID)
        )

        assert attached.attachments[0].context == "thread_image"
        assert [a.state for a in response.thread.attachments] == ["bound"]

    @pytest.mark.asyncio
    async def test_missing_title(self, unit_env):
        await _save_thread_draft(unit_env, title="")
        create_thread = await unit_env.get(CreateThreadUseCase)
        backend = await unit_env.get(MockForumBackend)

        with pytest.raises(ValidationError, match="title"):
            await create_thread.execute(
                CreateThreadRequest(draft_key=DRAFT_KEY, author_id=AUTHOR_ID)
            )

        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_reply_draft_rejected(self, unit_env):
        save_draft = await unit_env.get(SaveDraftUseCase)
        await save_draft.execute(
            SaveDraftRequest(key=DRAFT_KEY, content="Some reply", thread_id=str(uuid4()))
        )
        create_thread = await unit_env.get(CreateThreadUseCase)

        with pytest.raises(ValidationError):
            await create_thread.execute(
                CreateThreadRequest(draft_key=DRAFT_KEY, author_id=AUTHOR_ID)
            )

    @pytest.mark.asyncio
    async def test_creation_failure_keeps_draft(self, unit_env):
        draft = await _save_thread_draft(unit_env)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_creation = True
        create_thread = await unit_env.get(CreateThreadUseCase)
        draft_repo = await unit_env.get(DraftRepository)

        with pytest.raises(CreationError) as exc_info:
            await create_thread.execute(
                CreateThreadRequest(draft_key=DRAFT_KEY, author_id=AUTHOR_ID)
            )

        assert exc_info.value.draft.title == draft.title
        assert (await draft_repo.find_by_key(DRAFT_KEY)).content == draft.content
        assert await (await unit_env.get(ThreadService)).list_threads() == []
