"""Unit tests for FileDraftRepository."""

from uuid import uuid4

import pytest

from evforum.domain.model.draft import Draft
from evforum.domain.value import AttachmentId, TagName, ThreadId
from evforum.persistence.repository import FileDraftRepository


class TestFileDraftRepository:
    """Tests for FileDraftRepository."""

    @pytest.mark.asyncio
    async def test_draft_survives_a_new_repository(self, tmp_path):
        """A saved draft is readable by a fresh instance (crash recovery)."""
        # Arrange
        draft = Draft(
            key="reply:thread/1",
            thread_id=ThreadId(uuid4()),
            content="Half-written reply",
            history=("", "Half-written reply"),
            history_index=1,
            tags=(TagName("Charging"),),
            pending_attachment_ids=(AttachmentId(uuid4()),),
        )

        # Act
        await FileDraftRepository(tmp_path).save(draft)
        recovered = await FileDraftRepository(tmp_path).find_by_key(draft.key)

        # Assert
        assert recovered == draft

    @pytest.mark.asyncio
    async def test_missing_draft(self, tmp_path):
        assert await FileDraftRepository(tmp_path / "drafts").find_by_key("nope") is None

    @pytest.mark.asyncio
    async def test_delete(self, tmp_path):
        repo = FileDraftRepository(tmp_path)
        await repo.save(Draft(key="thread:1", content="text"))

        await repo.delete("thread:1")
        await repo.delete("thread:1")

        assert await repo.find_by_key("thread:1") is None

    @pytest.mark.asyncio
    async def test_similar_keys_do_not_collide(self, tmp_path):
        repo = FileDraftRepository(tmp_path)
        await repo.save(Draft(key="a/b", content="slash"))
        await repo.save(Draft(key="a:b", content="colon"))

        assert (await repo.find_by_key("a/b")).content == "slash"
        assert (await repo.find_by_key("a:b")).content == "colon"

    @pytest.mark.asyncio
    async def test_corrupt_file_counts_as_missing(self, tmp_path):
        repo = FileDraftRepository(tmp_path)
        await repo.save(Draft(key="thread:1", content="text"))
        for path in tmp_path.glob("*.json"):
            path.write_text("{not json", encoding="utf-8")

        assert await repo.find_by_key("thread:1") is None
