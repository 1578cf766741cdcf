"""Unit tests for AttachmentService."""

import asyncio
from uuid import uuid4

import pytest

from evforum.adapter.forum_api import MockForumBackend
from evforum.config import MEGABYTE
from evforum.domain.error import (
    AttachmentValidationError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from evforum.domain.model.attachment import FileUpload
from evforum.domain.service import AttachmentService
from evforum.domain.value import (
    AttachmentContext,
    AttachmentId,
    AttachmentLimit,
    AttachmentState,
    EntityId,
    TempOwnerId,
)
from tests.conftest import make_image
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

REPLY_IMAGE = AttachmentContext.REPLY_IMAGE


def _owner() -> TempOwnerId:
    return TempOwnerId(uuid4())


class TestLimits:
    """Tests for per-file and per-owner limits."""

    @pytest.mark.asyncio
    async def test_non_image_rejected_for_reply_images(self, unit_env):
        service = await unit_env.get(AttachmentService)
        pdf = FileUpload(filename="manual.pdf", mime_type="application/pdf", data=b"%PDF")

        with pytest.raises(AttachmentValidationError) as exc_info:
            await service.start_upload(pdf, _owner(), REPLY_IMAGE)

        assert exc_info.value.filename == "manual.pdf"
        assert exc_info.value.limit is AttachmentLimit.TYPE

    @pytest.mark.asyncio
    async def test_any_type_allowed_for_post_attachments(self, unit_env):
        service = await unit_env.get(AttachmentService)
        pdf = FileUpload(filename="manual.pdf", mime_type="application/pdf", data=b"%PDF")

        attachment = await service.upload(pdf, _owner(), AttachmentContext.POST_ATTACHMENT)

        assert attachment.is_uploaded

    @pytest.mark.asyncio
    async def test_oversized_image_rejected(self, unit_env):
        service = await unit_env.get(AttachmentService)
        big = make_image("big.png", size_bytes=5 * MEGABYTE + 1)

        with pytest.raises(AttachmentValidationError) as exc_info:
            await service.start_upload(big, _owner(), REPLY_IMAGE)

        assert exc_info.value.limit is AttachmentLimit.SIZE
        assert "big.png" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_fourth_reply_image_rejected_while_first_three_proceed(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.upload_gate = asyncio.Event()
        owner = _owner()

        accepted = [
            await service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)
            for n in range(3)
        ]
        with pytest.raises(AttachmentValidationError) as exc_info:
            await service.start_upload(make_image("3.png"), owner, REPLY_IMAGE)
        assert exc_info.value.limit is AttachmentLimit.COUNT
        assert exc_info.value.filename == "3.png"

        backend.upload_gate.set()
        failures = await service.wait_for_uploads(a.id for a in accepted)

        assert failures == []
        for attachment in accepted:
            assert (await service.get(attachment.id)).is_uploaded

    @pytest.mark.asyncio
    async def test_concurrent_selections_cannot_overshoot_count(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()

        results = await asyncio.gather(
            *(
                service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)
                for n in range(5)
            ),
            return_exceptions=True,
        )

        rejected = [r for r in results if isinstance(r, AttachmentValidationError)]
        assert len(rejected) == 2
        assert len(await service.list_for_owner(owner)) == 3

    @pytest.mark.asyncio
    async def test_count_is_per_owner(self, unit_env):
        service = await unit_env.get(AttachmentService)
        first, second = _owner(), _owner()

        for n in range(3):
            await service.start_upload(make_image(f"a{n}.png"), first, REPLY_IMAGE)
        attachment = await service.start_upload(make_image("b.png"), second, REPLY_IMAGE)

        assert attachment.temp_owner_id == second


class TestUploadFailure:
    """Tests for failed transfers."""

    @pytest.mark.asyncio
    async def test_failed_upload_raises_and_releases_slot(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_upload_for("broken.png")
        owner = _owner()

        with pytest.raises(UploadError):
            await service.upload(make_image("broken.png"), owner, REPLY_IMAGE)

        failed = await service.list_for_owner(owner)
        assert failed == []
        for n in range(3):
            await service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)

    @pytest.mark.asyncio
    async def test_failure_is_reported_by_wait(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_upload_for("broken.png")
        owner = _owner()

        good = await service.start_upload(make_image("good.png"), owner, REPLY_IMAGE)
        bad = await service.start_upload(make_image("broken.png"), owner, REPLY_IMAGE)
        failures = await service.wait_for_uploads([good.id, bad.id])

        assert [f.attachment_id for f in failures] == [bad.id]
        assert failures[0].filename == "broken.png"
        assert service.upload_failure(bad.id) == failures[0]
        assert service.upload_failure(good.id) is None


class TestBookkeeping:
    """Tests that per-owner and per-failure state does not accumulate."""

    @pytest.mark.asyncio
    async def test_owner_locks_released_after_attach_and_bind(self, unit_env):
        service = await unit_env.get(AttachmentService)

        for _ in range(50):
            attachment = await service.upload(make_image(), _owner(), REPLY_IMAGE)
            await service.bind([attachment.id], EntityId(uuid4()))

        assert service._owner_locks == {}
        assert service._owner_lock_users == {}

    @pytest.mark.asyncio
    async def test_owner_lock_released_after_concurrent_reservations(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()

        await asyncio.gather(
            *(
                service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)
                for n in range(5)
            ),
            return_exceptions=True,
        )

        assert owner not in service._owner_locks
        assert len(await service.list_for_owner(owner)) == 3

    @pytest.mark.asyncio
    async def test_owner_lock_released_after_rejection(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()
        for n in range(3):
            await service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)

        with pytest.raises(AttachmentValidationError):
            await service.start_upload(make_image("4.png"), owner, REPLY_IMAGE)

        assert owner not in service._owner_locks

    @pytest.mark.asyncio
    async def test_discarded_failure_is_forgotten(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_upload_for("broken.png")
        bad = await service.start_upload(make_image("broken.png"), _owner(), REPLY_IMAGE)
        await service.wait_for_uploads([bad.id])

        service.discard_failures([bad.id])

        assert service.upload_failure(bad.id) is None
        assert await service.wait_for_uploads([bad.id]) == []


class TestRemove:
    """Tests for removing pending attachments."""

    @pytest.mark.asyncio
    async def test_remove_cancels_in_flight_upload(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.upload_gate = asyncio.Event()

        attachment = await service.start_upload(make_image(), _owner(), REPLY_IMAGE)
        removed = await service.remove(attachment.id)
        backend.upload_gate.set()
        await service.wait_for_uploads([attachment.id])

        assert removed.state is AttachmentState.REMOVED
        assert await service.state(attachment.id) is AttachmentState.REMOVED
        assert backend.files == {}

    @pytest.mark.asyncio
    async def test_removed_attachment_frees_its_slot(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()
        attachments = [
            await service.start_upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)
            for n in range(3)
        ]

        await service.remove(attachments[0].id)
        replacement = await service.start_upload(make_image("new.png"), owner, REPLY_IMAGE)

        assert replacement.state is AttachmentState.PENDING

    @pytest.mark.asyncio
    async def test_remove_after_bind_is_a_no_op(self, unit_env):
        service = await unit_env.get(AttachmentService)
        attachment = await service.upload(make_image(), _owner(), REPLY_IMAGE)
        await service.bind([attachment.id], EntityId(uuid4()))

        after = await service.remove(attachment.id)

        assert after.state is AttachmentState.BOUND

    @pytest.mark.asyncio
    async def test_remove_unknown(self, unit_env):
        service = await unit_env.get(AttachmentService)

        with pytest.raises(NotFoundError):
            await service.remove(AttachmentId(uuid4()))


class TestBind:
    """Tests for binding attachments to their real owner."""

    @pytest.mark.asyncio
    async def test_partial_bind_failure(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_association_for("2.png")
        owner, post_id = _owner(), EntityId(uuid4())
        one, two, three = [
            await service.upload(make_image(f"{n}.png"), owner, REPLY_IMAGE)
            for n in (1, 2, 3)
        ]

        result = await service.bind([one.id, two.id, three.id], post_id)

        assert [a.id for a in result.bound] == [one.id, three.id]
        assert all(a.state is AttachmentState.BOUND for a in result.bound)
        assert all(a.real_owner_id == post_id for a in result.bound)
        assert [f.attachment_id for f in result.failures] == [two.id]
        assert await service.state(two.id) is AttachmentState.ORPHANED

    @pytest.mark.asyncio
    async def test_rejected_association_orphans_file(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_association_for("x.png", raise_error=False)
        attachment = await service.upload(make_image("x.png"), _owner(), REPLY_IMAGE)

        result = await service.bind([attachment.id], EntityId(uuid4()))

        assert result.bound == ()
        assert await service.state(attachment.id) is AttachmentState.ORPHANED

    @pytest.mark.asyncio
    async def test_bind_waits_for_in_flight_upload(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.upload_gate = asyncio.Event()
        attachment = await service.start_upload(make_image(), _owner(), REPLY_IMAGE)

        binding = asyncio.create_task(service.bind([attachment.id], EntityId(uuid4())))
        await asyncio.sleep(0)
        # Removal is refused once binding has begun
        assert (await service.remove(attachment.id)).state is AttachmentState.PENDING
        backend.upload_gate.set()
        result = await binding

        assert [a.id for a in result.bound] == [attachment.id]
        assert result.bound[0].file_id in backend.associations

    @pytest.mark.asyncio
    async def test_bound_is_terminal(self, unit_env):
        service = await unit_env.get(AttachmentService)
        attachment = await service.upload(make_image(), _owner(), REPLY_IMAGE)
        await service.bind([attachment.id], EntityId(uuid4()))

        again = await service.bind([attachment.id], EntityId(uuid4()))

        assert again.bound == ()
        assert len(again.failures) == 1


class TestCheckForSubmission:
    """Tests for the pre-submission re-check."""

    @pytest.mark.asyncio
    async def test_returns_pending_attachments_in_order(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()
        a = await service.upload(make_image("a.png"), owner, REPLY_IMAGE)
        b = await service.upload(make_image("b.png"), owner, REPLY_IMAGE)

        checked = await service.check_for_submission([b.id, a.id], owner)

        assert [x.id for x in checked] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_other_drafts_attachment_is_rejected(self, unit_env):
        service = await unit_env.get(AttachmentService)
        attachment = await service.upload(make_image(), _owner(), REPLY_IMAGE)

        with pytest.raises(ValidationError):
            await service.check_for_submission([attachment.id], _owner())

    @pytest.mark.asyncio
    async def test_removed_attachment_is_rejected(self, unit_env):
        service = await unit_env.get(AttachmentService)
        owner = _owner()
        attachment = await service.upload(make_image(), owner, REPLY_IMAGE)
        await service.remove(attachment.id)

        with pytest.raises(ValidationError):
            await service.check_for_submission([attachment.id], owner)

    @pytest.mark.asyncio
    async def test_unknown_attachment_is_rejected(self, unit_env):
        service = await unit_env.get(AttachmentService)

        with pytest.raises(ValidationError):
            await service.check_for_submission([AttachmentId(uuid4())], _owner())

    @pytest.mark.asyncio
    async def test_failed_upload_is_skipped(self, unit_env):
        service = await unit_env.get(AttachmentService)
        backend = await unit_env.get(MockForumBackend)
        backend.fail_upload_for("broken.png")
        owner = _owner()
        attachment = await service.start_upload(make_image("broken.png"), owner, REPLY_IMAGE)
        await service.wait_for_uploads([attachment.id])

        assert await service.check_for_submission([attachment.id], owner) == []
