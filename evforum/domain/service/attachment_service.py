"""Attachment lifecycle domain service."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional
from uuid import uuid4

import logfire

from evforum.config import AttachmentLimits, AttachmentSettings
from evforum.domain.error import (
    AttachmentValidationError,
    BindError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from evforum.domain.model.attachment import AttachmentRef, FileUpload
from evforum.domain.repository import AttachmentRepository
from evforum.domain.service.backend import ForumBackend, UploadMetadata
from evforum.domain.value import (
    AttachmentContext,
    AttachmentId,
    AttachmentLimit,
    AttachmentState,
    EntityId,
    TempOwnerId,
)
from evforum.domain.value.common import ValueObject

from .base import Service


class UploadFailure(ValueObject):
    """A file whose transfer failed."""

    attachment_id: AttachmentId
    filename: str
    reason: str


class BindFailure(ValueObject):
    """A file that could not be linked to its real owner."""

    attachment_id: AttachmentId
    filename: str
    reason: str


class BindResult(ValueObject):
    """Per-file outcome of binding. Binding is never all-or-nothing."""

    owner_id: EntityId
    bound: tuple[AttachmentRef, ...] = ()
    failures: tuple[BindFailure, ...] = ()


class AttachmentService(Service):
    """Domain service for the attachment lifecycle.

    Files are uploaded as soon as they are selected, grouped under the
    draft's temp owner. Once the owning post exists, `bind` re-links each
    file to it. Every attachment ends in exactly one of bound, orphaned or
    removed; orphaned files are left for the backend's garbage collection,
    which picks them up from the structured events logged here.

    Transfers run as asyncio tasks owned by this service, so the service
    must live for the whole application (APP scope).
    """

    def __init__(
        self,
        attachment_repository: AttachmentRepository,
        backend: ForumBackend,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize attachment service.

        Args:
            attachment_repository: Attachment repository
            backend: Forum backend that stores the files
            attachment_settings: Upload limits per attachment context
        """
        self.attachment_repository = attachment_repository
        self.backend = backend
        self.attachment_settings = attachment_settings
        self._transfers: dict[AttachmentId, asyncio.Task[AttachmentRef]] = {}
        self._failures: dict[AttachmentId, UploadFailure] = {}
        self._binding: set[AttachmentId] = set()
        # Held only while a reservation for the owner is in progress
        self._owner_locks: dict[TempOwnerId, asyncio.Lock] = {}
        self._owner_lock_users: dict[TempOwnerId, int] = {}

    def limits_for(self, context: AttachmentContext) -> AttachmentLimits:
        """Upload limits that apply to a context."""
        return getattr(self.attachment_settings, context.value)

    def check_file(
        self,
        filename: str,
        mime_type: str,
        size_bytes: int,
        context: AttachmentContext,
    ) -> None:
        """Check the type and size limits of a single file.

        Raises:
            AttachmentValidationError: If the file breaks a limit
        """
        limits = self.limits_for(context)
        if limits.mime_prefix and not mime_type.startswith(limits.mime_prefix):
            raise AttachmentValidationError(
                filename,
                AttachmentLimit.TYPE,
                f"type {mime_type} is not allowed here, expected {limits.mime_prefix}*",
            )
        if size_bytes > limits.max_size_bytes:
            raise AttachmentValidationError(
                filename,
                AttachmentLimit.SIZE,
                f"file is {size_bytes} bytes, limit is {limits.max_size_bytes}",
            )

    async def start_upload(
        self,
        file: FileUpload,
        temp_owner_id: TempOwnerId,
        context: AttachmentContext,
    ) -> AttachmentRef:
        """Validate and reserve a file, then start transferring it.

        The reservation is recorded before this returns, so it counts
        against the owner's limit immediately. The transfer keeps running
        in the background; `wait_for_uploads` collects its outcome.

        Args:
            file: Selected file
            temp_owner_id: Draft the file is attached to
            context: Where the file is used

        Returns:
            The pending attachment reference (not yet uploaded)

        Raises:
            AttachmentValidationError: If the file breaks a size, type or
                count limit. Other uploads are not affected.
        """
        with logfire.span(
            "attachment_service.start_upload",
            filename=file.filename,
            mime_type=file.mime_type,
            size_bytes=file.size_bytes,
            context=context.value,
            temp_owner_id=str(temp_owner_id),
        ):
            self.check_file(file.filename, file.mime_type, file.size_bytes, context)

            async with self._owner_lock(temp_owner_id):
                limits = self.limits_for(context)
                if limits.max_count is not None:
                    live = await self._live_count(temp_owner_id, context)
                    if live >= limits.max_count:
                        logfire.warn(
                            "Attachment count limit reached",
                            filename=file.filename,
                            temp_owner_id=str(temp_owner_id),
                            limit=limits.max_count,
                        )
                        raise AttachmentValidationError(
                            file.filename,
                            AttachmentLimit.COUNT,
                            f"at most {limits.max_count} files allowed",
                        )

                attachment = AttachmentRef(
                    id=AttachmentId(uuid4()),
                    context=context,
                    filename=file.filename,
                    mime_type=file.mime_type,
                    size_bytes=file.size_bytes,
                    temp_owner_id=temp_owner_id,
                    alt_text=file.alt_text,
                    caption=file.caption,
                )
                await self.attachment_repository.save(attachment)

            task = asyncio.create_task(self._transfer(attachment, file))
            self._transfers[attachment.id] = task
            task.add_done_callback(
                lambda done, attachment_id=attachment.id: self._transfer_done(
                    attachment_id, done
                )
            )
            logfire.info(
                "Attachment reserved",
                attachment_id=str(attachment.id),
                filename=attachment.filename,
                temp_owner_id=str(temp_owner_id),
            )
            return attachment

    async def upload(
        self,
        file: FileUpload,
        temp_owner_id: TempOwnerId,
        context: AttachmentContext,
    ) -> AttachmentRef:
        """Validate, reserve and transfer a file, waiting for the transfer.

        Returns:
            The attachment after its transfer (removed if it was removed
            while uploading)

        Raises:
            AttachmentValidationError: If the file breaks a limit
            UploadError: If the transfer failed
        """
        attachment = await self.start_upload(file, temp_owner_id, context)
        task = self._transfers.get(attachment.id)
        if task is None:
            return await self.get(attachment.id)

        await asyncio.wait([task])
        if task.cancelled():
            return await self.get(attachment.id)
        return task.result()

    async def wait_for_uploads(
        self, attachment_ids: Iterable[AttachmentId]
    ) -> list[UploadFailure]:
        """Wait for the transfers of the given attachments to finish.

        Args:
            attachment_ids: Attachments to wait for

        Returns:
            One failure per attachment whose transfer failed
        """
        attachment_ids = list(attachment_ids)
        with logfire.span(
            "attachment_service.wait_for_uploads", count=len(attachment_ids)
        ):
            running = [
                self._transfers[attachment_id]
                for attachment_id in attachment_ids
                if attachment_id in self._transfers
            ]
            if running:
                await asyncio.wait(running)
            return [
                self._failures[attachment_id]
                for attachment_id in attachment_ids
                if attachment_id in self._failures
            ]

    async def bind(
        self, attachment_ids: Iterable[AttachmentId], real_owner_id: EntityId
    ) -> BindResult:
        """Link uploaded attachments to the post that now exists.

        Each file is associated independently and concurrently. A file
        that fails is marked orphaned; the others are still bound.

        Args:
            attachment_ids: Attachments to bind
            real_owner_id: Id of the persisted thread or reply

        Returns:
            Bound attachments and one failure per file that was not bound
        """
        attachment_ids = list(attachment_ids)
        with logfire.span(
            "attachment_service.bind",
            owner_id=str(real_owner_id),
            count=len(attachment_ids),
        ):
            # Marked before the first await: remove() is a no-op from here on
            self._binding.update(attachment_ids)
            try:
                outcomes = await asyncio.gather(
                    *(
                        self._bind_one(attachment_id, real_owner_id)
                        for attachment_id in attachment_ids
                    )
                )
            finally:
                self._binding.difference_update(attachment_ids)

            bound = [outcome for outcome in outcomes if isinstance(outcome, AttachmentRef)]
            failures = [outcome for outcome in outcomes if isinstance(outcome, BindFailure)]
            logfire.info(
                "Attachments bound",
                owner_id=str(real_owner_id),
                bound=len(bound),
                failed=len(failures),
            )
            return BindResult(
                owner_id=real_owner_id, bound=tuple(bound), failures=tuple(failures)
            )

    async def remove(self, attachment_id: AttachmentId) -> AttachmentRef:
        """Remove a pending attachment, cancelling its transfer.

        Does nothing once binding has begun or the attachment has reached a
        final state.

        Returns:
            The attachment after the call

        Raises:
            NotFoundError: If the attachment does not exist
        """
        with logfire.span(
            "attachment_service.remove", attachment_id=str(attachment_id)
        ):
            attachment = await self.get(attachment_id)
            if attachment.state.is_terminal or attachment_id in self._binding:
                logfire.info(
                    "Attachment removal ignored",
                    attachment_id=str(attachment_id),
                    state=attachment.state.value,
                    binding=attachment_id in self._binding,
                )
                return attachment

            task = self._transfers.pop(attachment_id, None)
            if task is not None:
                task.cancel()

            removed = attachment.model_copy(update={"state": AttachmentState.REMOVED})
            await self.attachment_repository.save(removed)
            logfire.info(
                "Attachment removed",
                attachment_id=str(attachment_id),
                file_id=removed.file_id,
                transfer_cancelled=task is not None,
            )
            return removed

    async def get(self, attachment_id: AttachmentId) -> AttachmentRef:
        """Get an attachment.

        Raises:
            NotFoundError: If the attachment does not exist
        """
        attachment = await self.attachment_repository.find_by_id(attachment_id)
        if attachment is None:
            raise NotFoundError("Attachment", str(attachment_id))
        return attachment

    async def state(self, attachment_id: AttachmentId) -> AttachmentState:
        return (await self.get(attachment_id)).state

    async def list_for_owner(self, temp_owner_id: TempOwnerId) -> list[AttachmentRef]:
        return await self.attachment_repository.find_by_temp_owner(temp_owner_id)

    def upload_failure(self, attachment_id: AttachmentId) -> Optional[UploadFailure]:
        """Failure recorded for a transfer, if it failed."""
        return self._failures.get(attachment_id)

    async def check_for_submission(
        self, attachment_ids: Iterable[AttachmentId], temp_owner_id: TempOwnerId
    ) -> list[AttachmentRef]:
        """Re-check a draft's attachments right before submission.

        Returns:
            The attachments, in the given order

        Raises:
            AttachmentValidationError: If an attachment breaks a limit
            ValidationError: If an attachment is unknown, not pending or
                belongs to another draft
        """
        attachments = []
        per_context: dict[AttachmentContext, int] = {}
        for attachment_id in attachment_ids:
            attachment = await self.attachment_repository.find_by_id(attachment_id)
            if attachment is None:
                failure = self._failures.get(attachment_id)
                # A failed transfer is reported as a warning, not a rejection
                if failure is not None:
                    continue
                raise ValidationError(f"Unknown attachment: {attachment_id}")
            if attachment.temp_owner_id != temp_owner_id:
                raise ValidationError(
                    f"{attachment.filename}: attachment belongs to another draft"
                )
            if attachment.state is not AttachmentState.PENDING:
                raise ValidationError(
                    f"{attachment.filename}: attachment is {attachment.state.value}"
                )
            self.check_file(
                attachment.filename,
                attachment.mime_type,
                attachment.size_bytes,
                attachment.context,
            )
            per_context[attachment.context] = per_context.get(attachment.context, 0) + 1
            max_count = self.limits_for(attachment.context).max_count
            if max_count is not None and per_context[attachment.context] > max_count:
                raise AttachmentValidationError(
                    attachment.filename,
                    AttachmentLimit.COUNT,
                    f"at most {max_count} files allowed",
                )
            attachments.append(attachment)
        return attachments

    def discard_failures(self, attachment_ids: Iterable[AttachmentId]) -> None:
        """Forget recorded upload failures once they have been reported."""
        for attachment_id in attachment_ids:
            self._failures.pop(attachment_id, None)

    @asynccontextmanager
    async def _owner_lock(self, temp_owner_id: TempOwnerId) -> AsyncIterator[None]:
        """Serialize reservations for one owner.

        The lock is dropped when its last user leaves, so owners that stop
        uploading leave nothing behind.
        """
        lock = self._owner_locks.setdefault(temp_owner_id, asyncio.Lock())
        self._owner_lock_users[temp_owner_id] = (
            self._owner_lock_users.get(temp_owner_id, 0) + 1
        )
        try:
            async with lock:
                yield
        finally:
            self._owner_lock_users[temp_owner_id] -= 1
            if self._owner_lock_users[temp_owner_id] == 0:
                del self._owner_lock_users[temp_owner_id]
                del self._owner_locks[temp_owner_id]

    async def _live_count(
        self, temp_owner_id: TempOwnerId, context: AttachmentContext
    ) -> int:
        attachments = await self.attachment_repository.find_by_temp_owner(temp_owner_id)
        return sum(
            1
            for attachment in attachments
            if attachment.context is context
            and attachment.state is AttachmentState.PENDING
        )

    async def _transfer(self, attachment: AttachmentRef, file: FileUpload) -> AttachmentRef:
        metadata = UploadMetadata(
            entity_type=attachment.context.entity_type,
            temp_owner_id=attachment.temp_owner_id,
            alt_text=file.alt_text,
            caption=file.caption,
        )
        try:
            uploaded = await self.backend.upload_file(file, metadata)
        except Exception as e:
            logfire.error(
                "Attachment upload failed",
                attachment_id=str(attachment.id),
                filename=attachment.filename,
                error=str(e),
            )
            self._failures[attachment.id] = UploadFailure(
                attachment_id=attachment.id,
                filename=attachment.filename,
                reason=str(e),
            )
            # Release the reservation so the slot can be reused
            await self.attachment_repository.delete(attachment.id)
            raise UploadError(attachment.filename, str(e)) from e

        current = await self.attachment_repository.find_by_id(attachment.id)
        if current is None or current.state is not AttachmentState.PENDING:
            return current or attachment

        uploaded_ref = current.model_copy(
            update={
                "file_id": uploaded.id,
                "storage_path": uploaded.file_path,
                "mime_type": uploaded.mime_type,
            }
        )
        await self.attachment_repository.save(uploaded_ref)
        logfire.info(
            "Attachment uploaded",
            attachment_id=str(attachment.id),
            file_id=uploaded.id,
            filename=attachment.filename,
        )
        return uploaded_ref

    def _transfer_done(
        self, attachment_id: AttachmentId, task: "asyncio.Task[AttachmentRef]"
    ) -> None:
        if self._transfers.get(attachment_id) is task:
            del self._transfers[attachment_id]
        if not task.cancelled():
            # Failures are kept in self._failures; mark the exception retrieved
            task.exception()

    async def _bind_one(
        self, attachment_id: AttachmentId, real_owner_id: EntityId
    ) -> AttachmentRef | BindFailure:
        running = self._transfers.get(attachment_id)
        if running is not None:
            await asyncio.wait([running])

        attachment = await self.attachment_repository.find_by_id(attachment_id)
        if attachment is None:
            failure = self._failures.get(attachment_id)
            reason = failure.reason if failure else "unknown attachment"
            logfire.warn(
                "Attachment not bound",
                attachment_id=str(attachment_id),
                owner_id=str(real_owner_id),
                reason=reason,
            )
            return BindFailure(
                attachment_id=attachment_id,
                filename=failure.filename if failure else "",
                reason=reason,
            )
        if attachment.state is not AttachmentState.PENDING:
            logfire.warn(
                "Attachment not bound",
                attachment_id=str(attachment_id),
                owner_id=str(real_owner_id),
                reason=f"attachment is {attachment.state.value}",
            )
            return BindFailure(
                attachment_id=attachment_id,
                filename=attachment.filename,
                reason=f"attachment is {attachment.state.value}",
            )

        try:
            await self._associate(attachment, real_owner_id)
        except BindError as e:
            orphaned = attachment.model_copy(update={"state": AttachmentState.ORPHANED})
            await self.attachment_repository.save(orphaned)
            logfire.warn(
                "Attachment orphaned",
                attachment_id=str(attachment_id),
                file_id=attachment.file_id,
                storage_path=attachment.storage_path,
                owner_id=str(real_owner_id),
                reason=e.reason,
            )
            return BindFailure(
                attachment_id=attachment_id,
                filename=attachment.filename,
                reason=e.reason,
            )

        bound = attachment.model_copy(
            update={"state": AttachmentState.BOUND, "real_owner_id": real_owner_id}
        )
        await self.attachment_repository.save(bound)
        logfire.info(
            "Attachment bound",
            attachment_id=str(attachment_id),
            file_id=attachment.file_id,
            owner_id=str(real_owner_id),
        )
        return bound

    async def _associate(self, attachment: AttachmentRef, real_owner_id: EntityId) -> None:
        """Ask the backend to re-link one file.

        Raises:
            BindError: If the file was never uploaded or the backend refused
        """
        if attachment.file_id is None:
            raise BindError(attachment.filename, "upload did not complete")
        try:
            accepted = await self.backend.update_file_association(
                attachment.file_id, real_owner_id
            )
        except Exception as e:
            raise BindError(attachment.filename, str(e)) from e
        if not accepted:
            raise BindError(attachment.filename, "association rejected by backend")
