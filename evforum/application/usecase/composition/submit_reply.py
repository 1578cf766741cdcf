"""Submit reply use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from evforum.adapter.error import AdapterError
from evforum.application.usecase.views import ReplyView
from evforum.domain.error import CreationError, NotFoundError, ValidationError
from evforum.domain.model.draft import Draft
from evforum.domain.model.reply import Reply
from evforum.domain.repository import DraftRepository
from evforum.domain.service import (
    AttachmentService,
    DraftService,
    ForumBackend,
    ThreadService,
)
from evforum.domain.value import ReplyId, SubmissionWarning, UserId

from .submission import bind_attachments, settle_uploads


class SubmitReplyRequest(BaseModel):
    """Submit reply request."""

    draft_key: str
    author_id: str  # User ID from the auth gateway
    thread_id: str | None = None  # When given, must match the draft's thread


class SubmitReplyResponse(BaseModel):
    """Submit reply response."""

    reply: ReplyView
    warnings: list[SubmissionWarning]
    draft: Draft  # Cleared draft, ready for the next reply


class SubmitReplyUseCase:
    """Use case for submitting a reply draft."""

    def __init__(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        attachment_service: AttachmentService,
        backend: ForumBackend,
        draft_repository: DraftRepository,
    ) -> None:
        """Initialize submit reply use case.

        Args:
            draft_service: Draft domain service
            thread_service: Thread domain service
            attachment_service: Attachment domain service
            backend: Forum backend that persists the reply
            draft_repository: Draft repository (autosave)
        """
        self.draft_service = draft_service
        self.thread_service = thread_service
        self.attachment_service = attachment_service
        self.backend = backend
        self.draft_repository = draft_repository

    async def execute(self, request: SubmitReplyRequest) -> SubmitReplyResponse:
        """Execute submit reply flow.

        Steps:
        1. Validate content, target and attachments (no side effects yet)
        2. Wait for uploads still in flight; failed ones become warnings
        3. Create the reply in the backend
        4. Bind attachments to the new reply; failed ones become warnings
        5. Insert the reply into the thread's tree
        6. Clear the draft and drop its autosave

        Args:
            request: Submit reply request

        Returns:
            The new reply, any per-file warnings and the cleared draft

        Raises:
            NotFoundError: If the draft does not exist
            ValidationError: If the content, target or an attachment is invalid
            InvariantViolation: If the parent reply cannot be replied to
            CreationError: If the backend failed to create the reply
        """
        draft = await self.draft_repository.find_by_key(request.draft_key)
        if draft is None:
            raise NotFoundError("Draft", request.draft_key)
        if draft.thread_id is None:
            raise ValidationError("Draft is not a reply draft")
        if request.thread_id and UUID(request.thread_id) != draft.thread_id:
            raise ValidationError(
                f"Draft replies to thread {draft.thread_id}, not {request.thread_id}"
            )

        with logfire.span(
            "submit_reply.execute",
            draft_key=draft.key,
            thread_id=str(draft.thread_id),
            parent_id=str(draft.parent_id) if draft.parent_id else None,
            attachments=len(draft.pending_attachment_ids),
        ):
            content = self.draft_service.check_reply_content(draft.content)
            tree = await self.thread_service.find_tree(draft.thread_id)
            if tree is None:
                raise ValidationError(f"Thread {draft.thread_id} not found")
            nesting_level = self.thread_service.check_reply_target(tree, draft.parent_id)
            await self.attachment_service.check_for_submission(
                draft.pending_attachment_ids, draft.temp_owner_id
            )

            to_bind, warnings = await settle_uploads(
                self.attachment_service, draft.pending_attachment_ids
            )

            try:
                created = await self.backend.create_post(
                    content, thread_id=draft.thread_id, parent_id=draft.parent_id
                )
            except AdapterError as e:
                logfire.error(
                    "Reply creation failed", draft_key=draft.key, error=str(e)
                )
                await self.draft_repository.save(draft)
                raise CreationError(f"Could not create reply: {e}", draft=draft)

            result, bind_warnings = await bind_attachments(
                self.attachment_service, to_bind, created.id
            )
            warnings.extend(bind_warnings)
            # Failed uploads are reported in this response and not needed again
            self.attachment_service.discard_failures(draft.pending_attachment_ids)

            reply = await self.thread_service.add_reply(
                tree,
                Reply(
                    id=ReplyId(UUID(str(created.id))),
                    thread_id=draft.thread_id,
                    author_id=UserId(UUID(request.author_id)),
                    content=content,
                    attachments=result.bound,
                    parent_id=draft.parent_id,
                    nesting_level=nesting_level,
                    created_at=created.created_at,
                ),
            )

            cleared = self.draft_service.clear(draft)
            await self.draft_repository.delete(draft.key)

            return SubmitReplyResponse(
                reply=ReplyView.from_reply(reply),
                warnings=warnings,
                draft=cleared,
            )
