"""Create thread use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from evforum.adapter.error import AdapterError
from evforum.application.usecase.views import ThreadView
from evforum.domain.error import CreationError, NotFoundError, ValidationError
from evforum.domain.model.draft import Draft
from evforum.domain.model.thread import Thread
from evforum.domain.repository import DraftRepository
from evforum.domain.service import (
    AttachmentService,
    DraftService,
    ForumBackend,
    ThreadService,
)
from evforum.domain.value import SubmissionWarning, ThreadId, UserId

from .submission import bind_attachments, settle_uploads


class CreateThreadRequest(BaseModel):
    """Create thread request."""

    draft_key: str
    author_id: str  # User ID from the auth gateway


class CreateThreadResponse(BaseModel):
    """Create thread response."""

    thread: ThreadView
    warnings: list[SubmissionWarning]
    draft: Draft


class CreateThreadUseCase:
    """Use case for publishing a thread draft."""

    def __init__(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        attachment_service: AttachmentService,
        backend: ForumBackend,
        draft_repository: DraftRepository,
    ) -> None:
        """Initialize create thread use case.

        Args:
            draft_service: Draft domain service
            thread_service: Thread domain service
            attachment_service: Attachment domain service
            backend: Forum backend that persists the thread
            draft_repository: Draft repository (autosave)
        """
        self.draft_service = draft_service
        self.thread_service = thread_service
        self.attachment_service = attachment_service
        self.backend = backend
        self.draft_repository = draft_repository

    async def execute(self, request: CreateThreadRequest) -> CreateThreadResponse:
        """Execute create thread flow.

        Same steps as reply submission, ending with a new, empty reply tree
        instead of an insert.

        Raises:
            NotFoundError: If the draft does not exist
            ValidationError: If the title, content or an attachment is invalid
            CreationError: If the backend failed to create the thread
        """
        draft = await self.draft_repository.find_by_key(request.draft_key)
        if draft is None:
            raise NotFoundError("Draft", request.draft_key)
        if not draft.is_thread:
            raise ValidationError("Draft is not a thread draft")

        with logfire.span(
            "create_thread.execute",
            draft_key=draft.key,
            attachments=len(draft.pending_attachment_ids),
        ):
            title, content = self.draft_service.check_thread(draft)
            await self.attachment_service.check_for_submission(
                draft.pending_attachment_ids, draft.temp_owner_id
            )

            to_bind, warnings = await settle_uploads(
                self.attachment_service, draft.pending_attachment_ids
            )

            try:
                created = await self.backend.create_post(
                    content, title=title, tags=draft.tags
                )
            except AdapterError as e:
                logfire.error(
                    "Thread creation failed", draft_key=draft.key, error=str(e)
                )
                await self.draft_repository.save(draft)
                raise CreationError(f"Could not create thread: {e}", draft=draft)

            result, bind_warnings = await bind_attachments(
                self.attachment_service, to_bind, created.id
            )
            warnings.extend(bind_warnings)
            # Failed uploads are reported in this response and not needed again
            self.attachment_service.discard_failures(draft.pending_attachment_ids)

            tree = await self.thread_service.create_thread(
                Thread(
                    id=ThreadId(UUID(str(created.id))),
                    title=title,
                    author_id=UserId(UUID(request.author_id)),
                    content=content,
                    attachments=result.bound,
                    tags=frozenset(draft.tags),
                    created_at=created.created_at,
                )
            )

            cleared = self.draft_service.clear(draft)
            await self.draft_repository.delete(draft.key)

            return CreateThreadResponse(
                thread=ThreadView.from_thread(tree.thread),
                warnings=warnings,
                draft=cleared,
            )
