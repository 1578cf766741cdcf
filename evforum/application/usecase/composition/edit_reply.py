"""Edit reply use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from evforum.adapter.error import AdapterError
from evforum.application.usecase.views import ReplyView
from evforum.domain.error import CreationError
from evforum.domain.service import DraftService, ForumBackend, ThreadService
from evforum.domain.value import EntityId, ReplyId, UserId


class EditReplyRequest(BaseModel):
    """Edit reply request."""

    reply_id: str
    content: str
    author_id: str  # Must match the reply's author


class EditReplyResponse(BaseModel):
    """Edit reply response."""

    reply: ReplyView


class EditReplyUseCase:
    """Use case for the author editing a reply's content."""

    def __init__(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        backend: ForumBackend,
    ) -> None:
        """Initialize edit reply use case.

        Args:
            draft_service: Draft domain service (content rules)
            thread_service: Thread domain service
            backend: Forum backend holding the reply
        """
        self.draft_service = draft_service
        self.thread_service = thread_service
        self.backend = backend

    async def execute(self, request: EditReplyRequest) -> EditReplyResponse:
        """Execute edit reply flow.

        Steps:
        1. Check the new content against the reply length rules
        2. Check the reply exists and belongs to the author
        3. Update the reply in the backend, then locally

        Raises:
            ValidationError: If the content is invalid
            NotFoundError: If the reply does not exist
            NotAuthorizedError: If the user is not the author
            CreationError: If the backend failed to store the edit
        """
        reply_id = ReplyId(UUID(request.reply_id))
        with logfire.span("edit_reply.execute", reply_id=request.reply_id):
            content = self.draft_service.check_reply_content(request.content)
            await self.thread_service.get_editable_reply(
                reply_id, UserId(UUID(request.author_id))
            )

            try:
                await self.backend.update_post(EntityId(reply_id), content)
            except AdapterError as e:
                logfire.error("Reply edit failed", reply_id=str(reply_id), error=str(e))
                raise CreationError(f"Could not update reply: {e}")

            reply = await self.thread_service.edit_reply(reply_id, content)
            return EditReplyResponse(reply=ReplyView.from_reply(reply))
