"""Save draft use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from evforum.domain.error import ValidationError
from evforum.domain.model.draft import Draft
from evforum.domain.repository import DraftRepository
from evforum.domain.service import DraftService
from evforum.domain.value import ReplyId, TagName, ThreadId, utc_now


class SaveDraftRequest(BaseModel):
    """Save draft request.

    Creates the draft on first save; later saves record the content as a
    new undo step.
    """

    key: str
    content: str
    thread_id: Optional[str] = None  # None for a thread draft
    parent_id: Optional[str] = None
    title: Optional[str] = None
    tags: Optional[list[str]] = None


class SaveDraftResponse(BaseModel):
    """Save draft response."""

    draft: Draft
    can_undo: bool
    can_redo: bool


class SaveDraftUseCase:
    """Use case for autosaving a draft."""

    def __init__(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> None:
        """Initialize save draft use case.

        Args:
            draft_service: Draft domain service
            draft_repository: Draft repository
        """
        self.draft_service = draft_service
        self.draft_repository = draft_repository

    async def execute(self, request: SaveDraftRequest) -> SaveDraftResponse:
        draft = await self.draft_repository.find_by_key(request.key)
        if draft is None:
            if request.thread_id:
                draft = self.draft_service.new_reply_draft(
                    ThreadId(UUID(request.thread_id)),
                    ReplyId(UUID(request.parent_id)) if request.parent_id else None,
                    key=request.key,
                )
            else:
                draft = self.draft_service.new_thread_draft(key=request.key)

        draft = self.draft_service.edit(draft, request.content)
        if request.title is not None and draft.is_thread:
            draft = self.draft_service.set_title(draft, request.title)
        if request.tags is not None and draft.is_thread:
            try:
                tags = [TagName(t) for t in request.tags]
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid tag: {e.errors()[0]['msg']}")
            draft = self.draft_service.set_tags(draft, tags)

        saved = await self.draft_repository.save(
            draft.model_copy(update={"saved_at": utc_now()})
        )
        return SaveDraftResponse(
            draft=saved,
            can_undo=self.draft_service.can_undo(saved),
            can_redo=self.draft_service.can_redo(saved),
        )
