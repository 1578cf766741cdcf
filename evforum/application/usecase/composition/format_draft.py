"""Format draft use case."""

from typing import Literal

from pydantic import BaseModel, Field

from evforum.domain.error import NotFoundError
from evforum.domain.model.draft import Draft
from evforum.domain.repository import DraftRepository
from evforum.domain.service import DraftService
from evforum.domain.value import FormatCommand, Selection


class FormatDraftRequest(BaseModel):
    """Formatting toolbar request."""

    key: str
    command: FormatCommand
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)
    language: str = ""  # CODE_BLOCK only
    url: str = ""  # LINK only
    text: str = ""  # LINK only


class FormatDraftResponse(BaseModel):
    """Format draft response."""

    draft: Draft
    cursor: int


class FormatDraftUseCase:
    """Use case for applying a toolbar command to a saved draft."""

    def __init__(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> None:
        """Initialize format draft use case.

        Args:
            draft_service: Draft domain service
            draft_repository: Draft repository
        """
        self.draft_service = draft_service
        self.draft_repository = draft_repository

    async def execute(self, request: FormatDraftRequest) -> FormatDraftResponse:
        """Apply the command and save the result.

        Raises:
            NotFoundError: If the draft does not exist
        """
        draft = await self.draft_repository.find_by_key(request.key)
        if draft is None:
            raise NotFoundError("Draft", request.key)

        result = self.draft_service.apply_format(
            draft,
            request.command,
            Selection(start=request.start, end=max(request.start, request.end)),
            language=request.language,
            url=request.url,
            text=request.text,
        )
        saved = await self.draft_repository.save(result.draft)
        return FormatDraftResponse(draft=saved, cursor=result.cursor)


class StepDraftHistoryRequest(BaseModel):
    """Undo/redo request."""

    key: str
    direction: Literal["undo", "redo"]


class StepDraftHistoryResponse(BaseModel):
    """Undo/redo response."""

    draft: Draft
    can_undo: bool
    can_redo: bool


class StepDraftHistoryUseCase:
    """Use case for undo and redo on a saved draft."""

    def __init__(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> None:
        self.draft_service = draft_service
        self.draft_repository = draft_repository

    async def execute(self, request: StepDraftHistoryRequest) -> StepDraftHistoryResponse:
        draft = await self.draft_repository.find_by_key(request.key)
        if draft is None:
            raise NotFoundError("Draft", request.key)

        if request.direction == "undo":
            draft = self.draft_service.undo(draft)
        else:
            draft = self.draft_service.redo(draft)
        saved = await self.draft_repository.save(draft)
        return StepDraftHistoryResponse(
            draft=saved,
            can_undo=self.draft_service.can_undo(saved),
            can_redo=self.draft_service.can_redo(saved),
        )
