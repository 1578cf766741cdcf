"""Recover draft use case."""

from pydantic import BaseModel

from evforum.domain.error import NotFoundError
from evforum.domain.model.draft import Draft
from evforum.domain.repository import DraftRepository


class RecoverDraftRequest(BaseModel):
    """Recover draft request."""

    key: str


class RecoverDraftResponse(BaseModel):
    """Recover draft response."""

    draft: Draft


class RecoverDraftUseCase:
    """Use case for restoring an autosaved draft."""

    def __init__(self, draft_repository: DraftRepository) -> None:
        """Initialize recover draft use case.

        Args:
            draft_repository: Draft repository
        """
        self.draft_repository = draft_repository

    async def execute(self, request: RecoverDraftRequest) -> RecoverDraftResponse:
        """Load the last saved version of a draft.

        Raises:
            NotFoundError: If nothing was saved under the key
        """
        draft = await self.draft_repository.find_by_key(request.key)
        if draft is None:
            raise NotFoundError("Draft", request.key)
        return RecoverDraftResponse(draft=draft)
