"""In-memory draft repository."""

from typing import Optional

from evforum.domain.model.draft import Draft
from evforum.domain.repository.draft import DraftRepository


class InMemoryDraftRepository(DraftRepository):
    """In-memory implementation of DraftRepository."""

    def __init__(self) -> None:
        self._drafts: dict[str, Draft] = {}

    async def find_by_key(self, key: str) -> Optional[Draft]:
        """Find a saved draft."""
        return self._drafts.get(key)

    async def save(self, draft: Draft) -> Draft:
        """Save a draft."""
        self._drafts[draft.key] = draft
        return draft

    async def delete(self, key: str) -> None:
        """Delete a saved draft."""
        self._drafts.pop(key, None)
