"""Draft repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from evforum.domain.model.draft import Draft


class DraftRepository(ABC):
    """Autosave storage for drafts, keyed by draft key."""

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[Draft]:
        """Find a saved draft.

        Args:
            key: Draft key

        Returns:
            The last saved draft, None if nothing was saved
        """
        pass

    @abstractmethod
    async def save(self, draft: Draft) -> Draft:
        """Save a draft, replacing any earlier save under the same key.

        Args:
            draft: Draft to save

        Returns:
            The saved draft
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a saved draft. Unknown keys are ignored.

        Args:
            key: Draft key
        """
        pass
