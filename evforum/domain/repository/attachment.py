"""Attachment repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from evforum.domain.model.attachment import AttachmentRef
from evforum.domain.value import AttachmentId, TempOwnerId


class AttachmentRepository(ABC):
    """Repository for attachment references.

    Only references are stored here; file bytes live in external storage.
    """

    @abstractmethod
    async def find_by_id(self, attachment_id: AttachmentId) -> Optional[AttachmentRef]:
        """Find an attachment by ID.

        Args:
            attachment_id: The attachment's local identifier

        Returns:
            The attachment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_temp_owner(self, temp_owner_id: TempOwnerId) -> list[AttachmentRef]:
        """Find all attachments grouped under a temp owner, oldest first.

        Args:
            temp_owner_id: Temp owner (draft) identifier

        Returns:
            Attachments in selection order, in any state
        """
        pass

    @abstractmethod
    async def save(self, attachment: AttachmentRef) -> AttachmentRef:
        """Save (insert or replace) an attachment reference.

        Args:
            attachment: Attachment to save

        Returns:
            The saved attachment
        """
        pass

    @abstractmethod
    async def delete(self, attachment_id: AttachmentId) -> None:
        """Forget an attachment. Unknown ids are ignored.

        Args:
            attachment_id: The attachment's local identifier
        """
        pass
