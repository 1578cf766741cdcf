"""In-memory attachment repository."""

from typing import Optional

from evforum.domain.model.attachment import AttachmentRef
from evforum.domain.repository.attachment import AttachmentRepository
from evforum.domain.value import AttachmentId, TempOwnerId


class InMemoryAttachmentRepository(AttachmentRepository):
    """In-memory implementation of AttachmentRepository."""

    def __init__(self) -> None:
        self._attachments: dict[AttachmentId, AttachmentRef] = {}

    async def find_by_id(self, attachment_id: AttachmentId) -> Optional[AttachmentRef]:
        """Find an attachment by ID."""
        return self._attachments.get(attachment_id)

    async def find_by_temp_owner(self, temp_owner_id: TempOwnerId) -> list[AttachmentRef]:
        """Find all attachments of a temp owner in selection order."""
        attachments = [
            a for a in self._attachments.values() if a.temp_owner_id == temp_owner_id
        ]
        attachments.sort(key=lambda a: a.created_at)
        return attachments

    async def save(self, attachment: AttachmentRef) -> AttachmentRef:
        """Save an attachment."""
        self._attachments[attachment.id] = attachment
        return attachment

    async def delete(self, attachment_id: AttachmentId) -> None:
        """Delete an attachment."""
        self._attachments.pop(attachment_id, None)
