"""Forum backend collaborator interface.

The forum backend owns persistence of posts and file storage. This module
only describes what the discussion engine needs from it; the HTTP client
and the test double live in `evforum.adapter.forum_api`.
"""

from typing import Optional

from evforum.domain.model.attachment import FileUpload
from evforum.domain.value import (
    EntityId,
    EntityType,
    ReplyId,
    TagName,
    TempOwnerId,
    ThreadId,
    Timestamp,
)
from evforum.domain.value.common import ValueObject


class CreatedPost(ValueObject):
    """Identity the backend assigned to a newly persisted thread or reply."""

    id: EntityId
    created_at: Timestamp


class UploadMetadata(ValueObject):
    """Metadata sent along with an uploaded file."""

    entity_type: EntityType
    temp_owner_id: TempOwnerId
    alt_text: Optional[str] = None
    caption: Optional[str] = None


class UploadedFile(ValueObject):
    """Backend record of a stored file."""

    id: str
    file_path: str
    mime_type: str
    size_bytes: int


class ForumBackend:
    """Interface to the forum backend.

    Implementations raise on transport or server failure; callers decide
    whether that failure is fatal.
    """

    async def create_post(
        self,
        content: str,
        thread_id: Optional[ThreadId] = None,
        parent_id: Optional[ReplyId] = None,
        title: Optional[str] = None,
        tags: tuple[TagName, ...] = (),
    ) -> CreatedPost:
        """Persist a new thread (thread_id None) or reply.

        Args:
            content: Raw markdown content
            thread_id: Thread being replied to, None for a new thread
            parent_id: Parent reply for nested replies
            title: Title of a new thread
            tags: Tags of a new thread

        Returns:
            Id and creation time assigned by the backend
        """
        raise NotImplementedError

    async def upload_file(self, file: FileUpload, metadata: UploadMetadata) -> UploadedFile:
        """Store a file in backend storage.

        Args:
            file: File selected by the user
            metadata: Owner and description of the file

        Returns:
            The stored file record
        """
        raise NotImplementedError

    async def update_file_association(self, file_id: str, real_owner_id: EntityId) -> bool:
        """Re-link a stored file from its temp owner to its real owner.

        Args:
            file_id: Backend id of the stored file
            real_owner_id: Id of the persisted thread or reply

        Returns:
            True if the backend accepted the association
        """
        raise NotImplementedError

    async def update_post(self, post_id: EntityId, content: str) -> None:
        """Replace the content of an existing reply.

        Args:
            post_id: Id of the persisted reply
            content: New raw markdown content
        """
        raise NotImplementedError
