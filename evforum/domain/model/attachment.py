"""Attachment entities.

An attachment is selected and uploaded while its owning reply or thread is
still a draft. Until the owner exists it is grouped under the draft's temp
owner id; binding later re-links it to the real owner.
"""

from typing import Optional

from pydantic import Field

from evforum.domain.model.common import DomainModel
from evforum.domain.value import (
    AttachmentContext,
    AttachmentId,
    AttachmentState,
    EntityId,
    TempOwnerId,
    Timestamp,
    utc_now,
)
from evforum.domain.value.common import ValueObject

MAX_FILENAME_LENGTH = 255


class FileUpload(ValueObject):
    """A file selected by the user, not yet transferred."""

    filename: str = Field(min_length=1, max_length=MAX_FILENAME_LENGTH)
    mime_type: str = "application/octet-stream"
    data: bytes = Field(repr=False)
    alt_text: Optional[str] = None
    caption: Optional[str] = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class AttachmentRef(DomainModel):
    """Reference to an uploaded (or uploading) file.

    `id` is assigned locally when the file is selected. `file_id` and
    `storage_path` come from the upload response, so an attachment whose
    transfer is still running has neither.

    Lifecycle: pending -> bound | orphaned | removed
    """

    id: AttachmentId
    context: AttachmentContext
    filename: str
    mime_type: str
    size_bytes: int = Field(ge=0)
    temp_owner_id: Optional[TempOwnerId] = None
    real_owner_id: Optional[EntityId] = None
    file_id: Optional[str] = None
    storage_path: Optional[str] = None
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    state: AttachmentState = AttachmentState.PENDING
    created_at: Timestamp = Field(default_factory=utc_now)

    @property
    def is_uploaded(self) -> bool:
        return self.file_id is not None

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")
