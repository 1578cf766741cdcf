"""Get attachment use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from evforum.application.usecase.views import AttachmentView
from evforum.domain.service import AttachmentService
from evforum.domain.value import AttachmentId


class GetAttachmentRequest(BaseModel):
    """Get attachment request."""

    attachment_id: str


class GetAttachmentResponse(BaseModel):
    """Attachment state, or the reason its upload failed."""

    attachment: Optional[AttachmentView]
    upload_error: Optional[str] = None


class GetAttachmentUseCase:
    """Use case for polling an attachment's upload state."""

    def __init__(self, attachment_service: AttachmentService) -> None:
        """Initialize get attachment use case.

        Args:
            attachment_service: Attachment domain service
        """
        self.attachment_service = attachment_service

    async def execute(self, request: GetAttachmentRequest) -> GetAttachmentResponse:
        """Look up an attachment.

        Raises:
            NotFoundError: If the attachment never existed
        """
        attachment_id = AttachmentId(UUID(request.attachment_id))
        failure = self.attachment_service.upload_failure(attachment_id)
        if failure is not None:
            return GetAttachmentResponse(attachment=None, upload_error=failure.reason)
        attachment = await self.attachment_service.get(attachment_id)
        return GetAttachmentResponse(attachment=AttachmentView.from_attachment(attachment))
