"""Remove attachment use case."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from evforum.application.usecase.views import AttachmentView
from evforum.domain.error import NotFoundError
from evforum.domain.repository import DraftRepository
from evforum.domain.service import AttachmentService, DraftService
from evforum.domain.value import AttachmentId


class RemoveAttachmentRequest(BaseModel):
    """Remove attachment request."""

    draft_key: str
    attachment_id: str


class RemoveAttachmentResponse(BaseModel):
    """Remove attachment response."""

    # None when the file had already failed to upload
    attachment: Optional[AttachmentView]


class RemoveAttachmentUseCase:
    """Use case for removing a file from a draft before submission."""

    def __init__(
        self,
        draft_service: DraftService,
        attachment_service: AttachmentService,
        draft_repository: DraftRepository,
    ) -> None:
        """Initialize remove attachment use case.

        Args:
            draft_service: Draft domain service
            attachment_service: Attachment domain service
            draft_repository: Draft repository (autosave)
        """
        self.draft_service = draft_service
        self.attachment_service = attachment_service
        self.draft_repository = draft_repository

    async def execute(self, request: RemoveAttachmentRequest) -> RemoveAttachmentResponse:
        """Cancel the attachment's upload and detach it from the draft.

        Raises:
            NotFoundError: If the draft does not exist, or the attachment is
                not one of the draft's
        """
        attachment_id = AttachmentId(UUID(request.attachment_id))
        draft = await self.draft_repository.find_by_key(request.draft_key)
        if draft is None:
            raise NotFoundError("Draft", request.draft_key)

        with logfire.span(
            "remove_attachment.execute",
            draft_key=draft.key,
            attachment_id=request.attachment_id,
        ):
            if attachment_id not in draft.pending_attachment_ids:
                logfire.warn(
                    "Attachment removal refused",
                    draft_key=draft.key,
                    attachment_id=request.attachment_id,
                )
                raise NotFoundError("Attachment", request.attachment_id)

            if self.attachment_service.upload_failure(attachment_id) is not None:
                # Failed uploads leave no record, only the draft's reference
                self.attachment_service.discard_failures([attachment_id])
                attachment = None
            else:
                attachment = await self.attachment_service.get(attachment_id)
                if attachment.temp_owner_id != draft.temp_owner_id:
                    raise NotFoundError("Attachment", request.attachment_id)
                attachment = await self.attachment_service.remove(attachment_id)

            await self.draft_repository.save(
                self.draft_service.detach(draft, attachment_id)
            )
            return RemoveAttachmentResponse(
                attachment=AttachmentView.from_attachment(attachment)
                if attachment
                else None
            )
