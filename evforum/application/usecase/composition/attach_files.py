"""Attach files use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from evforum.application.usecase.views import AttachmentView
from evforum.domain.error import AttachmentValidationError, NotFoundError
from evforum.domain.model.attachment import FileUpload
from evforum.domain.repository import DraftRepository
from evforum.domain.service import AttachmentService, DraftService
from evforum.domain.value import AttachmentContext, AttachmentLimit


class AttachmentRejection(BaseModel):
    """A selected file that was refused before upload."""

    filename: str
    limit: AttachmentLimit
    message: str


class AttachFilesRequest(BaseModel):
    """Attach files request."""

    draft_key: str
    files: list[FileUpload]
    # Defaults to the draft's image context
    context: Optional[AttachmentContext] = None


class AttachFilesResponse(BaseModel):
    """Attach files response."""

    attachments: list[AttachmentView]
    rejections: list[AttachmentRejection]


class AttachFilesUseCase:
    """Use case for selecting files on a draft.

    Accepted files start uploading immediately; the response does not wait
    for the transfers.
    """

    def __init__(
        self,
        draft_service: DraftService,
        attachment_service: AttachmentService,
        draft_repository: DraftRepository,
    ) -> None:
        """Initialize attach files use case.

        Args:
            draft_service: Draft domain service
            attachment_service: Attachment domain service
            draft_repository: Draft repository (autosave)
        """
        self.draft_service = draft_service
        self.attachment_service = attachment_service
        self.draft_repository = draft_repository

    async def execute(self, request: AttachFilesRequest) -> AttachFilesResponse:
        """Execute attach files flow.

        Files are reserved in selection order, so when a count limit is hit
        the earlier files win. A rejected file does not stop the others.

        Raises:
            NotFoundError: If the draft does not exist
        """
        draft = await self.draft_repository.find_by_key(request.draft_key)
        if draft is None:
            raise NotFoundError("Draft", request.draft_key)
        context = request.context or draft.attachment_context

        with logfire.span(
            "attach_files.execute",
            draft_key=draft.key,
            context=context.value,
            files=len(request.files),
        ):
            attachments = []
            rejections = []
            for file in request.files:
                try:
                    attachment = await self.attachment_service.start_upload(
                        file, draft.temp_owner_id, context
                    )
                except AttachmentValidationError as e:
                    logfire.info(
                        "Attachment rejected",
                        draft_key=draft.key,
                        filename=e.filename,
                        limit=e.limit.value,
                    )
                    rejections.append(
                        AttachmentRejection(
                            filename=e.filename, limit=e.limit, message=str(e)
                        )
                    )
                    continue
                attachments.append(attachment)

            draft = self.draft_service.attach(draft, (a.id for a in attachments))
            await self.draft_repository.save(draft)

            return AttachFilesResponse(
                attachments=[AttachmentView.from_attachment(a) for a in attachments],
                rejections=rejections,
            )
