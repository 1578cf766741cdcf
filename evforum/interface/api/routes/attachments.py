"""Attachment routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, File, Form, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from evforum.application.usecase.composition import (
    AttachFilesRequest,
    AttachFilesResponse,
    AttachFilesUseCase,
    AttachmentRejection,
    GetAttachmentRequest,
    GetAttachmentResponse,
    GetAttachmentUseCase,
    RemoveAttachmentRequest,
    RemoveAttachmentResponse,
    RemoveAttachmentUseCase,
)
from evforum.config import AttachmentSettings
from evforum.domain.error import AttachmentValidationError, DomainError
from evforum.domain.model.attachment import MAX_FILENAME_LENGTH, FileUpload
from evforum.domain.value import AttachmentContext, AttachmentLimit
from evforum.interface.error import http_error, parse_id

router = APIRouter(prefix="/attachments", tags=["attachments"], route_class=DishkaRoute)


@router.post(
    "",
    response_model=AttachFilesResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def attach_files(
    attach_files_use_case: FromDishka[AttachFilesUseCase],
    attachment_settings: FromDishka[AttachmentSettings],
    draft_key: str = Form(...),
    files: list[UploadFile] = File(...),
    context: AttachmentContext | None = Form(default=None),
    alt_text: str | None = Form(default=None),
    caption: str | None = Form(default=None),
) -> AttachFilesResponse:
    """Select files for a draft and start uploading them.

    Returns immediately; poll `GET /attachments/{id}` for upload state.
    Files over a limit are listed in `rejections` and the rest proceed.
    `alt_text` and `caption` apply to every file of the request.
    """
    uploads = []
    rejections = []
    for file in files:
        try:
            uploads.append(
                await _read_upload(
                    file, attachment_settings.largest_size_bytes, alt_text, caption
                )
            )
        except AttachmentValidationError as e:
            logfire.info(
                "Attachment rejected",
                draft_key=draft_key,
                filename=e.filename,
                limit=e.limit.value,
            )
            rejections.append(
                AttachmentRejection(filename=e.filename, limit=e.limit, message=str(e))
            )

    try:
        response = await attach_files_use_case.execute(
            AttachFilesRequest(draft_key=draft_key, files=uploads, context=context)
        )
    except DomainError as e:
        logfire.warn("Attaching files failed", draft_key=draft_key, error=str(e))
        raise http_error(e)
    return response.model_copy(
        update={"rejections": [*rejections, *response.rejections]}
    )


async def _read_upload(
    file: UploadFile,
    max_size_bytes: int,
    alt_text: str | None,
    caption: str | None,
) -> FileUpload:
    """Read one multipart file into a FileUpload.

    The declared size is checked before the body is read.

    Raises:
        AttachmentValidationError: If the file is too large or its name is invalid
    """
    filename = file.filename or "upload"
    if file.size is not None and file.size > max_size_bytes:
        raise AttachmentValidationError(
            filename[:MAX_FILENAME_LENGTH],
            AttachmentLimit.SIZE,
            f"file is {file.size} bytes, limit is {max_size_bytes}",
        )
    try:
        return FileUpload(
            filename=filename,
            mime_type=file.content_type or "application/octet-stream",
            data=await file.read(),
            alt_text=alt_text,
            caption=caption,
        )
    except PydanticValidationError as e:
        raise AttachmentValidationError(
            filename[:MAX_FILENAME_LENGTH],
            AttachmentLimit.NAME,
            e.errors()[0]["msg"],
        )


@router.get("/{attachment_id}", response_model=GetAttachmentResponse)
async def get_attachment(
    attachment_id: str,
    get_attachment_use_case: FromDishka[GetAttachmentUseCase],
) -> GetAttachmentResponse:
    """Get an attachment's upload state."""
    parse_id(attachment_id, "Attachment")
    try:
        return await get_attachment_use_case.execute(
            GetAttachmentRequest(attachment_id=attachment_id)
        )
    except DomainError as e:
        raise http_error(e)


@router.delete("/{attachment_id}", response_model=RemoveAttachmentResponse)
async def remove_attachment(
    attachment_id: str,
    remove_attachment_use_case: FromDishka[RemoveAttachmentUseCase],
    draft_key: str = Query(...),
) -> RemoveAttachmentResponse:
    """Remove a pending attachment from its draft, cancelling its upload."""
    parse_id(attachment_id, "Attachment")
    try:
        return await remove_attachment_use_case.execute(
            RemoveAttachmentRequest(draft_key=draft_key, attachment_id=attachment_id)
        )
    except DomainError as e:
        raise http_error(e)
