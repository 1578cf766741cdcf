"""Steps shared by reply and thread submission."""

from typing import Sequence

import logfire

from evforum.domain.service import AttachmentService, BindResult
from evforum.domain.value import (
    AttachmentId,
    EntityId,
    SubmissionWarning,
    WarningKind,
)


async def settle_uploads(
    attachment_service: AttachmentService, attachment_ids: Sequence[AttachmentId]
) -> tuple[list[AttachmentId], list[SubmissionWarning]]:
    """Wait for in-flight uploads and split off the ones that failed.

    Failures are looked up for every id on the draft, including uploads
    that had already failed before the submission started.

    Returns:
        Ids still worth binding, and one warning per failed upload
    """
    failures = await attachment_service.wait_for_uploads(attachment_ids)
    failed = {failure.attachment_id for failure in failures}
    warnings = [
        SubmissionWarning(
            kind=WarningKind.UPLOAD,
            attachment_id=failure.attachment_id,
            filename=failure.filename,
            message=failure.reason,
        )
        for failure in failures
    ]
    return [i for i in attachment_ids if i not in failed], warnings


async def bind_attachments(
    attachment_service: AttachmentService,
    attachment_ids: Sequence[AttachmentId],
    owner_id: EntityId,
) -> tuple[BindResult, list[SubmissionWarning]]:
    """Bind attachments to the created post, turning failures into warnings."""
    result = await attachment_service.bind(attachment_ids, owner_id)
    warnings = [
        SubmissionWarning(
            kind=WarningKind.BIND,
            attachment_id=failure.attachment_id,
            filename=failure.filename,
            message=failure.reason,
        )
        for failure in result.failures
    ]
    for warning in warnings:
        logfire.warn(
            "Attachment dropped from post",
            owner_id=str(owner_id),
            attachment_id=str(warning.attachment_id),
            filename=warning.filename,
        )
    return result, warnings
