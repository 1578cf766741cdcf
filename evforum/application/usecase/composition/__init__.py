"""Composition and submission use cases."""

from .attach_files import (
    AttachFilesRequest,
    AttachFilesResponse,
    AttachFilesUseCase,
    AttachmentRejection,
)
from .create_thread import (
    CreateThreadRequest,
    CreateThreadResponse,
    CreateThreadUseCase,
)
from .get_attachment import (
    GetAttachmentRequest,
    GetAttachmentResponse,
    GetAttachmentUseCase,
)
from .edit_reply import EditReplyRequest, EditReplyResponse, EditReplyUseCase
from .format_draft import (
    FormatDraftRequest,
    FormatDraftResponse,
    FormatDraftUseCase,
    StepDraftHistoryRequest,
    StepDraftHistoryResponse,
    StepDraftHistoryUseCase,
)
from .recover_draft import (
    RecoverDraftRequest,
    RecoverDraftResponse,
    RecoverDraftUseCase,
)
from .remove_attachment import (
    RemoveAttachmentRequest,
    RemoveAttachmentResponse,
    RemoveAttachmentUseCase,
)
from .save_draft import SaveDraftRequest, SaveDraftResponse, SaveDraftUseCase
from .submit_reply import (
    SubmitReplyRequest,
    SubmitReplyResponse,
    SubmitReplyUseCase,
)

__all__ = [
    "AttachFilesRequest",
    "AttachFilesResponse",
    "AttachFilesUseCase",
    "AttachmentRejection",
    "CreateThreadRequest",
    "CreateThreadResponse",
    "CreateThreadUseCase",
    "EditReplyRequest",
    "EditReplyResponse",
    "EditReplyUseCase",
    "GetAttachmentRequest",
    "GetAttachmentResponse",
    "GetAttachmentUseCase",
    "FormatDraftRequest",
    "FormatDraftResponse",
    "FormatDraftUseCase",
    "RecoverDraftRequest",
    "RecoverDraftResponse",
    "RecoverDraftUseCase",
    "RemoveAttachmentRequest",
    "RemoveAttachmentResponse",
    "RemoveAttachmentUseCase",
    "SaveDraftRequest",
    "SaveDraftResponse",
    "SaveDraftUseCase",
    "StepDraftHistoryRequest",
    "StepDraftHistoryResponse",
    "StepDraftHistoryUseCase",
    "SubmitReplyRequest",
    "SubmitReplyResponse",
    "SubmitReplyUseCase",
]
