"""Domain services."""

from .attachment_service import (
    AttachmentService,
    BindFailure,
    BindResult,
    UploadFailure,
)
from .backend import CreatedPost, ForumBackend, UploadedFile, UploadMetadata
from .base import Service
from .draft_service import DraftService, FormatResult
from .ordering import filter_threads, sort_replies, sort_threads
from .thread_service import ThreadService

__all__ = [
    "AttachmentService",
    "BindFailure",
    "BindResult",
    "CreatedPost",
    "DraftService",
    "FormatResult",
    "ForumBackend",
    "Service",
    "ThreadService",
    "UploadFailure",
    "UploadMetadata",
    "UploadedFile",
    "filter_threads",
    "sort_replies",
    "sort_threads",
]
