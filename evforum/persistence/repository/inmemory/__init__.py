"""In-memory repository implementations."""

from .attachment import InMemoryAttachmentRepository
from .draft import InMemoryDraftRepository
from .reply_tree import InMemoryReplyTreeRepository

__all__ = [
    "InMemoryAttachmentRepository",
    "InMemoryDraftRepository",
    "InMemoryReplyTreeRepository",
]
