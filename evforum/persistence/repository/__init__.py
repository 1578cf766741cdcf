"""Repository implementations."""

from evforum.persistence.repository.file import FileDraftRepository
from evforum.persistence.repository.inmemory import (
    InMemoryAttachmentRepository,
    InMemoryDraftRepository,
    InMemoryReplyTreeRepository,
)

__all__ = [
    "FileDraftRepository",
    "InMemoryAttachmentRepository",
    "InMemoryDraftRepository",
    "InMemoryReplyTreeRepository",
]
