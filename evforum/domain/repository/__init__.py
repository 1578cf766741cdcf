"""Repository interfaces for the discussion engine.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from evforum.domain.repository.attachment import AttachmentRepository
from evforum.domain.repository.draft import DraftRepository
from evforum.domain.repository.reply_tree import ReplyTreeRepository

__all__ = [
    "AttachmentRepository",
    "DraftRepository",
    "ReplyTreeRepository",
]
