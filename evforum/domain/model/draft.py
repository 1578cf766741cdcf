"""Draft entity.

A draft is the authoring state of a reply or a new thread: the text being
typed, its undo/redo history and the attachments selected so far. Drafts
are autosaved so a crash or a failed submission never loses the text.
"""

from typing import Optional
from uuid import uuid4

from pydantic import Field

from evforum.domain.model.common import DomainModel
from evforum.domain.value import (
    AttachmentContext,
    AttachmentId,
    ReplyId,
    TagName,
    TempOwnerId,
    ThreadId,
    Timestamp,
)


def _new_temp_owner() -> TempOwnerId:
    return TempOwnerId(uuid4())


class Draft(DomainModel):
    """Draft of a reply (thread_id set) or of a new thread (thread_id None).

    `history` holds content snapshots; `history_index` points at the one
    currently shown, so undo/redo only move the index until the next edit.
    """

    key: str = Field(min_length=1, max_length=200)
    thread_id: Optional[ThreadId] = None
    parent_id: Optional[ReplyId] = None
    title: Optional[str] = None
    tags: tuple[TagName, ...] = ()
    content: str = ""
    temp_owner_id: TempOwnerId = Field(default_factory=_new_temp_owner)
    pending_attachment_ids: tuple[AttachmentId, ...] = ()
    history: tuple[str, ...] = ("",)
    history_index: int = Field(default=0, ge=0)
    saved_at: Optional[Timestamp] = None

    @property
    def is_thread(self) -> bool:
        return self.thread_id is None

    @property
    def attachment_context(self) -> AttachmentContext:
        """Context used for images attached to this draft."""
        if self.is_thread:
            return AttachmentContext.THREAD_IMAGE
        return AttachmentContext.REPLY_IMAGE
