"""Thread entity.

A thread is the top-level discussion post of a category. Its opening text
is rendered like any reply; the replies themselves live in the thread's
ReplyTree, and the thread only keeps the ids of its top-level replies.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from evforum.domain.markdown import render
from evforum.domain.model.attachment import AttachmentRef
from evforum.domain.model.common import DomainModel
from evforum.domain.model.rendered import BlockNode
from evforum.domain.value import (
    ReplyId,
    TagName,
    ThreadId,
    Timestamp,
    UserId,
    utc_now,
)


class Thread(DomainModel):
    """Thread entity.

    `view_count`, `reply_count` and `last_activity_at` are maintained by the
    forum backend and only read here, by thread-list ordering. Pinning and
    locking are moderation actions owned by the backend as well.
    """

    id: ThreadId
    title: str = Field(min_length=1, max_length=200)
    author_id: UserId
    content: str = ""
    rendered_content: tuple[BlockNode, ...] = ()
    attachments: tuple[AttachmentRef, ...] = ()
    tags: frozenset[TagName] = frozenset()
    is_pinned: bool = False
    is_locked: bool = False
    root_reply_ids: tuple[ReplyId, ...] = ()
    view_count: int = Field(default=0, ge=0)
    reply_count: int = Field(default=0, ge=0)
    created_at: Timestamp = Field(default_factory=utc_now)
    last_activity_at: Optional[Timestamp] = None

    @model_validator(mode="before")
    @classmethod
    def render_content(cls, data: Any) -> Any:
        """Derive rendered_content from content when it is not supplied."""
        if isinstance(data, dict) and "rendered_content" not in data:
            content = data.get("content")
            if isinstance(content, str):
                return {**data, "rendered_content": render(content)}
        return data

    @property
    def last_activity(self) -> datetime:
        return self.last_activity_at or self.created_at

    def is_trending(self, view_threshold: int) -> bool:
        return self.view_count > view_threshold
