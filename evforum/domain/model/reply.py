"""Reply entity.

Replies form a tree under their thread with bounded depth: level 0 replies
answer the thread directly, and a reply can be answered as long as its own
level is below MAX_NESTING. The depth rule is enforced when a reply is
inserted into its ReplyTree, not on construction.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from evforum.domain.markdown import render
from evforum.domain.model.attachment import AttachmentRef
from evforum.domain.model.common import DomainModel
from evforum.domain.model.rendered import BlockNode
from evforum.domain.value import (
    MAX_NESTING,
    ReplyId,
    ThreadId,
    Timestamp,
    UserId,
    as_utc,
    utc_now,
)


class Reply(DomainModel):
    """Reply entity.

    `rendered_content` is always derived from `content`. It is computed on
    construction when not given and recomputed wholesale by `with_content`.
    """

    id: ReplyId
    thread_id: ThreadId
    author_id: UserId
    content: str
    rendered_content: tuple[BlockNode, ...] = ()
    attachments: tuple[AttachmentRef, ...] = ()
    parent_id: Optional[ReplyId] = None
    nesting_level: int = Field(default=0, ge=0)
    created_at: Timestamp = Field(default_factory=utc_now)
    edited_at: Optional[Timestamp] = None

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
    def can_reply(self) -> bool:
        """Whether the reply-to-reply action may be offered."""
        return self.nesting_level < MAX_NESTING

    @property
    def is_edited(self) -> bool:
        return self.edited_at is not None

    def with_content(self, content: str, edited_at: datetime) -> "Reply":
        """Return an edited copy with freshly rendered content."""
        return self.model_copy(
            update={
                "content": content,
                "rendered_content": render(content),
                "edited_at": as_utc(edited_at),
            }
        )
