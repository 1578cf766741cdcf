"""Read models returned by use cases.

Views flatten domain entities into JSON-friendly shapes: ids become
strings and rendered content is delivered as HTML next to the raw text.
"""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel

from evforum.domain.markdown import to_html, to_plain_text
from evforum.domain.model.attachment import AttachmentRef
from evforum.domain.model.reply import Reply
from evforum.domain.model.thread import Thread

EXCERPT_LENGTH = 200


class AttachmentView(BaseModel):
    """Attachment as shown to clients."""

    attachment_id: str
    filename: str
    mime_type: str
    size_bytes: int
    state: str
    context: str
    file_path: Optional[str] = None
    alt_text: Optional[str] = None
    caption: Optional[str] = None

    @classmethod
    def from_attachment(cls, attachment: AttachmentRef) -> "AttachmentView":
        return cls(
            attachment_id=str(attachment.id),
            filename=attachment.filename,
            mime_type=attachment.mime_type,
            size_bytes=attachment.size_bytes,
            state=attachment.state.value,
            context=attachment.context.value,
            file_path=attachment.storage_path,
            alt_text=attachment.alt_text,
            caption=attachment.caption,
        )


class ReplyView(BaseModel):
    """Reply with its rendered HTML and, in thread views, its children."""

    reply_id: str
    thread_id: str
    parent_id: Optional[str]
    author_id: str
    content: str
    html: str
    nesting_level: int
    can_reply: bool
    created_at: datetime
    edited_at: Optional[datetime]
    attachments: list[AttachmentView]
    replies: list["ReplyView"] = []

    @classmethod
    def from_reply(
        cls, reply: Reply, replies: Iterable["ReplyView"] = ()
    ) -> "ReplyView":
        return cls(
            reply_id=str(reply.id),
            thread_id=str(reply.thread_id),
            parent_id=str(reply.parent_id) if reply.parent_id else None,
            author_id=str(reply.author_id),
            content=reply.content,
            html=to_html(reply.rendered_content),
            nesting_level=reply.nesting_level,
            can_reply=reply.can_reply,
            created_at=reply.created_at,
            edited_at=reply.edited_at,
            attachments=[AttachmentView.from_attachment(a) for a in reply.attachments],
            replies=list(replies),
        )


class ThreadSummary(BaseModel):
    """Thread card shown in thread lists."""

    thread_id: str
    title: str
    author_id: str
    excerpt: str
    tags: list[str]
    is_pinned: bool
    is_locked: bool
    view_count: int
    reply_count: int
    created_at: datetime
    last_activity_at: datetime

    @classmethod
    def from_thread(cls, thread: Thread) -> "ThreadSummary":
        return cls(**cls._fields(thread))

    @staticmethod
    def _fields(thread: Thread) -> dict:
        text = to_plain_text(thread.rendered_content)
        if len(text) > EXCERPT_LENGTH:
            text = text[:EXCERPT_LENGTH].rstrip() + "..."
        return {
            "thread_id": str(thread.id),
            "title": thread.title,
            "author_id": str(thread.author_id),
            "excerpt": text,
            "tags": sorted(tag.root for tag in thread.tags),
            "is_pinned": thread.is_pinned,
            "is_locked": thread.is_locked,
            "view_count": thread.view_count,
            "reply_count": thread.reply_count,
            "created_at": thread.created_at,
            "last_activity_at": thread.last_activity,
        }


class ThreadView(ThreadSummary):
    """Full thread: opening post content and attachments."""

    content: str
    html: str
    attachments: list[AttachmentView]

    @classmethod
    def from_thread(cls, thread: Thread) -> "ThreadView":
        return cls(
            **cls._fields(thread),
            content=thread.content,
            html=to_html(thread.rendered_content),
            attachments=[AttachmentView.from_attachment(a) for a in thread.attachments],
        )
