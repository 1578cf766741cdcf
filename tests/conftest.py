"""Test configuration and shared builders."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from evforum.domain.model.attachment import FileUpload
from evforum.domain.model.reply import Reply
from evforum.domain.model.thread import Thread
from evforum.domain.value import ReplyId, ThreadId, UserId

# Spans and events are recorded but never printed or exported
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_thread(**overrides) -> Thread:
    """Build a thread with sensible defaults."""
    fields = {
        "id": ThreadId(uuid4()),
        "title": "Model Y winter range",
        "author_id": UserId(uuid4()),
        "content": "How much range do you lose below freezing?",
        "created_at": BASE_TIME,
    }
    fields.update(overrides)
    return Thread(**fields)


def make_reply(thread: Thread, parent: Reply | None = None, **overrides) -> Reply:
    """Build a reply placed directly under `parent` (or the thread)."""
    fields = {
        "id": ReplyId(uuid4()),
        "thread_id": thread.id,
        "author_id": UserId(uuid4()),
        "content": "Around 20% with preconditioning.",
        "parent_id": parent.id if parent else None,
        "nesting_level": parent.nesting_level + 1 if parent else 0,
        "created_at": BASE_TIME + timedelta(minutes=1),
    }
    fields.update(overrides)
    return Reply(**fields)


def make_image(filename: str = "charger.png", size_bytes: int = 1024) -> FileUpload:
    """Build an image upload of the given size."""
    return FileUpload(filename=filename, mime_type="image/png", data=b"\x89" * size_bytes)
