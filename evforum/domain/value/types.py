"""Domain value objects for the discussion engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, Field, ValidationInfo, field_validator

from evforum.domain.value.common import RootValueObject, ValueObject

# Replies may nest at most two levels beneath a top-level reply (levels 0, 1, 2)
MAX_NESTING = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# All domain timestamps are aware UTC so they can be compared and sorted
Timestamp = Annotated[datetime, AfterValidator(as_utc)]


class AttachmentState(str, Enum):
    """Lifecycle state of an attachment.

    pending -> bound | orphaned | removed. No transition leaves the
    three terminal states.
    """

    PENDING = "pending"
    BOUND = "bound"
    ORPHANED = "orphaned"
    REMOVED = "removed"

    @property
    def is_terminal(self) -> bool:
        return self is not AttachmentState.PENDING


class AttachmentContext(str, Enum):
    """Where an attachment is used; selects the upload limits."""

    POST_ATTACHMENT = "post_attachment"
    REPLY_IMAGE = "reply_image"
    THREAD_IMAGE = "thread_image"

    @property
    def entity_type(self) -> "EntityType":
        """Entity type reported to the upload collaborator."""
        if self is AttachmentContext.REPLY_IMAGE:
            return EntityType.FORUM_REPLY
        return EntityType.FORUM_POST


class EntityType(str, Enum):
    """Kind of entity an uploaded file belongs to."""

    FORUM_POST = "forum_post"
    FORUM_REPLY = "forum_reply"


class AttachmentLimit(str, Enum):
    """Which upload constraint a file violated."""

    SIZE = "size"
    TYPE = "type"
    COUNT = "count"
    NAME = "name"


class ReplySortOrder(str, Enum):
    """Ordering of a sibling set of replies."""

    OLDEST = "oldest"
    NEWEST = "newest"


class ThreadSortOrder(str, Enum):
    """Ordering of a thread list. Pinned threads always come first."""

    OLDEST = "oldest"
    NEWEST = "newest"
    LATEST_ACTIVITY = "latest_activity"
    POPULAR = "popular"
    REPLIES = "replies"
    TRENDING = "trending"


class ThreadFilter(str, Enum):
    """Thread list filters offered by the category page."""

    ALL = "all"
    PINNED = "pinned"
    LOCKED = "locked"
    TRENDING = "trending"


class FormatCommand(str, Enum):
    """Formatting toolbar commands."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    INLINE_CODE = "inline_code"
    QUOTE = "quote"
    BULLET_LIST = "bullet_list"
    NUMBERED_LIST = "numbered_list"
    CODE_BLOCK = "code_block"
    LINK = "link"
    IMAGE = "image"
    TABLE = "table"
    RULE = "rule"


class TagName(RootValueObject[str]):
    """Thread tag.

    Free-form label shown on thread cards, e.g. 'Software Update',
    'Charging', 'Model 3'. 1-50 characters, no line breaks.
    """

    @field_validator("root")
    @classmethod
    def validate_tag_name(cls, v: str) -> str:
        """Validate tag name format."""
        v = v.strip()
        if not 1 <= len(v) <= 50:
            raise ValueError("Tag must be 1-50 characters")
        if re.search(r"[\r\n]", v):
            raise ValueError("Tag must be a single line")
        return v


class Selection(ValueObject):
    """Cursor selection inside a draft's content (start <= end)."""

    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)

    @field_validator("end")
    @classmethod
    def validate_order(cls, v: int, info: ValidationInfo) -> int:
        start = info.data.get("start", 0)
        if v < start:
            raise ValueError("Selection end must not precede start")
        return v


class WarningKind(str, Enum):
    """Stage of a submission that produced a non-fatal warning."""

    UPLOAD = "upload"
    BIND = "bind"


class SubmissionWarning(ValueObject):
    """Non-fatal problem with one attachment during a submission.

    The post itself was created; the named file is not part of it.
    """

    kind: WarningKind
    attachment_id: UUID
    filename: str
    message: str
