"""Domain value objects for the discussion engine."""

from evforum.domain.value.identifiers import (
    AttachmentId,
    EntityId,
    ReplyId,
    TempOwnerId,
    ThreadId,
    UserId,
)
from evforum.domain.value.types import (
    MAX_NESTING,
    AttachmentContext,
    AttachmentLimit,
    AttachmentState,
    EntityType,
    FormatCommand,
    ReplySortOrder,
    Selection,
    SubmissionWarning,
    TagName,
    ThreadFilter,
    ThreadSortOrder,
    Timestamp,
    WarningKind,
    as_utc,
    utc_now,
)

__all__ = [
    # Identifiers
    "UserId",
    "ThreadId",
    "ReplyId",
    "AttachmentId",
    "EntityId",
    "TempOwnerId",
    # Types
    "MAX_NESTING",
    "AttachmentContext",
    "AttachmentLimit",
    "AttachmentState",
    "EntityType",
    "FormatCommand",
    "ReplySortOrder",
    "Selection",
    "SubmissionWarning",
    "TagName",
    "ThreadFilter",
    "ThreadSortOrder",
    "Timestamp",
    "WarningKind",
    "as_utc",
    "utc_now",
]
