"""Strongly typed identifiers for forum domain entities.

Using NewType keeps thread, reply and attachment ids from being mixed up
while staying plain UUIDs at runtime.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
ThreadId = NewType("ThreadId", UUID)
ReplyId = NewType("ReplyId", UUID)
AttachmentId = NewType("AttachmentId", UUID)

# Id of a persisted thread or reply, used as the real owner of attachments
EntityId = NewType("EntityId", UUID)

# Groups uploads made before their owning entity exists (one per draft)
TempOwnerId = NewType("TempOwnerId", UUID)
