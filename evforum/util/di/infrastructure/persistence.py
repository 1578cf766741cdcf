"""Persistence infrastructure providers."""

from dishka import Scope, provide

from evforum.config import DraftSettings
from evforum.domain.repository import (
    AttachmentRepository,
    DraftRepository,
    ReplyTreeRepository,
)
from evforum.persistence.repository import (
    FileDraftRepository,
    InMemoryAttachmentRepository,
    InMemoryDraftRepository,
    InMemoryReplyTreeRepository,
)
from evforum.util.di.base import ProviderBase


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider.

    Threads and attachments are process-local and live as long as the
    container. Drafts go to disk when DRAFTS__STORAGE=file so they survive
    a restart.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide
    def get_attachment_repository(self) -> AttachmentRepository:
        """Provide Attachment repository."""
        return InMemoryAttachmentRepository()

    @provide
    def get_reply_tree_repository(self) -> ReplyTreeRepository:
        """Provide ReplyTree repository."""
        return InMemoryReplyTreeRepository()

    @provide
    def get_draft_repository(self, draft_settings: DraftSettings) -> DraftRepository:
        """Provide Draft repository."""
        if draft_settings.storage == "file":
            return FileDraftRepository(draft_settings.directory)
        return InMemoryDraftRepository()
