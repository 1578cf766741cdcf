"""Domain layer DI providers."""

from dishka import Scope, provide

from evforum.config import AttachmentSettings, CompositionSettings
from evforum.domain.repository import AttachmentRepository, ReplyTreeRepository
from evforum.domain.service import (
    AttachmentService,
    DraftService,
    ForumBackend,
    ThreadService,
)
from evforum.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Stateless services are REQUEST-scoped. AttachmentService is APP-scoped:
    it owns the upload tasks, which outlive the request that started them.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_attachment_service(
        self,
        attachment_repository: AttachmentRepository,
        backend: ForumBackend,
        attachment_settings: AttachmentSettings,
    ) -> AttachmentService:
        """Provide attachment lifecycle domain service."""
        return AttachmentService(
            attachment_repository=attachment_repository,
            backend=backend,
            attachment_settings=attachment_settings,
        )

    @provide
    def get_draft_service(self, composition_settings: CompositionSettings) -> DraftService:
        """Provide draft authoring domain service."""
        return DraftService(composition_settings=composition_settings)

    @provide
    def get_thread_service(
        self, reply_tree_repository: ReplyTreeRepository
    ) -> ThreadService:
        """Provide thread domain service."""
        return ThreadService(reply_tree_repository=reply_tree_repository)
