"""Application layer DI providers."""

from dishka import Scope, provide

from evforum.application.usecase.composition import (
    AttachFilesUseCase,
    CreateThreadUseCase,
    EditReplyUseCase,
    FormatDraftUseCase,
    GetAttachmentUseCase,
    RecoverDraftUseCase,
    RemoveAttachmentUseCase,
    SaveDraftUseCase,
    StepDraftHistoryUseCase,
    SubmitReplyUseCase,
)
from evforum.application.usecase.markdown import PreviewMarkdownUseCase
from evforum.application.usecase.thread import GetThreadUseCase, ListThreadsUseCase
from evforum.config import ThreadListSettings
from evforum.domain.repository import DraftRepository
from evforum.domain.service import (
    AttachmentService,
    DraftService,
    ForumBackend,
    ThreadService,
)
from evforum.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Submission use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_reply_use_case(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        attachment_service: AttachmentService,
        backend: ForumBackend,
        draft_repository: DraftRepository,
    ) -> SubmitReplyUseCase:
        """Provide submit reply use case."""
        return SubmitReplyUseCase(
            draft_service=draft_service,
            thread_service=thread_service,
            attachment_service=attachment_service,
            backend=backend,
            draft_repository=draft_repository,
        )

    @provide(scope=Scope.REQUEST)
    def get_create_thread_use_case(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        attachment_service: AttachmentService,
        backend: ForumBackend,
        draft_repository: DraftRepository,
    ) -> CreateThreadUseCase:
        """Provide create thread use case."""
        return CreateThreadUseCase(
            draft_service=draft_service,
            thread_service=thread_service,
            attachment_service=attachment_service,
            backend=backend,
            draft_repository=draft_repository,
        )

    @provide(scope=Scope.REQUEST)
    def get_edit_reply_use_case(
        self,
        draft_service: DraftService,
        thread_service: ThreadService,
        backend: ForumBackend,
    ) -> EditReplyUseCase:
        """Provide edit reply use case."""
        return EditReplyUseCase(
            draft_service=draft_service,
            thread_service=thread_service,
            backend=backend,
        )

    # Attachment use cases
    @provide(scope=Scope.REQUEST)
    def get_attach_files_use_case(
        self,
        draft_service: DraftService,
        attachment_service: AttachmentService,
        draft_repository: DraftRepository,
    ) -> AttachFilesUseCase:
        """Provide attach files use case."""
        return AttachFilesUseCase(
            draft_service=draft_service,
            attachment_service=attachment_service,
            draft_repository=draft_repository,
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_attachment_use_case(
        self,
        draft_service: DraftService,
        attachment_service: AttachmentService,
        draft_repository: DraftRepository,
    ) -> RemoveAttachmentUseCase:
        """Provide remove attachment use case."""
        return RemoveAttachmentUseCase(
            draft_service=draft_service,
            attachment_service=attachment_service,
            draft_repository=draft_repository,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_attachment_use_case(
        self, attachment_service: AttachmentService
    ) -> GetAttachmentUseCase:
        """Provide get attachment use case."""
        return GetAttachmentUseCase(attachment_service=attachment_service)

    # Draft use cases
    @provide(scope=Scope.REQUEST)
    def get_save_draft_use_case(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> SaveDraftUseCase:
        """Provide save draft use case."""
        return SaveDraftUseCase(
            draft_service=draft_service, draft_repository=draft_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_recover_draft_use_case(
        self, draft_repository: DraftRepository
    ) -> RecoverDraftUseCase:
        """Provide recover draft use case."""
        return RecoverDraftUseCase(draft_repository=draft_repository)

    @provide(scope=Scope.REQUEST)
    def get_format_draft_use_case(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> FormatDraftUseCase:
        """Provide format draft use case."""
        return FormatDraftUseCase(
            draft_service=draft_service, draft_repository=draft_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_step_draft_history_use_case(
        self, draft_service: DraftService, draft_repository: DraftRepository
    ) -> StepDraftHistoryUseCase:
        """Provide undo/redo use case."""
        return StepDraftHistoryUseCase(
            draft_service=draft_service, draft_repository=draft_repository
        )

    # Thread use cases
    @provide(scope=Scope.REQUEST)
    def get_get_thread_use_case(self, thread_service: ThreadService) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(thread_service=thread_service)

    @provide(scope=Scope.REQUEST)
    def get_list_threads_use_case(
        self, thread_service: ThreadService, thread_list_settings: ThreadListSettings
    ) -> ListThreadsUseCase:
        """Provide list threads use case."""
        return ListThreadsUseCase(
            thread_service=thread_service, thread_list_settings=thread_list_settings
        )

    # Markdown use cases
    @provide(scope=Scope.REQUEST)
    def get_preview_markdown_use_case(self) -> PreviewMarkdownUseCase:
        """Provide preview markdown use case."""
        return PreviewMarkdownUseCase()
