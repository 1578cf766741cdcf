"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from evforum.config import (
    AttachmentSettings,
    CompositionSettings,
    DraftSettings,
    ForumApiSettings,
    Settings,
    ThreadListSettings,
)
from evforum.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_forum_api_settings(self, settings: Settings) -> ForumApiSettings:
        return settings.forum_api

    @provide(scope=Scope.APP)
    def provide_attachment_settings(self, settings: Settings) -> AttachmentSettings:
        return settings.attachments

    @provide(scope=Scope.APP)
    def provide_composition_settings(self, settings: Settings) -> CompositionSettings:
        return settings.composition

    @provide(scope=Scope.APP)
    def provide_thread_list_settings(self, settings: Settings) -> ThreadListSettings:
        return settings.thread_list

    @provide(scope=Scope.APP)
    def provide_draft_settings(self, settings: Settings) -> DraftSettings:
        return settings.drafts
