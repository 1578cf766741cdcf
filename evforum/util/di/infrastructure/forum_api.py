"""Forum API infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from evforum.adapter.forum_api import HttpForumBackend
from evforum.config import ForumApiSettings
from evforum.domain.service import ForumBackend
from evforum.util.di.base import ProviderBase
from evforum.util.observability import instrument_httpx


class ForumApiProvider(ProviderBase):
    """Forum API component base."""

    __mock_component__ = "forum_api"


class ProdForumApiProvider(ForumApiProvider):
    """Production forum API provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_forum_backend(
        self, forum_api_settings: ForumApiSettings
    ) -> AsyncIterator[ForumBackend]:
        """Provide the HTTP forum backend, closed with the container."""
        instrument_httpx()
        backend = HttpForumBackend(
            base_url=forum_api_settings.base_url,
            timeout=forum_api_settings.timeout,
            token=forum_api_settings.token,
        )
        yield backend
        await backend.aclose()
