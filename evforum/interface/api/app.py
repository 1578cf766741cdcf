"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from evforum.config import Settings
from evforum.interface.api.routes import (
    attachments,
    drafts,
    health,
    markdown,
    replies,
    threads,
)
from evforum.util.di.container import create_container, setup_di
from evforum.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Closes the forum API client and other APP-scoped resources
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container by default
    """
    settings = Settings()

    app_instance = FastAPI(
        title="EV Forum API",
        description="Threaded discussions for the EV community: markdown posts, nested replies and image attachments",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Author-Id"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(markdown.router)
    app_instance.include_router(threads.router)
    app_instance.include_router(replies.router)
    app_instance.include_router(attachments.router)
    app_instance.include_router(drafts.router)

    return app_instance
