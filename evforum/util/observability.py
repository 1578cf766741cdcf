"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured events
    logfire.info("Attachment bound", attachment_id=str(attachment.id))

    # Spans around operations worth timing
    with logfire.span("attachment_service.bind", owner_id=str(owner_id)):
        ...
"""

import logfire
from fastapi import FastAPI

from evforum.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Telemetry is sent to Logfire cloud only when a token is configured,
    unless OBSERVABILITY__SEND_TO_LOGFIRE says otherwise. Everything is
    always written to the console.

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs = {
        "service_name": "evforum",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }
    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by the API.

    Request spans carry the author id set by the auth gateway and, for
    draft and attachment routes, the draft key.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}
        author_id = request.headers.get("x-author-id")
        if author_id:
            result["author_id"] = author_id
        draft_key = request.query_params.get("draft_key")
        if draft_key:
            result["draft_key"] = draft_key
        return result

    logfire.instrument_fastapi(app, request_attributes_mapper=_map_request_attributes)
    logfire.info("FastAPI instrumented")


def instrument_httpx() -> None:
    """Trace outbound calls to the forum backend."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
