"""Interface layer errors."""

from uuid import UUID

import logfire
from fastapi import HTTPException, status

from evforum.adapter.error import AdapterError
from evforum.domain.error import (
    CreationError,
    DomainError,
    InvariantViolation,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)


def http_error(error: DomainError | AdapterError) -> HTTPException:
    """Map a domain or adapter error to its HTTP response.

    A failed creation carries the draft back to the client so nothing the
    author typed is lost.
    """
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, NotAuthorizedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, InvariantViolation):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, CreationError):
        detail = {"message": str(error)}
        if error.draft is not None:
            detail["draft"] = error.draft.model_dump(mode="json")
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    if isinstance(error, AdapterError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))

    logfire.error("Unmapped domain error", error=str(error), type=type(error).__name__)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
    )


def require_author(x_author_id: str | None) -> str:
    """Check the author id set by the auth gateway.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID
    """
    if not x_author_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Author-Id header required",
        )
    try:
        UUID(x_author_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Author-Id must be a UUID",
        )
    return x_author_id


def parse_id(value: str, resource: str) -> str:
    """Check a path id is a UUID.

    Raises:
        HTTPException: 404, since no resource can have that id
    """
    try:
        UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found: {value}",
        )
    return value
