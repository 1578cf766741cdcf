"""Reply routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel

from evforum.application.usecase.composition import (
    EditReplyRequest,
    EditReplyResponse,
    EditReplyUseCase,
)
from evforum.domain.error import DomainError
from evforum.interface.error import http_error, parse_id, require_author

router = APIRouter(prefix="/replies", tags=["replies"], route_class=DishkaRoute)


class EditReplyAPIRequest(BaseModel):
    """API request for editing a reply."""

    content: str


@router.patch("/{reply_id}", response_model=EditReplyResponse)
async def edit_reply(
    reply_id: str,
    request: EditReplyAPIRequest,
    edit_reply_use_case: FromDishka[EditReplyUseCase],
    x_author_id: str | None = Header(default=None),
) -> EditReplyResponse:
    """Replace a reply's content. Only the author can edit.

    Raises:
        HTTPException: 400 on invalid content, 403 if not the author,
            404 if the reply does not exist
    """
    author_id = require_author(x_author_id)
    parse_id(reply_id, "Reply")
    try:
        return await edit_reply_use_case.execute(
            EditReplyRequest(reply_id=reply_id, content=request.content, author_id=author_id)
        )
    except DomainError as e:
        logfire.warn("Reply edit failed", reply_id=reply_id, error=str(e))
        raise http_error(e)
