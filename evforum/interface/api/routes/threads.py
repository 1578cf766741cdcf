"""Thread routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query, status
from pydantic import BaseModel

from evforum.application.usecase.composition import (
    CreateThreadRequest,
    CreateThreadResponse,
    CreateThreadUseCase,
    SubmitReplyRequest,
    SubmitReplyResponse,
    SubmitReplyUseCase,
)
from evforum.application.usecase.thread import (
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    ListThreadsRequest,
    ListThreadsResponse,
    ListThreadsUseCase,
)
from evforum.domain.error import DomainError
from evforum.domain.value import ReplySortOrder, ThreadFilter, ThreadSortOrder
from evforum.interface.error import http_error, parse_id, require_author

router = APIRouter(prefix="/threads", tags=["threads"], route_class=DishkaRoute)


class SubmitDraftAPIRequest(BaseModel):
    """API request for publishing a saved draft."""

    draft_key: str


@router.get("", response_model=ListThreadsResponse)
async def list_threads(
    list_threads_use_case: FromDishka[ListThreadsUseCase],
    sort: ThreadSortOrder | None = Query(default=None),
    filter: ThreadFilter = Query(default=ThreadFilter.ALL),
    tag: str | None = Query(default=None),
    limit: int = Query(default=30, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListThreadsResponse:
    """List threads, pinned first, then by the chosen sort."""
    return await list_threads_use_case.execute(
        ListThreadsRequest(sort=sort, filter=filter, tag=tag, limit=limit, offset=offset)
    )


@router.post(
    "",
    response_model=CreateThreadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_thread(
    request: SubmitDraftAPIRequest,
    create_thread_use_case: FromDishka[CreateThreadUseCase],
    x_author_id: str | None = Header(default=None),
) -> CreateThreadResponse:
    """Publish a thread draft.

    Attachments that could not be uploaded or bound are reported in
    `warnings`; the thread is created without them.

    Raises:
        HTTPException: 400 on invalid content, 502 if the backend failed
            (the draft is returned in the error detail)
    """
    author_id = require_author(x_author_id)
    try:
        return await create_thread_use_case.execute(
            CreateThreadRequest(draft_key=request.draft_key, author_id=author_id)
        )
    except DomainError as e:
        logfire.warn("Thread creation failed", draft_key=request.draft_key, error=str(e))
        raise http_error(e)


@router.get("/{thread_id}", response_model=GetThreadResponse)
async def get_thread(
    thread_id: str,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    sort: ReplySortOrder = Query(default=ReplySortOrder.OLDEST),
) -> GetThreadResponse:
    """Get a thread with its nested replies."""
    parse_id(thread_id, "Thread")
    try:
        return await get_thread_use_case.execute(
            GetThreadRequest(thread_id=thread_id, sort=sort)
        )
    except DomainError as e:
        raise http_error(e)


@router.post(
    "/{thread_id}/replies",
    response_model=SubmitReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_reply(
    thread_id: str,
    request: SubmitDraftAPIRequest,
    submit_reply_use_case: FromDishka[SubmitReplyUseCase],
    x_author_id: str | None = Header(default=None),
) -> SubmitReplyResponse:
    """Publish a reply draft to the thread.

    Raises:
        HTTPException: 400 on invalid content or target, 409 when replying
            to a reply at maximum depth, 502 if the backend failed
    """
    author_id = require_author(x_author_id)
    parse_id(thread_id, "Thread")
    try:
        return await submit_reply_use_case.execute(
            SubmitReplyRequest(
                draft_key=request.draft_key, author_id=author_id, thread_id=thread_id
            )
        )
    except DomainError as e:
        logfire.warn(
            "Reply submission failed",
            thread_id=thread_id,
            draft_key=request.draft_key,
            error=str(e),
        )
        raise http_error(e)
