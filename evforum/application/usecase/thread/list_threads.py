"""List threads use case."""

from typing import Optional

import logfire
from pydantic import BaseModel, Field

from evforum.application.usecase.views import ThreadSummary
from evforum.config import ThreadListSettings
from evforum.domain.service import ThreadService, filter_threads, sort_threads
from evforum.domain.value import ThreadFilter, ThreadSortOrder


class ListThreadsRequest(BaseModel):
    """List threads request."""

    sort: Optional[ThreadSortOrder] = None  # Configured default when omitted
    filter: ThreadFilter = ThreadFilter.ALL
    tag: Optional[str] = None
    limit: int = Field(default=30, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListThreadsResponse(BaseModel):
    """List threads response."""

    threads: list[ThreadSummary]
    total: int
    limit: int
    offset: int


class ListThreadsUseCase:
    """Use case for the category page thread list."""

    def __init__(
        self, thread_service: ThreadService, thread_list_settings: ThreadListSettings
    ) -> None:
        """Initialize list threads use case.

        Args:
            thread_service: Thread domain service
            thread_list_settings: Default sort and trending threshold
        """
        self.thread_service = thread_service
        self.thread_list_settings = thread_list_settings

    async def execute(self, request: ListThreadsRequest) -> ListThreadsResponse:
        """Execute list threads flow.

        Args:
            request: List threads request with filter, sort and pagination

        Returns:
            One page of thread summaries, pinned threads first
        """
        sort = request.sort or self.thread_list_settings.default_sort
        threshold = self.thread_list_settings.trending_view_threshold
        with logfire.span(
            "list_threads.execute",
            sort=sort.value,
            filter=request.filter.value,
            tag=request.tag,
            limit=request.limit,
            offset=request.offset,
        ):
            threads = await self.thread_service.list_threads()
            if request.tag:
                threads = [t for t in threads if any(tag.root == request.tag for tag in t.tags)]
            threads = filter_threads(threads, request.filter, threshold)
            threads = sort_threads(threads, sort, threshold)

            page = threads[request.offset : request.offset + request.limit]
            return ListThreadsResponse(
                threads=[ThreadSummary.from_thread(t) for t in page],
                total=len(threads),
                limit=request.limit,
                offset=request.offset,
            )
