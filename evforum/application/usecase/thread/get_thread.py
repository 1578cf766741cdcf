"""Get thread use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from evforum.application.usecase.views import ReplyView, ThreadView
from evforum.domain.model.reply import Reply
from evforum.domain.model.reply_tree import ReplyTree
from evforum.domain.service import ThreadService, sort_replies
from evforum.domain.value import ReplySortOrder, ThreadId


class GetThreadRequest(BaseModel):
    """Get thread request."""

    thread_id: str
    sort: ReplySortOrder = ReplySortOrder.OLDEST


class GetThreadResponse(BaseModel):
    """Get thread response."""

    thread: ThreadView
    replies: list[ReplyView]  # Top-level replies, children nested inside


class GetThreadUseCase:
    """Use case for reading a thread with its whole reply tree."""

    def __init__(self, thread_service: ThreadService) -> None:
        """Initialize get thread use case.

        Args:
            thread_service: Thread domain service
        """
        self.thread_service = thread_service

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Siblings at every level are ordered by the requested mode.

        Raises:
            NotFoundError: If the thread does not exist
        """
        with logfire.span(
            "get_thread.execute", thread_id=request.thread_id, sort=request.sort.value
        ):
            tree = await self.thread_service.get_tree(ThreadId(UUID(request.thread_id)))
            return GetThreadResponse(
                thread=ThreadView.from_thread(tree.thread),
                replies=[
                    self._view(tree, reply, request.sort)
                    for reply in sort_replies(tree.roots(), request.sort)
                ],
            )

    def _view(self, tree: ReplyTree, reply: Reply, sort: ReplySortOrder) -> ReplyView:
        children = sort_replies(tree.children(reply.id), sort)
        return ReplyView.from_reply(
            reply, [self._view(tree, child, sort) for child in children]
        )
