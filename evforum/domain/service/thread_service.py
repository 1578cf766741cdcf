"""Thread and reply tree domain service."""

from datetime import datetime
from typing import Optional

import logfire

from evforum.domain.error import (
    InvariantViolation,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from evforum.domain.model.reply import Reply
from evforum.domain.model.reply_tree import ReplyTree
from evforum.domain.model.thread import Thread
from evforum.domain.repository import ReplyTreeRepository
from evforum.domain.value import MAX_NESTING, ReplyId, ThreadId, UserId, utc_now

from .base import Service


class ThreadService(Service):
    """Domain service for threads and their reply trees."""

    def __init__(self, reply_tree_repository: ReplyTreeRepository) -> None:
        """Initialize thread service.

        Args:
            reply_tree_repository: Reply tree repository
        """
        self.reply_tree_repository = reply_tree_repository

    async def get_tree(self, thread_id: ThreadId) -> ReplyTree:
        """Get a thread's reply tree.

        Raises:
            NotFoundError: If the thread does not exist
        """
        tree = await self.reply_tree_repository.find_by_thread(thread_id)
        if tree is None:
            raise NotFoundError("Thread", str(thread_id))
        return tree

    async def find_tree(self, thread_id: ThreadId) -> Optional[ReplyTree]:
        return await self.reply_tree_repository.find_by_thread(thread_id)

    async def list_threads(self) -> list[Thread]:
        return await self.reply_tree_repository.list_threads()

    def check_reply_target(self, tree: ReplyTree, parent_id: Optional[ReplyId]) -> int:
        """Check that a new reply may be added at the given position.

        Args:
            tree: Tree of the thread being replied to
            parent_id: Reply being answered, None for a top-level reply

        Returns:
            Nesting level the new reply will have

        Raises:
            ValidationError: If the thread is locked or the parent is unknown
            InvariantViolation: If the parent is already at maximum depth
        """
        if tree.thread.is_locked:
            raise ValidationError(f"Thread {tree.thread.id} is locked")
        if parent_id is None:
            return 0
        if parent_id not in tree:
            raise ValidationError(
                f"Parent reply {parent_id} not found in thread {tree.thread.id}"
            )
        parent = tree.get(parent_id)
        if not parent.can_reply:
            raise InvariantViolation(
                f"Reply {parent_id} is at maximum depth {MAX_NESTING} "
                "and cannot be replied to"
            )
        return parent.nesting_level + 1

    async def add_reply(self, tree: ReplyTree, reply: Reply) -> Reply:
        """Insert a reply into its thread's tree and save the tree.

        Raises:
            InvariantViolation: If the reply breaks the tree structure
        """
        with logfire.span(
            "thread_service.add_reply",
            thread_id=str(reply.thread_id),
            reply_id=str(reply.id),
            parent_id=str(reply.parent_id) if reply.parent_id else None,
            nesting_level=reply.nesting_level,
        ):
            inserted = tree.insert(reply)
            await self.reply_tree_repository.save(tree)
            logfire.info(
                "Reply added",
                thread_id=str(reply.thread_id),
                reply_id=str(reply.id),
                attachments=len(reply.attachments),
            )
            return inserted

    async def create_thread(self, thread: Thread) -> ReplyTree:
        """Start the reply tree of a newly created thread."""
        with logfire.span("thread_service.create_thread", thread_id=str(thread.id)):
            tree = await self.reply_tree_repository.save(ReplyTree(thread))
            logfire.info(
                "Thread created",
                thread_id=str(thread.id),
                author_id=str(thread.author_id),
                tags=sorted(tag.root for tag in thread.tags),
            )
            return tree

    async def get_editable_reply(self, reply_id: ReplyId, author_id: UserId) -> Reply:
        """Get a reply that the given user may edit.

        Raises:
            NotFoundError: If the reply does not exist
            NotAuthorizedError: If the user is not the reply's author
        """
        tree = await self.reply_tree_repository.find_by_reply(reply_id)
        if tree is None:
            raise NotFoundError("Reply", str(reply_id))
        reply = tree.get(reply_id)
        if reply.author_id != author_id:
            logfire.warn(
                "Reply edit by non-author",
                reply_id=str(reply_id),
                author_id=str(author_id),
            )
            raise NotAuthorizedError("reply", str(reply_id), str(author_id))
        return reply

    async def edit_reply(
        self,
        reply_id: ReplyId,
        content: str,
        edited_at: Optional[datetime] = None,
    ) -> Reply:
        """Replace a reply's content and re-render it.

        Raises:
            NotFoundError: If the reply does not exist
        """
        with logfire.span("thread_service.edit_reply", reply_id=str(reply_id)):
            tree = await self.reply_tree_repository.find_by_reply(reply_id)
            if tree is None:
                raise NotFoundError("Reply", str(reply_id))
            edited = tree.edit(reply_id, content, edited_at or utc_now())
            await self.reply_tree_repository.save(tree)
            logfire.info("Reply edited", reply_id=str(reply_id))
            return edited
