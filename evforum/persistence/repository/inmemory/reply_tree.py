"""In-memory reply tree repository."""

from typing import Optional

from evforum.domain.model.reply_tree import ReplyTree
from evforum.domain.model.thread import Thread
from evforum.domain.repository.reply_tree import ReplyTreeRepository
from evforum.domain.value import ReplyId, ThreadId


class InMemoryReplyTreeRepository(ReplyTreeRepository):
    """In-memory implementation of ReplyTreeRepository.

    Trees are stored as live objects, so a tree found here and mutated is
    the stored tree; `save` is still called after every change.
    """

    def __init__(self) -> None:
        self._trees: dict[ThreadId, ReplyTree] = {}
        self._reply_index: dict[ReplyId, ThreadId] = {}

    async def find_by_thread(self, thread_id: ThreadId) -> Optional[ReplyTree]:
        """Find the reply tree of a thread."""
        return self._trees.get(thread_id)

    async def find_by_reply(self, reply_id: ReplyId) -> Optional[ReplyTree]:
        """Find the tree containing a reply."""
        thread_id = self._reply_index.get(reply_id)
        if thread_id is None:
            return None
        return self._trees.get(thread_id)

    async def list_threads(self) -> list[Thread]:
        """List every thread."""
        return [tree.thread for tree in self._trees.values()]

    async def save(self, tree: ReplyTree) -> ReplyTree:
        """Save a reply tree and index its replies."""
        self._trees[tree.thread.id] = tree
        for reply in tree.walk():
            self._reply_index[reply.id] = tree.thread.id
        return tree
