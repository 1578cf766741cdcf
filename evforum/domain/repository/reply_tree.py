"""Reply tree repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from evforum.domain.model.reply_tree import ReplyTree
from evforum.domain.model.thread import Thread
from evforum.domain.value import ReplyId, ThreadId


class ReplyTreeRepository(ABC):
    """Repository for threads and their reply trees.

    A thread and its replies are stored and loaded together as one
    ReplyTree.
    """

    @abstractmethod
    async def find_by_thread(self, thread_id: ThreadId) -> Optional[ReplyTree]:
        """Find the reply tree of a thread.

        Args:
            thread_id: The thread's unique identifier

        Returns:
            The tree if the thread exists, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_reply(self, reply_id: ReplyId) -> Optional[ReplyTree]:
        """Find the tree containing a reply.

        Args:
            reply_id: Any reply's unique identifier

        Returns:
            The tree if the reply exists, None otherwise
        """
        pass

    @abstractmethod
    async def list_threads(self) -> list[Thread]:
        """List every thread, unordered.

        Returns:
            List of threads
        """
        pass

    @abstractmethod
    async def save(self, tree: ReplyTree) -> ReplyTree:
        """Save a reply tree.

        Args:
            tree: Tree to save

        Returns:
            The saved tree
        """
        pass
