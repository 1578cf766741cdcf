"""Reply tree of a thread.

Replies are kept in a flat store keyed by id with a parent -> children
index, rather than as nested objects. Depth limits are then a plain integer
check at insert time, and a reply never holds references to its children.
"""

from datetime import datetime
from typing import Iterable, Iterator

from evforum.domain.error import InvariantViolation, NotFoundError
from evforum.domain.model.reply import Reply
from evforum.domain.model.thread import Thread
from evforum.domain.value import MAX_NESTING, ReplyId


class ReplyTree:
    """All replies of one thread.

    The tree owns its Thread value and keeps its `root_reply_ids`, reply
    count and last activity current as replies are inserted. Children are
    kept in insertion order; display order is applied by
    `evforum.domain.service.ordering`.
    """

    def __init__(self, thread: Thread):
        self._thread = thread.model_copy(update={"root_reply_ids": (), "reply_count": 0})
        self._replies: dict[ReplyId, Reply] = {}
        self._children: dict[ReplyId, list[ReplyId]] = {}

    @classmethod
    def build(cls, thread: Thread, replies: Iterable[Reply]) -> "ReplyTree":
        """Rebuild a tree from stored replies in any order.

        Parents are inserted before their children; replies of equal depth
        keep the order they were given in.
        """
        tree = cls(thread)
        for reply in sorted(replies, key=lambda r: r.nesting_level):
            tree.insert(reply)
        return tree

    @property
    def thread(self) -> Thread:
        return self._thread

    def insert(self, reply: Reply) -> Reply:
        """Insert a reply under its parent, or at the top level.

        Args:
            reply: Reply to insert

        Returns:
            The inserted reply

        Raises:
            InvariantViolation: If the reply would break the tree structure.
                The tree is left unchanged.
        """
        if reply.nesting_level > MAX_NESTING:
            raise InvariantViolation(
                f"Reply {reply.id} nesting level {reply.nesting_level} "
                f"exceeds maximum of {MAX_NESTING}"
            )
        if reply.thread_id != self._thread.id:
            raise InvariantViolation(
                f"Reply {reply.id} belongs to thread {reply.thread_id}, "
                f"not {self._thread.id}"
            )
        if reply.id in self._replies:
            raise InvariantViolation(f"Reply {reply.id} already exists")

        if reply.parent_id is None:
            expected_level = 0
        else:
            parent = self._replies.get(reply.parent_id)
            if parent is None:
                raise InvariantViolation(
                    f"Parent reply {reply.parent_id} is not in thread {self._thread.id}"
                )
            expected_level = parent.nesting_level + 1
        if reply.nesting_level != expected_level:
            raise InvariantViolation(
                f"Reply {reply.id} has nesting level {reply.nesting_level}, "
                f"expected {expected_level}"
            )

        self._replies[reply.id] = reply
        self._children[reply.id] = []
        update = {
            "reply_count": len(self._replies),
            "last_activity_at": max(self._thread.last_activity, reply.created_at),
        }
        if reply.parent_id is None:
            update["root_reply_ids"] = (*self._thread.root_reply_ids, reply.id)
        else:
            self._children[reply.parent_id].append(reply.id)
        self._thread = self._thread.model_copy(update=update)
        return reply

    def get(self, reply_id: ReplyId) -> Reply:
        """Get a reply by id.

        Raises:
            NotFoundError: If the reply is not in this tree
        """
        reply = self._replies.get(reply_id)
        if reply is None:
            raise NotFoundError("Reply", str(reply_id))
        return reply

    def children(self, reply_id: ReplyId) -> tuple[Reply, ...]:
        """Direct children of a reply, in insertion order."""
        if reply_id not in self._children:
            raise NotFoundError("Reply", str(reply_id))
        return tuple(self._replies[child] for child in self._children[reply_id])

    def roots(self) -> tuple[Reply, ...]:
        """Top-level replies, in insertion order."""
        return tuple(self._replies[reply_id] for reply_id in self._thread.root_reply_ids)

    def walk(self) -> Iterator[Reply]:
        """Yield every reply depth-first, parents before their children."""
        stack = list(reversed(self.roots()))
        while stack:
            reply = stack.pop()
            yield reply
            stack.extend(reversed(self.children(reply.id)))

    def can_reply(self, reply_id: ReplyId) -> bool:
        return self.get(reply_id).can_reply

    def edit(self, reply_id: ReplyId, content: str, edited_at: datetime) -> Reply:
        """Replace a reply's content. Position in the tree never changes."""
        edited = self.get(reply_id).with_content(content, edited_at)
        self._replies[reply_id] = edited
        return edited

    def __contains__(self, reply_id: object) -> bool:
        return reply_id in self._replies

    def __len__(self) -> int:
        return len(self._replies)
