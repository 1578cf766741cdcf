"""Display ordering of replies and threads.

Pure functions: inputs are never mutated and equal inputs give equal
output. Every sort is stable with an id tie-break, so the order never
depends on how the input happened to be arranged.
"""

from typing import Iterable

from evforum.domain.model.reply import Reply
from evforum.domain.model.thread import Thread
from evforum.domain.value import ReplySortOrder, ThreadFilter, ThreadSortOrder

DEFAULT_TRENDING_THRESHOLD = 2000


def sort_replies(
    replies: Iterable[Reply], order: ReplySortOrder = ReplySortOrder.OLDEST
) -> list[Reply]:
    """Order a set of sibling replies by creation time."""
    newest_first = order is ReplySortOrder.NEWEST
    replies = sorted(replies, key=lambda r: str(r.id))
    return sorted(replies, key=lambda r: r.created_at, reverse=newest_first)


def sort_threads(
    threads: Iterable[Thread],
    order: ThreadSortOrder = ThreadSortOrder.LATEST_ACTIVITY,
    trending_threshold: int = DEFAULT_TRENDING_THRESHOLD,
) -> list[Thread]:
    """Order a thread list. Pinned threads always come first.

    Args:
        threads: Threads to order
        order: Sort mode
        trending_threshold: View count a thread must exceed to be trending

    Returns:
        Ordered threads. Under TRENDING only trending threads are kept.
    """
    threads = sorted(threads, key=lambda t: str(t.id))
    if order is ThreadSortOrder.TRENDING:
        threads = [t for t in threads if t.is_trending(trending_threshold)]

    if order is ThreadSortOrder.OLDEST:
        threads.sort(key=lambda t: t.created_at)
    elif order is ThreadSortOrder.NEWEST:
        threads.sort(key=lambda t: t.created_at, reverse=True)
    elif order is ThreadSortOrder.LATEST_ACTIVITY:
        threads.sort(key=lambda t: t.last_activity, reverse=True)
    elif order is ThreadSortOrder.REPLIES:
        threads.sort(key=lambda t: t.reply_count, reverse=True)
    else:
        # POPULAR and TRENDING both rank by views
        threads.sort(key=lambda t: t.view_count, reverse=True)

    # Stable: keeps the mode's order within the pinned and unpinned groups
    threads.sort(key=lambda t: not t.is_pinned)
    return threads


def filter_threads(
    threads: Iterable[Thread],
    thread_filter: ThreadFilter = ThreadFilter.ALL,
    trending_threshold: int = DEFAULT_TRENDING_THRESHOLD,
) -> list[Thread]:
    """Keep the threads matching a category-page filter, in input order."""
    if thread_filter is ThreadFilter.PINNED:
        return [t for t in threads if t.is_pinned]
    if thread_filter is ThreadFilter.LOCKED:
        return [t for t in threads if t.is_locked]
    if thread_filter is ThreadFilter.TRENDING:
        return [t for t in threads if t.is_trending(trending_threshold)]
    return list(threads)
