"""Thread use cases."""

from .get_thread import GetThreadRequest, GetThreadResponse, GetThreadUseCase
from .list_threads import ListThreadsRequest, ListThreadsResponse, ListThreadsUseCase

__all__ = [
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ListThreadsRequest",
    "ListThreadsResponse",
    "ListThreadsUseCase",
]
