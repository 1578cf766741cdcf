"""Forum backend adapter."""

from .client import HttpForumBackend, MockForumBackend

__all__ = ["HttpForumBackend", "MockForumBackend"]
