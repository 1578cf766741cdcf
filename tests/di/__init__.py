"""Mock providers for testing."""

from .forum_api import MockForumApiProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockForumApiProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
