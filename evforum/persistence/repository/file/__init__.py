"""File-backed repository implementations."""

from .draft import FileDraftRepository

__all__ = ["FileDraftRepository"]
