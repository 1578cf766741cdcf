"""Markdown use cases."""

from .preview_markdown import (
    PreviewMarkdownRequest,
    PreviewMarkdownResponse,
    PreviewMarkdownUseCase,
)

__all__ = [
    "PreviewMarkdownRequest",
    "PreviewMarkdownResponse",
    "PreviewMarkdownUseCase",
]
