"""Markdown preview routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from evforum.application.usecase.markdown import (
    PreviewMarkdownRequest,
    PreviewMarkdownResponse,
    PreviewMarkdownUseCase,
)

router = APIRouter(prefix="/markdown", tags=["markdown"], route_class=DishkaRoute)


@router.post("/preview", response_model=PreviewMarkdownResponse)
async def preview_markdown(
    request: PreviewMarkdownRequest,
    preview_markdown_use_case: FromDishka[PreviewMarkdownUseCase],
) -> PreviewMarkdownResponse:
    """Render composer content for the live preview.

    Rendering never fails; malformed markup comes back as text.
    """
    return await preview_markdown_use_case.execute(request)
