"""Preview markdown use case."""

from pydantic import BaseModel, Field

from evforum.domain.markdown import render, to_html, to_plain_text
from evforum.domain.model.rendered import BlockNode


class PreviewMarkdownRequest(BaseModel):
    """Preview markdown request."""

    content: str = Field(max_length=10000)


class PreviewMarkdownResponse(BaseModel):
    """Preview markdown response."""

    nodes: list[BlockNode]
    html: str
    text: str


class PreviewMarkdownUseCase:
    """Use case for the composer's live preview."""

    async def execute(self, request: PreviewMarkdownRequest) -> PreviewMarkdownResponse:
        nodes = render(request.content)
        return PreviewMarkdownResponse(
            nodes=list(nodes), html=to_html(nodes), text=to_plain_text(nodes)
        )
