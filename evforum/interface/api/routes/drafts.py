"""Draft routes (autosave, recovery and the formatting toolbar)."""

from typing import Literal

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from evforum.application.usecase.composition import (
    FormatDraftRequest,
    FormatDraftResponse,
    FormatDraftUseCase,
    RecoverDraftRequest,
    RecoverDraftResponse,
    RecoverDraftUseCase,
    SaveDraftRequest,
    SaveDraftResponse,
    SaveDraftUseCase,
    StepDraftHistoryRequest,
    StepDraftHistoryResponse,
    StepDraftHistoryUseCase,
)
from evforum.domain.error import DomainError
from evforum.domain.value import FormatCommand
from evforum.interface.error import http_error

router = APIRouter(prefix="/drafts", tags=["drafts"], route_class=DishkaRoute)


class SaveDraftAPIRequest(BaseModel):
    """API request for autosaving a draft."""

    content: str
    thread_id: str | None = None
    parent_id: str | None = None
    title: str | None = None
    tags: list[str] | None = None


class FormatDraftAPIRequest(BaseModel):
    """API request for a formatting toolbar command."""

    command: FormatCommand
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)
    language: str = ""
    url: str = ""
    text: str = ""


@router.put("/{key}", response_model=SaveDraftResponse)
async def save_draft(
    key: str,
    request: SaveDraftAPIRequest,
    save_draft_use_case: FromDishka[SaveDraftUseCase],
) -> SaveDraftResponse:
    """Autosave a draft, creating it on first save."""
    try:
        return await save_draft_use_case.execute(
            SaveDraftRequest(key=key, **request.model_dump())
        )
    except DomainError as e:
        raise http_error(e)
    except ValueError as e:
        # Malformed thread or parent id
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{key}", response_model=RecoverDraftResponse)
async def recover_draft(
    key: str,
    recover_draft_use_case: FromDishka[RecoverDraftUseCase],
) -> RecoverDraftResponse:
    """Restore the last autosaved version of a draft."""
    try:
        return await recover_draft_use_case.execute(RecoverDraftRequest(key=key))
    except DomainError as e:
        raise http_error(e)


@router.post("/{key}/format", response_model=FormatDraftResponse)
async def format_draft(
    key: str,
    request: FormatDraftAPIRequest,
    format_draft_use_case: FromDishka[FormatDraftUseCase],
) -> FormatDraftResponse:
    """Apply a formatting command at the selection."""
    try:
        return await format_draft_use_case.execute(
            FormatDraftRequest(key=key, **request.model_dump())
        )
    except DomainError as e:
        raise http_error(e)


@router.post("/{key}/{direction}", response_model=StepDraftHistoryResponse)
async def step_draft_history(
    key: str,
    direction: Literal["undo", "redo"],
    step_draft_history_use_case: FromDishka[StepDraftHistoryUseCase],
) -> StepDraftHistoryResponse:
    """Undo or redo the last content change."""
    try:
        return await step_draft_history_use_case.execute(
            StepDraftHistoryRequest(key=key, direction=direction)
        )
    except DomainError as e:
        raise http_error(e)
