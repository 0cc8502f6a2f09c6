"""Practice session API routes."""

import logging
from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from lingodrill.api.dependencies import SessionManagerDep, rate_limit
from lingodrill.api.schemas import CardResponse, ErrorResponse, to_http_exception
from lingodrill.config import (
    get_default_source_language,
    get_default_target_language,
    get_max_cards_per_session,
)
from lingodrill.domain.constants import WarningMessages
from lingodrill.domain.entities.session import Session
from lingodrill.domain.exceptions import (
    InvalidSessionStateError,
    NotFoundError,
    SessionExpiredError,
)
from lingodrill.domain.services.evaluator import AnswerEvaluation
from lingodrill.domain.services.progress_tracker import CurrentCard
from lingodrill.domain.value_objects.session_stats import SessionStats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Request body for creating a session. Omitted fields use configured defaults."""

    source_language: str | None = None
    target_language: str | None = None
    max_cards: int | None = Field(default=None, ge=0)
    use_built_in_deck: bool = True
    tags: list[str] = Field(default_factory=list)
    include_untagged: bool = False


class ProgressResponse(BaseModel):
    current: int
    total: int


class CurrentCardResponse(BaseModel):
    """Card under the session cursor; card is null once the deck is exhausted."""

    session_id: str
    is_complete: bool
    progress: ProgressResponse | None = None
    card: CardResponse | None = None


class SessionStatsResponse(BaseModel):
    """Session statistics."""

    total_cards: int
    answered_cards: int
    correct_cards: int
    remaining_cards: int
    accuracy: float
    is_complete: bool


class CreateSessionResponse(BaseModel):
    """Response for session creation."""

    session_id: str
    source_language: str
    target_language: str
    state: str
    card_count: int
    current: CurrentCardResponse


class SubmitAnswerRequest(BaseModel):
    """Request body for answering the current card."""

    answer: str


class EvaluationDetailsResponse(BaseModel):
    grammar: str
    vocabulary: str
    accuracy: str


class EvaluationResponse(BaseModel):
    correct: bool
    score: float
    feedback: str
    suggested_translation: str
    details: EvaluationDetailsResponse
    fallback: bool


class WarningResponse(BaseModel):
    """Non-blocking notice shown next to a verdict."""

    title: str
    message: str


class SubmitAnswerResponse(BaseModel):
    """Verdict for an answer."""

    session_id: str
    card_id: str
    evaluation: EvaluationResponse
    reference_translation: str
    had_translation_error: bool
    warnings: list[WarningResponse]


class AdvanceResponse(BaseModel):
    """Response for moving to the next card."""

    session_id: str
    is_complete: bool
    next: CurrentCardResponse | None = None
    stats: SessionStatsResponse | None = None


class SessionSummaryResponse(BaseModel):
    """Session as shown in listings."""

    session_id: str
    source_language: str
    target_language: str
    state: str
    card_count: int
    current_card_index: int
    answered_cards: int
    created_at: datetime
    completed_at: datetime | None

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummaryResponse":
        return cls(
            session_id=session.id,
            source_language=session.source_language,
            target_language=session.target_language,
            state=session.state.value,
            card_count=len(session.card_ids),
            current_card_index=session.current_card_index,
            answered_cards=len(session.responses),
            created_at=session.created_at,
            completed_at=session.completed_at,
        )


class SessionListResponse(BaseModel):
    sessions: list[SessionSummaryResponse]
    count: int


# =============================================================================
# Helpers
# =============================================================================


def _current_response(session_id: str, current: CurrentCard | None) -> CurrentCardResponse:
    if current is None:
        return CurrentCardResponse(session_id=session_id, is_complete=True)
    return CurrentCardResponse(
        session_id=current.session_id,
        is_complete=False,
        progress=ProgressResponse(current=current.progress.current, total=current.progress.total),
        card=CardResponse.from_card(current.card),
    )


def _stats_response(stats: SessionStats) -> SessionStatsResponse:
    return SessionStatsResponse(
        total_cards=stats.total_cards,
        answered_cards=stats.answered_cards,
        correct_cards=stats.correct_cards,
        remaining_cards=stats.remaining_cards,
        accuracy=stats.accuracy,
        is_complete=stats.is_complete,
    )


def build_warnings(result: AnswerEvaluation) -> list[WarningResponse]:
    """Collect the notices a client should show alongside the verdict."""
    warnings = []
    if result.had_translation_error:
        warnings.append(
            WarningResponse(title="Translation Issue", message=WarningMessages.TRANSLATION_ISSUE)
        )
    if result.evaluation.fallback:
        warnings.append(
            WarningResponse(title="Evaluation Fallback", message=WarningMessages.EVALUATION_FALLBACK)
        )
    return warnings


# =============================================================================
# Routes
# =============================================================================


@router.post("", response_model=CreateSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest,
    session_manager: SessionManagerDep,
    _: Annotated[None, Depends(rate_limit("/api/sessions"))],
) -> CreateSessionResponse:
    """Create a practice session from the built-in deck or stored cards."""
    max_cards = request.max_cards if request.max_cards is not None else get_max_cards_per_session()
    session = await session_manager.create_session(
        source_language=request.source_language or get_default_source_language(),
        target_language=request.target_language or get_default_target_language(),
        max_cards=max_cards,
        use_built_in_deck=request.use_built_in_deck,
        tags=request.tags,
        include_untagged=request.include_untagged,
    )

    try:
        current = await session_manager.get_current_card(session.id)
    except NotFoundError as e:
        raise to_http_exception(e) from None

    return CreateSessionResponse(
        session_id=session.id,
        source_language=session.source_language,
        target_language=session.target_language,
        state=session.state.value,
        card_count=len(session.card_ids),
        current=_current_response(session.id, current),
    )


@router.get("/{session_id}/current", response_model=CurrentCardResponse, responses=NOT_FOUND)
async def get_current_card(
    session_id: str,
    session_manager: SessionManagerDep,
) -> CurrentCardResponse:
    """Get the card under the session cursor."""
    try:
        current = await session_manager.get_current_card(session_id)
    except NotFoundError as e:
        raise to_http_exception(e) from None
    return _current_response(session_id, current)


@router.post(
    "/{session_id}/answer",
    response_model=SubmitAnswerResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Card not found"},
        409: {"model": ErrorResponse, "description": "Session already complete"},
        410: {"model": ErrorResponse, "description": "Session expired"},
    },
)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    session_manager: SessionManagerDep,
    _: Annotated[None, Depends(rate_limit("/api/sessions/{session_id}/answer"))],
) -> SubmitAnswerResponse:
    """Judge an answer for the current card.

    Provider failures never fail this call; they surface as warnings.
    """
    try:
        result = await session_manager.submit_answer(session_id, request.answer)
    except (NotFoundError, SessionExpiredError, InvalidSessionStateError) as e:
        raise to_http_exception(e) from None

    evaluation = result.evaluation
    return SubmitAnswerResponse(
        session_id=result.session_id,
        card_id=result.card_id,
        evaluation=EvaluationResponse(
            correct=evaluation.correct,
            score=evaluation.score,
            feedback=evaluation.feedback,
            suggested_translation=evaluation.suggested_translation,
            details=EvaluationDetailsResponse(
                grammar=evaluation.details.grammar,
                vocabulary=evaluation.details.vocabulary,
                accuracy=evaluation.details.accuracy,
            ),
            fallback=evaluation.fallback,
        ),
        reference_translation=result.reference_translation,
        had_translation_error=result.had_translation_error,
        warnings=build_warnings(result),
    )


@router.post("/{session_id}/advance", response_model=AdvanceResponse, responses=NOT_FOUND)
async def advance_session(
    session_id: str,
    session_manager: SessionManagerDep,
) -> AdvanceResponse:
    """Move to the next card; completes the session after the last one."""
    try:
        result = await session_manager.advance_session(session_id)
    except NotFoundError as e:
        raise to_http_exception(e) from None

    if result.is_complete:
        return AdvanceResponse(
            session_id=result.session_id,
            is_complete=True,
            stats=_stats_response(result.stats) if result.stats else None,
        )
    return AdvanceResponse(
        session_id=result.session_id,
        is_complete=False,
        next=_current_response(result.session_id, result.next_card),
    )


@router.get("/{session_id}/stats", response_model=SessionStatsResponse, responses=NOT_FOUND)
async def get_session_stats(
    session_id: str,
    session_manager: SessionManagerDep,
) -> SessionStatsResponse:
    """Get answer counts and accuracy for a session."""
    try:
        stats = await session_manager.get_session_stats(session_id)
    except NotFoundError as e:
        raise to_http_exception(e) from None
    return _stats_response(stats)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    session_manager: SessionManagerDep,
    state: Literal["active", "completed"] | None = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SessionListResponse:
    """List sessions, newest first, optionally only active or completed ones."""
    completed = None if state is None else state == "completed"
    sessions = await session_manager.list_sessions(
        completed=completed, limit=limit, offset=offset
    )
    return SessionListResponse(
        sessions=[SessionSummaryResponse.from_session(s) for s in sessions],
        count=len(sessions),
    )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
)
async def delete_session(session_id: str, session_manager: SessionManagerDep) -> Response:
    """Delete a session and its responses."""
    try:
        await session_manager.delete_session(session_id)
    except NotFoundError as e:
        raise to_http_exception(e) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)
