"""Shared API models and domain error mapping."""

from datetime import datetime

from fastapi import HTTPException, status
from pydantic import BaseModel

from lingodrill.domain.entities.card import Card
from lingodrill.domain.exceptions import (
    CardNotFoundError,
    InvalidSessionStateError,
    NotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
)


class CardResponse(BaseModel):
    """Card in API response."""

    id: str
    content: str
    source_language: str
    comment: str
    user_translation: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(
            id=card.id,
            content=card.content,
            source_language=card.source_language,
            comment=card.comment,
            user_translation=card.user_translation,
            tags=list(card.tags),
            created_at=card.created_at,
            updated_at=card.updated_at,
        )


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


def error_detail(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def to_http_exception(error: Exception) -> HTTPException:
    """Map a domain error to its HTTP status and error code.

    Raises:
        TypeError: If the error has no HTTP mapping (callers let it propagate)
    """
    if isinstance(error, SessionExpiredError):
        status_code, code = status.HTTP_410_GONE, "SESSION_EXPIRED"
    elif isinstance(error, SessionNotFoundError):
        status_code, code = status.HTTP_404_NOT_FOUND, "SESSION_NOT_FOUND"
    elif isinstance(error, CardNotFoundError):
        status_code, code = status.HTTP_404_NOT_FOUND, "CARD_NOT_FOUND"
    elif isinstance(error, NotFoundError):
        status_code, code = status.HTTP_404_NOT_FOUND, "NOT_FOUND"
    elif isinstance(error, InvalidSessionStateError):
        status_code, code = status.HTTP_409_CONFLICT, "INVALID_SESSION_STATE"
    else:
        raise TypeError(f"No HTTP mapping for {type(error).__name__}") from error

    return HTTPException(status_code=status_code, detail=error_detail(code, str(error)))
