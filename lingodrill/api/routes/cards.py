"""Card management API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel, Field

from lingodrill.api.dependencies import CardStoreDep
from lingodrill.api.schemas import CardResponse, ErrorResponse, to_http_exception
from lingodrill.domain.entities.card import Card
from lingodrill.domain.exceptions import CardNotFoundError
from lingodrill.domain.value_objects.card_filter import CardFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards", tags=["cards"])


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateCardRequest(BaseModel):
    """Request body for adding a card."""

    content: str = Field(..., min_length=1)
    source_language: str = "en"
    comment: str = ""
    user_translation: str = ""
    tags: list[str] = Field(default_factory=list)


class UpdateCardRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    content: str | None = Field(default=None, min_length=1)
    source_language: str | None = None
    comment: str | None = None
    user_translation: str | None = None
    tags: list[str] | None = None


class CardListResponse(BaseModel):
    cards: list[CardResponse]
    count: int


class TagCountResponse(BaseModel):
    name: str
    count: int


class TagCountsResponse(BaseModel):
    """Tag usage for a language (or every language)."""

    source_language: str | None
    tags: list[TagCountResponse]
    untagged: int


# =============================================================================
# Routes
# =============================================================================


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(request: CreateCardRequest, card_store: CardStoreDep) -> CardResponse:
    """Add a card to storage."""
    card = Card(
        content=request.content,
        source_language=request.source_language,
        comment=request.comment,
        user_translation=request.user_translation,
        tags=request.tags,
    )
    await card_store.save_card(card)
    logger.info(f"Created card {card.id}", extra={"tags": card.tags})
    return CardResponse.from_card(card)


@router.get("", response_model=CardListResponse)
async def list_cards(
    card_store: CardStoreDep,
    language: str | None = None,
    tags: Annotated[list[str] | None, Query()] = None,
    include_untagged: bool = False,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> CardListResponse:
    """List stored cards, most recently updated first.

    Tag filtering matches any of the given tags.
    """
    card_filter = CardFilter(
        source_language=language,
        tags=tuple(tags or ()),
        include_untagged=include_untagged,
        limit=limit,
    )
    cards = await card_store.get_all_cards(card_filter)
    return CardListResponse(cards=[CardResponse.from_card(c) for c in cards], count=len(cards))


@router.get("/tags", response_model=TagCountsResponse)
async def get_tag_counts(
    card_store: CardStoreDep,
    language: str | None = None,
) -> TagCountsResponse:
    """Count cards per tag, plus cards without tags."""
    counts = await card_store.get_tag_counts(language)
    return TagCountsResponse(
        source_language=language,
        tags=[TagCountResponse(**entry) for entry in counts.to_dict()["tags"]],
        untagged=counts.untagged,
    )


@router.get(
    "/{card_id}",
    response_model=CardResponse,
    responses={404: {"model": ErrorResponse, "description": "Card not found"}},
)
async def get_card(card_id: str, card_store: CardStoreDep) -> CardResponse:
    """Get a single card."""
    card = await card_store.get_card(card_id)
    if card is None:
        raise to_http_exception(CardNotFoundError(card_id))
    return CardResponse.from_card(card)


@router.put(
    "/{card_id}",
    response_model=CardResponse,
    responses={404: {"model": ErrorResponse, "description": "Card not found"}},
)
async def update_card(
    card_id: str,
    request: UpdateCardRequest,
    card_store: CardStoreDep,
) -> CardResponse:
    """Update some fields of a card."""
    card = await card_store.get_card(card_id)
    if card is None:
        raise to_http_exception(CardNotFoundError(card_id))

    card.update(**request.model_dump(exclude_unset=True))
    await card_store.save_card(card)
    return CardResponse.from_card(card)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse, "description": "Card not found"}},
)
async def delete_card(card_id: str, card_store: CardStoreDep) -> Response:
    """Delete a card. Sessions already holding it keep their card ids."""
    if not await card_store.delete_card(card_id):
        raise to_http_exception(CardNotFoundError(card_id))
    logger.info(f"Deleted card {card_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
