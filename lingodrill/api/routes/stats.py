"""Store-wide statistics route."""

from fastapi import APIRouter
from pydantic import BaseModel

from lingodrill.api.dependencies import CardStoreDep

router = APIRouter(prefix="/api/stats", tags=["stats"])


class StoreStatsResponse(BaseModel):
    """Record counts across the whole store."""

    cards: int
    sessions: int
    active_sessions: int
    completed_sessions: int


@router.get("", response_model=StoreStatsResponse)
async def get_store_stats(card_store: CardStoreDep) -> StoreStatsResponse:
    """Count cards, plus sessions split by completion."""
    stats = await card_store.get_stats()
    return StoreStatsResponse(**stats.to_dict())
