"""API routes module."""

from .cards import router as cards_router
from .session import router as session_router
from .stats import router as stats_router

__all__ = ["session_router", "cards_router", "stats_router"]
