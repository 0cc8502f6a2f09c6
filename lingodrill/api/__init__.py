"""API layer - FastAPI routes and dependencies."""

from .dependencies import (
    CardStoreDep,
    InMemoryRateLimiter,
    SessionManagerDep,
    TranslationBackendDep,
    cleanup_dependencies,
    get_card_store,
    get_rate_limiter,
    get_session_manager,
    get_translation_backend,
    init_dependencies,
    rate_limit,
)
from .routes import cards_router, session_router, stats_router

__all__ = [
    # Routes
    "session_router",
    "cards_router",
    "stats_router",
    # Dependencies
    "init_dependencies",
    "cleanup_dependencies",
    "get_card_store",
    "get_translation_backend",
    "get_session_manager",
    "get_rate_limiter",
    "rate_limit",
    # Type aliases
    "CardStoreDep",
    "TranslationBackendDep",
    "SessionManagerDep",
    "InMemoryRateLimiter",
]
