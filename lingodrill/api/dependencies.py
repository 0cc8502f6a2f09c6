"""FastAPI dependency injection module.

Provides singleton instances of services for API routes.
Uses lifespan events for initialization and cleanup.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from lingodrill.composition import (
    create_card_store,
    create_session_manager,
    create_translation_backend,
)
from lingodrill.domain.services.session_manager import SessionManager
from lingodrill.domain.services.translation_backend import TranslationBackend
from lingodrill.ports.card_store import CardStore

logger = logging.getLogger(__name__)


# Singletons stored at module level
_card_store: CardStore | None = None
_translation_backend: TranslationBackend | None = None
_session_manager: SessionManager | None = None


async def init_dependencies() -> None:
    """Initialize all singleton dependencies.

    Called during FastAPI lifespan startup.
    """
    global _card_store, _translation_backend, _session_manager

    _card_store = create_card_store()
    await _card_store.initialize()

    _translation_backend = create_translation_backend()
    _session_manager = create_session_manager(_card_store, _translation_backend)
    logger.info(
        f"Session manager ready (primary provider: {_translation_backend.primary_provider})"
    )


async def cleanup_dependencies() -> None:
    """Cleanup dependencies on shutdown.

    Called during FastAPI lifespan shutdown.
    """
    global _card_store, _translation_backend, _session_manager

    if _card_store is not None and hasattr(_card_store, "close"):
        _card_store.close()

    _card_store = None
    _translation_backend = None
    _session_manager = None


def get_card_store() -> CardStore:
    """Dependency: Get CardStore instance."""
    if _card_store is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies first.")
    return _card_store


def get_translation_backend() -> TranslationBackend:
    """Dependency: Get TranslationBackend instance."""
    if _translation_backend is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies first.")
    return _translation_backend


def get_session_manager() -> SessionManager:
    """Dependency: Get SessionManager instance."""
    if _session_manager is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies first.")
    return _session_manager


# Type aliases for dependency injection
CardStoreDep = Annotated[CardStore, Depends(get_card_store)]
TranslationBackendDep = Annotated[TranslationBackend, Depends(get_translation_backend)]
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]


# =============================================================================
# In-Memory Rate Limiter
# =============================================================================


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    max_requests: int
    window_seconds: int


# Per-endpoint rate limits; answers hit paid translation providers
RATE_LIMITS: dict[str, RateLimitConfig] = {
    "/api/sessions": RateLimitConfig(max_requests=30, window_seconds=60),
    "/api/sessions/{session_id}/answer": RateLimitConfig(max_requests=60, window_seconds=60),
}


class InMemoryRateLimiter:
    """Simple in-memory rate limiter using sliding window.

    Not suitable for multi-process deployments.
    Uses IP address as client identifier.
    """

    def __init__(self, limits: dict[str, RateLimitConfig] | None = None) -> None:
        self._limits = RATE_LIMITS if limits is None else limits
        # requests[endpoint][client_ip] = list of timestamps
        self._requests: dict[str, dict[str, list[datetime]]] = defaultdict(dict)

    def _cleanup_old_requests(self, endpoint: str, client_ip: str, window_seconds: int) -> None:
        """Remove requests outside the sliding window, forgetting idle clients."""
        clients = self._requests[endpoint]
        cutoff = datetime.now(UTC).timestamp() - window_seconds
        recent = [ts for ts in clients.get(client_ip, []) if ts.timestamp() > cutoff]
        if recent:
            clients[client_ip] = recent
        else:
            clients.pop(client_ip, None)

    def is_allowed(self, endpoint: str, client_ip: str) -> bool:
        """Check if request is allowed under rate limit."""
        config = self._limits.get(endpoint)
        if config is None:
            return True

        self._cleanup_old_requests(endpoint, client_ip, config.window_seconds)
        return len(self._requests[endpoint].get(client_ip, [])) < config.max_requests

    def record_request(self, endpoint: str, client_ip: str) -> None:
        """Record a request for rate limiting."""
        self._requests[endpoint].setdefault(client_ip, []).append(datetime.now(UTC))

    def tracked_clients(self, endpoint: str) -> int:
        return len(self._requests.get(endpoint, {}))

    def limit_for(self, endpoint: str) -> RateLimitConfig | None:
        return self._limits.get(endpoint)

    def reset(self) -> None:
        self._requests.clear()


# Singleton rate limiter
_rate_limiter = InMemoryRateLimiter()


def get_rate_limiter() -> InMemoryRateLimiter:
    """Dependency: Get rate limiter instance."""
    return _rate_limiter


def rate_limit(endpoint: str):
    """Dependency factory: Rate limit check for endpoint.

    Usage:
        @router.post("/api/sessions")
        async def create_session(
            _: Annotated[None, Depends(rate_limit("/api/sessions"))],
            ...
        ):

    Raises:
        HTTPException 429 if rate limit exceeded
    """

    async def check_rate_limit(
        request: Request,
        limiter: Annotated[InMemoryRateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        client_ip = request.client.host if request.client else "unknown"

        if not limiter.is_allowed(endpoint, client_ip):
            config = limiter.limit_for(endpoint)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": f"Too many requests. Limit: {config.max_requests}/{config.window_seconds}s",
                    }
                },
            )

        limiter.record_request(endpoint, client_ip)

    return check_rate_limit
