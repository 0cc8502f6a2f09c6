"""
lingodrill - FastAPI Application

Translation practice sessions for vocabulary flashcards.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
# Must happen before importing modules that use environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from lingodrill import __version__  # noqa: E402
from lingodrill.api.dependencies import (  # noqa: E402
    TranslationBackendDep,
    cleanup_dependencies,
    init_dependencies,
)
from lingodrill.api.routes import cards_router, session_router, stats_router  # noqa: E402
from lingodrill.config import (  # noqa: E402
    CORS_ALLOWED_HEADERS,
    CORS_ALLOWED_METHODS,
    configure_logging,
    get_cors_allow_credentials,
    get_cors_origins,
)

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown events.

    Startup:
    - Open the card store and create its schema
    - Build the translation backend from configuration

    Shutdown:
    - Release storage connections
    """
    logger.info("Starting lingodrill backend...")

    await init_dependencies()
    logger.info("Dependencies initialized")

    yield

    logger.info("Shutting down lingodrill backend...")
    await cleanup_dependencies()
    logger.info("Shutdown complete")


app = FastAPI(
    title="lingodrill API",
    description="Translation practice sessions for vocabulary flashcards",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration - loaded from environment with restrictive defaults
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=get_cors_allow_credentials(),
    allow_methods=CORS_ALLOWED_METHODS,
    allow_headers=CORS_ALLOWED_HEADERS,
)

# Register API routers
app.include_router(session_router)
app.include_router(cards_router)
app.include_router(stats_router)


@app.get("/health")
async def health(backend: TranslationBackendDep) -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "lingodrill",
        "version": __version__,
        "translation_provider": backend.primary_provider,
    }
