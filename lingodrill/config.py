"""Application configuration loaded from environment variables.

Provides type-safe access to configuration with sensible defaults.
Production defaults are restrictive for security.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from lingodrill.domain.constants import (
    DEFAULT_MAX_CARDS,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
)

SUPPORTED_PROVIDERS = ("gemini", "openai")
DEFAULT_PROVIDER = "gemini"

# Provider-specific key variables, consulted after TRANSLATION_API_KEY
PROVIDER_KEY_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Translation providers
# =============================================================================


@dataclass(frozen=True)
class TranslationConfig:
    """Provider preference, credentials and call limits, resolved once at startup."""

    provider: str = DEFAULT_PROVIDER
    api_key: str | None = None
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    gemini_model: str | None = None
    openai_model: str | None = None
    timeout_seconds: float = 30.0
    max_attempts: int = 3
    strict: bool = False

    def key_for(self, provider: str) -> str | None:
        """Provider's own env key (ignores the explicit key)."""
        return {"gemini": self.gemini_api_key, "openai": self.openai_api_key}.get(provider)

    def model_for(self, provider: str) -> str | None:
        return {"gemini": self.gemini_model, "openai": self.openai_model}.get(provider)


@dataclass(frozen=True)
class ProviderSpec:
    """One entry of the ordered provider plan."""

    name: str
    api_key: str


def load_translation_config(env: Mapping[str, str] | None = None) -> TranslationConfig:
    """Read translation settings from the environment.

    Environment variables:
        TRANSLATION_API_PROVIDER: gemini | openai (default gemini)
        TRANSLATION_API_KEY: key bound to the preferred provider
        GEMINI_API_KEY / OPENAI_API_KEY: per-provider keys
        GEMINI_MODEL / OPENAI_MODEL: model overrides
        TRANSLATION_TIMEOUT_SECONDS: request timeout (default 30)
        TRANSLATION_MAX_ATTEMPTS: attempts per provider call (default 3)
        TRANSLATION_STRICT: raise provider errors instead of using the
            built-in heuristic (default false)

    Raises:
        ValueError: If the provider name is not supported
    """
    env = os.environ if env is None else env

    provider = env.get("TRANSLATION_API_PROVIDER", DEFAULT_PROVIDER).strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported TRANSLATION_API_PROVIDER: {provider!r} "
            f"(expected one of {', '.join(SUPPORTED_PROVIDERS)})"
        )

    return TranslationConfig(
        provider=provider,
        api_key=env.get("TRANSLATION_API_KEY") or None,
        gemini_api_key=env.get(PROVIDER_KEY_VARS["gemini"]) or None,
        openai_api_key=env.get(PROVIDER_KEY_VARS["openai"]) or None,
        gemini_model=env.get("GEMINI_MODEL") or None,
        openai_model=env.get("OPENAI_MODEL") or None,
        timeout_seconds=float(env.get("TRANSLATION_TIMEOUT_SECONDS", "30")),
        max_attempts=max(1, int(env.get("TRANSLATION_MAX_ATTEMPTS", "3"))),
        strict=_env_bool(env.get("TRANSLATION_STRICT")),
    )


def resolve_provider_plan(config: TranslationConfig) -> list[ProviderSpec]:
    """Decide which providers to build, in fallback order.

    - An explicit key binds to the preferred provider.
    - Otherwise the preferred provider uses its own key when present, else
      whichever provider has a key becomes primary.
    - The other provider is added as secondary when it has its own key.
    - No key at all yields an empty plan (heuristic only).
    """
    preferred = config.provider
    other = next(p for p in SUPPORTED_PROVIDERS if p != preferred)

    if config.api_key:
        primary = ProviderSpec(preferred, config.api_key)
    elif config.key_for(preferred):
        primary = ProviderSpec(preferred, config.key_for(preferred))
    elif config.key_for(other):
        return [ProviderSpec(other, config.key_for(other))]
    else:
        return []

    plan = [primary]
    if config.key_for(other):
        plan.append(ProviderSpec(other, config.key_for(other)))
    return plan


# =============================================================================
# Storage and sessions
# =============================================================================


def get_storage_adapter() -> str:
    """Get storage backend name.

    Environment variable: STORAGE_ADAPTER (sqlite | memory)
    Default: sqlite
    """
    return os.getenv("STORAGE_ADAPTER", "sqlite").strip().lower()


def get_db_path() -> str:
    """Get SQLite database path.

    Environment variable: LINGODRILL_DB_PATH
    Default: lingodrill.db in the working directory
    """
    return os.getenv("LINGODRILL_DB_PATH", "lingodrill.db")


def get_default_source_language() -> str:
    return os.getenv("DEFAULT_SOURCE_LANGUAGE", DEFAULT_SOURCE_LANGUAGE)


def get_default_target_language() -> str:
    return os.getenv("DEFAULT_TARGET_LANGUAGE", DEFAULT_TARGET_LANGUAGE)


def get_max_cards_per_session() -> int:
    """Get default deck size for new sessions.

    Environment variable: MAX_CARDS_PER_SESSION
    Default: 10
    """
    return int(os.getenv("MAX_CARDS_PER_SESSION", str(DEFAULT_MAX_CARDS)))


# =============================================================================
# HTTP and logging
# =============================================================================


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins from environment.

    Environment variable: CORS_ORIGINS (comma-separated)
    Default: localhost ports 3000 and 5173 for development
    """
    default_origins = "http://localhost:3000,http://localhost:5173"
    origins_str = os.getenv("CORS_ORIGINS", default_origins)
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def get_cors_allow_credentials() -> bool:
    """Get CORS allow_credentials setting.

    Environment variable: CORS_ALLOW_CREDENTIALS
    Default: true for development
    """
    return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# Restricted HTTP methods - only what the API actually uses
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "OPTIONS"]

# Restricted headers - only what's needed for the API
CORS_ALLOWED_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "Authorization",
    "X-Requested-With",
]


def configure_logging() -> None:
    """Configure root logging.

    Environment variable: LOG_LEVEL (default INFO)
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
