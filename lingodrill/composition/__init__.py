"""
Composition Root.

Centralized dependency wiring for the application.
All factory functions that instantiate adapters belong here to maintain
hexagonal architecture (domain NEVER imports from adapters).
"""

import logging
from collections.abc import Sequence

from lingodrill.adapters.chat_completion import ChatCompletionAdapter
from lingodrill.adapters.gemini_adapter import GeminiAdapter
from lingodrill.adapters.memory_store import InMemoryCardStore
from lingodrill.adapters.openai_adapter import OpenAIAdapter
from lingodrill.adapters.sample_deck import load_sample_cards, sample_deck_target_language
from lingodrill.adapters.sqlite_store import SqliteCardStore
from lingodrill.config import (
    TranslationConfig,
    get_db_path,
    get_storage_adapter,
    load_translation_config,
    resolve_provider_plan,
)
from lingodrill.domain.entities.card import Card
from lingodrill.domain.services.card_selector import CardSelector
from lingodrill.domain.services.evaluator import Evaluator
from lingodrill.domain.services.progress_tracker import ProgressTracker
from lingodrill.domain.services.session_manager import SessionManager
from lingodrill.domain.services.translation_backend import TranslationBackend
from lingodrill.ports.card_store import CardStore

logger = logging.getLogger(__name__)

PROVIDER_ADAPTERS: dict[str, type[ChatCompletionAdapter]] = {
    "gemini": GeminiAdapter,
    "openai": OpenAIAdapter,
}


def create_translation_providers(config: TranslationConfig) -> list[ChatCompletionAdapter]:
    """Build provider adapters in fallback order.

    A provider whose construction fails is skipped so the rest of the
    chain (and the baseline) still serve requests.
    """
    providers: list[ChatCompletionAdapter] = []
    for spec in resolve_provider_plan(config):
        adapter_cls = PROVIDER_ADAPTERS[spec.name]
        try:
            providers.append(
                adapter_cls(
                    api_key=spec.api_key,
                    model=config.model_for(spec.name),
                    timeout=config.timeout_seconds,
                    max_attempts=config.max_attempts,
                )
            )
        except ValueError as e:
            logger.error(f"Could not initialize {spec.name} provider: {e}")
    return providers


def create_translation_backend(config: TranslationConfig | None = None) -> TranslationBackend:
    """Create TranslationBackend from configuration.

    Args:
        config: Resolved settings, read from the environment when omitted

    Returns:
        Backend with zero, one or two providers ahead of the baseline
    """
    config = config or load_translation_config()
    providers = create_translation_providers(config)
    backend = TranslationBackend(providers=providers, strict=config.strict)
    logger.info(
        f"Translation backend ready: providers={backend.provider_names or ['baseline']}",
        extra={"strict": config.strict},
    )
    return backend


def create_card_store(adapter: str | None = None, db_path: str | None = None) -> CardStore:
    """Create the configured CardStore.

    Args:
        adapter: 'sqlite' or 'memory', defaults to STORAGE_ADAPTER
        db_path: SQLite path, defaults to LINGODRILL_DB_PATH

    Raises:
        ValueError: If the adapter name is unknown
    """
    adapter = adapter or get_storage_adapter()
    if adapter == "memory":
        logger.info("Using in-memory card store")
        return InMemoryCardStore()
    if adapter == "sqlite":
        path = db_path or get_db_path()
        logger.info(f"Using SQLite card store: {path}")
        return SqliteCardStore(path)
    raise ValueError(f"Invalid STORAGE_ADAPTER: '{adapter}'. Valid options: 'sqlite', 'memory'")


def create_session_manager(
    card_store: CardStore,
    translation_backend: TranslationBackend,
    sample_cards: Sequence[Card] | None = None,
    sample_target_language: str | None = None,
) -> SessionManager:
    """Create SessionManager with its collaborators.

    Args:
        card_store: Storage shared by every service
        translation_backend: Backend used by the Evaluator
        sample_cards: Built-in deck, loaded from package data when omitted
        sample_target_language: Language of the built-in deck's references
    """
    if sample_cards is None:
        sample_cards = load_sample_cards()
        sample_target_language = sample_deck_target_language()
    return SessionManager(
        card_store=card_store,
        card_selector=CardSelector(
            card_store,
            sample_cards=sample_cards,
            sample_target_language=sample_target_language,
        ),
        progress_tracker=ProgressTracker(card_store),
        evaluator=Evaluator(translation_backend),
    )
