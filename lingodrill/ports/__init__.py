# Ports layer - Abstract interfaces (Protocols)

from .card_store import CardStore
from .translation_provider import (
    CredentialError,
    EvaluationRequest,
    EvaluationResponse,
    GenerationRequest,
    TranslationContext,
    TranslationProvider,
    TranslationProviderError,
    TranslationRateLimitError,
    TranslationServiceError,
    TranslationTimeoutError,
)

__all__ = [
    "CardStore",
    "TranslationProvider",
    "GenerationRequest",
    "EvaluationRequest",
    "EvaluationResponse",
    "TranslationContext",
    "TranslationServiceError",
    "TranslationRateLimitError",
    "TranslationTimeoutError",
    "TranslationProviderError",
    "CredentialError",
]
