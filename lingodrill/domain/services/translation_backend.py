"""
Translation Backend.

Produces reference translations and verdicts by trying the configured
providers in preference order (one primary, at most one secondary) and
falling back to the deterministic baseline heuristic when none is
configured or all of them failed.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from lingodrill.domain.services.baseline_translator import BaselineTranslator
from lingodrill.domain.value_objects.evaluation_result import EvaluationResult
from lingodrill.infrastructure.fallback import run_with_fallback
from lingodrill.ports.translation_provider import (
    CredentialError,
    EvaluationRequest,
    GenerationRequest,
    TranslationContext,
    TranslationProvider,
    TranslationProviderError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PROVIDERS = 2

# Lowercased fragments that identify a missing or rejected API key
CREDENTIAL_ERROR_MARKERS = ("api key", "api_key", "apikey", "authentication", "unauthorized")

BASELINE_PROVIDER_NAME = "baseline"


def is_credential_error(error: Exception) -> bool:
    """Check if a provider failure was caused by the API key."""
    if isinstance(error, CredentialError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in CREDENTIAL_ERROR_MARKERS)


class TranslationBackend:
    """Provider chain with a heuristic floor.

    Responsibilities:
    - Try the primary provider, then the secondary one (never more than two
      remote attempts per operation)
    - Wrap every provider failure with its context, rewriting credential
      failures into a configuration hint
    - Answer from the baseline heuristic when no provider could

    With strict=True the wrapped error of the last failed provider is raised
    instead of answering from the heuristic; the heuristic still answers
    when no provider is configured at all.
    """

    def __init__(
        self,
        providers: Sequence[TranslationProvider] = (),
        baseline: BaselineTranslator | None = None,
        strict: bool = False,
    ) -> None:
        """Initialize the backend.

        Args:
            providers: Providers in preference order (primary first)
            baseline: Heuristic used when no provider answers
            strict: Raise instead of degrading after provider failures

        Raises:
            ValueError: If more than two providers are given
        """
        if len(providers) > MAX_PROVIDERS:
            raise ValueError(
                f"At most {MAX_PROVIDERS} providers supported (primary and secondary), "
                f"got {len(providers)}"
            )
        self._providers = list(providers)
        self._baseline = baseline or BaselineTranslator()
        self._strict = strict

        if not self._providers:
            logger.warning("No translation providers initialized. Using baseline implementation.")

    @property
    def primary_provider(self) -> str:
        """Name of the provider tried first."""
        return self._providers[0].name if self._providers else BASELINE_PROVIDER_NAME

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    async def generate_translation(
        self,
        content: str,
        source_language: str,
        target_language: str,
    ) -> str:
        """Generate a reference translation.

        Raises:
            TranslationProviderError: Only in strict mode, when every
                configured provider failed
        """
        request = GenerationRequest(
            content=content,
            source_language=source_language,
            target_language=target_language,
        )

        def attempt(provider: TranslationProvider) -> Callable[[], Awaitable[str]]:
            return lambda: provider.generate_translation(request)

        return await self._run(
            operation="generation",
            attempts=[attempt(provider) for provider in self._providers],
            heuristic=lambda: self._baseline.generate_translation(request),
            source_language=source_language,
            target_language=target_language,
        )

    async def evaluate_translation(
        self,
        source_content: str,
        source_language: str,
        target_language: str,
        user_translation: str,
        reference_translation: str | None = None,
    ) -> EvaluationResult:
        """Grade a learner's translation.

        Raises:
            TranslationProviderError: Only in strict mode, when every
                configured provider failed
        """
        request = EvaluationRequest(
            source_content=source_content,
            source_language=source_language,
            target_language=target_language,
            user_translation=user_translation,
            reference_translation=reference_translation,
        )

        def attempt(provider: TranslationProvider) -> Callable[[], Awaitable[EvaluationResult]]:
            async def evaluate() -> EvaluationResult:
                response = await provider.evaluate_translation(request)
                return response.to_result()

            return evaluate

        return await self._run(
            operation="evaluation",
            attempts=[attempt(provider) for provider in self._providers],
            heuristic=lambda: self._baseline.evaluate_translation(request),
            source_language=source_language,
            target_language=target_language,
        )

    async def _run(
        self,
        operation: str,
        attempts: list[Callable[[], Awaitable[T]]],
        heuristic: Callable[[], T],
        source_language: str,
        target_language: str,
    ) -> T:
        def on_failure(index: int, error: Exception) -> Exception:
            return self._wrap_error(
                operation, self._providers[index], source_language, target_language, error
            )

        def degrade(errors: list[Exception]) -> T:
            if errors:
                if self._strict:
                    raise errors[-1]
                logger.warning(
                    f"All translation providers failed for {operation}. Using baseline.",
                    extra={"providers": self.provider_names, "errors": [str(e) for e in errors]},
                )
            else:
                logger.warning(
                    f"No translation providers available. Using baseline {operation}."
                )
            return heuristic()

        outcome = await run_with_fallback(attempts, degrade, on_failure=on_failure)
        return outcome.value

    def _wrap_error(
        self,
        operation: str,
        provider: TranslationProvider,
        source_language: str,
        target_language: str,
        error: Exception,
    ) -> TranslationProviderError:
        """Attach context to a provider failure and log it."""
        context = TranslationContext(
            operation=operation,
            provider=provider.name,
            source_language=source_language,
            target_language=target_language,
            has_credential=provider.has_credential,
        )

        if is_credential_error(error):
            wrapped: TranslationProviderError = CredentialError(
                f"Translation API key error: The API key for {provider.name} "
                "is missing or invalid. Please check your settings.",
                context=context,
                original=error,
            )
        else:
            wrapped = TranslationProviderError(
                f"Translation {operation} failed: {error}",
                context=context,
                original=error,
            )

        logger.error(f"Translation {operation} error: {error}", extra=context.to_dict())
        wrapped.__cause__ = error
        return wrapped
