"""Base adapter for OpenAI-compatible chat-completion providers.

Implements TranslationProvider on top of AsyncOpenAI. Gemini and OpenAI
share this code path; subclasses only pick the endpoint and model.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, ClassVar

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)
from pydantic import ValidationError

from lingodrill.adapters.prompts import (
    EVALUATION_RESPONSE_SCHEMA,
    build_evaluation_messages,
    build_translation_messages,
)
from lingodrill.infrastructure.retry import DEFAULT_MAX_ATTEMPTS, retry_operation
from lingodrill.infrastructure.usage_tracker import ServiceType, log_usage
from lingodrill.ports.translation_provider import (
    EvaluationRequest,
    EvaluationResponse,
    GenerationRequest,
    TranslationProvider,
    TranslationRateLimitError,
    TranslationServiceError,
    TranslationTimeoutError,
)

logger = logging.getLogger(__name__)

# Errors worth another attempt before giving up on this provider
RETRYABLE_ERRORS = (RateLimitError, APITimeoutError, APIConnectionError)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_SURROUNDING_QUOTES = re.compile(r'^["\'](.*)["\']$', re.DOTALL)


class ChatCompletionAdapter(TranslationProvider):
    """Translation provider backed by an OpenAI-compatible chat endpoint."""

    name: ClassVar[str] = "chat"
    service: ClassVar[ServiceType]
    default_model: ClassVar[str]
    base_url: ClassVar[str | None] = None

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        usage_log_path: Path | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            api_key: Provider API key
            model: Model name, defaults to the provider's default model
            timeout: Request timeout in seconds
            max_attempts: Attempts per call for transient failures
            usage_log_path: Override for the usage JSONL file
            client: Preconfigured client (tests)
        """
        if not api_key:
            raise ValueError(f"API key required for {self.name} provider")

        self._api_key = api_key
        self._model = model or self.default_model
        self._max_attempts = max_attempts
        self._usage_log_path = usage_log_path
        # Retries are owned by tenacity, not the SDK
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
        )
        logger.info(f"{type(self).__name__} initialized with model: {self._model}")

    @property
    def model(self) -> str:
        return self._model

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key)

    async def generate_translation(self, request: GenerationRequest) -> str:
        """Translate content with the chat model.

        Raises:
            TranslationServiceError: If generation fails after retries
        """
        content = await self._complete(
            "generate",
            messages=build_translation_messages(request),
            temperature=0.3,
        )
        translation = content.strip()
        match = _SURROUNDING_QUOTES.match(translation)
        if match:
            translation = match.group(1).strip()
        if not translation:
            raise TranslationServiceError(f"Empty translation from {self.name}")
        return translation

    async def evaluate_translation(self, request: EvaluationRequest) -> EvaluationResponse:
        """Grade a learner's translation with structured JSON output.

        Raises:
            TranslationServiceError: If grading fails or the reply is malformed
        """
        content = await self._complete(
            "evaluate",
            messages=build_evaluation_messages(request),
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "evaluation_response",
                    "strict": True,
                    "schema": EVALUATION_RESPONSE_SCHEMA,
                },
            },
            temperature=0.3,  # Low temp for consistent grading
        )

        try:
            return EvaluationResponse.model_validate(_extract_json(content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Invalid evaluation JSON from {self.name}: {e}")
            raise TranslationServiceError(f"Invalid JSON response: {e}") from e

    async def _complete(self, operation: str, **params: Any) -> str:
        """Run one chat completion with retries and map SDK errors."""
        try:
            response = await retry_operation(
                self._client.chat.completions.create,
                model=self._model,
                max_attempts=self._max_attempts,
                retryable_exceptions=RETRYABLE_ERRORS,
                label=f"{self.name} {operation}",
                **params,
            )
        except RateLimitError as e:
            logger.warning(f"{self.name} rate limited: {e}")
            raise TranslationRateLimitError(str(e)) from e
        except APITimeoutError as e:
            logger.warning(f"{self.name} timeout: {e}")
            raise TranslationTimeoutError(str(e)) from e
        except AuthenticationError as e:
            logger.error(f"{self.name} rejected the API key: {e}")
            raise TranslationServiceError(f"Invalid API key for {self.name}: {e}") from e
        except Exception as e:
            logger.error(f"{self.name} {operation} failed: {e}")
            raise TranslationServiceError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise TranslationServiceError(f"Empty response from {self.name}")

        # Log token usage for cost tracking
        if response.usage:
            log_usage(
                service=self.service,
                model=self._model,
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                operation=operation,
                log_path=self._usage_log_path,
            )
            logger.debug(
                "translation_usage",
                extra={
                    "provider": self.name,
                    "model": self._model,
                    "operation": operation,
                    "total_tokens": response.usage.total_tokens,
                },
            )

        return content


def _extract_json(content: str) -> Any:
    """Parse a JSON object, tolerating prose or code fences around it."""
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(content)
        if not match:
            raise
        return json.loads(match.group(0))
