"""Port interface for translation providers (reference generation and grading)."""

from dataclasses import asdict, dataclass
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from lingodrill.domain.constants import DetailMessages
from lingodrill.domain.value_objects.evaluation_result import (
    EvaluationDetails,
    EvaluationResult,
)


class GenerationRequest(BaseModel):
    """Request for a reference translation."""

    content: str
    source_language: str
    target_language: str


class EvaluationRequest(BaseModel):
    """Request for grading a learner's translation."""

    source_content: str
    source_language: str
    target_language: str
    user_translation: str
    reference_translation: str | None = None


class EvaluationDetailsResponse(BaseModel):
    """Per-aspect feedback returned by a provider."""

    grammar: str = ""
    vocabulary: str = ""
    accuracy: str = ""


class EvaluationResponse(BaseModel):
    """Structured grading returned by a provider."""

    correct: bool
    score: float = Field(ge=0.0, le=1.0)
    feedback: str
    suggested_translation: str
    details: EvaluationDetailsResponse

    def to_result(self) -> EvaluationResult:
        """Convert to the domain value object, filling empty details."""
        return EvaluationResult(
            correct=self.correct,
            score=self.score,
            feedback=self.feedback,
            suggested_translation=self.suggested_translation,
            details=EvaluationDetails(
                grammar=self.details.grammar or DetailMessages.NO_GRAMMAR,
                vocabulary=self.details.vocabulary or DetailMessages.NO_VOCABULARY,
                accuracy=self.details.accuracy or DetailMessages.NO_ACCURACY,
            ),
        )


@runtime_checkable
class TranslationProvider(Protocol):
    """Translation provider port.

    Implementations should:
    - Retry transient failures internally with backoff
    - Raise TranslationServiceError subclasses once retries are exhausted
    """

    name: str

    @property
    def has_credential(self) -> bool:
        """Whether an API key was configured for this provider."""
        ...

    async def generate_translation(self, request: GenerationRequest) -> str:
        """Translate content into the target language.

        Args:
            request: Content and language pair

        Returns:
            Translated text only

        Raises:
            TranslationServiceError: If generation fails after retries
        """
        ...

    async def evaluate_translation(self, request: EvaluationRequest) -> EvaluationResponse:
        """Grade a learner's translation.

        Args:
            request: Original content, learner answer and optional reference

        Returns:
            Structured grading

        Raises:
            TranslationServiceError: If evaluation fails after retries
        """
        ...


@dataclass(frozen=True)
class TranslationContext:
    """Diagnostic metadata attached to a wrapped provider failure."""

    operation: str
    provider: str
    source_language: str
    target_language: str
    has_credential: bool

    def to_dict(self) -> dict:
        return asdict(self)


class TranslationServiceError(Exception):
    """Base exception for translation provider failures."""

    pass


class TranslationRateLimitError(TranslationServiceError):
    """Raised when the provider rate limit is exceeded."""

    pass


class TranslationTimeoutError(TranslationServiceError):
    """Raised when a provider request times out."""

    pass


class TranslationProviderError(TranslationServiceError):
    """Provider failure wrapped with the context it happened in."""

    def __init__(self, message: str, context: TranslationContext, original: Exception):
        self.context = context
        self.original = original
        super().__init__(message)


class CredentialError(TranslationProviderError):
    """Provider failure caused by a missing or invalid API key."""

    pass
