"""
Evaluator.

Domain service that judges one answer in a session. Uses the translation
backend for the reference translation and the verdict, and owns the
degradation rules: a failing backend never stops a session.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

from lingodrill.domain.constants import FeedbackMessages
from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Session
from lingodrill.domain.services.translation_backend import TranslationBackend
from lingodrill.domain.value_objects.evaluation_result import (
    BENEFIT_OF_THE_DOUBT,
    EvaluationResult,
    FallbackVerdictPolicy,
)
from lingodrill.infrastructure.fallback import run_with_fallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerEvaluation:
    """Outcome of judging one answer.

    Attributes:
        session_id: Session the answer belongs to
        card_id: Card that was answered
        evaluation: Backend verdict, or the fallback verdict
        reference_translation: Reference the answer was judged against
        had_translation_error: True when generating the reference failed and
            the learner's own answer was used instead
    """

    session_id: str
    card_id: str
    evaluation: EvaluationResult
    reference_translation: str
    had_translation_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "card_id": self.card_id,
            "evaluation": self.evaluation.to_dict(),
            "reference_translation": self.reference_translation,
            "had_translation_error": self.had_translation_error,
        }


class Evaluator:
    """Judges answers, degrading instead of failing.

    Responsibilities:
    - Reuse the card's own translation as reference when present
    - Substitute the learner's answer when the reference cannot be generated
    - Substitute the fallback verdict when the answer cannot be graded
    - Log evaluation outcomes for observability
    """

    def __init__(
        self,
        translation_backend: TranslationBackend,
        fallback_policy: FallbackVerdictPolicy = BENEFIT_OF_THE_DOUBT,
    ) -> None:
        """Initialize evaluator.

        Args:
            translation_backend: Backend producing references and verdicts
            fallback_policy: Verdict used when the backend cannot grade
        """
        self._backend = translation_backend
        self._fallback_policy = fallback_policy

    async def evaluate_answer(
        self,
        session: Session,
        card: Card,
        user_answer: str,
    ) -> AnswerEvaluation:
        """Evaluate a learner's answer to a card.

        Args:
            session: Session supplying the language pair
            card: Card being answered
            user_answer: Raw text the learner submitted

        Returns:
            AnswerEvaluation, degraded but valid when the backend failed
        """
        start_time = time.time()

        reference_translation, had_translation_error = await self._resolve_reference(
            session, card, user_answer
        )

        def degrade(errors: list[Exception]) -> EvaluationResult:
            logger.error(f"Error evaluating translation: {errors[-1]}")
            feedback = (
                FeedbackMessages.API_ERROR
                if had_translation_error
                else FeedbackMessages.NO_DETAILED_FEEDBACK
            )
            return self._fallback_policy.build(
                feedback=feedback,
                suggested_translation=reference_translation,
            )

        outcome = await run_with_fallback(
            [
                lambda: self._backend.evaluate_translation(
                    source_content=card.content,
                    source_language=session.source_language,
                    target_language=session.target_language,
                    user_translation=user_answer,
                    reference_translation=reference_translation,
                )
            ],
            degrade,
        )

        result = AnswerEvaluation(
            session_id=session.id,
            card_id=card.id,
            evaluation=outcome.value,
            reference_translation=reference_translation,
            had_translation_error=had_translation_error,
        )
        self._log_evaluation(result, user_answer, (time.time() - start_time) * 1000)
        return result

    async def _resolve_reference(
        self,
        session: Session,
        card: Card,
        user_answer: str,
    ) -> tuple[str, bool]:
        """Pick the reference translation.

        Returns:
            Tuple of (reference, had_translation_error)
        """
        if card.has_user_translation:
            return card.user_translation, False

        def degrade(errors: list[Exception]) -> str:
            # Benefit of the doubt: an answer can't be wrong because of an
            # infrastructure fault
            logger.error(f"Error generating reference translation: {errors[-1]}")
            return user_answer

        outcome = await run_with_fallback(
            [
                lambda: self._backend.generate_translation(
                    content=card.content,
                    source_language=session.source_language,
                    target_language=session.target_language,
                )
            ],
            degrade,
        )
        return outcome.value, outcome.degraded

    def _log_evaluation(
        self,
        result: AnswerEvaluation,
        user_answer: str,
        evaluation_time_ms: float,
    ) -> None:
        """Log structured evaluation data for observability."""
        logger.info(
            "evaluation_complete",
            extra={
                "event": "evaluation_complete",
                "session_id": result.session_id,
                "card_id": result.card_id,
                "user_answer": user_answer[:100],
                "is_correct": result.evaluation.correct,
                "score": result.evaluation.score,
                "fallback": result.evaluation.fallback,
                "had_translation_error": result.had_translation_error,
                "evaluation_time_ms": int(evaluation_time_ms),
            },
        )
