"""
Evaluation Result Value Object.

Represents the verdict on a learner's translation.
Immutable data structure passed from the translation backend through the
evaluator to the presentation layer.
"""

from dataclasses import dataclass, field
from typing import Any

from lingodrill.domain.constants import DetailMessages


@dataclass(frozen=True)
class EvaluationDetails:
    """Per-aspect feedback on a translation."""

    grammar: str
    vocabulary: str
    accuracy: str

    @classmethod
    def unavailable(cls) -> "EvaluationDetails":
        return cls(
            grammar=DetailMessages.UNAVAILABLE,
            vocabulary=DetailMessages.UNAVAILABLE,
            accuracy=DetailMessages.UNAVAILABLE,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "grammar": self.grammar,
            "vocabulary": self.vocabulary,
            "accuracy": self.accuracy,
        }


@dataclass(frozen=True)
class EvaluationResult:
    """Verdict on a learner's translation.

    Attributes:
        correct: Whether the translation is acceptable overall
        score: Quality score from 0.0 to 1.0
        feedback: Short feedback message for the learner
        suggested_translation: Reference or corrected translation
        details: Grammar, vocabulary and accuracy sub-feedback
        fallback: True when this is a last-resort verdict rather than a
            backend judgement
    """

    correct: bool
    score: float
    feedback: str
    suggested_translation: str
    details: EvaluationDetails = field(default_factory=EvaluationDetails.unavailable)
    fallback: bool = False

    def __post_init__(self) -> None:
        """Validate score range."""
        if self.score < 0.0 or self.score > 1.0:
            raise ValueError(f"score must be 0.0-1.0, got {self.score}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "correct": self.correct,
            "score": self.score,
            "feedback": self.feedback,
            "suggested_translation": self.suggested_translation,
            "details": self.details.to_dict(),
            "fallback": self.fallback,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationResult":
        """Create from dictionary."""
        details = data.get("details") or {}
        return cls(
            correct=data["correct"],
            score=float(data["score"]),
            feedback=data["feedback"],
            suggested_translation=data.get("suggested_translation", ""),
            details=EvaluationDetails(
                grammar=details.get("grammar") or DetailMessages.NO_GRAMMAR,
                vocabulary=details.get("vocabulary") or DetailMessages.NO_VOCABULARY,
                accuracy=details.get("accuracy") or DetailMessages.NO_ACCURACY,
            ),
            fallback=bool(data.get("fallback", False)),
        )


@dataclass(frozen=True)
class FallbackVerdictPolicy:
    """Verdict used when no backend could judge an answer.

    Deployments that prefer not to credit unverifiable answers can pass a
    different policy to the Evaluator.
    """

    correct: bool = True
    score: float = 0.5

    def build(self, feedback: str, suggested_translation: str) -> EvaluationResult:
        """Create the flagged fallback EvaluationResult."""
        return EvaluationResult(
            correct=self.correct,
            score=self.score,
            feedback=feedback,
            suggested_translation=suggested_translation,
            details=EvaluationDetails.unavailable(),
            fallback=True,
        )


# An answer that could not be verified because of an infrastructure fault
# is accepted at half score.
BENEFIT_OF_THE_DOUBT = FallbackVerdictPolicy(correct=True, score=0.5)
