"""Domain services - orchestration and business logic."""

from .baseline_translator import BaselineTranslator
from .card_selector import CardSelector
from .evaluator import AnswerEvaluation, Evaluator
from .progress_tracker import (
    AdvanceResult,
    CurrentCard,
    ProgressTracker,
    SessionProgress,
)
from .session_manager import SessionManager
from .translation_backend import TranslationBackend

__all__ = [
    "AdvanceResult",
    "AnswerEvaluation",
    "BaselineTranslator",
    "CardSelector",
    "CurrentCard",
    "Evaluator",
    "ProgressTracker",
    "SessionManager",
    "SessionProgress",
    "TranslationBackend",
]
