"""Domain value objects - immutable objects without identity."""

from .card_filter import CardFilter
from .evaluation_result import (
    BENEFIT_OF_THE_DOUBT,
    EvaluationDetails,
    EvaluationResult,
    FallbackVerdictPolicy,
)
from .session_state import SessionState
from .session_stats import SessionStats
from .store_stats import StoreStats
from .tag_counts import TagCounts

__all__ = [
    "BENEFIT_OF_THE_DOUBT",
    "CardFilter",
    "EvaluationDetails",
    "EvaluationResult",
    "FallbackVerdictPolicy",
    "SessionState",
    "SessionStats",
    "StoreStats",
    "TagCounts",
]
