# Domain layer - Business logic (NO adapter imports)

from .entities import Card, Response, Session
from .value_objects import (
    CardFilter,
    EvaluationResult,
    FallbackVerdictPolicy,
    SessionState,
    SessionStats,
)

__all__ = [
    "Card",
    "CardFilter",
    "EvaluationResult",
    "FallbackVerdictPolicy",
    "Response",
    "Session",
    "SessionState",
    "SessionStats",
]
