"""Infrastructure layer - retry, fallback and usage tracking."""

from .fallback import FallbackOutcome, run_with_fallback
from .retry import TransientError, retry_operation
from .usage_tracker import ServiceType, calculate_cost, get_usage_summary, log_usage

__all__ = [
    "FallbackOutcome",
    "run_with_fallback",
    "TransientError",
    "retry_operation",
    # Usage tracking
    "ServiceType",
    "log_usage",
    "calculate_cost",
    "get_usage_summary",
]
