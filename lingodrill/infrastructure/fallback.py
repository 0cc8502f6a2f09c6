"""Try-then-degrade helper shared by the translation backend and the evaluator.

Both layers follow the same rule: run a short list of remote attempts in
order, stop at the first success, and when every attempt failed hand the
collected errors to a degrade function that still produces a value.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Attempt = Callable[[], Awaitable[T]]
Degrade = Callable[[list[Exception]], T | Awaitable[T]]


@dataclass
class FallbackOutcome(Generic[T]):
    """Result of run_with_fallback.

    Attributes:
        value: Value from the first successful attempt, or from degrade
        errors: Exceptions raised by failed attempts, in order
        degraded: True when no attempt succeeded and degrade produced value
    """

    value: T
    errors: list[Exception] = field(default_factory=list)
    degraded: bool = False


async def run_with_fallback(
    attempts: Sequence[Attempt[T]],
    degrade: Degrade[T],
    on_failure: Callable[[int, Exception], Exception | None] | None = None,
) -> FallbackOutcome[T]:
    """Run attempts in order until one succeeds, else degrade.

    Args:
        attempts: Zero-argument async callables tried in order
        degrade: Called with the collected errors when all attempts fail
            (or when there are none); may be sync or async and may raise
        on_failure: Optional hook called with (index, error) for each failed
            attempt; a returned exception replaces the recorded error

    Returns:
        FallbackOutcome with the value and the errors collected on the way
    """
    errors: list[Exception] = []
    for index, attempt in enumerate(attempts):
        try:
            return FallbackOutcome(value=await attempt(), errors=errors)
        except Exception as e:
            recorded = e
            if on_failure is not None:
                recorded = on_failure(index, e) or e
            errors.append(recorded)

    value = degrade(errors)
    if inspect.isawaitable(value):
        value = await value
    return FallbackOutcome(value=value, errors=errors, degraded=True)
