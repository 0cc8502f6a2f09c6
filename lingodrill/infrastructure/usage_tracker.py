"""Usage tracking for billable translation providers.

Logs token usage to a JSONL file for cost monitoring and analysis.
Services tracked: Gemini and OpenAI chat completions.
"""

import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ServiceType(str, Enum):
    """Billable service types."""

    GEMINI = "gemini"
    OPENAI = "openai"


# Pricing per 1M tokens (USD)
MODEL_PRICING: dict[str, dict[str, float]] = {
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
    "gemini-2.0-flash-lite": {"input": 0.075, "output": 0.30},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
    "gemini-2.5-flash-lite": {"input": 0.10, "output": 0.40},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
}

# Unknown models are costed at this rate
FALLBACK_PRICING = {"input": 0.50, "output": 2.00}

# Default log path (relative to the project root)
DEFAULT_USAGE_LOG = Path(__file__).parent.parent.parent / "logs" / "usage.jsonl"


def calculate_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Calculate chat completion cost in USD."""
    pricing = MODEL_PRICING.get(model, FALLBACK_PRICING)
    input_cost = (prompt_tokens / 1_000_000) * pricing["input"]
    output_cost = (completion_tokens / 1_000_000) * pricing["output"]
    return input_cost + output_cost


def _log_entry(entry: dict[str, Any], log_path: Path | None = None) -> None:
    """Internal: write a log entry to JSONL file.

    Non-blocking: failures are logged but don't raise.
    """
    log_file = log_path or DEFAULT_USAGE_LOG

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as e:
        logger.warning(f"Failed to log usage: {e}")


def log_usage(
    service: ServiceType,
    model: str,
    prompt_tokens: int,
    completion_tokens: int,
    operation: str,
    log_path: Path | None = None,
) -> None:
    """Log token usage of one provider call."""
    cost = calculate_cost(model, prompt_tokens, completion_tokens)
    entry = {
        "timestamp": datetime.now(UTC).isoformat(),
        "service": service.value,
        "model": model,
        "operation": operation,
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
        "cost_usd": round(cost, 6),
    }
    _log_entry(entry, log_path)


def get_usage_summary(log_path: Path | None = None) -> dict[str, Any]:
    """Get summary of usage from log file, aggregated by service.

    Returns:
        Summary dict with per-service breakdowns and totals.
    """
    log_file = log_path or DEFAULT_USAGE_LOG

    if not log_file.exists():
        return {
            "total_cost_usd": 0.0,
            "total_requests": 0,
            "by_service": {},
        }

    by_service: dict[str, dict[str, Any]] = {}
    total_cost = 0.0
    total_requests = 0

    with log_file.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue

            service = entry.get("service", "unknown")
            cost = entry.get("cost_usd", 0)
            total_cost += cost
            total_requests += 1

            service_data = by_service.setdefault(
                service, {"count": 0, "cost_usd": 0.0, "total_tokens": 0}
            )
            service_data["count"] += 1
            service_data["cost_usd"] += cost
            service_data["total_tokens"] += entry.get("total_tokens", 0)

    for service_data in by_service.values():
        service_data["cost_usd"] = round(service_data["cost_usd"], 4)

    return {
        "total_cost_usd": round(total_cost, 4),
        "total_requests": total_requests,
        "by_service": by_service,
    }
