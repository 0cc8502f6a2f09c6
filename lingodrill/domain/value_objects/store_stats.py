"""Aggregate record counts for a card store."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class StoreStats:
    """Card and session totals; sessions split by completion."""

    cards: int = 0
    sessions: int = 0
    active_sessions: int = 0
    completed_sessions: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
