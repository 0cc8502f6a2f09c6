"""In-memory card and session store.

Records are kept as copies so callers never share state with the store,
matching what a persistent backend would return. Data is lost on restart.
"""

import copy
from collections import Counter

from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Session
from lingodrill.domain.value_objects.card_filter import CardFilter
from lingodrill.domain.value_objects.store_stats import StoreStats
from lingodrill.domain.value_objects.tag_counts import TagCounts


class InMemoryCardStore:
    """CardStore implementation backed by dictionaries.

    Useful for:
    - Development without a database file
    - Unit and API tests
    """

    def __init__(self) -> None:
        self._cards: dict[str, Card] = {}
        self._sessions: dict[str, Session] = {}

    async def initialize(self) -> None:
        """Nothing to prepare; present for parity with SqliteCardStore."""

    async def save_card(self, card: Card) -> Card:
        self._cards[card.id] = copy.deepcopy(card)
        return card

    async def get_card(self, card_id: str) -> Card | None:
        card = self._cards.get(card_id)
        return copy.deepcopy(card) if card else None

    async def get_all_cards(self, card_filter: CardFilter | None = None) -> list[Card]:
        card_filter = card_filter or CardFilter()
        matching = [c for c in self._cards.values() if card_filter.matches(c)]
        matching.sort(key=lambda c: c.updated_at, reverse=True)
        if card_filter.limit is not None:
            matching = matching[: card_filter.limit]
        return [copy.deepcopy(c) for c in matching]

    async def delete_card(self, card_id: str) -> bool:
        return self._cards.pop(card_id, None) is not None

    async def get_tag_counts(self, source_language: str | None = None) -> TagCounts:
        counts: Counter[str] = Counter()
        untagged = 0
        for card in self._cards.values():
            if source_language and card.source_language != source_language:
                continue
            if card.is_untagged:
                untagged += 1
            counts.update(card.tags)
        return TagCounts(tags=dict(counts), untagged=untagged)

    async def save_session(self, session: Session) -> Session:
        self._sessions[session.id] = copy.deepcopy(session)
        return session

    async def get_session(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        return copy.deepcopy(session) if session else None

    async def list_sessions(
        self,
        completed: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Session]:
        sessions = [
            s for s in self._sessions.values() if completed is None or s.is_complete == completed
        ]
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        end = None if limit is None else offset + limit
        return [copy.deepcopy(s) for s in sessions[offset:end]]

    async def delete_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    async def get_stats(self) -> StoreStats:
        completed = sum(1 for s in self._sessions.values() if s.is_complete)
        return StoreStats(
            cards=len(self._cards),
            sessions=len(self._sessions),
            active_sessions=len(self._sessions) - completed,
            completed_sessions=completed,
        )

    def close(self) -> None:
        """Drop all records."""
        self._cards.clear()
        self._sessions.clear()
