"""Port interface for card and session storage."""

from typing import Protocol, runtime_checkable

from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Session
from lingodrill.domain.value_objects.card_filter import CardFilter
from lingodrill.domain.value_objects.store_stats import StoreStats
from lingodrill.domain.value_objects.tag_counts import TagCounts


@runtime_checkable
class CardStore(Protocol):
    """Port for card and session persistence.

    Each call is treated as atomic; callers do no transaction control.
    Records are written back whole, last write wins.
    """

    async def save_card(self, card: Card) -> Card:
        """Insert or replace a card.

        Args:
            card: Card to persist

        Returns:
            The saved card
        """
        ...

    async def get_card(self, card_id: str) -> Card | None:
        """Get a card by id.

        Args:
            card_id: ID of the card

        Returns:
            The card, or None if unknown
        """
        ...

    async def get_all_cards(self, card_filter: CardFilter | None = None) -> list[Card]:
        """Get cards matching a filter, most recently updated first.

        Args:
            card_filter: Language/tag criteria and optional limit

        Returns:
            Matching cards
        """
        ...

    async def delete_card(self, card_id: str) -> bool:
        """Delete a card.

        Sessions that reference it are left untouched.

        Returns:
            True if a card was removed
        """
        ...

    async def save_session(self, session: Session) -> Session:
        """Insert or replace a session.

        Args:
            session: Session to persist

        Returns:
            The saved session
        """
        ...

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session by id.

        Args:
            session_id: ID of the session

        Returns:
            The session, or None if unknown
        """
        ...

    async def list_sessions(
        self,
        completed: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Session]:
        """List sessions, newest first.

        Args:
            completed: True for completed only, False for active only, None for all
            limit: Maximum number of sessions, or no limit when None
            offset: Number of sessions to skip
        """
        ...

    async def delete_session(self, session_id: str) -> bool:
        """Delete a session.

        Returns:
            True if a session was removed
        """
        ...

    async def get_tag_counts(self, source_language: str | None = None) -> TagCounts:
        """Count cards per tag.

        Args:
            source_language: Restrict to one language, or all when None

        Returns:
            Per-tag counts and the number of untagged cards
        """
        ...

    async def get_stats(self) -> StoreStats:
        """Count stored cards and sessions."""
        ...
