"""Progress tracker service for session cursor, completion and statistics."""

import logging
from dataclasses import dataclass
from typing import Any

from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Response, Session
from lingodrill.domain.exceptions import (
    CardNotFoundError,
    InvalidSessionStateError,
    SessionNotFoundError,
)
from lingodrill.domain.value_objects.session_stats import SessionStats
from lingodrill.ports.card_store import CardStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionProgress:
    """1-based position of the current card in the deck."""

    current: int
    total: int


@dataclass(frozen=True)
class CurrentCard:
    """The card under a session's cursor."""

    session_id: str
    progress: SessionProgress
    card: Card

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "progress": {"current": self.progress.current, "total": self.progress.total},
            "card": self.card.to_dict(),
        }


@dataclass(frozen=True)
class AdvanceResult:
    """Result of moving a session forward.

    stats is set when the session is complete, next_card otherwise.
    """

    session_id: str
    is_complete: bool
    stats: SessionStats | None = None
    next_card: CurrentCard | None = None


class ProgressTracker:
    """Owns a session's cursor, completion transition and response log.

    State machine per session: IN_PROGRESS -> COMPLETE, only via advance().
    """

    def __init__(self, card_store: CardStore) -> None:
        self._card_store = card_store

    async def get_current_card(self, session_id: str) -> CurrentCard | None:
        """Get the card under the cursor.

        Returns:
            CurrentCard, or None if the session is complete or exhausted

        Raises:
            SessionNotFoundError: If the session is unknown
            CardNotFoundError: If the deck references a missing card
        """
        session = await self._load_session(session_id)
        card_id = session.get_current_card_id()
        if card_id is None:
            return None

        card = await self._card_store.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        return CurrentCard(
            session_id=session.id,
            progress=SessionProgress(
                current=session.current_card_index + 1,
                total=len(session.card_ids),
            ),
            card=card,
        )

    async def advance(self, session_id: str) -> AdvanceResult:
        """Move to the next card, completing the session after the last one.

        Idempotent once complete: the stored session is returned untouched.

        Raises:
            SessionNotFoundError: If the session is unknown
        """
        session = await self._load_session(session_id)

        if session.is_complete:
            return AdvanceResult(session_id=session.id, is_complete=True, stats=session.get_stats())

        has_more_cards = session.next_card()
        await self._card_store.save_session(session)

        if not has_more_cards:
            logger.info(
                f"Session {session.id} complete",
                extra={"total_cards": len(session.card_ids), "answered": len(session.responses)},
            )
            return AdvanceResult(session_id=session.id, is_complete=True, stats=session.get_stats())

        return AdvanceResult(
            session_id=session.id,
            is_complete=False,
            next_card=await self.get_current_card(session.id),
        )

    async def record_response(
        self,
        session: Session,
        card_id: str,
        user_response: str,
        correct: bool,
    ) -> Response:
        """Append a response to the session and persist it.

        Raises:
            InvalidSessionStateError: If the session is already complete
        """
        try:
            response = session.record_response(card_id, user_response, correct)
        except ValueError as e:
            raise InvalidSessionStateError(str(e)) from e

        await self._card_store.save_session(session)
        return response

    async def get_session_stats(self, session_id: str) -> SessionStats:
        """Get statistics for a session.

        Raises:
            SessionNotFoundError: If the session is unknown
        """
        session = await self._load_session(session_id)
        return session.get_stats()

    async def _load_session(self, session_id: str) -> Session:
        session = await self._card_store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session
