"""Session manager service for practice session lifecycle management."""

import logging
from collections.abc import Sequence

from lingodrill.domain.constants import (
    DEFAULT_MAX_CARDS,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
)
from lingodrill.domain.entities.session import Session
from lingodrill.domain.exceptions import (
    CardNotFoundError,
    InvalidSessionStateError,
    SessionExpiredError,
    SessionNotFoundError,
)
from lingodrill.domain.services.card_selector import CardSelector
from lingodrill.domain.services.evaluator import AnswerEvaluation, Evaluator
from lingodrill.domain.services.progress_tracker import (
    AdvanceResult,
    CurrentCard,
    ProgressTracker,
)
from lingodrill.domain.value_objects.session_stats import SessionStats
from lingodrill.ports.card_store import CardStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages practice session lifecycle.

    Responsibilities:
    - Session creation from a selected deck
    - Gatekeeping answers against completed sessions
    - Delegating progress to ProgressTracker and judgement to Evaluator

    No locking: one caller per session is assumed and records are written
    back whole, last write wins.
    """

    def __init__(
        self,
        card_store: CardStore,
        card_selector: CardSelector,
        progress_tracker: ProgressTracker,
        evaluator: Evaluator,
    ):
        """Initialize session manager.

        Args:
            card_store: Storage port for cards and sessions
            card_selector: Deck builder
            progress_tracker: Cursor and response log owner
            evaluator: Answer judge
        """
        self._card_store = card_store
        self._card_selector = card_selector
        self._progress_tracker = progress_tracker
        self._evaluator = evaluator

    async def create_session(
        self,
        source_language: str = DEFAULT_SOURCE_LANGUAGE,
        target_language: str = DEFAULT_TARGET_LANGUAGE,
        max_cards: int = DEFAULT_MAX_CARDS,
        use_built_in_deck: bool = True,
        tags: Sequence[str] | None = None,
        include_untagged: bool = False,
    ) -> Session:
        """Create and persist a new practice session.

        Returns:
            New session positioned on the first card (may have an empty deck)
        """
        card_ids = await self._card_selector.select_cards(
            source_language=source_language,
            target_language=target_language,
            max_cards=max_cards,
            use_built_in_deck=use_built_in_deck,
            tags=tags,
            include_untagged=include_untagged,
        )

        session = Session.create(source_language, target_language, card_ids)
        await self._card_store.save_session(session)
        logger.info(
            f"Created session {session.id} with {len(card_ids)} cards",
            extra={"source_language": source_language, "target_language": target_language},
        )
        return session

    async def get_current_card(self, session_id: str) -> CurrentCard | None:
        return await self._progress_tracker.get_current_card(session_id)

    async def submit_answer(self, session_id: str, answer: str) -> AnswerEvaluation:
        """Judge an answer for the current card and record it.

        Args:
            session_id: Session being played
            answer: Learner's raw answer

        Returns:
            The Evaluator's result, unchanged

        Raises:
            SessionExpiredError: If the session cannot be found
            InvalidSessionStateError: If the session has no card left to answer
            CardNotFoundError: If the current card is missing from storage
        """
        session = await self._card_store.get_session(session_id)
        if session is None:
            # Sessions are ephemeral, an unknown id here means it expired
            raise SessionExpiredError(session_id) from SessionNotFoundError(session_id)

        if session.is_exhausted:
            raise InvalidSessionStateError("Session is already complete")

        card_id = session.card_ids[session.current_card_index]
        card = await self._card_store.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        result = await self._evaluator.evaluate_answer(session, card, answer)

        await self._progress_tracker.record_response(
            session, card_id, answer, result.evaluation.correct
        )
        return result

    async def advance_session(self, session_id: str) -> AdvanceResult:
        return await self._progress_tracker.advance(session_id)

    async def get_session_stats(self, session_id: str) -> SessionStats:
        return await self._progress_tracker.get_session_stats(session_id)

    async def list_sessions(
        self,
        completed: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Session]:
        """List stored sessions, newest first.

        Args:
            completed: True for completed only, False for active only, None for all
            limit: Maximum number of sessions
            offset: Number of sessions to skip
        """
        return await self._card_store.list_sessions(
            completed=completed, limit=limit, offset=offset
        )

    async def delete_session(self, session_id: str) -> None:
        """Delete a session.

        Raises:
            SessionNotFoundError: If the session is unknown
        """
        if not await self._card_store.delete_session(session_id):
            raise SessionNotFoundError(session_id)
        logger.info(f"Deleted session {session_id}")
