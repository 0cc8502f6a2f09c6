"""Session entity for practice session lifecycle management."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Self
from uuid import uuid4

from lingodrill.domain.value_objects.session_state import SessionState
from lingodrill.domain.value_objects.session_stats import SessionStats


@dataclass(frozen=True)
class Response:
    """A learner's answer to one card.

    Attributes:
        card_id: Card the answer was given for
        user_response: Raw text the learner submitted
        correct: Verdict recorded for the answer
        timestamp: When the response was recorded
    """

    card_id: str
    user_response: str
    correct: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "user_response": self.user_response,
            "correct": self.correct,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Response":
        return cls(
            card_id=data["card_id"],
            user_response=data["user_response"],
            correct=bool(data["correct"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class Session:
    """Practice session entity.

    Attributes:
        id: Unique session identifier (UUID v4)
        source_language: Language the cards are written in
        target_language: Language the learner translates into
        card_ids: Deck of card ids, fixed at creation
        current_card_index: Cursor into card_ids (0 <= index <= len(card_ids))
        responses: Append-only log of answers
        created_at: When the session was created
        completed_at: When the cursor passed the last card (None while in progress)
    """

    id: str = field(default_factory=lambda: str(uuid4()))
    source_language: str = "en"
    target_language: str = "de"
    card_ids: list[str] = field(default_factory=list)
    current_card_index: int = 0
    responses: list[Response] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    @classmethod
    def create(cls, source_language: str, target_language: str, card_ids: list[str]) -> Self:
        """Create a new in-progress session positioned on the first card."""
        return cls(
            source_language=source_language,
            target_language=target_language,
            card_ids=list(card_ids),  # Copy to avoid mutating caller's list
        )

    @property
    def state(self) -> SessionState:
        if self.completed_at is not None:
            return SessionState.COMPLETE
        return SessionState.IN_PROGRESS

    @property
    def is_complete(self) -> bool:
        return self.state.is_terminal()

    @property
    def is_exhausted(self) -> bool:
        """True when the cursor is past the last card or the session is complete."""
        return self.is_complete or self.current_card_index >= len(self.card_ids)

    def get_current_card_id(self) -> str | None:
        """Get the card id under the cursor, or None when exhausted."""
        if self.is_exhausted:
            return None
        return self.card_ids[self.current_card_index]

    def record_response(self, card_id: str, user_response: str, correct: bool) -> Response:
        """Append a response for a card.

        Raises:
            ValueError: If the session is already complete
        """
        if not self.state.can_accept_responses():
            raise ValueError(f"Cannot record response in state {self.state}")

        response = Response(card_id=card_id, user_response=user_response, correct=correct)
        self.responses.append(response)
        return response

    def next_card(self) -> bool:
        """Move the cursor forward.

        The cursor never moves past len(card_ids). completed_at is set the
        first time the cursor passes the last card.

        Returns:
            True if another card is available, False once the session is complete
        """
        if self.is_complete:
            return False

        self.current_card_index = min(self.current_card_index + 1, len(self.card_ids))
        if self.current_card_index < len(self.card_ids):
            return True

        if self.completed_at is None:
            self.completed_at = datetime.now(UTC)
        return False

    def get_stats(self) -> SessionStats:
        """Compute statistics from the response log."""
        answered = len(self.responses)
        correct = sum(1 for r in self.responses if r.correct)
        return SessionStats(
            total_cards=len(self.card_ids),
            answered_cards=answered,
            correct_cards=correct,
            accuracy=(correct / answered) * 100 if answered > 0 else 0,
            is_complete=self.is_complete,
        )

    def to_dict(self) -> dict:
        """Convert to a plain dictionary for storage and API responses."""
        return {
            "id": self.id,
            "source_language": self.source_language,
            "target_language": self.target_language,
            "card_ids": list(self.card_ids),
            "current_card_index": self.current_card_index,
            "responses": [r.to_dict() for r in self.responses],
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """Create from dictionary."""
        completed_at = data.get("completed_at")
        return cls(
            id=data["id"],
            source_language=data["source_language"],
            target_language=data["target_language"],
            card_ids=list(data.get("card_ids") or []),
            current_card_index=int(data.get("current_card_index", 0)),
            responses=[Response.from_dict(r) for r in data.get("responses") or []],
            created_at=datetime.fromisoformat(data["created_at"]),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
        )
