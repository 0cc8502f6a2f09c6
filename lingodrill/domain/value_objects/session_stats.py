"""Session statistics value object."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class SessionStats:
    """Immutable snapshot of a session's answer counts.

    accuracy is a percentage (0-100) of correct answers among answered cards,
    and 0 when nothing has been answered yet.
    """

    total_cards: int
    answered_cards: int
    correct_cards: int
    accuracy: float
    is_complete: bool

    @property
    def remaining_cards(self) -> int:
        """Cards in the deck without a recorded response."""
        return max(0, self.total_cards - self.answered_cards)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)
