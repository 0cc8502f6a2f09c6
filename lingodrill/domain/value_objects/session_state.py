"""Session state value object for session lifecycle management."""

from enum import StrEnum


class SessionState(StrEnum):
    """Session lifecycle states.

    State machine:
        IN_PROGRESS -> COMPLETE

    The only transition is advancing past the last card of the deck.
    COMPLETE is terminal: no responses may be appended afterwards.
    """

    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"

    def can_accept_responses(self) -> bool:
        """Check if session can record new responses."""
        return self is SessionState.IN_PROGRESS

    def is_terminal(self) -> bool:
        """Check if session is in a terminal state."""
        return self is SessionState.COMPLETE
