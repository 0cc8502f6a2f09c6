"""Domain exceptions raised by the session services."""


class NotFoundError(Exception):
    """Raised when a session or card id cannot be resolved."""

    pass


class SessionNotFoundError(NotFoundError):
    """Raised when a session id is unknown to storage."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class CardNotFoundError(NotFoundError):
    """Raised when a card referenced by a deck is missing from storage."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class SessionExpiredError(Exception):
    """Raised by the session manager when a session can no longer be found.

    Sessions are ephemeral, so a missing session id at the answer boundary
    is reported as expired rather than as a plain lookup failure.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            "Session error: The practice session could not be found or has expired."
        )


class InvalidSessionStateError(Exception):
    """Raised when an operation is not allowed in the session's current state."""

    pass
