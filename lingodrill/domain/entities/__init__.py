"""Domain entities - objects with identity."""

from .card import Card
from .session import Response, Session

__all__ = ["Card", "Response", "Session"]
