"""lingodrill - practice-session engine for a vocabulary flashcard trainer."""

__version__ = "0.1.0"
