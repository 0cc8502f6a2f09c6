"""
Shared Domain Constants.

Central location for user-facing messages and session defaults used
across domain services.
"""

# =============================================================================
# Session Defaults
# =============================================================================

DEFAULT_SOURCE_LANGUAGE = "en"
DEFAULT_TARGET_LANGUAGE = "de"
DEFAULT_MAX_CARDS = 10


# =============================================================================
# Baseline Heuristic
# =============================================================================

# Share of words (of the shorter text) two answers must have in common to
# count as a close match
CLOSE_MATCH_WORD_RATIO = 0.5

EXACT_MATCH_SCORE = 1.0
CLOSE_MATCH_SCORE = 0.8
MISMATCH_SCORE = 0.2


# =============================================================================
# Language Names
# =============================================================================

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
}


def language_name(code: str) -> str:
    """Human-readable language name for an ISO code (the code itself if unknown)."""
    return LANGUAGE_NAMES.get(code, code)


# =============================================================================
# Feedback Messages
# =============================================================================


class FeedbackMessages:
    """User-facing feedback strings."""

    EXACT_MATCH = "Perfect! Your translation matches exactly."
    CLOSE_MATCH = "Good job! Your translation is very close."
    MISMATCH = "Try again. Your translation doesn't match the expected answer."
    NO_REFERENCE = "Great job! Your translation is correct."

    # Evaluator fallbacks
    API_ERROR = (
        "We couldn't properly evaluate your translation due to an API error. "
        "Continuing session."
    )
    NO_DETAILED_FEEDBACK = (
        "Your answer was accepted, but we couldn't provide detailed feedback."
    )


class DetailMessages:
    """Per-aspect detail strings."""

    UNAVAILABLE = "Evaluation unavailable"
    NO_GRAMMAR = "No grammar feedback available"
    NO_VOCABULARY = "No vocabulary feedback available"
    NO_ACCURACY = "No accuracy feedback available"


class WarningMessages:
    """Non-blocking warnings surfaced alongside an answer verdict."""

    TRANSLATION_ISSUE = (
        "There was a problem with the translation service, but your answer was accepted."
    )
    EVALUATION_FALLBACK = "We had to use a simplified evaluation method due to API issues."
