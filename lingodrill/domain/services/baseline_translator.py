"""
Baseline Translator.

Deterministic, network-free heuristic used when no translation provider is
configured or every configured provider failed. Good enough to keep a
session moving; not a real translator.
"""

import logging

from lingodrill.domain.constants import (
    CLOSE_MATCH_SCORE,
    CLOSE_MATCH_WORD_RATIO,
    EXACT_MATCH_SCORE,
    MISMATCH_SCORE,
    FeedbackMessages,
)
from lingodrill.domain.value_objects.evaluation_result import (
    EvaluationDetails,
    EvaluationResult,
)
from lingodrill.ports.translation_provider import EvaluationRequest, GenerationRequest

logger = logging.getLogger(__name__)


# Common phrases per (source, target) pair, keyed by normalized content
PHRASE_TABLE: dict[tuple[str, str], dict[str, str]] = {
    ("en", "de"): {
        "hello": "Hallo",
        "goodbye": "Auf Wiedersehen",
        "thank you": "Danke",
        "yes": "Ja",
        "no": "Nein",
        "please": "Bitte",
        "excuse me": "Entschuldigung",
        "sorry": "Es tut mir leid",
        "good morning": "Guten Morgen",
        "good evening": "Guten Abend",
        "how are you": "Wie geht es dir",
        "fine": "Gut",
        "what is your name": "Wie heißt du",
        "my name is": "Ich heiße",
        "nice to meet you": "Schön, dich kennenzulernen",
        "where is": "Wo ist",
        "when": "Wann",
        "why": "Warum",
        "today": "Heute",
        "tomorrow": "Morgen",
    },
    ("en", "fr"): {
        "hello": "Bonjour",
        "goodbye": "Au revoir",
        "thank you": "Merci",
        "yes": "Oui",
        "no": "Non",
        "please": "S'il vous plaît",
        "excuse me": "Excusez-moi",
        "sorry": "Désolé",
        "good morning": "Bonjour",
        "good evening": "Bonsoir",
    },
    ("en", "es"): {
        "hello": "Hola",
        "goodbye": "Adiós",
        "thank you": "Gracias",
        "yes": "Sí",
        "no": "No",
        "please": "Por favor",
        "excuse me": "Disculpe",
        "sorry": "Lo siento",
        "good morning": "Buenos días",
        "good evening": "Buenas noches",
    },
    ("de", "en"): {
        "hallo": "Hello",
        "auf wiedersehen": "Goodbye",
        "danke": "Thank you",
        "ja": "Yes",
        "nein": "No",
        "bitte": "Please",
        "entschuldigung": "Excuse me",
        "es tut mir leid": "I am sorry",
        "guten morgen": "Good morning",
        "guten abend": "Good evening",
        "wie geht es dir": "How are you",
        "gut": "Fine",
        "wie heißt du": "What is your name",
        "ich heiße": "My name is",
        "schön, dich kennenzulernen": "Nice to meet you",
    },
}


def normalize(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(text.split()).lower()


def is_close_match(first: str, second: str) -> bool:
    """Check if two normalized strings are close.

    Close means one contains the other, or they share at least half the
    words of the shorter string. Empty strings are never close.
    """
    if not first or not second:
        return False
    if first in second or second in first:
        return True

    words_first = first.split()
    words_second = second.split()
    shared = sum(1 for word in words_first if word in words_second)
    threshold = min(len(words_first), len(words_second)) * CLOSE_MATCH_WORD_RATIO
    return shared >= threshold


class BaselineTranslator:
    """Heuristic translator and grader with no external dependencies."""

    def generate_translation(self, request: GenerationRequest) -> str:
        """Look up a known phrase, or echo the content in brackets."""
        logger.info("Using baseline translation generation")
        table = PHRASE_TABLE.get((request.source_language, request.target_language), {})
        return table.get(normalize(request.content), f"[{request.content}]")

    def evaluate_translation(self, request: EvaluationRequest) -> EvaluationResult:
        """Grade by comparing against the reference translation."""
        logger.info("Using baseline translation evaluation")

        if not request.reference_translation:
            # Nothing to compare with, accept the answer as given
            return EvaluationResult(
                correct=True,
                score=EXACT_MATCH_SCORE,
                feedback=FeedbackMessages.NO_REFERENCE,
                suggested_translation=request.user_translation,
                details=EvaluationDetails(
                    grammar="Perfect", vocabulary="Appropriate", accuracy="Precise"
                ),
            )

        user = normalize(request.user_translation)
        reference = normalize(request.reference_translation)

        if user == reference:
            return EvaluationResult(
                correct=True,
                score=EXACT_MATCH_SCORE,
                feedback=FeedbackMessages.EXACT_MATCH,
                suggested_translation=request.reference_translation,
                details=EvaluationDetails(
                    grammar="Perfect", vocabulary="Appropriate", accuracy="Precise"
                ),
            )

        if is_close_match(user, reference):
            return EvaluationResult(
                correct=True,
                score=CLOSE_MATCH_SCORE,
                feedback=FeedbackMessages.CLOSE_MATCH,
                suggested_translation=request.reference_translation,
                details=EvaluationDetails(
                    grammar="Good", vocabulary="Appropriate", accuracy="Close"
                ),
            )

        return EvaluationResult(
            correct=False,
            score=MISMATCH_SCORE,
            feedback=FeedbackMessages.MISMATCH,
            suggested_translation=request.reference_translation,
            details=EvaluationDetails(
                grammar="Check your word order",
                vocabulary="Review key terms",
                accuracy="Needs improvement",
            ),
        )
