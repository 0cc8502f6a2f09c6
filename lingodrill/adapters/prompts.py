"""Prompt templates and response schemas for chat-completion providers."""

from typing import Any

from lingodrill.domain.constants import language_name
from lingodrill.ports.translation_provider import EvaluationRequest, GenerationRequest

# JSON Schema for structured evaluation output
EVALUATION_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "correct": {
            "type": "boolean",
            "description": "Whether the translation is overall correct",
        },
        "score": {
            "type": "number",
            "description": "A score from 0.0 to 1.0 indicating quality",
        },
        "feedback": {
            "type": "string",
            "description": "A short, helpful feedback message for the user",
        },
        "suggested_translation": {
            "type": "string",
            "description": "A correct translation if the user's is wrong",
        },
        "details": {
            "type": "object",
            "properties": {
                "grammar": {"type": "string", "description": "Brief feedback on grammar"},
                "vocabulary": {"type": "string", "description": "Brief feedback on vocabulary"},
                "accuracy": {"type": "string", "description": "Brief feedback on accuracy"},
            },
            "required": ["grammar", "vocabulary", "accuracy"],
            "additionalProperties": False,
        },
    },
    "required": ["correct", "score", "feedback", "suggested_translation", "details"],
    "additionalProperties": False,
}


def build_translation_messages(request: GenerationRequest) -> list[dict[str, str]]:
    """Build chat messages asking for a plain translation."""
    source = language_name(request.source_language)
    target = language_name(request.target_language)
    return [
        {
            "role": "system",
            "content": (
                f"You are a professional translator from {source} to {target}. "
                "Translate the text provided by the user. Provide only the translation "
                "itself without explanations or notes."
            ),
        },
        {"role": "user", "content": request.content},
    ]


def build_evaluation_messages(request: EvaluationRequest) -> list[dict[str, str]]:
    """Build chat messages asking for a structured grading."""
    source = language_name(request.source_language)
    target = language_name(request.target_language)

    prompt_parts = [
        "<translation>",
        f'Original text: "{request.source_content}"',
        f"User's translation: \"{request.user_translation}\"",
    ]
    if request.reference_translation:
        prompt_parts.append(f'Reference translation: "{request.reference_translation}"')
    prompt_parts.extend(["</translation>", "", "<task>Evaluate the user's translation.</task>"])

    return [
        {"role": "system", "content": EVALUATION_SYSTEM_PROMPT.format(source=source, target=target)},
        {"role": "user", "content": "\n".join(prompt_parts)},
    ]


# System prompt for evaluation - uses XML tags for clearer parsing
EVALUATION_SYSTEM_PROMPT = """You are a language expert evaluating translations from {source} to {target}.

<criteria>
1. Accuracy - It should convey the same meaning - significant changes in meaning should be considered incorrect
2. Grammar - It should be grammatically correct
3. Vocabulary - Appropriate vocabulary should be used, with key terms correctly translated
4. Style - The style should match the context
5. Spelling - Up to 2 typos or spelling mistakes may be acceptable, but more than that must be considered incorrect
</criteria>

<rules>
- Accuracy is your top priority
- Core meaning must be preserved, though synonyms and alternative phrasings are acceptable
- Translations should be rejected if they significantly change the action, object, direction, or core meaning
- Focus first on whether the core meaning is preserved before evaluating grammar or style
- Allow for different ways of expressing the same idea as long as the meaning is equivalent
</rules>

<output>
Respond with JSON only:
- correct: whether the translation is overall correct
- score: a number from 0.0 to 1.0 indicating quality
- feedback: a short, helpful feedback message for the user
- suggested_translation: a correct translation if the user's is wrong
- details: brief grammar, vocabulary and accuracy feedback
</output>"""
