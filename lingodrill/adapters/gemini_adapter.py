"""Gemini translation adapter.

Uses Gemini Flash models via the OpenAI-compatible API.
Default model: gemini-2.0-flash (configurable via GEMINI_MODEL env var)
"""

from lingodrill.adapters.chat_completion import ChatCompletionAdapter
from lingodrill.infrastructure.usage_tracker import ServiceType

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class GeminiAdapter(ChatCompletionAdapter):
    """Gemini provider using the OpenAI-compatible endpoint."""

    name = "gemini"
    service = ServiceType.GEMINI
    default_model = DEFAULT_GEMINI_MODEL
    base_url = GEMINI_BASE_URL
