"""OpenAI translation adapter."""

from lingodrill.adapters.chat_completion import ChatCompletionAdapter
from lingodrill.infrastructure.usage_tracker import ServiceType

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIAdapter(ChatCompletionAdapter):
    """OpenAI provider using the default API endpoint."""

    name = "openai"
    service = ServiceType.OPENAI
    default_model = DEFAULT_OPENAI_MODEL
