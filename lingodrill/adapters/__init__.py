# Adapters layer - Concrete implementations (Gemini, OpenAI, SQLite, in-memory)

from .chat_completion import ChatCompletionAdapter
from .gemini_adapter import GeminiAdapter
from .memory_store import InMemoryCardStore
from .openai_adapter import OpenAIAdapter
from .sample_deck import load_sample_cards, sample_deck_target_language
from .sqlite_store import SqliteCardStore

__all__ = [
    "ChatCompletionAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "InMemoryCardStore",
    "SqliteCardStore",
    "load_sample_cards",
    "sample_deck_target_language",
]
