"""Shared fixtures for lingodrill tests."""

import pytest

from lingodrill.adapters.memory_store import InMemoryCardStore
from lingodrill.domain.entities.card import Card


@pytest.fixture
def store():
    """Empty in-memory card store."""
    return InMemoryCardStore()


@pytest.fixture
def make_card():
    """Factory for cards with sensible defaults."""

    def _make(content: str = "Hello", **kwargs) -> Card:
        kwargs.setdefault("source_language", "en")
        return Card(content=content, **kwargs)

    return _make
