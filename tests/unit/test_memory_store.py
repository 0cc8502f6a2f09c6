"""Unit tests for InMemoryCardStore."""

from datetime import UTC, datetime, timedelta

import pytest

from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Session
from lingodrill.domain.value_objects.card_filter import CardFilter
from lingodrill.domain.value_objects.store_stats import StoreStats
from lingodrill.ports.card_store import CardStore


class TestInMemoryCardStore:
    """Test suite for the dictionary-backed store."""

    def test_satisfies_port(self, store):
        assert isinstance(store, CardStore)

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store):
        card = await store.save_card(Card(content="Hello"))

        fetched = await store.get_card(card.id)
        fetched.update(content="changed")

        assert (await store.get_card(card.id)).content == "Hello"

    @pytest.mark.asyncio
    async def test_filter_sorted_and_limited(self, store):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for offset, content in enumerate(["old", "mid", "new"]):
            await store.save_card(Card(content=content, updated_at=base + timedelta(days=offset)))

        cards = await store.get_all_cards(CardFilter(limit=2))

        assert [c.content for c in cards] == ["new", "mid"]

    @pytest.mark.asyncio
    async def test_tag_counts_per_language(self, store):
        await store.save_card(Card(content="cat", tags=["animal"]))
        await store.save_card(Card(content="table"))
        await store.save_card(Card(content="chat", source_language="fr", tags=["animal"]))

        counts = await store.get_tag_counts("en")

        assert counts.tags == {"animal": 1}
        assert counts.untagged == 1

    @pytest.mark.asyncio
    async def test_session_round_trip(self, store):
        session = Session.create("en", "de", ["a"])
        await store.save_session(session)
        assert await store.get_session(session.id) == session
        assert await store.get_session("missing") is None

    @pytest.mark.asyncio
    async def test_delete_card(self, store):
        card = await store.save_card(Card(content="Hello"))

        assert await store.delete_card(card.id) is True
        assert await store.delete_card(card.id) is False
        assert await store.get_card(card.id) is None

    @pytest.mark.asyncio
    async def test_list_and_delete_sessions(self, store):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        await store.save_session(Session(id="old", created_at=base, completed_at=base))
        await store.save_session(Session(id="new", created_at=base + timedelta(days=1)))

        assert [s.id for s in await store.list_sessions()] == ["new", "old"]
        assert [s.id for s in await store.list_sessions(completed=True)] == ["old"]
        assert [s.id for s in await store.list_sessions(completed=False)] == ["new"]
        assert [s.id for s in await store.list_sessions(limit=1, offset=1)] == ["old"]

        assert await store.delete_session("old") is True
        assert await store.delete_session("old") is False
        assert [s.id for s in await store.list_sessions()] == ["new"]

    @pytest.mark.asyncio
    async def test_stats(self, store):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        await store.save_card(Card(content="Hello"))
        await store.save_session(Session(id="done", completed_at=base))
        await store.save_session(Session(id="open"))

        stats = await store.get_stats()

        assert stats == StoreStats(cards=1, sessions=2, active_sessions=1, completed_sessions=1)
        assert stats.to_dict()["completed_sessions"] == 1
