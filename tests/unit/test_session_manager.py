"""Unit tests for the session lifecycle facade."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lingodrill.adapters.sample_deck import load_sample_cards, sample_deck_target_language
from lingodrill.domain.entities.session import Session
from lingodrill.domain.exceptions import (
    CardNotFoundError,
    InvalidSessionStateError,
    NotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
)
from lingodrill.domain.services.card_selector import CardSelector
from lingodrill.domain.services.evaluator import Evaluator
from lingodrill.domain.services.progress_tracker import ProgressTracker
from lingodrill.domain.services.session_manager import SessionManager
from lingodrill.domain.services.translation_backend import TranslationBackend
from lingodrill.domain.value_objects.session_state import SessionState
from lingodrill.ports.translation_provider import TranslationServiceError
from tests.fakes import FakeProvider


def build_manager(store, backend=None) -> SessionManager:
    return SessionManager(
        card_store=store,
        card_selector=CardSelector(
            store,
            sample_cards=load_sample_cards(),
            sample_target_language=sample_deck_target_language(),
        ),
        progress_tracker=ProgressTracker(store),
        evaluator=Evaluator(backend or TranslationBackend()),
    )


class TestCreateSession:
    """Test suite for session creation."""

    @pytest.mark.asyncio
    async def test_defaults_use_built_in_deck(self, store):
        session = await build_manager(store).create_session()

        assert session.source_language == "en"
        assert session.target_language == "de"
        assert len(session.card_ids) == 10
        assert session.current_card_index == 0
        assert session.responses == []
        assert session.state is SessionState.IN_PROGRESS
        assert await store.get_session(session.id) == session

    @pytest.mark.asyncio
    async def test_empty_deck_is_allowed(self, store):
        session = await build_manager(store).create_session(
            use_built_in_deck=False, tags=["nothing"]
        )
        assert session.card_ids == []

    @pytest.mark.asyncio
    async def test_delegates_to_selector(self, store):
        selector = MagicMock(spec=CardSelector)
        selector.select_cards = AsyncMock(return_value=["a", "b"])
        manager = SessionManager(
            store, selector, ProgressTracker(store), Evaluator(TranslationBackend())
        )

        session = await manager.create_session("fr", "en", 2, False, ["x"], True)

        selector.select_cards.assert_awaited_once_with(
            source_language="fr",
            target_language="en",
            max_cards=2,
            use_built_in_deck=False,
            tags=["x"],
            include_untagged=True,
        )
        assert session.card_ids == ["a", "b"]


class TestSubmitAnswer:
    """Test suite for answering cards."""

    @pytest.mark.asyncio
    async def test_user_translation_answer_scores_full(self, store, make_card):
        card = await store.save_card(make_card("Hello", user_translation="bonjour"))
        session = Session.create("en", "fr", [card.id])
        await store.save_session(session)
        provider = FakeProvider()
        provider.evaluate_translation.side_effect = TranslationServiceError("down")

        result = await build_manager(store, TranslationBackend([provider])).submit_answer(
            session.id, "bonjour"
        )

        assert result.evaluation.correct
        assert result.evaluation.score == 1.0
        provider.generate_translation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_translation_used_as_reference_with_working_provider(
        self, store, make_card
    ):
        card = await store.save_card(make_card("Hello", user_translation="bonjour"))
        session = Session.create("en", "fr", [card.id])
        await store.save_session(session)
        provider = FakeProvider()

        result = await build_manager(store, TranslationBackend([provider])).submit_answer(
            session.id, "bonjour"
        )

        provider.generate_translation.assert_not_awaited()
        request = provider.evaluate_translation.await_args.args[0]
        assert request.reference_translation == "bonjour"
        assert request.user_translation == "bonjour"
        assert result.reference_translation == "bonjour"
        assert not result.had_translation_error
        assert result.evaluation == provider.evaluate_translation.return_value.to_result()
        assert result.evaluation.score == 0.9
        assert result.evaluation.feedback == "Well done"
        assert not result.evaluation.fallback

    @pytest.mark.asyncio
    async def test_built_in_deck_for_other_target_not_graded_against_bundled_reference(
        self, store
    ):
        manager = build_manager(store)
        session = await manager.create_session("en", "fr", max_cards=1)

        result = await manager.submit_answer(session.id, "Bonjour")

        assert result.reference_translation == "Bonjour"
        assert result.evaluation.correct
        assert result.evaluation.score == 1.0

    @pytest.mark.asyncio
    async def test_response_recorded(self, store):
        manager = build_manager(store)
        session = await manager.create_session(max_cards=2)

        await manager.submit_answer(session.id, "Hallo")

        stored = await store.get_session(session.id)
        assert len(stored.responses) == 1
        assert stored.responses[0].card_id == session.card_ids[0]
        assert stored.responses[0].correct

    @pytest.mark.asyncio
    async def test_cursor_at_end_is_invalid_state(self, store):
        session = Session(card_ids=["a"], current_card_index=1)
        await store.save_session(session)

        with pytest.raises(InvalidSessionStateError):
            await build_manager(store).submit_answer(session.id, "Hallo")

    @pytest.mark.asyncio
    async def test_completed_session_is_invalid_state(self, store):
        manager = build_manager(store)
        session = await manager.create_session(max_cards=1)
        await manager.advance_session(session.id)

        with pytest.raises(InvalidSessionStateError) as exc_info:
            await manager.submit_answer(session.id, "Hallo")

        assert not isinstance(exc_info.value, NotFoundError)

    @pytest.mark.asyncio
    async def test_unknown_session_is_expired(self, store):
        with pytest.raises(SessionExpiredError) as exc_info:
            await build_manager(store).submit_answer("missing", "Hallo")

        assert isinstance(exc_info.value.__cause__, SessionNotFoundError)

    @pytest.mark.asyncio
    async def test_missing_card(self, store):
        session = Session(card_ids=["ghost"])
        await store.save_session(session)

        with pytest.raises(CardNotFoundError):
            await build_manager(store).submit_answer(session.id, "Hallo")


class TestFullSession:
    """A session completes even when every provider fails."""

    @pytest.mark.asyncio
    async def test_completes_with_failing_providers(self, store):
        primary = FakeProvider("gemini")
        primary.generate_translation.side_effect = TranslationServiceError("down")
        primary.evaluate_translation.side_effect = TranslationServiceError("down")
        manager = build_manager(store, TranslationBackend([primary]))
        session = await manager.create_session(max_cards=3)

        for _ in range(3):
            result = await manager.submit_answer(session.id, "irgendwas")
            assert result.evaluation is not None
            await manager.advance_session(session.id)

        stats = await manager.get_session_stats(session.id)
        assert stats.is_complete
        assert stats.answered_cards == 3
        assert (await manager.get_current_card(session.id)) is None


class TestSessionListing:
    """Test suite for listing and deleting sessions."""

    @pytest.mark.asyncio
    async def test_lists_created_sessions(self, store):
        manager = build_manager(store)
        first = await manager.create_session(max_cards=1)
        await manager.advance_session(first.id)
        second = await manager.create_session(max_cards=1)

        listed = await manager.list_sessions()
        completed = await manager.list_sessions(completed=True)

        assert {s.id for s in listed} == {first.id, second.id}
        assert [s.id for s in completed] == [first.id]

    @pytest.mark.asyncio
    async def test_delete_session(self, store):
        manager = build_manager(store)
        session = await manager.create_session(max_cards=1)

        await manager.delete_session(session.id)

        assert await store.get_session(session.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_session(self, store):
        with pytest.raises(SessionNotFoundError):
            await build_manager(store).delete_session("missing")
