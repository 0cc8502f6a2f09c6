"""Integration tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from lingodrill.adapters.memory_store import InMemoryCardStore
from lingodrill.api.dependencies import (
    InMemoryRateLimiter,
    RateLimitConfig,
    get_card_store,
    get_rate_limiter,
    get_session_manager,
    get_translation_backend,
)
from lingodrill.app import app
from lingodrill.composition import create_session_manager
from lingodrill.domain.services.translation_backend import TranslationBackend
from lingodrill.ports.translation_provider import TranslationServiceError
from tests.fakes import FakeProvider


@pytest.fixture
def api_store():
    return InMemoryCardStore()


@pytest.fixture
def backend():
    return TranslationBackend()


@pytest.fixture
def client(api_store, backend):
    manager = create_session_manager(api_store, backend)
    app.dependency_overrides[get_card_store] = lambda: api_store
    app.dependency_overrides[get_translation_backend] = lambda: backend
    app.dependency_overrides[get_session_manager] = lambda: manager
    limiter = InMemoryRateLimiter()
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_card(client, content, **fields) -> dict:
    response = client.post("/api/cards", json={"content": content, **fields})
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_health_reports_provider(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["translation_provider"] == "baseline"


class TestSessionRoutes:
    """Test suite for /api/sessions."""

    def test_create_with_defaults(self, client):
        response = client.post("/api/sessions", json={})

        assert response.status_code == 201
        body = response.json()
        assert body["source_language"] == "en"
        assert body["target_language"] == "de"
        assert body["card_count"] == 10
        assert body["state"] == "in_progress"
        assert body["current"]["progress"] == {"current": 1, "total": 10}
        assert body["current"]["card"]["content"] == "Hello"

    def test_negative_max_cards_rejected(self, client):
        response = client.post("/api/sessions", json={"max_cards": -1})
        assert response.status_code == 422

    def test_full_session_flow(self, client):
        session_id = client.post("/api/sessions", json={"max_cards": 2}).json()["session_id"]

        answer = client.post(f"/api/sessions/{session_id}/answer", json={"answer": "Hallo"})
        assert answer.status_code == 200
        body = answer.json()
        assert body["evaluation"]["correct"]
        assert body["evaluation"]["score"] == 1.0
        assert body["reference_translation"] == "Hallo"
        assert body["warnings"] == []

        advance = client.post(f"/api/sessions/{session_id}/advance").json()
        assert not advance["is_complete"]
        assert advance["next"]["card"]["content"] == "Goodbye"

        client.post(f"/api/sessions/{session_id}/answer", json={"answer": "Tschüss"})
        done = client.post(f"/api/sessions/{session_id}/advance").json()
        assert done["is_complete"]
        assert done["stats"]["total_cards"] == 2
        assert done["stats"]["answered_cards"] == 2
        assert done["stats"]["correct_cards"] == 1
        assert done["stats"]["accuracy"] == 50

        current = client.get(f"/api/sessions/{session_id}/current").json()
        assert current["is_complete"]
        assert current["card"] is None

        again = client.post(f"/api/sessions/{session_id}/advance").json()
        assert again["stats"] == done["stats"]

        stats = client.get(f"/api/sessions/{session_id}/stats").json()
        assert stats["is_complete"]
        assert stats["remaining_cards"] == 0

    def test_answer_after_completion_conflicts(self, client):
        session_id = client.post("/api/sessions", json={"max_cards": 1}).json()["session_id"]
        client.post(f"/api/sessions/{session_id}/advance")

        response = client.post(f"/api/sessions/{session_id}/answer", json={"answer": "Hallo"})

        assert response.status_code == 409
        assert response.json()["detail"]["error"]["code"] == "INVALID_SESSION_STATE"

    def test_answer_to_unknown_session_is_expired(self, client):
        response = client.post("/api/sessions/missing/answer", json={"answer": "Hallo"})

        assert response.status_code == 410
        assert response.json()["detail"]["error"]["code"] == "SESSION_EXPIRED"

    def test_unknown_session_not_found(self, client):
        for response in (
            client.get("/api/sessions/missing/current"),
            client.post("/api/sessions/missing/advance"),
            client.get("/api/sessions/missing/stats"),
        ):
            assert response.status_code == 404
            assert response.json()["detail"]["error"]["code"] == "SESSION_NOT_FOUND"

    def test_session_from_stored_cards_by_tag(self, client):
        create_card(client, "cat", tags=["animal"])
        create_card(client, "dog", tags=["animal"])
        create_card(client, "table")
        create_card(client, "chair")
        create_card(client, "tower", tags=["building"])

        response = client.post(
            "/api/sessions",
            json={"use_built_in_deck": False, "tags": ["animal"], "include_untagged": True},
        )

        assert response.json()["card_count"] == 4

    def test_rate_limit(self, client):
        limiter = InMemoryRateLimiter({"/api/sessions": RateLimitConfig(1, 60)})
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        assert client.post("/api/sessions", json={}).status_code == 201
        response = client.post("/api/sessions", json={})

        assert response.status_code == 429
        assert response.json()["detail"]["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    def test_list_sessions_by_state(self, client):
        done = client.post("/api/sessions", json={"max_cards": 1}).json()["session_id"]
        client.post(f"/api/sessions/{done}/advance")
        active = client.post("/api/sessions", json={"max_cards": 1}).json()["session_id"]

        everything = client.get("/api/sessions").json()
        completed = client.get("/api/sessions", params={"state": "completed"}).json()
        in_progress = client.get("/api/sessions", params={"state": "active"}).json()

        assert everything["count"] == 2
        assert [s["session_id"] for s in completed["sessions"]] == [done]
        assert completed["sessions"][0]["state"] == "complete"
        assert [s["session_id"] for s in in_progress["sessions"]] == [active]

    def test_list_sessions_rejects_unknown_state(self, client):
        assert client.get("/api/sessions", params={"state": "paused"}).status_code == 422

    def test_delete_session(self, client):
        session_id = client.post("/api/sessions", json={}).json()["session_id"]

        assert client.delete(f"/api/sessions/{session_id}").status_code == 204
        response = client.delete(f"/api/sessions/{session_id}")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "SESSION_NOT_FOUND"
        assert client.get(f"/api/sessions/{session_id}/current").status_code == 404

    def test_built_in_deck_for_other_target_uses_matching_reference(self, client):
        body = client.post(
            "/api/sessions", json={"target_language": "fr", "max_cards": 1}
        ).json()
        assert body["current"]["card"]["user_translation"] == ""

        answer = client.post(
            f"/api/sessions/{body['session_id']}/answer", json={"answer": "Bonjour"}
        ).json()

        assert answer["reference_translation"] == "Bonjour"
        assert answer["evaluation"]["correct"] is True


class TestAnswerWarnings:
    """Provider failures surface as warnings, never as errors."""

    @pytest.fixture
    def backend(self):
        provider = FakeProvider("gemini")
        provider.generate_translation.side_effect = TranslationServiceError("down")
        provider.evaluate_translation.side_effect = TranslationServiceError("down")
        return TranslationBackend([provider], strict=True)

    def test_both_warnings(self, client):
        card = create_card(client, "Spaceship")
        session_id = client.post(
            "/api/sessions", json={"use_built_in_deck": False}
        ).json()["session_id"]

        response = client.post(f"/api/sessions/{session_id}/answer", json={"answer": "Raumschiff"})

        assert response.status_code == 200
        body = response.json()
        assert body["card_id"] == card["id"]
        assert body["had_translation_error"]
        assert body["reference_translation"] == "Raumschiff"
        assert body["evaluation"]["fallback"]
        assert body["evaluation"]["correct"]
        assert body["evaluation"]["score"] == 0.5
        assert [w["title"] for w in body["warnings"]] == ["Translation Issue", "Evaluation Fallback"]


class TestCardRoutes:
    """Test suite for /api/cards."""

    def test_create_and_get(self, client):
        card = create_card(client, "Hello", user_translation="Hallo", tags=["greeting", " "])

        response = client.get(f"/api/cards/{card['id']}")

        assert response.status_code == 200
        assert response.json()["tags"] == ["greeting"]
        assert response.json()["user_translation"] == "Hallo"

    def test_get_unknown_card(self, client):
        response = client.get("/api/cards/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "CARD_NOT_FOUND"

    def test_partial_update(self, client):
        card = create_card(client, "Hello", comment="keep me")

        response = client.put(f"/api/cards/{card['id']}", json={"tags": ["greeting"]})

        body = response.json()
        assert body["comment"] == "keep me"
        assert body["tags"] == ["greeting"]
        assert body["updated_at"] >= card["updated_at"]

    def test_update_unknown_card(self, client):
        assert client.put("/api/cards/missing", json={"comment": "x"}).status_code == 404

    def test_list_filters(self, client):
        create_card(client, "cat", tags=["animal"])
        create_card(client, "table")
        create_card(client, "chat", source_language="fr", tags=["animal"])

        response = client.get(
            "/api/cards", params={"language": "en", "tags": ["animal"], "include_untagged": True}
        )

        assert response.json()["count"] == 2

    def test_list_limit(self, client):
        for content in ("a", "b", "c"):
            create_card(client, content)

        assert client.get("/api/cards", params={"limit": 2}).json()["count"] == 2

    def test_tag_counts(self, client):
        create_card(client, "cat", tags=["animal"])
        create_card(client, "dog", tags=["animal", "pet"])
        create_card(client, "table")

        body = client.get("/api/cards/tags", params={"language": "en"}).json()

        assert body["tags"] == [{"name": "animal", "count": 2}, {"name": "pet", "count": 1}]
        assert body["untagged"] == 1

    def test_delete_card(self, client):
        card = create_card(client, "Hello")

        assert client.delete(f"/api/cards/{card['id']}").status_code == 204
        assert client.get(f"/api/cards/{card['id']}").status_code == 404

    def test_delete_unknown_card(self, client):
        response = client.delete("/api/cards/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "CARD_NOT_FOUND"


class TestStatsRoute:
    """Test suite for /api/stats."""

    def test_counts_cards_and_sessions(self, client):
        create_card(client, "Hello")
        done = client.post("/api/sessions", json={"max_cards": 1}).json()["session_id"]
        client.post(f"/api/sessions/{done}/advance")
        client.post("/api/sessions", json={"max_cards": 1})

        body = client.get("/api/stats").json()

        # Built-in sessions seed their sample card into the store
        assert body == {
            "cards": 2,
            "sessions": 2,
            "active_sessions": 1,
            "completed_sessions": 1,
        }
