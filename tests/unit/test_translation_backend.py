"""Unit tests for the provider chain."""

import pytest

from lingodrill.domain.services.translation_backend import (
    TranslationBackend,
    is_credential_error,
)
from lingodrill.ports.translation_provider import (
    CredentialError,
    TranslationProviderError,
    TranslationServiceError,
)
from tests.fakes import FakeProvider


class TestGenerateTranslation:
    """Test suite for reference generation fallback."""

    @pytest.mark.asyncio
    async def test_without_providers_heuristic_is_deterministic(self):
        backend = TranslationBackend()

        first = await backend.generate_translation("hello", "en", "de")
        second = await backend.generate_translation("hello", "en", "de")

        assert first == second == "Hallo"
        assert backend.primary_provider == "baseline"

    @pytest.mark.asyncio
    async def test_primary_answers(self):
        primary = FakeProvider("gemini")
        secondary = FakeProvider("openai")
        backend = TranslationBackend([primary, secondary])

        assert await backend.generate_translation("Hello", "en", "de") == "Hallo"
        secondary.generate_translation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_secondary_used_when_primary_fails(self):
        primary = FakeProvider("gemini")
        primary.generate_translation.side_effect = TranslationServiceError("down")
        secondary = FakeProvider("openai")
        secondary.generate_translation.return_value = "Servus"
        backend = TranslationBackend([primary, secondary])

        assert await backend.generate_translation("Hello", "en", "de") == "Servus"
        primary.generate_translation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_heuristic_after_both_fail(self):
        primary = FakeProvider("gemini")
        primary.generate_translation.side_effect = TranslationServiceError("down")
        secondary = FakeProvider("openai")
        secondary.generate_translation.side_effect = TranslationServiceError("down too")
        backend = TranslationBackend([primary, secondary])

        assert await backend.generate_translation("Spaceship", "en", "de") == "[Spaceship]"
        primary.generate_translation.assert_awaited_once()
        secondary.generate_translation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_strict_mode_raises_wrapped_error(self):
        primary = FakeProvider("gemini")
        original = TranslationServiceError("down")
        primary.generate_translation.side_effect = original
        backend = TranslationBackend([primary], strict=True)

        with pytest.raises(TranslationProviderError) as exc_info:
            await backend.generate_translation("Hello", "en", "fr")

        error = exc_info.value
        assert error.original is original
        assert error.__cause__ is original
        assert error.context.provider == "gemini"
        assert error.context.operation == "generation"
        assert error.context.source_language == "en"
        assert error.context.target_language == "fr"
        assert error.context.has_credential is True

    @pytest.mark.asyncio
    async def test_strict_mode_without_providers_uses_heuristic(self):
        backend = TranslationBackend(strict=True)
        assert await backend.generate_translation("yes", "en", "de") == "Ja"

    @pytest.mark.asyncio
    async def test_credential_failure_rewritten_into_hint(self):
        primary = FakeProvider("openai", has_credential=False)
        primary.generate_translation.side_effect = TranslationServiceError(
            "Incorrect API key provided"
        )
        backend = TranslationBackend([primary], strict=True)

        with pytest.raises(CredentialError) as exc_info:
            await backend.generate_translation("Hello", "en", "de")

        assert str(exc_info.value) == (
            "Translation API key error: The API key for openai is missing or invalid. "
            "Please check your settings."
        )
        assert exc_info.value.context.has_credential is False

    def test_more_than_two_providers_rejected(self):
        with pytest.raises(ValueError):
            TranslationBackend([FakeProvider("a"), FakeProvider("b"), FakeProvider("c")])


class TestEvaluateTranslation:
    """Test suite for grading fallback."""

    @pytest.mark.asyncio
    async def test_provider_response_converted_to_result(self):
        backend = TranslationBackend([FakeProvider("gemini")])

        result = await backend.evaluate_translation("Hello", "en", "de", "Hallo", "Hallo")

        assert result.correct
        assert result.score == 0.9
        assert result.details.grammar == "Good"
        assert not result.fallback

    @pytest.mark.asyncio
    async def test_heuristic_after_provider_failure(self):
        primary = FakeProvider("gemini")
        primary.evaluate_translation.side_effect = TranslationServiceError("down")
        backend = TranslationBackend([primary])

        result = await backend.evaluate_translation("Hello", "en", "de", "hallo", "Hallo")

        assert result.correct
        assert result.score == 1.0

    @pytest.mark.asyncio
    async def test_strict_mode_raises(self):
        primary = FakeProvider("gemini")
        primary.evaluate_translation.side_effect = TranslationServiceError("down")
        backend = TranslationBackend([primary], strict=True)

        with pytest.raises(TranslationProviderError):
            await backend.evaluate_translation("Hello", "en", "de", "hallo", "Hallo")


class TestIsCredentialError:
    """Test suite for credential failure detection."""

    @pytest.mark.parametrize(
        "message",
        ["Invalid API key", "missing api_key", "Authentication failed", "401 Unauthorized"],
    )
    def test_detects_credential_messages(self, message):
        assert is_credential_error(RuntimeError(message))

    def test_ignores_other_failures(self):
        assert not is_credential_error(RuntimeError("connection reset"))
