"""Unit tests for configuration loading and provider resolution."""

import pytest

from lingodrill.config import (
    ProviderSpec,
    TranslationConfig,
    load_translation_config,
    resolve_provider_plan,
)


class TestLoadTranslationConfig:
    """Test suite for reading settings from the environment."""

    def test_defaults(self):
        config = load_translation_config({})

        assert config.provider == "gemini"
        assert config.api_key is None
        assert config.timeout_seconds == 30.0
        assert config.max_attempts == 3
        assert config.strict is False

    def test_reads_values(self):
        config = load_translation_config(
            {
                "TRANSLATION_API_PROVIDER": "OpenAI",
                "TRANSLATION_API_KEY": "explicit",
                "GEMINI_API_KEY": "g",
                "OPENAI_MODEL": "gpt-4.1-mini",
                "TRANSLATION_TIMEOUT_SECONDS": "12.5",
                "TRANSLATION_MAX_ATTEMPTS": "0",
                "TRANSLATION_STRICT": "true",
            }
        )

        assert config.provider == "openai"
        assert config.api_key == "explicit"
        assert config.gemini_api_key == "g"
        assert config.model_for("openai") == "gpt-4.1-mini"
        assert config.timeout_seconds == 12.5
        assert config.max_attempts == 1
        assert config.strict is True

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError):
            load_translation_config({"TRANSLATION_API_PROVIDER": "deepl"})


class TestResolveProviderPlan:
    """Test suite for primary/secondary selection."""

    def test_no_keys_no_providers(self):
        assert resolve_provider_plan(TranslationConfig()) == []

    def test_explicit_key_binds_to_preferred(self):
        plan = resolve_provider_plan(TranslationConfig(provider="openai", api_key="explicit"))
        assert plan == [ProviderSpec("openai", "explicit")]

    def test_preferred_env_key(self):
        plan = resolve_provider_plan(TranslationConfig(provider="gemini", gemini_api_key="g"))
        assert plan == [ProviderSpec("gemini", "g")]

    def test_other_provider_becomes_primary(self):
        plan = resolve_provider_plan(TranslationConfig(provider="gemini", openai_api_key="o"))
        assert plan == [ProviderSpec("openai", "o")]

    def test_secondary_added_when_it_has_its_own_key(self):
        plan = resolve_provider_plan(
            TranslationConfig(provider="gemini", api_key="explicit", openai_api_key="o")
        )
        assert plan == [ProviderSpec("gemini", "explicit"), ProviderSpec("openai", "o")]

    def test_both_env_keys(self):
        plan = resolve_provider_plan(
            TranslationConfig(provider="openai", gemini_api_key="g", openai_api_key="o")
        )
        assert [spec.name for spec in plan] == ["openai", "gemini"]
