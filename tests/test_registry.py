"""Tests for the client registry and provider settings."""

import pytest

from modelbridge.config import Settings
from modelbridge.llm.errors import ConfigurationError, UnsupportedProviderError
from modelbridge.llm.providers import AnthropicClient, OllamaClient, OpenAIClient
from modelbridge.llm.types import RetryPolicy
from modelbridge.registry import ModelRegistry

from fakes import Flag


def test_same_key_returns_same_instance(empty_settings):
    registry = ModelRegistry(empty_settings)
    assert registry.get_or_create("ollama", "mistral") is registry.get_or_create("ollama", "mistral")


def test_different_models_are_distinct(empty_settings):
    registry = ModelRegistry(empty_settings)
    mistral = registry.get_or_create("ollama", "mistral")
    llama = registry.get_or_create("ollama", "llama2")
    assert mistral is not llama
    assert mistral.key == "ollama:mistral"
    assert llama.key == "ollama:llama2"


def test_provider_tag_is_case_insensitive(empty_settings):
    registry = ModelRegistry(empty_settings)
    assert registry.get_or_create("Ollama", "mistral") is registry.get_or_create("ollama", "mistral")


def test_ollama_uses_configured_base_url(full_settings):
    client = ModelRegistry(full_settings).get_or_create("ollama", "mistral")
    assert isinstance(client, OllamaClient)
    assert client.base_url == "http://ollama.test:11434"


def test_explicit_base_url_wins(empty_settings):
    client = ModelRegistry(empty_settings).get_or_create(
        "ollama", "mistral", base_url="http://gpu-box:11434"
    )
    assert client.base_url == "http://gpu-box:11434"


def test_cached_client_keeps_first_base_url(empty_settings, caplog):
    registry = ModelRegistry(empty_settings)
    first = registry.get_or_create("ollama", "mistral", base_url="http://gpu-box:11434")

    with caplog.at_level("DEBUG", logger="modelbridge"):
        again = registry.get_or_create("ollama", "mistral", base_url="http://other:11434")

    assert again is first
    assert again.base_url == "http://gpu-box:11434"
    assert any(getattr(r, "_action", None) == "base_url_ignored" for r in caplog.records)


def test_registry_retry_policy_is_applied(empty_settings):
    policy = RetryPolicy(max_attempts=5, delay_ms=10)
    client = ModelRegistry(empty_settings, retry_policy=policy).get_or_create("ollama", "mistral")
    assert client.retry_policy == policy


def test_default_retry_policy(empty_settings):
    client = ModelRegistry(empty_settings).get_or_create("ollama", "mistral")
    assert client.retry_policy == RetryPolicy()


def test_missing_credentials_fail_on_first_use(empty_settings):
    registry = ModelRegistry(empty_settings)
    with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
        registry.get_or_create("anthropic", "claude-3-5-haiku-latest")
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        registry.get_or_create("openai", "gpt-4o-mini")
    assert registry.list_all() == []


def test_hosted_clients_built_with_credentials(full_settings):
    registry = ModelRegistry(full_settings)
    assert isinstance(registry.get_or_create("anthropic", "claude-3-5-haiku-latest"), AnthropicClient)
    openai = registry.get_or_create("openai", "gpt-4o-mini")
    assert isinstance(openai, OpenAIClient)
    assert openai.base_url == "https://api.openai.com/v1"


def test_unsupported_provider(empty_settings):
    with pytest.raises(UnsupportedProviderError, match="Unsupported AI model type: gemini"):
        ModelRegistry(empty_settings).get_or_create("gemini", "pro")


def test_get_and_list_all_in_creation_order(empty_settings):
    registry = ModelRegistry(empty_settings)
    a = registry.get_or_create("ollama", "mistral")
    b = registry.get_or_create("ollama", "llama2")
    registry.get_or_create("ollama", "mistral")

    assert registry.list_all() == [a, b]
    assert registry.get("ollama:llama2") is b
    assert registry.get("ollama:phi3") is None


def test_registries_do_not_share_clients(empty_settings):
    one = ModelRegistry(empty_settings).get_or_create("ollama", "mistral")
    two = ModelRegistry(empty_settings).get_or_create("ollama", "mistral")
    assert one is not two


def test_validate_content(empty_settings):
    registry = ModelRegistry(empty_settings)
    assert registry.validate_content("anything")
    assert registry.validate_content(Flag(a=1), Flag)
    assert registry.validate_content({"a": 1}, Flag)
    assert not registry.validate_content(None, Flag)
    assert not registry.validate_content({"a": "x"}, Flag)


# -- Settings -----------------------------------------------------------------

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_BASE_URL", "http://proxy/v1")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu:11434")

    settings = Settings.from_env()

    assert settings.openai_credentials() == ("sk-env", "http://proxy/v1")
    assert settings.require_anthropic_api_key() == "sk-ant-env"
    assert settings.ollama_base_url == "http://gpu:11434"


def test_settings_defaults(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "ANTHROPIC_API_KEY", "OLLAMA_BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.openai_base_url == "https://api.openai.com/v1"
    assert settings.ollama_base_url == "http://localhost:11434"
    with pytest.raises(ConfigurationError):
        settings.openai_credentials()


def test_blank_key_counts_as_missing():
    with pytest.raises(ConfigurationError):
        Settings(anthropic_api_key="   ").require_anthropic_api_key()
