"""Shared fixtures."""

import pytest

from modelbridge.config import Settings
from modelbridge.llm.types import RetryPolicy


@pytest.fixture
def no_retry() -> RetryPolicy:
    return RetryPolicy(max_attempts=1, delay_ms=0)


@pytest.fixture
def empty_settings() -> Settings:
    """Settings with no hosted credentials, independent of the environment."""
    return Settings()


@pytest.fixture
def full_settings() -> Settings:
    return Settings(
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        ollama_base_url="http://ollama.test:11434",
    )
