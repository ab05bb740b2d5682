"""Provider settings sourced from the environment.

  OPENAI_API_KEY     → required only when an OpenAI client is built
  OPENAI_BASE_URL    → default https://api.openai.com/v1
  ANTHROPIC_API_KEY  → required only when an Anthropic client is built
  OLLAMA_BASE_URL    → default http://localhost:11434

Nothing is checked at load time. A missing key fails when the first client
for that provider is constructed, so an Ollama-only deployment never needs
hosted credentials.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modelbridge.llm.errors import ConfigurationError
from modelbridge.llm.providers.ollama import DEFAULT_BASE_URL as OLLAMA_BASE_URL
from modelbridge.llm.providers.openai_chat import DEFAULT_BASE_URL as OPENAI_BASE_URL


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[str] = None
    openai_base_url: str = OPENAI_BASE_URL
    anthropic_api_key: Optional[str] = None
    ollama_base_url: str = OLLAMA_BASE_URL

    @field_validator("openai_api_key", "anthropic_api_key", mode="before")
    @classmethod
    def blank_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        env = {
            "openai_api_key": os.getenv("OPENAI_API_KEY"),
            "openai_base_url": os.getenv("OPENAI_BASE_URL"),
            "anthropic_api_key": os.getenv("ANTHROPIC_API_KEY"),
            "ollama_base_url": os.getenv("OLLAMA_BASE_URL"),
        }
        return cls(**{k: v for k, v in env.items() if v})

    def openai_credentials(self) -> tuple[str, str]:
        """(api_key, base_url) for the OpenAI client."""
        if self.openai_api_key is None:
            raise ConfigurationError(
                "The OpenAI API key is required. Set the OPENAI_API_KEY environment variable."
            )
        return self.openai_api_key, self.openai_base_url

    def require_anthropic_api_key(self) -> str:
        if self.anthropic_api_key is None:
            raise ConfigurationError(
                "The Anthropic API key is required. Set the ANTHROPIC_API_KEY environment variable."
            )
        return self.anthropic_api_key
