"""Client registry: at most one client per provider:model.

The application owns a ModelRegistry and passes it to whatever needs a
model. Clients are built lazily on first request and cached for the life
of the registry:

  registry = ModelRegistry(Settings.from_env())
  mistral = registry.get_or_create("ollama", "mistral")
  assert registry.get_or_create("ollama", "mistral") is mistral

Construction is synchronous, so under asyncio there is no suspension point
between the cache miss and the cache store.
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from modelbridge.config import Settings
from modelbridge.llm.base import ModelClient
from modelbridge.llm.errors import UnsupportedProviderError
from modelbridge.llm.providers.anthropic_chat import AnthropicClient
from modelbridge.llm.providers.ollama import OllamaClient
from modelbridge.llm.providers.openai_chat import OpenAIClient
from modelbridge.llm.types import RetryPolicy
from modelbridge.utils.logging import log, get_logger

MODULE = "registry"
logger = get_logger()


class ModelRegistry:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.retry_policy = retry_policy
        self._clients: dict[str, ModelClient] = {}
        self._builders: dict[str, Callable[..., ModelClient]] = {
            "ollama": self._build_ollama,
            "anthropic": self._build_anthropic,
            "openai": self._build_openai,
        }

    @staticmethod
    def make_key(provider: str, model: str) -> str:
        return f"{provider.lower()}:{model}"

    @property
    def providers(self) -> list[str]:
        return list(self._builders)

    def get_or_create(
        self,
        provider: str,
        model: str,
        *,
        base_url: Optional[str] = None,
    ) -> ModelClient:
        """Return the cached client for provider:model, building it on first use.

        The cache key is provider:model only. `base_url` is applied when the
        client is built; a later call with another URL gets the cached client.

        Raises:
            UnsupportedProviderError: Unknown provider tag
            ConfigurationError: Provider credentials missing
        """
        key = self.make_key(provider, model)
        client = self._clients.get(key)
        if client is not None:
            cached_url = getattr(client, "base_url", None)
            if base_url and cached_url and base_url.rstrip("/") != cached_url.rstrip("/"):
                log.debug(logger, MODULE, "base_url_ignored",
                          "Returning cached client built with a different base URL",
                          key=key, requested=base_url, cached=cached_url)
            return client

        builder = self._builders.get(provider.lower())
        if builder is None:
            raise UnsupportedProviderError(provider)

        log.debug(logger, MODULE, "client_create",
                  f"Creating AI model of type {provider} with name {model}",
                  key=key)
        client = builder(model, base_url)
        self._clients[key] = client
        return client

    def get(self, key: str) -> Optional[ModelClient]:
        return self._clients.get(key)

    def list_all(self) -> list[ModelClient]:
        """All cached clients, in creation order."""
        return list(self._clients.values())

    def validate_content(self, content: Any, schema: Optional[type[BaseModel]] = None) -> bool:
        """Check a previously returned content value against `schema`."""
        if schema is None:
            return True
        if content is None:
            return False
        try:
            schema.model_validate(content)
        except ValidationError as e:
            log.error(logger, MODULE, "validation_failed",
                      "Model response validation failed",
                      error=str(e), schema=schema.__name__)
            return False
        return True

    # -- builders -------------------------------------------------------------

    def _build_ollama(self, model: str, base_url: Optional[str]) -> ModelClient:
        return OllamaClient(
            model,
            base_url or self.settings.ollama_base_url,
            retry_policy=self.retry_policy,
        )

    def _build_anthropic(self, model: str, base_url: Optional[str]) -> ModelClient:
        return AnthropicClient(
            model,
            self.settings.require_anthropic_api_key(),
            retry_policy=self.retry_policy,
        )

    def _build_openai(self, model: str, base_url: Optional[str]) -> ModelClient:
        api_key, default_url = self.settings.openai_credentials()
        return OpenAIClient(
            model,
            api_key,
            base_url or default_url,
            retry_policy=self.retry_policy,
        )
