"""Anthropic adapter (hosted Messages API via LangChain's ChatAnthropic).

The system prompt is sent as a SystemMessage, which ChatAnthropic lifts into
the request's top-level "system" field. The reply's first text block is the
completion; a reply with no text block is a ProviderError (retryable).
"""

from typing import Any, AsyncIterator, Optional

from langchain_anthropic import ChatAnthropic

from modelbridge.llm.base import BaseModelClient, Completion
from modelbridge.llm.errors import ConfigurationError, ProviderError
from modelbridge.llm.providers.chat import build_messages, first_text, sampling_kwargs
from modelbridge.llm.types import GenerationOptions, RetryPolicy
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.anthropic"
logger = get_logger()

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class AnthropicClient(BaseModelClient):
    provider = "anthropic"

    def __init__(
        self,
        name: str,
        api_key: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        chat_model: Any = None,
    ):
        super().__init__(name, retry_policy)
        if chat_model is None:
            if not api_key:
                raise ConfigurationError(
                    "The Anthropic API key is required. Set the ANTHROPIC_API_KEY environment variable."
                )
            # Retries are owned by generate(), not the SDK
            chat_model = ChatAnthropic(model=name, api_key=api_key, max_retries=0)
        self.chat_model = chat_model

    def _request(self, prompt: str, options: GenerationOptions) -> tuple[list, dict]:
        return build_messages(prompt, options), sampling_kwargs(
            options,
            temperature=DEFAULT_TEMPERATURE,
            max_tokens=DEFAULT_MAX_TOKENS,
        )

    async def _complete(self, prompt: str, options: GenerationOptions) -> Completion:
        messages, kwargs = self._request(prompt, options)
        try:
            reply = await self.chat_model.ainvoke(messages, **kwargs)
        except Exception as e:
            raise ProviderError(f"Failed to generate response: {e}") from e

        if not reply.content:
            raise ProviderError("No content received from the model")
        text = first_text(reply.content)
        if text is None:
            raise ProviderError("No text content found in the response")

        log.debug(logger, MODULE, "generate_done", "Anthropic generate complete",
                  model=self.name, raw_length=len(text))
        return Completion(text=text, model=(reply.response_metadata or {}).get("model"))

    async def _stream(self, prompt: str, options: GenerationOptions) -> AsyncIterator[str]:
        messages, kwargs = self._request(prompt, options)
        try:
            async for chunk in self.chat_model.astream(messages, **kwargs):
                text = first_text(chunk.content)
                if text:
                    yield text
        except Exception as e:
            raise ProviderError(f"Failed to stream response: {e}") from e
