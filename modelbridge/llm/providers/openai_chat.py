"""OpenAI adapter (chat completions via LangChain's ChatOpenAI).

Works against api.openai.com or any OpenAI-compatible server (llama.cpp,
vLLM, Groq, ...) through base_url. A reply with no message content is
treated as the empty string, which still counts as valid raw output.
"""

from typing import Any, AsyncIterator, Optional

from langchain_openai import ChatOpenAI

from modelbridge.llm.base import BaseModelClient, Completion
from modelbridge.llm.errors import ConfigurationError, ProviderError
from modelbridge.llm.providers.chat import build_messages, first_text, sampling_kwargs
from modelbridge.llm.types import GenerationOptions, RetryPolicy
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.openai"
logger = get_logger()

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIClient(BaseModelClient):
    provider = "openai"

    def __init__(
        self,
        name: str,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        chat_model: Any = None,
    ):
        super().__init__(name, retry_policy)
        self.base_url = base_url
        if chat_model is None:
            if not api_key:
                raise ConfigurationError(
                    "The OpenAI API key is required. Set the OPENAI_API_KEY environment variable."
                )
            chat_model = ChatOpenAI(
                base_url=base_url,
                api_key=api_key,
                model=name,
                max_retries=0,
            )
            log.debug(logger, MODULE, "client_init", "OpenAI chat client created",
                      base_url=base_url, model=name)
        self.chat_model = chat_model

    async def _complete(self, prompt: str, options: GenerationOptions) -> Completion:
        try:
            reply = await self.chat_model.ainvoke(
                build_messages(prompt, options), **sampling_kwargs(options)
            )
        except Exception as e:
            raise ProviderError(f"Failed to generate response: {e}") from e

        text = first_text(reply.content) or ""
        log.debug(logger, MODULE, "generate_done", "OpenAI generate complete",
                  model=self.name, raw_length=len(text))
        return Completion(text=text, model=(reply.response_metadata or {}).get("model_name"))

    async def _stream(self, prompt: str, options: GenerationOptions) -> AsyncIterator[str]:
        try:
            async for chunk in self.chat_model.astream(
                build_messages(prompt, options), **sampling_kwargs(options)
            ):
                text = first_text(chunk.content)
                if text:
                    yield text
        except Exception as e:
            raise ProviderError(f"Failed to stream response: {e}") from e
