"""Model client contract and the behaviour shared by every provider.

ModelClient is the interface callers program against:

  response = await client.generate(prompt, options)
  async for chunk in client.stream_generate(prompt, options):
      ...

BaseModelClient implements both as template methods. A provider adapter
only implements the raw transport:

  _complete(prompt, options) → Completion(text, model)   one round trip
  _stream(prompt, options)   → async iterator of str      text fragments

and inherits option preparation (JSON prompt + formatter when an
output_schema is given), result validation and the retry loop.
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import aclosing
from typing import AsyncIterator, NamedTuple, Optional

from pydantic import ValidationError

from modelbridge.llm.parser import create_formatter
from modelbridge.llm.prompts import generate_system_prompt
from modelbridge.llm.retry import retry_operation
from modelbridge.llm.types import (
    Formatter,
    GenerationOptions,
    GenerationResponse,
    RetryPolicy,
)
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.client"
logger = get_logger()


class Completion(NamedTuple):
    """Raw text of one provider round trip, before formatting."""

    text: str
    model: Optional[str] = None


class ModelClient(ABC):
    """Uniform interface over every backend."""

    provider: str
    name: str

    @property
    def key(self) -> str:
        """Registry identity: provider:model."""
        return f"{self.provider}:{self.name}"

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResponse:
        """One round trip, retried and validated."""

    @abstractmethod
    def stream_generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> AsyncIterator[GenerationResponse]:
        """Incremental responses in transport order. Not retried."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


class BaseModelClient(ModelClient):
    provider = "base"

    def __init__(self, name: str, retry_policy: Optional[RetryPolicy] = None):
        self.name = name
        self.retry_policy = retry_policy or RetryPolicy()

    # -- provider hooks -------------------------------------------------------

    @abstractmethod
    async def _complete(self, prompt: str, options: GenerationOptions) -> Completion:
        ...

    @abstractmethod
    def _stream(self, prompt: str, options: GenerationOptions) -> AsyncIterator[str]:
        ...

    # -- shared behaviour -----------------------------------------------------

    async def delay(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def prepare_options(
        self, options: Optional[GenerationOptions]
    ) -> tuple[GenerationOptions, Optional[Formatter]]:
        """Resolve the output mode into (options for the wire, formatter).

        With an output_schema, the synthesized JSON instruction goes in front
        of any caller system prompt and the formatter validates against the
        schema. Called once per call, so every retry attempt reuses them.
        """
        options = options or GenerationOptions()

        if options.output_schema is None:
            return options, options.formatter

        json_prompt = generate_system_prompt(options.output_schema)
        if options.has_system_prompt:
            system_prompt = f"{json_prompt}\n{options.system_prompt}"
        else:
            system_prompt = json_prompt

        log.debug(logger, MODULE, "schema_prompt",
                  "Synthesized JSON system prompt",
                  client=self.key, schema=options.output_schema.__name__)
        prepared = options.model_copy(update={"system_prompt": system_prompt})
        return prepared, create_formatter(options.output_schema)

    def validate_result(self, result: GenerationResponse, options: GenerationOptions) -> bool:
        """Schema check when a schema is set, otherwise content must be non-None.

        A semantic_validator, when present, must also accept the content.
        """
        if options.output_schema is not None:
            try:
                options.output_schema.model_validate(result.content)
            except ValidationError:
                return False
        elif result.content is None:
            return False

        if options.semantic_validator is not None:
            is_valid, error = options.semantic_validator(result.content)
            if not is_valid:
                log.warning(logger, MODULE, "semantic_failed",
                            "Semantic validation failed",
                            client=self.key, error=error)
                return False
        return True

    def _to_response(
        self,
        text: Optional[str],
        formatter: Optional[Formatter],
        model: Optional[str] = None,
    ) -> GenerationResponse:
        content = formatter(text) if formatter and text is not None else text
        return GenerationResponse(content=content, model=model or self.name)

    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResponse:
        prepared, formatter = self.prepare_options(options)
        policy = prepared.retry or self.retry_policy

        async def attempt() -> GenerationResponse:
            completion = await self._complete(prompt, prepared)
            return self._to_response(completion.text, formatter, completion.model)

        return await retry_operation(
            attempt,
            lambda result: self.validate_result(result, prepared),
            policy,
            sleep=self.delay,
            label=self.key,
        )

    async def stream_generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> AsyncIterator[GenerationResponse]:
        prepared, formatter = self.prepare_options(options)

        # Closing the outer generator must release the provider stream too
        async with aclosing(self._stream(prompt, prepared)) as fragments:
            async for fragment in fragments:
                yield self._to_response(fragment, formatter)
