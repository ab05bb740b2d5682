"""LLM client package.

  from modelbridge.llm import GenerationOptions, OllamaClient

  client = OllamaClient("mistral")

  # Structured output (preferred)
  response = await client.generate(
      "Give me the weather in Paris.",
      GenerationOptions(output_schema=WeatherData, temperature=0.7),
  )
  response.content  # → WeatherData instance

  # Raw text, streamed
  async for chunk in client.stream_generate("Tell me a short story."):
      print(chunk.content, end="")

Architecture:
  types.py     → GenerationOptions / GenerationResponse / RetryPolicy
  parser.py    → JSON extraction from raw LLM output + schema formatter
  prompts.py   → JSON system prompt synthesized from a pydantic model
  retry.py     → bounded fixed-delay retry with result validation
  base.py      → ModelClient contract + shared generate/stream behaviour
  providers/   → Ollama, Anthropic and OpenAI adapters

generate() layers:
  1. PROMPT: Tell the model what JSON shape to produce
  2. PARSE: Extract JSON from surrounding prose, comments, trailing commas
  3. SCHEMA: Validate against the pydantic model
  4. SEMANTIC: Optional domain-specific validation
  5. RETRY: On any failure, retry after a fixed delay
"""

from modelbridge.llm.base import BaseModelClient, Completion, ModelClient
from modelbridge.llm.errors import (
    ConfigurationError,
    JSONExtractionError,
    LLMInvocationError,
    ModelBridgeError,
    ProviderError,
    UnsupportedProviderError,
)
from modelbridge.llm.parser import create_formatter, extract_json, safe_extract_json
from modelbridge.llm.prompts import generate_system_prompt
from modelbridge.llm.providers import AnthropicClient, OllamaClient, OpenAIClient
from modelbridge.llm.retry import retry_operation
from modelbridge.llm.types import (
    GenerationOptions,
    GenerationResponse,
    OutputMode,
    RetryPolicy,
)

__all__ = [
    # Contract
    "ModelClient",
    "BaseModelClient",
    "Completion",
    # Types
    "GenerationOptions",
    "GenerationResponse",
    "OutputMode",
    "RetryPolicy",
    # Engine
    "retry_operation",
    "create_formatter",
    "extract_json",
    "safe_extract_json",
    "generate_system_prompt",
    # Providers
    "OllamaClient",
    "AnthropicClient",
    "OpenAIClient",
    # Errors
    "ModelBridgeError",
    "ProviderError",
    "JSONExtractionError",
    "LLMInvocationError",
    "ConfigurationError",
    "UnsupportedProviderError",
]
