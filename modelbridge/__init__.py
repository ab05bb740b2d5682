"""modelbridge: one async interface over local and hosted LLM backends.

  from modelbridge import ModelRegistry, Settings, GenerationOptions

  registry = ModelRegistry(Settings.from_env())
  client = registry.get_or_create("ollama", "mistral")
"""

from modelbridge.config import Settings
from modelbridge.llm import (
    GenerationOptions,
    GenerationResponse,
    LLMInvocationError,
    ModelClient,
    RetryPolicy,
)
from modelbridge.registry import ModelRegistry

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "ModelRegistry",
    "ModelClient",
    "GenerationOptions",
    "GenerationResponse",
    "RetryPolicy",
    "LLMInvocationError",
]
