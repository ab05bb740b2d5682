"""Provider adapters.

  ollama.py          → local Ollama server (/api/generate, NDJSON streaming)
  anthropic_chat.py  → Anthropic Messages API via ChatAnthropic
  openai_chat.py     → OpenAI-compatible chat completions via ChatOpenAI
  chat.py            → message/sampling helpers shared by the hosted adapters
"""

from modelbridge.llm.providers.anthropic_chat import AnthropicClient
from modelbridge.llm.providers.ollama import OllamaClient
from modelbridge.llm.providers.openai_chat import OpenAIClient

__all__ = [
    "AnthropicClient",
    "OllamaClient",
    "OpenAIClient",
]
