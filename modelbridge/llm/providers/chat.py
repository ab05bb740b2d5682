"""Shared plumbing for the hosted chat-completion adapters.

Both hosted providers are driven through LangChain chat models, so the
message pair, sampling kwargs and reply-content handling are identical;
only the model class and its defaults differ.
"""

from typing import Any, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from modelbridge.llm.types import GenerationOptions


def build_messages(prompt: str, options: GenerationOptions) -> list[BaseMessage]:
    """[system?, user] message pair. Blank system prompts are dropped."""
    messages: list[BaseMessage] = []
    if options.has_system_prompt:
        messages.append(SystemMessage(content=options.system_prompt))
    messages.append(HumanMessage(content=prompt))
    return messages


def sampling_kwargs(
    options: GenerationOptions,
    *,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> dict:
    """Per-call request overrides. Unset values fall back to the given defaults
    and are omitted entirely when there is no default."""
    kwargs = {
        "temperature": options.temperature if options.temperature is not None else temperature,
        "max_tokens": options.max_tokens if options.max_tokens is not None else max_tokens,
        "top_p": options.top_p,
        "stop": options.stop,
    }
    return {k: v for k, v in kwargs.items() if v is not None}


def first_text(content: Any) -> Optional[str]:
    """First text segment of a message's content.

    LangChain returns either a plain string or a list of content blocks
    (strings or {"type": "text", "text": ...} dicts, mixed with tool-use or
    thinking blocks we ignore).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for block in content:
            if isinstance(block, str):
                return block
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    return text
    return None
