"""JSON extraction from LLM responses.

Models asked for JSON still wrap it in preamble text, trailing chatter,
<think> tags, comments and trailing commas. This module recovers the JSON
value and, through create_formatter(), validates it against a pydantic model.

The span heuristic is deliberately simple: first '{' or '[' up to the LAST
matching closer. Two independent JSON fragments in one reply, or a closer
appearing in trailing prose, will produce an unparseable span and the
formatter returns None.
"""

import json
import re
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel

from modelbridge.llm.errors import JSONExtractionError
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

T = TypeVar("T", bound=BaseModel)

_OPENERS = re.compile(r"[{\[]")
_CLOSERS = {"{": "}", "[": "]"}

_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_WHITESPACE = re.compile(r"\s+")
_THINK_BLOCK = re.compile(r"\s*<think>(.*?)</think>", re.DOTALL)


def strip_think_tags(raw: str) -> tuple[str, Optional[str]]:
    """Strip a leading <think>...</think> block from reasoning model output.

    Only a block that opens the response counts. Tags later in the text
    (inside a JSON string value, say) are left alone.

    Returns:
        Tuple of (content_after_think, thinking_content)
        - If <think> tags found: content after </think>, and the thinking
        - If no tags: original raw, None
    """
    think_match = _THINK_BLOCK.match(raw)
    if think_match:
        thinking = think_match.group(1)
        after = raw[think_match.end():].strip()
        return after, thinking
    return raw, None


def clean_json_span(span: str) -> str:
    """Remove // and /* */ comments and trailing commas, collapse whitespace."""
    span = _LINE_COMMENT.sub("", span)
    span = _BLOCK_COMMENT.sub("", span)
    span = _TRAILING_COMMA.sub(r"\1", span)
    return _WHITESPACE.sub(" ", span).strip()


def extract_json(raw: str) -> Any:
    """Extract a JSON value from LLM output.

    Handles:
    - Raw JSON: {"key": "value"}
    - Preamble text: Sure! {"key": "value"}
    - Trailing text: {"key": "value"} Hope that helps.
    - Comments and trailing commas: {"a": 1, } // note
    - <think> tags: <think>...</think>{"key": "value"}
    - Bare scalars with no brackets at all: 42, "text", true

    Args:
        raw: Raw LLM output string

    Returns:
        Parsed JSON (dict, list or scalar)

    Raises:
        JSONExtractionError: If no valid JSON can be extracted
    """
    text, thinking = strip_think_tags(raw)
    if thinking is not None:
        log.debug(logger, MODULE, "stripped_think", "Stripped <think> tags from response")

    opener = _OPENERS.search(text)
    candidate = text.strip()

    if opener:
        start = opener.start()
        end = text.rfind(_CLOSERS[opener.group()])
        if end > start:
            candidate = clean_json_span(text[start:end + 1])

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise JSONExtractionError(
            f"Could not extract valid JSON from LLM output ({len(raw)} chars): {e}",
            raw_output=raw,
        ) from e


def safe_extract_json(raw: str, fallback: Any = None) -> tuple[Any, Optional[str]]:
    """Extract JSON with fallback on failure.

    Returns:
        Tuple of (parsed_json, error_message)
        - On success: (parsed_json, None)
        - On failure: (fallback, error_message)
    """
    try:
        return extract_json(raw), None
    except JSONExtractionError as e:
        log.warning(logger, MODULE, "extract_failed",
                    "Failed to extract JSON from LLM output",
                    error=str(e), raw_length=len(raw))
        return fallback, str(e)


def create_formatter(schema: type[T]) -> Callable[[str], Optional[T]]:
    """Build a formatter that turns raw model text into a validated `schema`.

    The returned callable never raises: extraction or validation failures
    are logged and yield None, which the retry engine treats as an invalid
    result.
    """

    def format_content(content: str) -> Optional[T]:
        try:
            return schema.model_validate(extract_json(content))
        except Exception as e:
            log.error(logger, MODULE, "format_failed",
                      "Failed to parse JSON response",
                      error=str(e), error_type=type(e).__name__,
                      schema=schema.__name__, content=content)
            return None

    return format_content
