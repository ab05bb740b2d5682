"""Request/response models shared by every client.

These are pydantic models so the contract is validated at construction:

  RetryPolicy          → attempt ceiling + fixed delay between attempts
  GenerationOptions    → sampling params, system prompt, output mode
  GenerationResponse   → content (formatted or raw) + model name

Output mode is one of three, enforced when GenerationOptions is built:

  "schema"     → output_schema set; JSON prompt + formatter are synthesized
  "formatter"  → caller-supplied formatter applied to the raw text
  "raw"        → neither; content is the raw text
"""

from typing import Any, Callable, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")

OutputMode = Literal["schema", "formatter", "raw"]

# Formatter: raw model text → value, or None when the text is unusable
Formatter = Callable[[str], Any]

# Semantic validator: content → (is_valid, error_message)
SemanticValidator = Callable[[Any], tuple[bool, str]]


class RetryPolicy(BaseModel):
    """Bounded retry with a fixed delay (no backoff growth, no jitter)."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    delay_ms: int = Field(default=1000, ge=0)


class GenerationOptions(BaseModel):
    """Per-call options for generate() / stream_generate()."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = Field(default=None, ge=1)
    stop: Optional[list[str]] = None
    system_prompt: Optional[str] = None

    output_schema: Optional[type[BaseModel]] = None
    formatter: Optional[Formatter] = None
    semantic_validator: Optional[SemanticValidator] = None

    retry: Optional[RetryPolicy] = None

    @model_validator(mode="after")
    def check_output_mode(self) -> "GenerationOptions":
        if self.output_schema is not None and self.formatter is not None:
            raise ValueError("output_schema and formatter are mutually exclusive")
        return self

    @property
    def output_mode(self) -> OutputMode:
        if self.output_schema is not None:
            return "schema"
        if self.formatter is not None:
            return "formatter"
        return "raw"

    @property
    def has_system_prompt(self) -> bool:
        return bool(self.system_prompt and self.system_prompt.strip())


class GenerationResponse(BaseModel, Generic[T]):
    """One generated result (or one streamed chunk)."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: Optional[T] = None
    model: str
