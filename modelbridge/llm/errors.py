"""Exception types raised by the client layer.

  ProviderError         → a backend call failed (HTTP status, SDK error, empty reply)
  JSONExtractionError   → no usable JSON in model text (caught by the formatter)
  LLMInvocationError    → every retry attempt failed
  ConfigurationError    → a provider is missing required settings
"""

from typing import Optional


class ModelBridgeError(Exception):
    """Base class for all errors raised by modelbridge."""


class ProviderError(ModelBridgeError):
    """Raised when a provider call fails. Retryable inside generate()."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class JSONExtractionError(ModelBridgeError):
    """Raised when JSON cannot be extracted from LLM output."""

    def __init__(self, message: str, raw_output: str):
        super().__init__(message)
        self.raw_output = raw_output


class LLMInvocationError(ModelBridgeError):
    """Raised when LLM invocation fails after all retries."""

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        last_error: Optional[str] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ConfigurationError(ModelBridgeError):
    """Raised when a provider cannot be built from the current settings."""


class UnsupportedProviderError(ConfigurationError):
    """Raised when the registry is asked for an unknown provider tag."""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported AI model type: {provider}")
        self.provider = provider
