"""Bounded retry around a single backend call.

  for attempt in 1..max_attempts:
      run operation
        raised   → remember the error
        returned → validate(result)? return it : remember "invalid format"
      not the last attempt → sleep delay_ms (fixed, no growth)
  raise LLMInvocationError naming the attempt count and the last error

Formatting failures never raise here: the formatter returns None and
validate() rejects the result, so they spend the same attempt budget as
transport errors.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from modelbridge.llm.errors import LLMInvocationError
from modelbridge.llm.types import RetryPolicy
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.retry"
logger = get_logger()

R = TypeVar("R")


async def retry_operation(
    operation: Callable[[], Awaitable[R]],
    validate: Callable[[R], bool],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "generate",
) -> R:
    """Run `operation` until `validate` accepts its result.

    Args:
        operation: Zero-arg coroutine factory; called once per attempt
        validate: Predicate on the operation's result
        policy: Attempt ceiling and fixed delay between attempts
        sleep: Awaitable sleep in seconds (injectable for tests)
        label: Name for logging context (usually the client key)

    Returns:
        The first result accepted by `validate`

    Raises:
        LLMInvocationError: If all attempts fail
    """
    last_error: Optional[str] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            result = await operation()
        except Exception as e:
            last_error = str(e) or type(e).__name__
            log.warning(logger, MODULE, "attempt_failed",
                        f"Attempt raised for {label}",
                        attempt=attempt, max_attempts=policy.max_attempts,
                        error=last_error, error_type=type(e).__name__)
        else:
            if validate(result):
                log.debug(logger, MODULE, "attempt_done",
                          f"Attempt succeeded for {label}",
                          attempt=attempt)
                return result
            last_error = f"Invalid response format on attempt {attempt}"
            log.warning(logger, MODULE, "attempt_invalid",
                        f"Result failed validation for {label}",
                        attempt=attempt, max_attempts=policy.max_attempts)

        if attempt < policy.max_attempts:
            await sleep(policy.delay_ms / 1000)

    log.error(logger, MODULE, "retry_exhausted",
              f"All attempts failed for {label}",
              error=last_error, attempts=policy.max_attempts)
    raise LLMInvocationError(
        f"Operation failed after {policy.max_attempts} attempts. Last error: {last_error}",
        attempts=policy.max_attempts,
        last_error=last_error,
    )
