"""Bounded retry for provider exchanges.

Rate limits (429) and server errors (>= 500) are retried with a linear
backoff of 1s, 2s, 3s... Everything else propagates on the first failure.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 2
BACKOFF_STEP_S = 1.0

_STATUS_ATTRIBUTES = ("status_code", "status", "code")


def get_error_status(error: BaseException) -> Optional[int]:
    """
    Extract an HTTP-like status from an exception.

    Looks at the attributes the SDK errors use (``status_code`` for
    openai/anthropic, ``code`` for google-api-core, ``status`` for
    ProviderError) and finally at ``error.response.status_code`` for
    httpx errors.

    Returns:
        The integer status, or None when the error carries none
    """
    for attribute in _STATUS_ATTRIBUTES:
        value = getattr(error, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    return None


def is_retryable(error: BaseException) -> bool:
    """True for rate limits and server errors."""
    status = get_error_status(error)
    if status is None:
        return False
    return status == 429 or status >= 500


def with_retry(
    operation: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run ``operation``, retrying transient failures.

    Args:
        operation: Zero-argument callable performing one exchange
        max_retries: Retries allowed after the first attempt
        sleep: Wait function, injectable for tests

    Returns:
        Whatever ``operation`` returns

    Raises:
        The last error once it is not retryable or retries are exhausted
    """
    attempt = 0
    while True:
        try:
            return operation()
        except Exception as error:
            if not is_retryable(error) or attempt >= max_retries:
                raise
            delay = BACKOFF_STEP_S * (attempt + 1)
            logger.warning(
                "Attempt %d failed with status %s, retrying in %.0fs",
                attempt + 1,
                get_error_status(error),
                delay,
            )
            sleep(delay)
            attempt += 1
