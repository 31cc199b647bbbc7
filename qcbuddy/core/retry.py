"""
Retry Utilities for Resilient Operations.

Retry logic with exponential backoff and jitter for transient failures in
external service calls (the generation API).

Components
----------
**@retry decorator**
    Wraps synchronous functions with retry logic:

        @retry(max_attempts=3, retryable_exceptions=(RateLimitError,))
        def call_api(prompt: str) -> str:
            return client.generate(prompt)

**RetryError**
    Raised when every attempt failed with a retryable exception. The last
    exception is kept on ``last_exception``. Non-retryable exceptions
    propagate immediately.

Backoff Strategy
----------------
Delay increases exponentially: ``base_delay * (exponential_base ^ attempt)``

    Attempt 1: 0.4s  (+ jitter)
    Attempt 2: 0.8s  (+ jitter)
    ... capped at max_delay
"""

import random
import time
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type

from qcbuddy.core.logging import get_logger

logger = get_logger(__name__)


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, last_exception: Exception, attempts: int) -> None:
        super().__init__(message)
        self.last_exception = last_exception
        self.attempts = attempts


def calculate_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Calculate delay for next retry attempt."""
    delay = base_delay * (exponential_base**attempt)
    delay = min(delay, max_delay)

    # 0-25% random variation
    if jitter:
        delay += delay * 0.25 * random.random()

    return delay


def _execute_with_retry(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    max_attempts: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
    retryable_exceptions: Tuple[Type[Exception], ...],
    on_retry: Optional[Callable[[Exception, int], None]],
    sleep: Callable[[float], None],
) -> Any:
    """
    Execute function with retry logic.

    Raises:
        RetryError: If all attempts fail with retryable exceptions
    """
    last_exception: Optional[Exception] = None
    func_name = getattr(func, "__name__", repr(func))

    for attempt in range(max_attempts):
        try:
            return func(*args, **kwargs)
        except retryable_exceptions as e:
            last_exception = e
            if attempt >= max_attempts - 1:
                logger.warning(
                    f"All {max_attempts} attempts failed",
                    error=str(e),
                    function=func_name,
                )
                break

            delay = calculate_delay(
                attempt, base_delay, max_delay, exponential_base, jitter
            )
            logger.warning(
                f"Attempt {attempt + 1}/{max_attempts} failed, "
                f"retrying in {delay:.2f}s",
                error=str(e),
                function=func_name,
            )
            if on_retry:
                on_retry(e, attempt + 1)
            sleep(delay)

    raise RetryError(
        f"Failed after {max_attempts} attempts: {last_exception}",
        last_exception,
        max_attempts,
    )


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (including first try)
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries
        exponential_base: Base for exponential backoff
        jitter: Add random jitter to delays
        retryable_exceptions: Exception types to retry on
        on_retry: Callback(exception, attempt) called before each retry
        sleep: Sleep function (injectable for tests)

    Example:
        @retry(max_attempts=3, base_delay=0.4)
        def call_api():
            return client.models.generate_content(...)
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if retryable_exceptions is None:
        retryable_exceptions = (Exception,)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return _execute_with_retry(
                func,
                args,
                kwargs,
                max_attempts,
                base_delay,
                max_delay,
                exponential_base,
                jitter,
                retryable_exceptions,
                on_retry,
                sleep,
            )

        return wrapper

    return decorator
