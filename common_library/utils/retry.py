"""
Retry logic for wrapped browser calls.

This module provides a plain ``retry`` helper used by the scraping wrapper
(fixed delay between attempts) and a decorator form with optional
exponential backoff.
"""

import time
from typing import TypeVar, Callable, Optional, Type, Tuple
from functools import wraps
import logging

from ..errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryStrategy:
    """
    Configurable retry strategy.

    A ``backoff_factor`` of 1.0 gives a constant delay between attempts.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        initial_delay: float = 2.0,
        backoff_factor: float = 1.0,
        max_delay: Optional[float] = None,
        exceptions: Tuple[Type[BaseException], ...] = (Exception,)
    ):
        """
        Initialize retry strategy.

        Args:
            max_attempts: Maximum number of attempts
            initial_delay: Delay before the second attempt, in seconds
            backoff_factor: Multiplier applied to the delay after each attempt
            max_delay: Upper bound for the delay, if any
            exceptions: Tuple of exception types to retry on
        """
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay
        self.exceptions = exceptions

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay after a failed attempt.

        Args:
            attempt: Failed attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay = self.initial_delay * (self.backoff_factor ** attempt)
        if self.max_delay is not None:
            return min(delay, self.max_delay)
        return delay

    def should_retry(self, exception: BaseException) -> bool:
        """Check if an exception should trigger a retry."""
        return isinstance(exception, self.exceptions)

    def run(
        self,
        task: Callable[[], T],
        on_retry: Optional[Callable[[int, BaseException], None]] = None
    ) -> T:
        """
        Call ``task`` until it succeeds or the attempts run out.

        The last exception is re-raised unchanged. Exceptions that are not
        retryable propagate immediately.

        Raises:
            RetryExhaustedError: If ``max_attempts`` allows no attempt at all
        """
        for attempt in range(self.max_attempts):
            try:
                return task()
            except Exception as e:
                if not self.should_retry(e):
                    raise

                if attempt >= self.max_attempts - 1:
                    logger.error(f"All {self.max_attempts} attempts failed. Last error: {e}")
                    raise

                delay = self.calculate_delay(attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{self.max_attempts} failed: {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                if on_retry:
                    on_retry(attempt + 1, e)
                time.sleep(delay)

        raise RetryExhaustedError("Exceeded retry attempts")


def retry(
    task: Callable[[], T],
    retries: int = 5,
    delay: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException], None]] = None
) -> T:
    """
    Run a task multiple times with a fixed delay between attempts.

    Args:
        task: Zero-argument callable to run
        retries: Maximum number of attempts
        delay: Seconds to sleep between attempts
        exceptions: Exception types that trigger another attempt
        on_retry: Optional callback called with (attempt, exception) before sleeping

    Returns:
        Result of the first successful attempt

    Example:
        title = retry(lambda: page.title(), retries=3, delay=0.5)
    """
    strategy = RetryStrategy(
        max_attempts=retries,
        initial_delay=delay,
        backoff_factor=1.0,
        exceptions=exceptions
    )
    return strategy.run(task, on_retry=on_retry)


def with_retry(
    max_attempts: int = 5,
    initial_delay: float = 2.0,
    backoff_factor: float = 1.0,
    max_delay: Optional[float] = None,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException], None]] = None
) -> Callable:
    """
    Decorator for adding retry logic to synchronous functions.

    Args:
        max_attempts: Maximum number of attempts
        initial_delay: Initial delay in seconds
        backoff_factor: Exponential backoff multiplier
        max_delay: Maximum delay in seconds
        exceptions: Tuple of exception types to retry on
        on_retry: Optional callback function called on each retry

    Returns:
        Decorated function with retry logic

    Example:
        @with_retry(max_attempts=3, initial_delay=1.0, backoff_factor=2.0)
        def read_title(page):
            return page.title()
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        backoff_factor=backoff_factor,
        max_delay=max_delay,
        exceptions=exceptions
    )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return strategy.run(lambda: func(*args, **kwargs), on_retry=on_retry)

        return wrapper

    return decorator
