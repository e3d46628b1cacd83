"""Retry with exponential backoff."""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional

from .config import RetryConfig
from .exceptions import is_retryable_error

logger = logging.getLogger(__name__)


def calculate_delay(
    attempt: int,
    config: RetryConfig,
    retry_after: Optional[int] = None,
) -> float:
    """Calculate delay after the given (1-based) failed attempt."""
    if retry_after:
        # Respect Retry-After header
        return float(min(retry_after, config.max_delay))

    # Exponential backoff
    delay = config.initial_delay * (config.exponential_base ** (attempt - 1))

    # Add jitter to prevent thundering herd
    if config.jitter:
        delay = delay * (0.5 + random.random())

    return min(delay, config.max_delay)


class RetryableOperation:
    """
    Runs an async callable until it succeeds, fails terminally, or runs
    out of attempts.

    Usage:
        op = RetryableOperation(config, "fetch_quote")
        result = await op.execute(my_async_func, *args, **kwargs)
    """

    def __init__(
        self,
        config: RetryConfig,
        operation_name: str,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config
        self.operation_name = operation_name
        self.attempts = 0
        self.last_error: Optional[BaseException] = None
        self._sleep = sleep

    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs):
        """Execute function with retry logic."""
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            self.attempts = attempt

            try:
                return await func(*args, **kwargs)

            except Exception as e:
                self.last_error = e

                if not is_retryable_error(e):
                    logger.debug(f"{self.operation_name}: non-retryable error: {e}")
                    raise

                if attempt == max_attempts:
                    logger.error(
                        f"{self.operation_name}: giving up after {attempt} attempts: {e}"
                    )
                    raise

                retry_after = getattr(e, "retry_after", None)
                delay = calculate_delay(attempt, self.config, retry_after)

                logger.warning(
                    f"{self.operation_name}: Retry {attempt}/{max_attempts - 1} "
                    f"after {delay:.2f}s: {e}"
                )

                await self._sleep(delay)

        # max_attempts >= 1 is enforced by RetryConfig
        raise RuntimeError("retry loop exited without a result")
