"""
Bounded retry with a fixed delay between attempts.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """
    Run a fallible async operation up to ``max_attempts`` times.

    Attempts are strictly sequential. Between a failed attempt and the next
    one the policy sleeps ``delay_ms`` milliseconds (fixed, no backoff, no
    jitter). The failure of the last attempt is re-raised as-is.

    The operation is invoked fresh on every attempt, so any side effects it
    has are repeated; keeping it idempotent is up to the caller.
    """

    def __init__(self, max_attempts: int = 3, delay_ms: int = 1000):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.delay_ms = delay_ms

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None
    ) -> T:
        """
        Execute ``operation`` with retries.

        Args:
            operation: Zero-argument callable returning an awaitable
            max_attempts: Override for this call
            delay_ms: Override for this call

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: Whatever the final attempt raised
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        delay = self.delay_ms if delay_ms is None else delay_ms

        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except Exception as e:
                if attempt == attempts:
                    logger.error(f"Attempt {attempt}/{attempts} failed, giving up: {e}")
                    raise

                logger.warning(
                    f"Attempt {attempt}/{attempts} failed: {e}. "
                    f"Retrying in {delay} ms"
                )
                await asyncio.sleep(delay / 1000)

        # Unreachable: the loop either returns or raises
        raise RuntimeError("retry loop exited without a result")


async def retry_operation(
    operation: Callable[[], Awaitable[Any]],
    max_attempts: int = 3,
    delay_ms: int = 1000
) -> Any:
    """Shortcut for a one-off ``RetryPolicy(max_attempts, delay_ms).execute(operation)``"""
    return await RetryPolicy(max_attempts, delay_ms).execute(operation)
