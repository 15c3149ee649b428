"""Fixed-interval retry with a bounded attempt count and an overall deadline."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional


class RetryError(Exception):
    """Raised when a retried condition never reported success."""

    def __init__(self, message: str, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class RetryExhaustedError(RetryError):
    """All attempts were used without success."""


class RetryTimeoutError(RetryError):
    """The deadline passed before the attempt budget was used."""


class RetryHandler:
    """
    Polls a condition until it succeeds.

    Used for startup steps that depend on cluster state settling, such as
    finding the local node or waiting for a rebalance to finish.
    """

    @staticmethod
    async def retry_until(
        condition: Callable[[], Awaitable[bool]],
        interval: float,
        max_attempts: int,
        timeout: float,
        logger: logging.Logger = None
    ) -> int:
        """
        Await condition() until it returns True.

        Args:
            condition: Async callable returning True when done
            interval: Fixed delay between attempts in seconds
            max_attempts: Maximum number of calls to condition
            timeout: Overall deadline in seconds, measured from the first call
            logger: Optional logger for retry events

        Returns:
            int: Number of attempts it took

        Raises:
            RetryExhaustedError: condition was called max_attempts times without success
            RetryTimeoutError: deadline passed first
        """
        logger = logger or logging.getLogger(__name__)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        last_error = None

        for attempt in range(1, max_attempts + 1):
            try:
                if await condition():
                    return attempt
            except Exception as e:
                last_error = e
                logger.warning(f"Attempt {attempt}/{max_attempts} raised: {e}")

            if attempt == max_attempts:
                break

            remaining = deadline - loop.time()
            if remaining <= interval:
                if remaining > 0:
                    await asyncio.sleep(remaining)
                raise RetryTimeoutError(
                    f"Deadline of {timeout:.0f}s exceeded after {attempt} attempt(s)",
                    attempts=attempt,
                    last_error=last_error
                )

            logger.debug(f"Attempt {attempt}/{max_attempts} not ready, retrying in {interval:.0f}s")
            await asyncio.sleep(interval)

        raise RetryExhaustedError(
            f"All {max_attempts} attempts exhausted",
            attempts=max_attempts,
            last_error=last_error
        )
