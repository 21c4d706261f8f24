"""Retry logic with exponential backoff for rate-limited RPC calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from chain_tx_tracker.core.errors import is_rate_limit_error

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    """
    Configuration for retry behavior.

    Parameters
    ----------
    max_attempts : int
        Total number of invocations, including the first one
    base_delay : float
        Delay in seconds before the first retry
    max_delay : float
        Maximum delay between retries
    exponential_base : float
        Base for exponential backoff calculation

    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base

    def get_delay(self, attempt: int, base_delay: float | None = None) -> float:
        """
        Calculate delay for a given retry attempt using exponential backoff.

        Parameters
        ----------
        attempt : int
            Current attempt number (0-indexed)
        base_delay : float | None
            Overrides the configured base delay

        Returns
        -------
        float
            Delay in seconds

        """
        base = self.base_delay if base_delay is None else base_delay
        delay = base * (self.exponential_base**attempt)
        return min(delay, self.max_delay)


class RetryExecutor:
    """
    Runs async operations, retrying only when they fail with a rate-limit signal.

    Any other failure propagates immediately. Once attempts are exhausted the
    last failure propagates unchanged.

    Parameters
    ----------
    config : RetryConfig | None
        Retry configuration. Uses default config if None.
    sleep : Callable[[float], Awaitable[None]]
        Non-blocking sleep primitive

    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or RetryConfig()
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> T:
        """
        Invoke ``operation`` with rate-limit-aware retry.

        Parameters
        ----------
        operation : Callable[[], Awaitable[T]]
            Zero-argument callable returning an awaitable
        max_attempts : int | None
            Overrides the configured attempt count, must be at least 1
        base_delay : float | None
            Overrides the configured base delay, in seconds

        Returns
        -------
        T
            Result of the first successful invocation

        Raises
        ------
        ValueError
            If the attempt count is below 1

        """
        attempts = self.config.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)

        for attempt in range(attempts):
            try:
                return await operation()
            except Exception as e:
                if not is_rate_limit_error(e) or attempt == attempts - 1:
                    raise

                delay = self.config.get_delay(attempt, base_delay)
                logger.debug(
                    "Rate limited (attempt %d/%d), retrying in %.1fs: %s",
                    attempt + 1,
                    attempts,
                    delay,
                    e,
                )
                await self._sleep(delay)

        # Unreachable: the last attempt either returns or raises
        msg = "Max retries exceeded"
        raise RuntimeError(msg)
