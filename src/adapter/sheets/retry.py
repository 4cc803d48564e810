"""Retry/Backoff Executor and Rate Limiter

Every remote spreadsheet call goes through ``RetryExecutor.execute``:
the rate limiter spaces out dispatches, a per-request timeout bounds each
attempt, and classified retryable failures are retried with exponential
backoff (plus jitter for rate-limit errors).
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, TypeVar

from src.app.errors import NetworkError, RateLimitError, SheetsError
from src.adapter.sheets.errors import classify_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 8.0
    backoff_multiplier: float = 2.0
    rate_limit_multiplier: float = 1.5
    request_timeout: Optional[float] = 30.0

    @classmethod
    def from_config(cls, config) -> "RetryConfig":
        return cls(
            max_retries=config.RETRY_MAX_RETRIES,
            base_delay=config.RETRY_BASE_DELAY,
            max_delay=config.RETRY_MAX_DELAY,
            backoff_multiplier=config.RETRY_BACKOFF_MULTIPLIER,
            request_timeout=config.SHEETS_REQUEST_TIMEOUT,
        )


class RateLimiter:
    """
    Minimum spacing between consecutive remote requests

    Holds the time of the last dispatched request and sleeps just long
    enough before the next one. State is per instance, so it only protects
    the quota within this process.
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """
        Wait for the next free slot

        Returns:
            Seconds slept (0.0 when no wait was needed)
        """
        async with self._lock:
            waited = 0.0
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    await self._sleep(waited)
            self._last_request = self._clock()
            return waited


class RetryExecutor:
    """
    Wraps remote calls with rate limiting, timeouts and bounded retries

    Usage:
        executor = RetryExecutor(RetryConfig(), RateLimiter(0.1))
        rows = await executor.execute(lambda: client.get_values("Clients!A2:K"), "get_clients")
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or RetryConfig()
        self.rate_limiter = rate_limiter or RateLimiter()
        self._sleep = sleep
        self._rng = rng or random.Random()

    def compute_delay(self, attempt: int, error: SheetsError, previous: float = 0.0) -> float:
        """
        Backoff before retry number ``attempt`` (1-based)

        delay = min(max_delay, base_delay * multiplier^(attempt-1)); rate-limit
        errors are stretched and jittered by +/-50%, capped at twice max_delay.
        The result never drops below ``previous``, the last delay used for the
        same kind of error.
        """
        cfg = self.config
        delay = min(cfg.max_delay, cfg.base_delay * cfg.backoff_multiplier ** (attempt - 1))
        if isinstance(error, RateLimitError):
            jitter = self._rng.uniform(0.5, 1.5)
            delay = min(cfg.max_delay * 2, max(previous, delay * cfg.rate_limit_multiplier * jitter))
        return max(previous, delay)

    def _should_retry(self, error: SheetsError, retryable_by_default: bool) -> bool:
        if not error.retryable:
            return False
        if retryable_by_default:
            return True
        return isinstance(error, (RateLimitError, NetworkError))

    async def _attempt(self, operation: Callable[[], Awaitable[T]]) -> T:
        await self.rate_limiter.acquire()
        if self.config.request_timeout is None:
            return await operation()
        return await asyncio.wait_for(operation(), timeout=self.config.request_timeout)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str,
        retryable_by_default: bool = True,
    ) -> T:
        """
        Run ``operation`` until it succeeds or fails permanently

        Args:
            operation: Zero-argument coroutine factory (called once per attempt)
            name: Operation name attached to classified errors
            retryable_by_default: When False only rate-limit and network
                errors are retried

        Returns:
            The operation's result

        Raises:
            SheetsError: Classified error after a non-retryable failure or
                once the retry budget is exhausted
        """
        attempt = 1
        last_delays: Dict[type, float] = {}
        while True:
            try:
                return await self._attempt(operation)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                error = classify_error(exc, name)
                if attempt > self.config.max_retries or not self._should_retry(error, retryable_by_default):
                    if attempt > 1:
                        logger.error(f"{name} failed after {attempt} attempts: {error.message}")
                    if error is exc:
                        raise
                    raise error from exc

                delay = self.compute_delay(attempt, error, last_delays.get(type(error), 0.0))
                last_delays[type(error)] = delay
                logger.warning(
                    f"{name} failed with {error.code} (attempt {attempt}/"
                    f"{self.config.max_retries + 1}), retrying in {delay:.2f}s"
                )
                await self._sleep(delay)
                attempt += 1
