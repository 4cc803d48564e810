import random

import pytest

from src.adapter.sheets.retry import RateLimiter, RetryConfig, RetryExecutor
from src.app.errors import NetworkError, RateLimitError, ValidationError
from tests.fakes import http_error


class Recorder:
    """Async sleep stand-in that remembers every requested delay"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FlakyOperation:
    def __init__(self, *errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


@pytest.mark.asyncio
class TestRetryExecutor:
    """Backoff, retry budget and retryability rules"""

    @pytest.fixture
    def sleeps(self):
        return Recorder()

    @pytest.fixture
    def executor(self, sleeps):
        return RetryExecutor(
            RetryConfig(request_timeout=None),
            RateLimiter(min_interval=0.0, sleep=sleeps),
            sleep=sleeps,
            rng=random.Random(7),
        )

    async def test_returns_result_without_retry(self, executor, sleeps):
        operation = FlakyOperation()

        result = await executor.execute(operation, "read_Clients")

        assert result == "ok"
        assert operation.calls == 1
        assert sleeps.delays == []

    async def test_network_errors_back_off_exponentially_until_budget_exhausted(self, executor, sleeps):
        # Arrange
        operation = FlakyOperation(*[http_error(503, "unavailable") for _ in range(10)])

        # Act
        with pytest.raises(NetworkError) as exc_info:
            await executor.execute(operation, "read_Clients")

        # Assert
        assert operation.calls == 4  # first attempt + 3 retries
        assert sleeps.delays == [1.0, 2.0, 4.0]
        assert exc_info.value.operation == "read_Clients"

    async def test_recovers_after_transient_failures(self, executor, sleeps):
        operation = FlakyOperation(http_error(500, "boom"), http_error(502, "bad gateway"))

        result = await executor.execute(operation, "read_Clients")

        assert result == "ok"
        assert operation.calls == 3
        assert sleeps.delays == [1.0, 2.0]

    async def test_non_retryable_error_fails_immediately(self, executor, sleeps):
        operation = FlakyOperation(http_error(400, "Unable to parse range"))

        with pytest.raises(ValidationError):
            await executor.execute(operation, "read_Clients")

        assert operation.calls == 1
        assert sleeps.delays == []

    async def test_rate_limit_delay_is_jittered_and_capped(self, executor, sleeps):
        operation = FlakyOperation(*[http_error(429, "Too many requests") for _ in range(10)])

        with pytest.raises(RateLimitError):
            await executor.execute(operation, "append_Invoices")

        assert len(sleeps.delays) == 3
        for attempt, delay in enumerate(sleeps.delays, start=1):
            base = min(8.0, 2.0 ** (attempt - 1))
            assert base * 1.5 * 0.5 <= delay <= min(16.0, base * 1.5 * 1.5)

    @pytest.mark.parametrize("seed", range(20))
    async def test_rate_limit_delays_never_shrink(self, seed):
        """
        GIVEN a rate-limited operation that keeps failing
        WHEN the executor retries with jittered backoff
        THEN every delay is at least as long as the one before, within the cap
        """
        sleeps = Recorder()
        executor = RetryExecutor(
            RetryConfig(max_retries=6, request_timeout=None),
            RateLimiter(min_interval=0.0, sleep=sleeps),
            sleep=sleeps,
            rng=random.Random(seed),
        )
        operation = FlakyOperation(*[http_error(429, "Quota exceeded") for _ in range(10)])

        with pytest.raises(RateLimitError):
            await executor.execute(operation, "append_Invoices")

        assert len(sleeps.delays) == 6
        assert sleeps.delays == sorted(sleeps.delays)
        assert max(sleeps.delays) <= 16.0

    async def test_non_idempotent_calls_only_retry_rate_limit_and_network(self, executor):
        network = FlakyOperation(http_error(503, "unavailable"))
        invalid = FlakyOperation(http_error(400, "Invalid value"))

        assert await executor.execute(network, "append_Payments", retryable_by_default=False) == "ok"
        with pytest.raises(ValidationError):
            await executor.execute(invalid, "append_Payments", retryable_by_default=False)

        assert network.calls == 2
        assert invalid.calls == 1


class TestComputeDelay:

    def test_never_exceeds_max_delay(self):
        executor = RetryExecutor(RetryConfig())
        error = NetworkError("down", "read_Clients")

        delays = [executor.compute_delay(attempt, error) for attempt in range(1, 8)]

        assert delays == sorted(delays)
        assert max(delays) == 8.0

    def test_rate_limit_delay_is_floored_at_previous_delay(self):
        executor = RetryExecutor(RetryConfig(), rng=random.Random(2))
        error = RateLimitError("slow down", "append_Invoices")

        delays = []
        previous = 0.0
        for attempt in range(1, 4):
            previous = executor.compute_delay(attempt, error, previous)
            delays.append(previous)

        assert delays == sorted(delays)
        assert delays[-1] <= 16.0


@pytest.mark.asyncio
class TestRateLimiter:

    async def test_spaces_out_consecutive_requests(self):
        # Arrange
        now = [100.0]
        sleeps = Recorder()
        limiter = RateLimiter(min_interval=0.1, clock=lambda: now[0], sleep=sleeps)

        # Act
        first = await limiter.acquire()
        now[0] += 0.04
        second = await limiter.acquire()

        # Assert
        assert first == 0.0
        assert second == pytest.approx(0.06)
        assert sleeps.delays == [pytest.approx(0.06)]

    async def test_no_wait_once_interval_elapsed(self):
        now = [5.0]
        limiter = RateLimiter(min_interval=0.1, clock=lambda: now[0], sleep=Recorder())

        await limiter.acquire()
        now[0] += 0.5

        assert await limiter.acquire() == 0.0
