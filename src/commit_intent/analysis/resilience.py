"""Resilience patterns for AI classification calls.

Every protected call goes through, in order:

    rate limit wait -> circuit breaker admission -> retry with backoff -> call

Rejections surface as RateLimitExceededError or CircuitOpenError. The
commit analyzer treats them like any other AI failure.

Circuit breaker states:
- CLOSED: Normal operation, calls pass through
- OPEN: Too many consecutive failures, calls fail fast
- HALF_OPEN: Timeout elapsed, a few trial calls test recovery
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

from commit_intent.config.models import ResilienceConfig
from commit_intent.exceptions import CircuitOpenError, RateLimitExceededError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from commit_intent.analysis.models import CommitClassification, CommitInfo
    from commit_intent.analysis.protocols import AIClassifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_MARKERS = (
    # Rate limiting
    "rate limit",
    "too many requests",
    "429",
    # Server errors
    "500",
    "502",
    "503",
    "504",
    "internal server error",
    "bad gateway",
    "service unavailable",
    "gateway timeout",
    # Network
    "connection",
    "timeout",
    "temporary",
)

_CLIENT_ERROR_MARKERS = ("400", "401", "403", "404")


def is_retryable_error(error: BaseException) -> bool:
    """Decide whether an error is worth retrying.

    Rate limits, server errors and network trouble are retried; client
    errors and our own admission rejections are not. Unknown errors are
    retried.
    """
    if isinstance(error, CircuitOpenError | RateLimitExceededError):
        return False
    if isinstance(error, TimeoutError | ConnectionError):
        return True

    text = str(error).lower()
    if any(marker in text for marker in _RETRYABLE_MARKERS):
        return True
    if any(marker in text for marker in _CLIENT_ERROR_MARKERS):
        return False
    return True


# =============================================================================
# Rate limiting
# =============================================================================


class TokenBucketRateLimiter:
    """Token bucket limiter for coroutines.

    The bucket starts full and refills continuously at rate_per_minute.
    """

    def __init__(
        self,
        rate_per_minute: int,
        burst: int | None = None,
        *,
        max_wait: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if rate_per_minute <= 0:
            raise ValueError("rate_per_minute must be positive")
        self.capacity = float(burst if burst is not None else rate_per_minute * 2)
        self.refill_per_second = rate_per_minute / 60.0
        self.max_wait = max_wait
        self._clock = clock
        self._sleep = sleep
        self._tokens = self.capacity
        self._last_update = clock()
        self._lock = asyncio.Lock()

    @property
    def tokens(self) -> float:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last_update)
        self._tokens = min(self.capacity, self._tokens + elapsed * self.refill_per_second)
        self._last_update = now

    async def acquire(self) -> None:
        """Wait for a token.

        Raises:
            RateLimitExceededError: If the wait would exceed max_wait
        """
        async with self._lock:
            while True:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return

                wait = (1 - self._tokens) / self.refill_per_second
                if self.max_wait is not None and wait > self.max_wait:
                    raise RateLimitExceededError(
                        f"Rate limit exceeded, next slot in {wait:.1f}s",
                        retry_after=wait,
                    )
                await self._sleep(wait)


# =============================================================================
# Circuit breaker
# =============================================================================


class CircuitState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


@dataclass
class CircuitBreakerMetrics:
    """Counters for monitoring a circuit breaker."""

    consecutive_failures: int = 0
    half_open_successes: int = 0
    half_open_admitted: int = 0
    total_calls: int = 0
    total_failures: int = 0
    total_rejections: int = 0
    opened_at: float | None = None


class CircuitBreaker:
    """Fails fast after repeated failures, then probes for recovery.

    Usage:
        breaker = CircuitBreaker("ai", failure_threshold=5, timeout=30)
        result = await breaker.call(lambda: client.complete(prompt))
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout: float = 30.0,
        half_open_max_requests: int = 3,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.half_open_max_requests = half_open_max_requests
        self.metrics = CircuitBreakerMetrics()
        self._state = CircuitState.CLOSED
        self._clock = clock

    @property
    def state(self) -> CircuitState:
        """Current state, moving OPEN to HALF_OPEN once the timeout elapses."""
        if self._state is CircuitState.OPEN and self._retry_after() <= 0:
            self._transition(CircuitState.HALF_OPEN)
        return self._state

    def _retry_after(self) -> float:
        if self.metrics.opened_at is None:
            return 0.0
        return self.timeout - (self._clock() - self.metrics.opened_at)

    def _transition(self, state: CircuitState) -> None:
        self._state = state
        self.metrics.half_open_successes = 0
        self.metrics.half_open_admitted = 0

        if state is CircuitState.OPEN:
            self.metrics.opened_at = self._clock()
            logger.warning(
                "CircuitBreaker %s: OPEN after %d consecutive failures",
                self.name,
                self.metrics.consecutive_failures,
            )
        elif state is CircuitState.HALF_OPEN:
            logger.info("CircuitBreaker %s: HALF_OPEN (testing recovery)", self.name)
        else:
            self.metrics.consecutive_failures = 0
            self.metrics.opened_at = None
            logger.info("CircuitBreaker %s: CLOSED (recovered)", self.name)

    def _admit(self) -> None:
        state = self.state
        if state is CircuitState.OPEN:
            self.metrics.total_rejections += 1
            raise CircuitOpenError(self.name, max(0.0, self._retry_after()))
        if state is CircuitState.HALF_OPEN:
            if self.metrics.half_open_admitted >= self.half_open_max_requests:
                self.metrics.total_rejections += 1
                raise CircuitOpenError(self.name, 0.0)
            self.metrics.half_open_admitted += 1

    def _record_success(self) -> None:
        self.metrics.consecutive_failures = 0
        if self._state is CircuitState.HALF_OPEN:
            self.metrics.half_open_successes += 1
            if self.metrics.half_open_successes >= self.half_open_max_requests:
                self._transition(CircuitState.CLOSED)

    def _record_failure(self) -> None:
        self.metrics.total_failures += 1
        self.metrics.consecutive_failures += 1
        if self._state is CircuitState.HALF_OPEN:
            self._transition(CircuitState.OPEN)
        elif self._state is CircuitState.CLOSED and self.metrics.consecutive_failures >= self.failure_threshold:
            self._transition(CircuitState.OPEN)

    async def call(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an operation through the breaker.

        Raises:
            CircuitOpenError: If the circuit rejects the call
        """
        self._admit()
        self.metrics.total_calls += 1
        try:
            result = await operation()
        except Exception:
            self._record_failure()
            raise
        self._record_success()
        return result


# =============================================================================
# Retry
# =============================================================================


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    initial_delay: float = 0.5,
    max_delay: float = 10.0,
    multiplier: float = 2.0,
    jitter: bool = True,
    is_retryable: Callable[[BaseException], bool] = is_retryable_error,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run an operation, retrying retryable failures with exponential backoff.

    Args:
        operation: Zero-argument coroutine factory
        attempts: Total attempts including the first
        initial_delay: Delay before the second attempt, in seconds
        max_delay: Upper bound for any single delay
        multiplier: Growth factor between delays
        jitter: Randomize each delay within [delay / 2, delay]
        is_retryable: Predicate deciding whether an error is retried
        sleep: Coroutine used to wait between attempts

    Returns:
        The operation's result

    Raises:
        The last error once attempts are exhausted or an error is not retryable
    """
    attempts = max(1, attempts)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt >= attempts or not is_retryable(e):
                raise
            delay = min(max_delay, initial_delay * multiplier ** (attempt - 1))
            if jitter:
                delay = random.uniform(delay / 2, delay)
            logger.warning("Attempt %d/%d failed: %s; retrying in %.2fs", attempt, attempts, e, delay)
            await sleep(delay)

    raise AssertionError("unreachable")


# =============================================================================
# Composition
# =============================================================================


class Resilience:
    """Rate limiter, circuit breaker and retry composed from ResilienceConfig."""

    def __init__(
        self,
        config: ResilienceConfig | None = None,
        *,
        name: str = "ai",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or ResilienceConfig()
        self._sleep = sleep

        self.rate_limiter: TokenBucketRateLimiter | None = None
        if self.config.rate_limit_rpm > 0:
            self.rate_limiter = TokenBucketRateLimiter(
                self.config.rate_limit_rpm,
                max_wait=self.config.rate_limit_max_wait,
                clock=clock,
                sleep=sleep,
            )

        self.circuit_breaker: CircuitBreaker | None = None
        if self.config.circuit_breaker_enabled:
            self.circuit_breaker = CircuitBreaker(
                name,
                failure_threshold=self.config.circuit_breaker_threshold,
                timeout=self.config.circuit_breaker_timeout,
                half_open_max_requests=self.config.circuit_breaker_max_requests,
                clock=clock,
            )

    @property
    def circuit_breaker_state(self) -> str:
        if self.circuit_breaker is None:
            return "disabled"
        return self.circuit_breaker.state.value

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an operation with every configured pattern applied."""
        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

        if self.circuit_breaker is not None:
            return await self.circuit_breaker.call(lambda: self._with_retry(operation))
        return await self._with_retry(operation)

    async def _with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self.config.retry_attempts <= 0:
            return await operation()
        return await retry_with_backoff(
            operation,
            attempts=self.config.retry_attempts,
            initial_delay=self.config.retry_initial_wait,
            max_delay=self.config.retry_max_wait,
            sleep=self._sleep,
        )


class ResilientAIClassifier:
    """An AIClassifier whose calls go through Resilience."""

    def __init__(self, classifier: AIClassifier, resilience: Resilience | None = None) -> None:
        self.classifier = classifier
        self.resilience = resilience or Resilience()

    async def classify(self, commit: CommitInfo) -> CommitClassification | None:
        return await self.resilience.execute(lambda: self.classifier.classify(commit))
