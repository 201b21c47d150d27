"""Circuit breaker in front of the grammar service.

CLOSED    checks go through to the service
OPEN      too many consecutive failures, checks fail fast
HALF_OPEN cooldown elapsed, the next check is let through as a probe

A failed check is any request that ends in a transport error, timeout,
5xx or 429 status, or an unusable body. Requests the service rejects
with another 4xx do not count. The breaker does not know about HTTP;
the client reports outcomes through :meth:`guard`.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpen(Exception):
    """Raised when a check is refused because the circuit is open."""

    def __init__(self, name: str, retry_after: float):
        super().__init__(
            f"Circuit breaker '{name}' is OPEN — retry in {retry_after:.0f}s"
        )
        self.breaker_name = name
        self.retry_after = retry_after


class CircuitBreaker:
    """Counts consecutive service failures and short-circuits when tripped."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        cooldown_seconds: float = 60,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds

        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN and self._remaining_cooldown() <= 0:
            return CircuitState.HALF_OPEN
        return self._state

    @property
    def failures(self) -> int:
        return self._failures

    def _remaining_cooldown(self) -> float:
        return self.cooldown_seconds - (time.monotonic() - self._opened_at)

    @asynccontextmanager
    async def guard(self) -> AsyncIterator[None]:
        """Wrap one service call; an exception inside counts as a failure.

        Raises CircuitBreakerOpen before the call when the circuit is open.
        """
        async with self._lock:
            if self.state == CircuitState.OPEN:
                raise CircuitBreakerOpen(self.name, self._remaining_cooldown())
            if self.state == CircuitState.HALF_OPEN:
                logger.info("Circuit '%s' HALF_OPEN — sending probe check", self.name)

        try:
            yield
        except Exception:
            await self.record_failure()
            raise
        await self.record_success()

    async def record_success(self) -> None:
        async with self._lock:
            if self._state != CircuitState.CLOSED:
                logger.info("Circuit '%s' recovered — CLOSED", self.name)
            self._state = CircuitState.CLOSED
            self._failures = 0

    async def record_failure(self) -> None:
        async with self._lock:
            self._failures += 1
            probing = self.state == CircuitState.HALF_OPEN
            if probing or self._failures >= self.failure_threshold:
                self._state = CircuitState.OPEN
                self._opened_at = time.monotonic()
                logger.warning(
                    "Circuit '%s' OPEN after %d consecutive failure(s) (cooldown %ss)",
                    self.name, self._failures, self.cooldown_seconds,
                )

    def reset(self) -> None:
        """Force the circuit back to CLOSED."""
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
