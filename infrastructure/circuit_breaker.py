"""Circuit breaker guarding the remove.bg call.

remove.bg is the only remote dependency of the diary. When it keeps
failing, a scissors tap or camera capture should come back as a failed
removal straight away, with the original photo still on the draft, rather
than sit in PROCESSING for another transport timeout.

States::

    CLOSED ──(failure_threshold consecutive failures)──→ OPEN
    OPEN ──(reset_timeout_seconds elapsed, next call)──→ HALF_OPEN
    HALF_OPEN ──(trial call succeeds)──→ CLOSED
    HALF_OPEN ──(trial call fails)──→ OPEN

Thresholds come from ``BackgroundRemovalConfig``::

    breaker = CircuitBreaker.from_config(DEFAULT_REMOVAL_CONFIG)
    image = await breaker.acall(transport.post, form)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from core.config import BackgroundRemovalConfig
from infrastructure.metrics import record_circuit_rejected, record_circuit_trip

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """The breaker refused the call; remove.bg was not contacted.

    Args:
        name: Breaker name.
        reset_in_seconds: Seconds left before a trial call is let through.
    """

    def __init__(self, name: str, reset_in_seconds: float) -> None:
        self.name = name
        self.reset_in_seconds = reset_in_seconds
        super().__init__(
            f"Background removal paused ({name} circuit open), "
            f"retrying allowed in {reset_in_seconds:.0f}s"
        )


@dataclass
class CircuitStats:
    """Call counters reported by ``/health/remove-bg``."""

    calls: int = 0
    successes: int = 0
    failures: int = 0
    rejected: int = 0


class CircuitBreaker:
    """Async circuit breaker shared by every remove.bg caller in the process.

    Args:
        name: Label used in logs, metrics and the health payload.
        failure_threshold: Consecutive failures that open the circuit.
        reset_timeout_seconds: Time spent OPEN before one trial call.
        tracked: Exception types that count as failures; anything else
            propagates without touching the counters.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        reset_timeout_seconds: float = 30.0,
        *,
        tracked: tuple[type[Exception], ...] = (Exception,),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._failure_threshold = failure_threshold
        self._reset_timeout = reset_timeout_seconds
        self._tracked = tracked
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._opened_at = 0.0
        self._lock = threading.Lock()
        self.stats = CircuitStats()

    @classmethod
    def from_config(
        cls, config: BackgroundRemovalConfig, name: str = "remove_bg"
    ) -> CircuitBreaker:
        """Build the breaker with the thresholds carried by ``config``."""
        return cls(
            name,
            failure_threshold=config.failure_threshold,
            reset_timeout_seconds=config.reset_timeout_seconds,
        )

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def _move(self, state: CircuitState) -> None:
        # lock held
        logger.warning("breaker %s: %s -> %s", self.name, self._state.value, state.value)
        self._state = state

    def _retry_in(self) -> float:
        return max(0.0, self._reset_timeout - (self._clock() - self._opened_at))

    def _admit(self) -> None:
        with self._lock:
            self.stats.calls += 1
            if self._state is not CircuitState.OPEN:
                return
            if self._retry_in() > 0:
                self.stats.rejected += 1
                record_circuit_rejected(self.name)
                raise CircuitOpenError(self.name, self._retry_in())
            self._move(CircuitState.HALF_OPEN)

    def _settle(self, error: Exception | None) -> None:
        with self._lock:
            if error is None:
                self.stats.successes += 1
                self._consecutive_failures = 0
                if self._state is CircuitState.HALF_OPEN:
                    self._move(CircuitState.CLOSED)
                return

            self.stats.failures += 1
            self._consecutive_failures += 1
            if self._state is CircuitState.HALF_OPEN:
                self._opened_at = self._clock()
                self._move(CircuitState.OPEN)
            elif (
                self._state is CircuitState.CLOSED
                and self._consecutive_failures >= self._failure_threshold
            ):
                self._opened_at = self._clock()
                self._move(CircuitState.OPEN)
                record_circuit_trip(self.name)
                logger.error(
                    "breaker %s tripped after %d failures, last: %s",
                    self.name,
                    self._consecutive_failures,
                    error,
                )

    async def acall(
        self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any
    ) -> Any:
        """Await ``func(*args, **kwargs)`` unless the circuit is open.

        The lock is released while the call is in flight.

        Raises:
            CircuitOpenError: The circuit is OPEN and the call was not made.
        """
        self._admit()
        try:
            result = await func(*args, **kwargs)
        except self._tracked as exc:
            self._settle(exc)
            raise
        self._settle(None)
        return result

    def status(self) -> dict[str, Any]:
        """Snapshot for the health endpoint."""
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "consecutive_failures": self._consecutive_failures,
                "failure_threshold": self._failure_threshold,
                "reset_timeout_seconds": self._reset_timeout,
                "retry_in_seconds": (
                    round(self._retry_in(), 1) if self._state is CircuitState.OPEN else None
                ),
                "stats": asdict(self.stats),
            }
