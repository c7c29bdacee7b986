"""Prometheus metrics for the diary note service.

Metrics:
    background_removals_total        Counter by outcome (success/failed/busy/...) and trigger
    background_removal_seconds       Histogram of background-removal latency
    entry_commits_total              Counter of commits by mode (created/updated)
    artist_slot_toggles_total        Counter of slot toggles by outcome (added/removed/full)
    rate_limited_total               Requests rejected by rate limiter
    circuit_breaker_trips_total      Times a circuit breaker tripped to OPEN
    circuit_breaker_rejected_total   Calls rejected while circuit is OPEN

Usage::

    from infrastructure.metrics import record_background_removal, record_commit
"""

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

# Lazy import: prometheus_client is optional. If not installed, all calls
# are no-ops and /metrics returns an empty body.
_registry_available = False
try:
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )

    _REGISTRY = CollectorRegistry()

    background_removals_total = Counter(
        "diary_background_removals_total",
        "Background-removal runs by outcome and trigger",
        ["outcome", "trigger"],
        registry=_REGISTRY,
    )

    background_removal_seconds = Histogram(
        "diary_background_removal_seconds",
        "Background-removal latency in seconds",
        ["trigger"],
        buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
        registry=_REGISTRY,
    )

    entry_commits_total = Counter(
        "diary_entry_commits_total",
        "Committed notes by mode (created or updated)",
        ["mode"],
        registry=_REGISTRY,
    )

    artist_slot_toggles_total = Counter(
        "diary_artist_slot_toggles_total",
        "Artist slot toggles by outcome (added, removed, full)",
        ["outcome"],
        registry=_REGISTRY,
    )

    rate_limited_total = Counter(
        "diary_rate_limited_total",
        "Requests rejected by rate limiter",
        registry=_REGISTRY,
    )

    circuit_breaker_trips_total = Counter(
        "diary_circuit_breaker_trips_total",
        "Number of times a circuit breaker tripped to OPEN state",
        ["breaker_name"],
        registry=_REGISTRY,
    )

    circuit_breaker_rejected_total = Counter(
        "diary_circuit_breaker_rejected_total",
        "Requests rejected because circuit was OPEN (short-circuited)",
        ["breaker_name"],
        registry=_REGISTRY,
    )

    _registry_available = True
    logger.info("Prometheus metrics registry initialized")

except ImportError:
    logger.info("prometheus_client not installed — metrics disabled")
    _REGISTRY = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Public helpers: all are no-ops when prometheus_client is not installed
# ---------------------------------------------------------------------------


def record_background_removal(
    *,
    outcome: str,
    trigger: str,
    latency_seconds: float | None = None,
) -> None:
    """Record a finished background-removal run.

    Args:
        outcome: "success" or a ``RemovalFailure.reason`` code.
        trigger: "manual", "capture" or "service".
        latency_seconds: Wall-clock time of the external call, if one was made.
    """
    if not _registry_available:
        return
    background_removals_total.labels(outcome=outcome, trigger=trigger).inc()
    if latency_seconds is not None:
        background_removal_seconds.labels(trigger=trigger).observe(latency_seconds)


def record_commit(mode: str) -> None:
    """Increment the commit counter.

    Args:
        mode: "created" or "updated".
    """
    if _registry_available:
        entry_commits_total.labels(mode=mode).inc()


def record_slot_toggle(outcome: str) -> None:
    """Increment the slot toggle counter.

    Args:
        outcome: "added", "removed" or "full".
    """
    if _registry_available:
        artist_slot_toggles_total.labels(outcome=outcome).inc()


def record_rate_limited() -> None:
    """Increment rate-limited requests counter."""
    if _registry_available:
        rate_limited_total.inc()


def record_circuit_trip(breaker_name: str) -> None:
    """Increment circuit breaker trip counter."""
    if _registry_available:
        circuit_breaker_trips_total.labels(breaker_name=breaker_name).inc()


def record_circuit_rejected(breaker_name: str) -> None:
    """Increment circuit breaker rejected-call counter."""
    if _registry_available:
        circuit_breaker_rejected_total.labels(breaker_name=breaker_name).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
        Returns empty bytes if prometheus_client is not available.
    """
    if not _registry_available:
        return b"", "text/plain"
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = await pipeline.run(draft)
        record_background_removal(outcome="success", trigger="manual", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
