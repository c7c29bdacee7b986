"""Tests for infrastructure/ resilience layer.

Covers:
- RateLimiter: per-client remove.bg budget, retry hint, key prefix, graceful failure
- metrics: no-op when prometheus_client absent, LatencyTimer
"""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

from core.config import RemovalQuotaConfig
from infrastructure import metrics as metrics_module
from infrastructure.rate_limiter import QuotaDecision, RateLimiter

NOW = 1_700_000_000.0

# ---------------------------------------------------------------------------
# RateLimiter: no Redis
# ---------------------------------------------------------------------------


def _limiter_without_redis(quota: RemovalQuotaConfig | None = None) -> RateLimiter:
    with patch("infrastructure.rate_limiter.redis_lib") as mock_redis:
        mock_redis.from_url.side_effect = ConnectionError("no redis")
        return RateLimiter(quota or RemovalQuotaConfig(), redis_url="redis://nowhere:9999/0")


class TestRateLimiterNoRedis:
    def test_unavailable(self) -> None:
        assert _limiter_without_redis().available is False

    def test_every_removal_admitted_with_full_budget(self) -> None:
        limiter = _limiter_without_redis(RemovalQuotaConfig(max_removals=2))
        decisions = [limiter.check("127.0.0.1") for _ in range(20)]
        assert set(decisions) == {QuotaDecision(allowed=True, remaining=2)}

    def test_ping_failure_disables_limiter(self) -> None:
        mock_client = MagicMock()
        mock_client.ping.side_effect = ConnectionError("refused")
        with patch("infrastructure.rate_limiter.redis_lib") as mock_redis:
            mock_redis.from_url.return_value = mock_client
            limiter = RateLimiter()
        assert limiter.available is False

    def test_missing_package_disables_limiter(self) -> None:
        with patch("infrastructure.rate_limiter.redis_lib", None):
            limiter = RateLimiter()
        assert limiter.available is False
        assert limiter.check("127.0.0.1").allowed is True


# ---------------------------------------------------------------------------
# RateLimiter: with mock Redis
# ---------------------------------------------------------------------------


class TestRateLimiterWithRedis:
    def _make_limiter(self, max_removals: int = 3) -> tuple[RateLimiter, MagicMock]:
        mock_client = MagicMock()
        mock_client.ping.return_value = True
        with patch("infrastructure.rate_limiter.redis_lib") as mock_redis_mod:
            mock_redis_mod.from_url.return_value = mock_client
            limiter = RateLimiter(
                RemovalQuotaConfig(max_removals=max_removals, window_seconds=60),
                clock=lambda: NOW,
            )
        return limiter, mock_client

    def _pipeline(
        self, mock_client: MagicMock, used: int, oldest_score: float | None = None
    ) -> MagicMock:
        oldest = [("member", oldest_score)] if oldest_score is not None else []
        pipe = MagicMock()
        pipe.execute.side_effect = [[0, oldest, used], [1, True]]
        mock_client.pipeline.return_value = pipe
        return pipe

    def test_available(self) -> None:
        limiter, _ = self._make_limiter()
        assert limiter.available is True

    def test_admits_under_budget_and_counts_down(self) -> None:
        limiter, mock_client = self._make_limiter(max_removals=5)
        self._pipeline(mock_client, used=3)
        assert limiter.check("10.0.0.7") == QuotaDecision(allowed=True, remaining=1)

    def test_admitted_removal_is_recorded(self) -> None:
        limiter, mock_client = self._make_limiter()
        pipe = self._pipeline(mock_client, used=0)
        limiter.check("10.0.0.7")
        key, members = pipe.zadd.call_args.args
        assert key == "diary:remove-bg:10.0.0.7"
        assert list(members.values()) == [NOW]
        pipe.expire.assert_called_once_with("diary:remove-bg:10.0.0.7", 60)

    def test_refuses_at_budget_with_retry_hint(self) -> None:
        limiter, mock_client = self._make_limiter(max_removals=3)
        self._pipeline(mock_client, used=3, oldest_score=NOW - 45.5)

        decision = limiter.check("10.0.0.7")

        assert decision == QuotaDecision(allowed=False, remaining=0, retry_after_seconds=15)

    def test_refused_removal_is_not_recorded(self) -> None:
        limiter, mock_client = self._make_limiter(max_removals=3)
        pipe = self._pipeline(mock_client, used=3, oldest_score=NOW - 1)
        limiter.check("10.0.0.7")
        pipe.zadd.assert_not_called()

    def test_window_trimmed_before_counting(self) -> None:
        limiter, mock_client = self._make_limiter()
        pipe = self._pipeline(mock_client, used=0)
        limiter.check("10.0.0.7")
        pipe.zremrangebyscore.assert_called_once_with("diary:remove-bg:10.0.0.7", 0, NOW - 60)

    def test_clients_have_separate_budgets(self) -> None:
        limiter, mock_client = self._make_limiter()
        pipe = self._pipeline(mock_client, used=0)
        limiter.check("10.0.0.8")
        assert pipe.zcard.call_args.args[0] == "diary:remove-bg:10.0.0.8"

    def test_fails_open_on_redis_error(self) -> None:
        limiter, mock_client = self._make_limiter(max_removals=4)
        mock_client.pipeline.side_effect = ConnectionError("Redis down")
        assert limiter.check("10.0.0.7") == QuotaDecision(allowed=True, remaining=4)


# ---------------------------------------------------------------------------
# Metrics: no-op path
# ---------------------------------------------------------------------------


class TestMetricsNoOp:
    def setup_method(self) -> None:
        self._orig = metrics_module._registry_available
        metrics_module._registry_available = False

    def teardown_method(self) -> None:
        metrics_module._registry_available = self._orig

    def test_record_helpers_do_not_raise(self) -> None:
        metrics_module.record_background_removal(
            outcome="success", trigger="manual", latency_seconds=0.4
        )
        metrics_module.record_commit("created")
        metrics_module.record_slot_toggle("full")
        metrics_module.record_rate_limited()
        metrics_module.record_circuit_trip("remove_bg")
        metrics_module.record_circuit_rejected("remove_bg")

    def test_metrics_response_empty(self) -> None:
        body, content_type = metrics_module.get_metrics_response()
        assert body == b""
        assert content_type == "text/plain"


class TestLatencyTimer:
    def test_elapsed_measured(self) -> None:
        with metrics_module.LatencyTimer() as t:
            time.sleep(0.01)
        assert 0.01 <= t.elapsed < 1.0
