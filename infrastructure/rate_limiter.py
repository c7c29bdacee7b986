"""Per-client remove.bg budget for the ``POST /remove-bg`` route.

Each admitted removal is stored as a member of a Redis sorted set keyed by
client and scored by its timestamp; members older than the window are
trimmed before counting. Refused requests are not stored, so a client that
keeps retrying while over budget regains credits on schedule instead of
pushing its own window forward.

Without Redis (package missing, server down, or a command failing) every
request is admitted with the full budget reported.
"""

from __future__ import annotations

import logging
import math
import os
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from core.config import DEFAULT_QUOTA_CONFIG, RemovalQuotaConfig

try:
    import redis as redis_lib
except ImportError:
    redis_lib = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of one admission check.

    Attributes:
        allowed: Whether the removal may go ahead.
        remaining: Removals still available in the window after this one.
        retry_after_seconds: When refused, seconds until the oldest removal
            leaves the window.
    """

    allowed: bool
    remaining: int
    retry_after_seconds: int = 0


class RateLimiter:
    """Sliding-window removal budget, one sorted set per client.

    Args:
        quota: Budget size, window and key prefix.
        redis_url: Redis URL (default: ``REDIS_URL`` env var or localhost).
        clock: Wall-clock time source; scores are shared across processes.
    """

    def __init__(
        self,
        quota: RemovalQuotaConfig = DEFAULT_QUOTA_CONFIG,
        redis_url: str | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.quota = quota
        self._clock = clock
        self._client: Any = self._connect(
            redis_url or os.environ.get("REDIS_URL", "redis://localhost:6379/0")
        )

    @staticmethod
    def _connect(url: str) -> Any:
        if redis_lib is None:
            logger.warning("redis package not installed, remove-bg quota disabled")
            return None
        try:
            client = redis_lib.from_url(url, decode_responses=True, socket_timeout=0.5)
            client.ping()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Redis unavailable at %s (%s), remove-bg quota disabled", url, exc)
            return None
        return client

    @property
    def available(self) -> bool:
        """True when removals are actually being counted."""
        return self._client is not None

    def _unlimited(self) -> QuotaDecision:
        return QuotaDecision(allowed=True, remaining=self.quota.max_removals)

    def check(self, client_id: str) -> QuotaDecision:
        """Spend one removal from ``client_id``'s budget if any is left."""
        if self._client is None:
            return self._unlimited()

        key = f"{self.quota.key_prefix}{client_id}"
        window = self.quota.window_seconds
        now = self._clock()
        try:
            pipe = self._client.pipeline()
            pipe.zremrangebyscore(key, 0, now - window)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.zcard(key)
            _, oldest, used = pipe.execute()
            used = int(used)

            if used >= self.quota.max_removals:
                wait = window - (now - oldest[0][1]) if oldest else window
                logger.warning(
                    "client %s spent %d removals in %ds, refusing",
                    client_id,
                    used,
                    window,
                )
                return QuotaDecision(
                    allowed=False, remaining=0, retry_after_seconds=max(1, math.ceil(wait))
                )

            pipe = self._client.pipeline()
            pipe.zadd(key, {f"{now:.6f}:{uuid.uuid4().hex[:8]}": now})
            pipe.expire(key, window)
            pipe.execute()
        except Exception as exc:  # noqa: BLE001
            logger.warning("remove-bg quota check failed for %s: %s", client_id, exc)
            return self._unlimited()

        return QuotaDecision(allowed=True, remaining=self.quota.max_removals - used - 1)
