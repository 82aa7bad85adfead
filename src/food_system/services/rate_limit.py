"""Fixed-window request rate limiting."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from math import ceil

from food_system.domain.errors import RateLimitExceededError

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Bucket:
    count: int
    resets_at: datetime


@dataclass(frozen=True)
class RateLimitStatus:
    """Counters reported back to the client."""

    limit: int
    remaining: int
    reset_at: datetime


@dataclass
class RateLimiter:
    """In-memory fixed-window limiter keyed by client identity."""

    name: str
    max_requests: int
    window_seconds: int
    message: str = "Too many requests, please try again later"
    clock: Callable[[], datetime] = _utcnow
    _buckets: dict[str, _Bucket] = field(default_factory=dict, init=False)

    def hit(self, key: str) -> RateLimitStatus:
        """Count a request for ``key``; raise once the window is exhausted."""
        now = self.clock()
        bucket = self._buckets.get(key)
        if bucket is None or now >= bucket.resets_at:
            bucket = _Bucket(
                count=0, resets_at=now + timedelta(seconds=self.window_seconds)
            )
            self._buckets[key] = bucket
        bucket.count += 1
        if bucket.count > self.max_requests:
            retry_after = max(1, ceil((bucket.resets_at - now).total_seconds()))
            _logger.warning(
                "Rate limit exceeded",
                extra={"limiter": self.name, "key": key, "retry_after": retry_after},
            )
            raise RateLimitExceededError(self.message, retry_after)
        return RateLimitStatus(
            limit=self.max_requests,
            remaining=max(0, self.max_requests - bucket.count),
            reset_at=bucket.resets_at,
        )

    def cleanup(self) -> int:
        """Drop expired buckets and return how many were removed."""
        now = self.clock()
        expired = [
            key for key, bucket in self._buckets.items() if now >= bucket.resets_at
        ]
        for key in expired:
            del self._buckets[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._buckets)
