"""Rate Limit — rate parsing and a non-blocking token bucket.

Invariants:
    - Rates are written "<count>-<period>" with period S, M, H or D (e.g. "5-S")
    - A bucket starts full (count tokens) and refills at count / period per second
    - try_acquire never blocks: it takes a token or reports how long to wait
"""

import math
import time
from dataclasses import dataclass


RATE_PERIODS = {"S": 1, "M": 60, "H": 3600, "D": 86400}


@dataclass(frozen=True)
class Rate:
    limit: int
    period_seconds: int


def parse_rate(raw: str) -> Rate:
    """Parse "5-S" style rates; ValueError on anything else."""
    count, sep, period = raw.strip().upper().partition("-")
    if not sep or period not in RATE_PERIODS or not count.isdigit():
        raise ValueError(f"invalid rate {raw!r}, expected e.g. 5-S, 100-M")
    limit = int(count)
    if limit <= 0:
        raise ValueError(f"invalid rate {raw!r}, count must be positive")
    return Rate(limit=limit, period_seconds=RATE_PERIODS[period])


class TokenBucket:
    """Token bucket refilled continuously at rate.limit / rate.period_seconds."""

    def __init__(self, rate: Rate, clock=time.monotonic):
        self._capacity = float(rate.limit)
        self._per_second = rate.limit / rate.period_seconds
        self._tokens = self._capacity
        self._clock = clock
        self._last_refill = clock()

    @property
    def remaining(self) -> int:
        return int(self._tokens)

    def _refill(self) -> None:
        now = self._clock()
        self._tokens = min(
            self._capacity,
            self._tokens + (now - self._last_refill) * self._per_second,
        )
        self._last_refill = now

    def try_acquire(self) -> bool:
        self._refill()
        if self._tokens >= 1.0:
            self._tokens -= 1.0
            return True
        return False

    def retry_after(self) -> int:
        """Whole seconds until the next token is available."""
        return max(1, math.ceil((1.0 - self._tokens) / self._per_second))
