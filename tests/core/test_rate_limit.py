"""Rate Limit — tests for rate parsing and the token bucket.

Tests cover:
    - "<count>-<period>" rates parse; anything else is a ValueError
    - a full bucket serves count requests, then refuses with a retry hint
    - tokens come back at count / period per second, never above count
"""

import pytest

from payments_api.core.rate_limit import Rate, TokenBucket, parse_rate


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


# ─── parse_rate ──────────────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("5-S", Rate(5, 1)),
    ("100-m", Rate(100, 60)),
    (" 10-H ", Rate(10, 3600)),
    ("1000-D", Rate(1000, 86400)),
])
def test_parse_rate(raw, expected):
    assert parse_rate(raw) == expected


@pytest.mark.parametrize("raw", ["", "5", "five-S", "5-X", "0-S", "-5-S", "5-"])
def test_parse_rate_rejects_malformed(raw):
    with pytest.raises(ValueError):
        parse_rate(raw)


# ─── TokenBucket ─────────────────────────────────────────────────

def test_bucket_serves_limit_then_refuses():
    clock = FakeClock()
    bucket = TokenBucket(Rate(3, 60), clock=clock)

    assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]
    assert bucket.retry_after() == 20


def test_bucket_refills_over_time_up_to_capacity():
    clock = FakeClock()
    bucket = TokenBucket(Rate(2, 1), clock=clock)
    bucket.try_acquire()
    bucket.try_acquire()
    assert not bucket.try_acquire()

    clock.now += 0.5
    assert bucket.try_acquire()
    assert not bucket.try_acquire()

    clock.now += 60
    assert bucket.try_acquire()
    assert bucket.remaining == 1
