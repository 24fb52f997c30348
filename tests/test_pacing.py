"""Tests for pacing policies."""

import pytest

from datamuse_backfill import pacing
from datamuse_backfill.pacing import FixedDelayPacer, TokenBucketPacer, as_pacer


@pytest.fixture
def recorded_sleeps(monkeypatch):
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    monkeypatch.setattr(pacing.asyncio, "sleep", fake_sleep)
    return sleeps


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_fixed_delay_sleeps_every_time(recorded_sleeps):
    pacer = FixedDelayPacer(0.2)

    await pacer.wait()
    await pacer.wait()

    assert recorded_sleeps == [0.2, 0.2]


def test_fixed_delay_rejects_negative():
    with pytest.raises(ValueError):
        FixedDelayPacer(-1)


def test_as_pacer_wraps_numbers():
    assert isinstance(as_pacer(0.5), FixedDelayPacer)
    assert as_pacer(2).delay == 2.0

    existing = FixedDelayPacer(1)
    assert as_pacer(existing) is existing


@pytest.mark.asyncio
async def test_token_bucket_allows_burst_then_waits(recorded_sleeps):
    clock = FakeClock()
    pacer = TokenBucketPacer(rate=5, capacity=2, clock=clock)

    await pacer.wait()
    await pacer.wait()
    assert recorded_sleeps == []

    await pacer.wait()
    assert recorded_sleeps == [pytest.approx(0.2)]


@pytest.mark.asyncio
async def test_token_bucket_refills_over_time(recorded_sleeps):
    clock = FakeClock()
    pacer = TokenBucketPacer(rate=2, capacity=1, clock=clock)

    await pacer.wait()
    clock.now += 0.5
    await pacer.wait()

    assert recorded_sleeps == []


def test_token_bucket_validates_arguments():
    with pytest.raises(ValueError):
        TokenBucketPacer(rate=0)
    with pytest.raises(ValueError):
        TokenBucketPacer(rate=1, capacity=0.5)
