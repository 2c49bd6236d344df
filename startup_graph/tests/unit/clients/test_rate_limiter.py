"""
Unit tests for the per-source rate limiter.
"""
import asyncio

import pytest

from startup_graph.clients.base_client import RateLimiter


@pytest.mark.asyncio
async def test_first_request_is_not_delayed(fake_clock, recording_sleep):
    limiter = RateLimiter(100, clock=fake_clock, sleep=recording_sleep)

    await limiter.wait()

    assert recording_sleep.calls == []


@pytest.mark.asyncio
async def test_back_to_back_requests_wait_for_remaining_delay(fake_clock, recording_sleep):
    limiter = RateLimiter(100, clock=fake_clock, sleep=recording_sleep)

    await limiter.wait()
    fake_clock.advance(0.040)
    await limiter.wait()

    assert recording_sleep.calls == [pytest.approx(0.060)]


@pytest.mark.asyncio
async def test_no_wait_once_delay_has_passed(fake_clock, recording_sleep):
    limiter = RateLimiter(100, clock=fake_clock, sleep=recording_sleep)

    await limiter.wait()
    fake_clock.advance(0.5)
    await limiter.wait()

    assert recording_sleep.calls == []


@pytest.mark.asyncio
async def test_concurrent_callers_are_spaced(fake_clock, recording_sleep):
    """Concurrent callers are admitted one at a time, each a full delay apart."""
    limiter = RateLimiter(100, clock=fake_clock, sleep=recording_sleep)

    await asyncio.gather(*(limiter.wait() for _ in range(3)))

    assert recording_sleep.calls == [pytest.approx(0.1), pytest.approx(0.1)]
