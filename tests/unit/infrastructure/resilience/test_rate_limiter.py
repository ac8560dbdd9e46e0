import asyncio

import pytest

from deelmcp.infrastructure.resilience.rate_limiter import RateLimiter

@pytest.fixture
def limiter(clock):
    return RateLimiter(max_requests=5, time_window=1.0, margin=0.01, clock=clock, sleep=clock.sleep)

def test_first_requests_under_cap_are_not_delayed(limiter, clock):
    async def scenario():
        for _ in range(5):
            await limiter.acquire()

    asyncio.run(scenario())
    assert clock.sleeps == []
    assert len(limiter.timestamps) == 5

def test_sixth_request_waits_for_oldest_to_leave_window(limiter, clock):
    start = clock.now

    async def scenario():
        for _ in range(6):
            await limiter.acquire()

    asyncio.run(scenario())
    assert clock.sleeps == [pytest.approx(1.01)]
    assert limiter.timestamps[-1] == pytest.approx(start + 1.01)

def test_wait_accounts_for_elapsed_time(limiter, clock):
    async def scenario():
        for _ in range(5):
            await limiter.acquire()
        clock.advance(0.4)
        await limiter.acquire()

    asyncio.run(scenario())
    assert clock.sleeps == [pytest.approx(0.61)]

def test_no_more_than_cap_within_any_window(limiter, clock):
    grants = []

    async def worker():
        await limiter.acquire()
        grants.append(clock.now)

    async def scenario():
        await asyncio.gather(*(worker() for _ in range(23)))

    asyncio.run(scenario())
    assert len(grants) == 23
    grants.sort()
    for i, granted_at in enumerate(grants):
        in_window = [t for t in grants[i:] if t - granted_at < 1.0]
        assert len(in_window) <= 5

def test_timestamps_outside_window_are_pruned(limiter, clock):
    async def scenario():
        for _ in range(5):
            await limiter.acquire()
        clock.advance(1.0)
        await limiter.acquire()

    asyncio.run(scenario())
    assert clock.sleeps == []
    assert len(limiter.timestamps) == 1

def test_get_wait_time_does_not_consume_a_slot(limiter, clock):
    async def scenario():
        for _ in range(5):
            await limiter.acquire()
        clock.advance(0.25)
        return await limiter.get_wait_time(), await limiter.get_wait_time()

    first, second = asyncio.run(scenario())
    assert first == pytest.approx(0.76)
    assert second == pytest.approx(0.76)
    assert len(limiter.timestamps) == 5

def test_get_wait_time_is_zero_under_cap(limiter):
    assert asyncio.run(limiter.get_wait_time()) == 0.0

def test_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        RateLimiter(max_requests=0)
