"""Tests for request spacing."""

import asyncio

import pytest
from fakes import FakeClock

from mtgtracker.models.errors import RateLimitInternal
from mtgtracker.services.rate_limiter import RateLimiter


class TestReserve:
    """Tests for the synchronous slot claim."""

    def test_first_request_goes_immediately(self, fake_clock: FakeClock) -> None:
        """The very first permit needs no wait."""
        limiter = RateLimiter(0.1, clock=fake_clock)

        assert limiter.reserve() == 0
        assert limiter.last_permit == 100.0

    def test_back_to_back_requests_are_spaced(self, fake_clock: FakeClock) -> None:
        """A second permit at the same instant waits the full delay."""
        limiter = RateLimiter(0.1, clock=fake_clock)

        limiter.reserve()
        assert limiter.reserve() == pytest.approx(0.1)

    def test_no_wait_after_idle_period(self, fake_clock: FakeClock) -> None:
        """Requests after a long pause go straight through."""
        limiter = RateLimiter(0.1, clock=fake_clock)

        limiter.reserve()
        fake_clock.now += 5
        assert limiter.reserve() == 0
        assert limiter.last_permit == 105.0

    def test_partial_wait(self, fake_clock: FakeClock) -> None:
        """Only the remainder of the delay is waited."""
        limiter = RateLimiter(0.1, clock=fake_clock)

        limiter.reserve()
        fake_clock.now += 0.04
        assert limiter.reserve() == pytest.approx(0.06)

    def test_queued_reservations_stack_up(self, fake_clock: FakeClock) -> None:
        """Each pending caller claims the slot after the previous claim."""
        limiter = RateLimiter(0.1, clock=fake_clock)

        delays = [limiter.reserve() for _ in range(4)]

        assert delays == pytest.approx([0.0, 0.1, 0.2, 0.3])

    def test_rejects_negative_delay(self) -> None:
        """A negative minimum delay is a configuration error."""
        with pytest.raises(ValueError, match="min_delay"):
            RateLimiter(-0.1)


class TestWait:
    """Tests for the async wait."""

    @pytest.mark.asyncio
    async def test_sleeps_for_reserved_delay(self, fake_clock: FakeClock) -> None:
        """wait() sleeps exactly as long as its slot requires."""
        limiter = RateLimiter(0.1, clock=fake_clock, sleep=fake_clock.sleep)

        await limiter.wait()
        await limiter.wait()
        await limiter.wait()

        assert fake_clock.sleeps == pytest.approx([0.1, 0.1])

    @pytest.mark.asyncio
    async def test_concurrent_waits_never_share_a_slot(self, fake_clock: FakeClock) -> None:
        """Callers racing for a permit each get their own slot."""
        slept: list[float] = []

        async def sleep(seconds: float) -> None:
            slept.append(seconds)
            await asyncio.sleep(0)

        limiter = RateLimiter(0.1, clock=fake_clock, sleep=sleep)

        await asyncio.gather(*(limiter.wait() for _ in range(5)))

        # The clock never moved, so waits grow by one delay per caller
        assert sorted(slept) == pytest.approx([0.1, 0.2, 0.3, 0.4])
        assert limiter.last_permit == pytest.approx(100.4)

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self) -> None:
        """With the real clock, caller k starts at least k delays after the first."""
        loop = asyncio.get_running_loop()
        limiter = RateLimiter(0.02)
        granted: list[float] = []

        async def request() -> None:
            await limiter.wait()
            granted.append(loop.time())

        await asyncio.gather(*(request() for _ in range(4)))

        # Permits are exactly min_delay apart; a caller never starts before its permit
        granted.sort()
        first = granted[0]
        for k, started in enumerate(granted):
            assert started - first >= k * 0.019

    @pytest.mark.asyncio
    async def test_negative_delay_is_internal_error(self) -> None:
        """A clock running backwards past a permit is reported, not slept on."""
        limiter = RateLimiter(0.1)
        limiter.reserve = lambda: -1.0  # type: ignore[method-assign]

        with pytest.raises(RateLimitInternal):
            await limiter.wait()
