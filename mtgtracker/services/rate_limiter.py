"""
Request spacing for the Scryfall API.

Scryfall asks clients to keep to roughly 10 requests per second, so every
catalog request first waits until at least ``min_delay`` seconds have passed
since the previous request was allowed through.

INVARIANT: Permits are at least ``min_delay`` apart, even when several
coroutines call ``wait()`` at once. The read of the last permit and the
write of the new one happen in a single synchronous step (no await in
between), so a caller still sleeping towards its slot has already claimed it.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from mtgtracker.config import settings
from mtgtracker.models.errors import RateLimitInternal

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Enforces a minimum spacing between outgoing requests."""

    def __init__(
        self,
        min_delay: float = 0.1,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Args:
            min_delay: Minimum seconds between two permits
            clock: Monotonic time source (injectable for tests)
            sleep: Coroutine used to suspend the caller (injectable for tests)
        """
        if min_delay < 0:
            raise ValueError(f"min_delay must be >= 0, got {min_delay}")
        self.min_delay = min_delay
        self._clock = clock
        self._sleep = sleep
        self._last_permit: float | None = None

    @property
    def last_permit(self) -> float | None:
        """Clock time of the most recently granted permit."""
        return self._last_permit

    def reserve(self) -> float:
        """
        Claim the next free slot.

        This is the atomic check-and-advance step and must stay free of awaits.

        Returns:
            Seconds the caller has to wait before its slot comes up.
        """
        now = self._clock()
        if self._last_permit is None:
            permit = now
        else:
            permit = max(now, self._last_permit + self.min_delay)
        self._last_permit = permit
        return permit - now

    async def wait(self) -> None:
        """Suspend until this caller's slot comes up."""
        delay = self.reserve()
        if delay < 0:
            raise RateLimitInternal(f"negative rate limit delay: {delay:.3f}s")
        if delay > 0:
            await self._sleep(delay)


# Process-wide limiter shared by every catalog client that isn't given its own
default_rate_limiter = RateLimiter(settings.rate_limit_delay)
