"""Process-wide pacing for outbound HTTP requests."""

import asyncio
import time


DEFAULT_REQUEST_DELAY = 5


class RequestLimiter:
    """Hands out one permit per ``interval`` seconds across all callers.

    Every feed fetch and every download acquires a permit first, so the
    request rate stays bounded no matter how many feeds or downloads are in
    flight. Waiters are served in arrival order.
    """

    def __init__(self, interval: float = DEFAULT_REQUEST_DELAY):
        if interval < 0:
            raise ValueError("Request interval must not be negative")
        self.interval = interval
        self._lock = asyncio.Lock()
        self._next_permit: float | None = None

    async def acquire(self) -> None:
        """Wait until a permit is available and take it."""
        async with self._lock:
            if self._next_permit is not None:
                delay = self._next_permit - time.monotonic()
                while delay > 0:
                    await asyncio.sleep(delay)
                    delay = self._next_permit - time.monotonic()
            self._next_permit = time.monotonic() + self.interval
