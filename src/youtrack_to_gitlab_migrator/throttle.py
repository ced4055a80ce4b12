"""
Pacing of GitLab API calls.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class Throttle:
    """Token bucket rate limiter holding at most one token.

    A token is added every ``interval`` seconds. ``acquire()`` takes one,
    sleeping until it is available, so consecutive calls are at least
    ``interval`` seconds apart. The bucket starts full.

    The clock and sleep functions can be replaced, e.g. in tests.
    """

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval < 0:
            msg = f"Throttle interval must not be negative: {interval}"
            raise ValueError(msg)
        self.interval: float = interval
        self._clock: Callable[[], float] = clock
        self._sleep: Callable[[float], None] = sleep
        self._tokens: float = 1.0
        self._last_update: float = clock()

    def _refill(self) -> None:
        now = self._clock()
        if self.interval == 0:
            self._tokens = 1.0
        else:
            self._tokens = min(1.0, self._tokens + (now - self._last_update) / self.interval)
        self._last_update = now

    def acquire(self) -> None:
        """Block until a token is available and consume it."""
        self._refill()
        if self._tokens < 1.0:
            wait_time = (1.0 - self._tokens) * self.interval
            logger.debug(f"Throttling: waiting {wait_time:.2f} seconds")
            self._sleep(wait_time)
            self._refill()
            # The sleep may return marginally early; the wait was for a full token.
            self._tokens = max(self._tokens, 1.0)
        self._tokens -= 1.0
