# webcrawler/crawler/throttle.py
"""
Per-domain politeness throttle.

Each domain keeps the timestamp of its last recorded fetch start. A caller for
that domain waits until a randomized delay, sampled from ``[base, 2*base]`` and
never shorter than the domain's last observed fetch duration, has passed since
that timestamp. Domains are independent: each one has its own lock.
"""
from __future__ import annotations

import asyncio
import random
import time
from collections import defaultdict
from typing import Callable, DefaultDict, Dict, Optional

from webcrawler.logger import logger

__all__ = ("PolitenessThrottle",)


class PolitenessThrottle:
    """Randomized minimum gap between fetches to the same domain."""

    def __init__(
        self,
        base_delay: float,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        self.base_delay = base_delay
        self._rng = rng or random.Random()
        self._clock = clock
        self._locks: DefaultDict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._last_start: Dict[str, float] = {}
        self._last_duration: Dict[str, float] = {}
        self._cancelled = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Wake every waiting caller; all later calls return ``False`` at once."""
        self._cancelled.set()

    def last_fetch(self, domain: str) -> Optional[float]:
        return self._last_start.get(domain)

    def record_duration(self, domain: str, duration: float) -> None:
        """Remember how long the last fetch of *domain* took."""
        self._last_duration[domain] = max(0.0, duration)

    def next_delay(self, domain: str) -> float:
        delay = self._rng.uniform(self.base_delay, 2 * self.base_delay) if self.base_delay else 0.0
        return max(delay, self._last_duration.get(domain, 0.0))

    async def acquire(self, domain: str) -> bool:
        """
        Suspend until *domain* may be fetched again, then record the fetch start.

        Returns ``True`` when the caller may proceed and ``False`` if the
        throttle was cancelled while (or before) waiting.
        """
        if self.cancelled:
            return False
        async with self._locks[domain]:
            if self.cancelled:
                return False
            last = self._last_start.get(domain)
            if last is not None:
                wait = last + self.next_delay(domain) - self._clock()
                if wait > 0:
                    logger.debug("Throttling %s for %.3f s", domain, wait)
                    try:
                        await asyncio.wait_for(self._cancelled.wait(), timeout=wait)
                    except asyncio.TimeoutError:
                        pass
                    else:
                        return False
            if self.cancelled:
                return False
            self._last_start[domain] = self._clock()
            return True
