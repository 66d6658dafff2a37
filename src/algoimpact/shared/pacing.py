# src/algoimpact/shared/pacing.py
"""
Request Pacing - Spacing Out Indexer Round-Trips

The balance impact core never retries or throttles; callers driving many
sequential lookups pace themselves. This module provides the pacer used by the
streaming driver between pages of transaction history.

Files that USE this module:
- algoimpact.app (waits between search pages)

Files that this module USES:
- None (pure utility implementation)
"""
import asyncio
import logging
import time
from typing import Optional

log = logging.getLogger(__name__)


class Pacer:
    """Keeps at least `min_interval` seconds between consecutive `wait()` returns."""

    def __init__(self, min_interval: float):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._last: Optional[float] = None

    def remaining(self) -> float:
        """
        Seconds left before the next call is allowed.

        Returns:
            0.0 if the next call may proceed immediately
        """
        if self._last is None:
            return 0.0
        elapsed = time.monotonic() - self._last
        return max(0.0, self.min_interval - elapsed)

    async def wait(self) -> None:
        """Sleep until the interval since the previous call has passed."""
        delay = self.remaining()
        if delay > 0:
            log.debug("Pacing: sleeping %.3fs", delay)
            await asyncio.sleep(delay)
        self._last = time.monotonic()
