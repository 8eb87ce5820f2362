import threading
import time
from typing import Callable, Dict, Tuple

from sherpamomo.core.errors import RateLimited


class FixedWindowRateLimiter:
    """In-process fixed-window counter keyed by an arbitrary string (phone, IP)"""

    def __init__(self, limit: int, window_seconds: int, message: str,
                 clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (window start, hits in window)
        self._hits: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> None:
        """Count one hit for key; raise RateLimited once the window is full"""
        now = self._clock()
        with self._lock:
            started, count = self._hits.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            if count >= self.limit:
                raise RateLimited(self.message)
            self._hits[key] = (started, count + 1)
            self._prune(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def _prune(self, now: float) -> None:
        stale = [k for k, (started, _) in self._hits.items() if now - started >= self.window_seconds]
        for key in stale:
            del self._hits[key]
