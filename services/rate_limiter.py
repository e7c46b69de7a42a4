"""Fixed-window, per-caller request rate limiting.

Each caller key owns one window: a start time and the number of requests
seen since then. A request arriving ``window_seconds`` or more after the
window started opens a fresh window with a count of one. Windows are not
sliding, so a burst straddling a boundary may see up to twice the limit.

All window mutations happen under one lock so that concurrent requests for the
same key cannot both read a stale count. State lives in process memory only.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict

from utils import create_contextual_logger, mask_caller_key, next_minute_epoch, utc_now
from .exceptions import RateLimitExceeded


@dataclass
class RateWindow:
    window_start: datetime
    count: int


@dataclass(frozen=True)
class RateLimitStatus:
    """What the response headers report for one admitted request."""

    limit: int
    remaining: int
    reset_at: int


class RateLimiter:
    """In-memory fixed-window limiter keyed by caller."""

    def __init__(
        self,
        window_seconds: int = 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.window = timedelta(seconds=window_seconds)
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self.logger = create_contextual_logger(__name__, service="rate_limiter")

    def _is_stale(self, window: RateWindow, now: datetime) -> bool:
        return now - window.window_start >= self.window

    def admit(self, caller_key: str, limit: int) -> bool:
        """Count one request and report whether it fits in the current window."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(caller_key)
            if window is None or self._is_stale(window, now):
                window = RateWindow(window_start=now, count=1)
                self._windows[caller_key] = window
            else:
                window.count += 1
            count = window.count
        return count <= limit

    def remaining(self, caller_key: str, limit: int) -> int:
        now = self._clock()
        with self._lock:
            window = self._windows.get(caller_key)
            if window is None or self._is_stale(window, now):
                return limit
            return max(0, limit - window.count)

    def reset_time(self) -> int:
        """Unix timestamp of the next whole-minute boundary."""
        return next_minute_epoch(self._clock())

    def enforce(self, caller_key: str, limit: int) -> RateLimitStatus:
        """Admit a request or raise ``RateLimitExceeded``."""
        reset_at = self.reset_time()
        if not self.admit(caller_key, limit):
            self.logger.warning(
                "Rate limit exceeded",
                caller_key=mask_caller_key(caller_key),
                limit=limit,
            )
            raise RateLimitExceeded(limit=limit, reset_at=reset_at)
        return RateLimitStatus(
            limit=limit,
            remaining=self.remaining(caller_key, limit),
            reset_at=reset_at,
        )

    def prune_stale(self) -> int:
        """Drop windows that have expired. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [key for key, window in self._windows.items() if self._is_stale(window, now)]
            for key in stale:
                del self._windows[key]
        if stale:
            self.logger.debug("Pruned stale rate windows", pruned=len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._windows)
