"""Fixed-Window Rate Limiter — per-client request budgets held in process memory.

Invariants:
    - Counters are keyed by client identifier (usually the remote address)
    - A window opens on a key's first hit and lasts window_seconds
    - Keys whose window has ended are evicted, at most one sweep per window
    - State is process-local and lost on restart
    - The clock is injectable so tests never sleep
"""

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single hit."""
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the window closes


class FixedWindowRateLimiter:
    """Counts hits per key inside a fixed time window."""

    def __init__(
        self, max_requests: int, window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str) -> RateLimitDecision:
        """Register one request for `key` and report whether it may proceed."""
        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._evict_expired(now)
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        reset_after = max(0, math.ceil(started + self.window_seconds - now))
        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when none is given."""
        if key is None:
            self._windows.clear()
        else:
            self._windows.pop(key, None)
