"""In-memory rate limiting for the authentication endpoints."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable

from tbs.core.exceptions import RateLimitExceededError

SWEEP_INTERVAL_SECONDS = 60


@dataclass(frozen=True)
class RateLimit:
    """At most ``limit`` hits per ``window_seconds``; ``message`` is shown when exceeded."""

    scope: str
    limit: int
    window_seconds: int
    message: str


class InMemoryRateLimiter:
    """
    Sliding-window rate limiter for single-node deployments.

    Keys whose window has emptied are dropped, either when next hit or by the
    periodic sweep, so caller-chosen keys cannot accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: Dict[str, Deque[float]] = {}
        self._windows: Dict[str, int] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def _prune(self, key: str, now: float) -> Deque[float]:
        bucket = self._buckets.get(key)
        if bucket is None:
            return deque()
        cutoff = now - self._windows[key]
        while bucket and bucket[0] <= cutoff:
            bucket.popleft()
        if not bucket:
            del self._buckets[key]
            del self._windows[key]
        return bucket

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < SWEEP_INTERVAL_SECONDS:
            return
        self._last_sweep = now
        for key in list(self._buckets):
            self._prune(key, now)

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            bucket = self._prune(key, now)
            if len(bucket) >= limit:
                return False
            bucket.append(now)
            self._buckets[key] = bucket
            self._windows[key] = window_seconds
            return True

    def enforce(self, subject: str, limits: Iterable[RateLimit]) -> None:
        """
        Record a hit for ``subject`` under every limit

        Raises:
            RateLimitExceededError: On the first limit already exhausted
        """
        for rule in limits:
            if not self.allow(f"{rule.scope}:{subject}", rule.limit, rule.window_seconds):
                raise RateLimitExceededError(rule.message)
