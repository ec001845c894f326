"""In-process rate-limit counters.

Counters are a sliding log of hit timestamps per client key. They live in memory
only and are lost on restart. The store is created by the application factory and
handed to the middleware explicitly; nothing here is module-global.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    # Epoch seconds (store clock) at which the oldest counted hit leaves the window.
    reset_at: float
    # Seconds from now until `reset_at`.
    reset_after: float


class RateLimitStore(Protocol):
    def hit(self, key: str) -> RateLimitDecision: ...

    def __len__(self) -> int: ...


class InMemoryRateLimitStore:
    """Sliding-window counter store keyed by client identity.

    `hit()` is an atomic check-and-increment: a request is only recorded when it
    is allowed, so once the oldest hit ages out the client can proceed again.
    """

    def __init__(
        self,
        *,
        window_seconds: float,
        max_requests: int,
        clock: Callable[[], float] = time.time,
    ):
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._window = float(window_seconds)
        self._max = int(max_requests)
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + self._window

    @property
    def window_seconds(self) -> float:
        return self._window

    @property
    def max_requests(self) -> int:
        return self._max

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)

            hits = self._hits.setdefault(key, deque())
            self._expire(hits, now)

            allowed = len(hits) < self._max
            if allowed:
                hits.append(now)

            reset_at = hits[0] + self._window
            return RateLimitDecision(
                allowed=allowed,
                limit=self._max,
                remaining=self._max - len(hits),
                reset_at=reset_at,
                reset_after=max(0.0, reset_at - now),
            )

    def __len__(self) -> int:
        # Number of client keys currently tracked.
        with self._lock:
            return len(self._hits)

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self._window
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        # Drop keys whose hits have all aged out; caller holds the lock.
        for key in list(self._hits):
            hits = self._hits[key]
            self._expire(hits, now)
            if not hits:
                del self._hits[key]
        self._next_sweep = now + self._window
