from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import HTTPException, Request

# Drop expired windows once this many client keys are being tracked.
_PRUNE_THRESHOLD = 1024


@dataclass(frozen=True)
class RateLimitState:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int

    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class FixedWindowRateLimiter:
    """
    In-memory per-client request counter (client key -> window start, hits).
    """

    def __init__(self, limit: int, window_seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> RateLimitState:
        now = self._clock()
        if len(self._windows) > _PRUNE_THRESHOLD:
            self._prune(now)

        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0
        count += 1
        self._windows[key] = (start, count)

        return RateLimitState(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after=max(0, math.ceil(start + self.window_seconds - now)),
        )

    def _prune(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for k in expired:
            self._windows.pop(k, None)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


def contact_rate_limit(request: Request) -> None:
    limiter: FixedWindowRateLimiter = request.app.state.contact_limiter
    state = limiter.hit(client_key(request))
    if not state.allowed:
        raise HTTPException(
            status_code=429,
            detail="Too many contact attempts. Please try again later.",
            headers=state.headers(),
        )
