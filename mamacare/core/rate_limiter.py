from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import Request

from .config import Settings
from .errors import RateLimited

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window request counter per client key."""

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._next_sweep = clock() + window_seconds
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateLimiter":
        return cls(settings.rate_limit_max, settings.rate_limit_window_seconds)

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._drop_expired(now)
                self._next_sweep = now + self.window_seconds
            count, reset = self._hits.get(key, (0, now + self.window_seconds))
            if now >= reset:
                count = 0
                reset = now + self.window_seconds
            count += 1
            self._hits[key] = (count, reset)
            return count <= self.limit

    def _drop_expired(self, now: float) -> None:
        for key in [k for k, (_count, reset) in self._hits.items() if now >= reset]:
            del self._hits[key]

    def retry_after(self, key: str) -> int:
        with self._lock:
            entry = self._hits.get(key)
        if not entry:
            return 0
        return max(0, math.ceil(entry[1] - self._clock()))

    def check(self, key: str) -> None:
        if not self.allow(key):
            logger.warning("Rate limit exceeded for %s", key)
            raise RateLimited(retry_after=self.retry_after(key))


def client_key(request: Request, *, trust_forwarded_for: bool = False) -> str:
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request) -> None:
    """Route dependency for abuse-prone endpoints."""
    limiter: RateLimiter = request.app.state.rate_limiter
    settings: Settings = request.app.state.settings
    limiter.check(client_key(request, trust_forwarded_for=settings.trust_forwarded_for))
