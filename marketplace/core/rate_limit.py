"""In-memory sliding-window rate limiting for the HTTP layer."""

import asyncio
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, Optional

from fastapi import HTTPException, Request

from ..config.settings import get_settings


class SlidingWindowRateLimiter:
    """Allow ``times`` requests per ``seconds`` for each client key."""

    def __init__(self, times: int, seconds: int) -> None:
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._times = times
        self._seconds = seconds
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 60.0

    @staticmethod
    def client_key(request: Request, trusted_proxies: Optional[Iterable[str]] = None) -> str:
        """Peer address, or the first X-Forwarded-For entry when the peer is a trusted proxy."""
        peer = request.client.host if request.client else "unknown"
        if trusted_proxies is None:
            trusted_proxies = get_settings().trusted_proxies
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded and peer in trusted_proxies:
            return forwarded.split(",")[0].strip()
        return peer

    async def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        """
        Record a request for ``key``.

        Returns:
            None when allowed, otherwise seconds until the oldest hit expires
        """
        now = time.monotonic() if now is None else now
        async with self._lock:
            self._maybe_cleanup(now)
            window = self._hits[key]
            while window and now - window[0] >= self._seconds:
                window.popleft()
            if len(window) >= self._times:
                return max(1, int(self._seconds - (now - window[0])))
            window.append(now)
            return None

    def reset(self) -> None:
        self._hits.clear()

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        stale = [k for k, w in self._hits.items() if not w or now - w[-1] >= self._seconds]
        for k in stale:
            del self._hits[k]
        self._last_cleanup = now

    async def __call__(self, request: Request) -> None:
        if not get_settings().rate_limit_enabled:
            return
        retry_after = await self.hit(self.client_key(request))
        if retry_after is not None:
            raise HTTPException(
                status_code=429,
                detail="Too many requests, please try again later.",
                headers={"Retry-After": str(retry_after)},
            )


_settings = get_settings()
api_rate_limiter = SlidingWindowRateLimiter(_settings.rate_limit_requests, _settings.rate_limit_window_seconds)
