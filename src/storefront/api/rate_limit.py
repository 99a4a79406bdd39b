"""Fixed-window request limiting keyed by client address."""

import threading
import time

from fastapi import HTTPException, Request

from storefront import config

TOO_MANY_REQUESTS = "Too many requests. Please try again later."


class FixedWindowRateLimiter:
    """At most ``limit`` hits per key within each ``window_seconds`` window.

    Only the current window is tracked; counters from earlier windows are
    dropped as soon as a new window starts.
    """

    def __init__(self, limit: int, window_seconds: int = 60) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._windows: dict[str, tuple[int, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Count one request for ``key``; False once the window is used up."""
        window = int(time.time() // self.window_seconds)
        with self._lock:
            self._evict_before(window)
            _, count = self._windows.get(key, (window, 0))
            count += 1
            self._windows[key] = (window, count)
        return count <= self.limit

    def _evict_before(self, window: int) -> None:
        stale = [key for key, (key_window, _) in self._windows.items() if key_window < window]
        for key in stale:
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


global_limiter = FixedWindowRateLimiter(config.RATE_LIMIT_PER_MINUTE)
auth_limiter = FixedWindowRateLimiter(config.AUTH_RATE_LIMIT_PER_MINUTE)


def client_key(request: Request) -> str:
    """The caller's address.

    ``X-Forwarded-For`` is only honoured when the direct peer is one of
    ``config.TRUSTED_PROXIES``; anyone else could write any address there.
    """
    peer = request.client.host if request.client else "unknown"
    if peer in config.TRUSTED_PROXIES:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return peer


async def limit_auth_requests(request: Request) -> None:
    if not auth_limiter.hit(client_key(request)):
        raise HTTPException(status_code=429, detail=TOO_MANY_REQUESTS)


def reset_rate_limits() -> None:
    global_limiter.reset()
    auth_limiter.reset()
