"""
Simple memory-based fixed-window rate limiter, keyed per client IP.
Limits are read from the application's settings on every request so they
can be tuned (or disabled) per deployment.
"""
import threading
import time
from typing import Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse

# In-memory storage: {"prefix:ip": (window_start, count)}
_rate_limit_store: Dict[str, Tuple[float, int]] = {}
_lock = threading.Lock()


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: int):
        super().__init__("Too many requests. Please try again later.")
        self.retry_after = retry_after


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


def hit(key: str, limit: int, window: int, now: float | None = None) -> None:
    """Count one request against ``key``; raise RateLimitExceeded over the limit."""
    now = time.time() if now is None else now
    with _lock:
        bucket = _rate_limit_store.get(key)
        if bucket is None or now - bucket[0] >= window:
            _rate_limit_store[key] = (now, 1)
            return

        window_start, count = bucket
        if count >= limit:
            raise RateLimitExceeded(max(0, int(window - (now - window_start)) + 1))
        _rate_limit_store[key] = (window_start, count + 1)


def reset() -> None:
    with _lock:
        _rate_limit_store.clear()


def rate_limit(key_prefix: str, limit_setting: str):
    """
    Dependency factory for rate limiting.
    Example: Depends(rate_limit("payment", "PAYMENT_RATE_LIMIT"))
    """
    def limiter(request: Request):
        settings = request.app.state.settings
        if not settings.RATE_LIMIT_ENABLED:
            return True
        hit(
            f"{key_prefix}:{client_ip(request)}",
            limit=getattr(settings, limit_setting),
            window=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        return True

    return limiter


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "error_code": "RATE_LIMITED"},
        headers={"Retry-After": str(exc.retry_after)},
    )
