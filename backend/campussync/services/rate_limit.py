from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
import logging
import time

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """Per-key request timestamps kept for one window; process-local."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str, *, limit: int, window_seconds: int) -> int | None:
        """Record a request; returns seconds to wait when the key is over its limit."""
        now = time.monotonic()
        horizon = now - window_seconds
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] < horizon:
                hits.popleft()
            if len(hits) >= limit:
                return max(1, int(hits[0] + window_seconds - now))
            hits.append(now)
        return None

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter = SlidingWindowLimiter()


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(
    *,
    request: Request,
    scope: str,
    limit: int,
    window_seconds: int,
    identity: str | None = None,
) -> None:
    key = f"{scope}|{client_address(request)}|{(identity or '').strip().lower()}"
    retry_after = _limiter.hit(key, limit=limit, window_seconds=window_seconds)
    if retry_after is None:
        return
    logger.warning("Rate limit exceeded for %s", key)
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Too many requests. Try again in {retry_after} second(s).",
        headers={"Retry-After": str(retry_after)},
    )


def clear_rate_limiter() -> None:
    _limiter.reset()
