import time
import uuid
import logging
from collections import defaultdict
from typing import Callable, Optional, Tuple
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from .config import settings
from .request_context import set_request_id

logger = logging.getLogger("hireperfect.middleware")

# In-memory rate limit: key -> list of request timestamps (pruned to last window_sec)
_rate_limit_store = defaultdict(list)
_RATE_WINDOW_SEC = 60
_RUNTIME_PREFIX = "/api/v1/assessment/"

# (path suffix, bucket, per-window limit) for the attempt runtime endpoints
_RATE_LIMITED_ROUTES: Tuple[Tuple[str, str, Callable[[], int]], ...] = (
    ("/proctor-event", "proctor", lambda: settings.RATE_LIMIT_PROCTOR_EVENTS_PER_MINUTE),
    ("/answer", "answer", lambda: settings.RATE_LIMIT_ANSWERS_PER_MINUTE),
    ("/start", "start", lambda: 20),
)


def _get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _match_route(path: str) -> Optional[Tuple[str, int]]:
    """Return (bucket, limit) for a rate-limited runtime path, else None."""
    if not path.startswith(_RUNTIME_PREFIX):
        return None
    for suffix, bucket, limit in _RATE_LIMITED_ROUTES:
        if path.endswith(suffix):
            return bucket, limit()
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window 429 per client IP on start, answer and proctor-event."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        matched = _match_route(path)
        if matched is None:
            return await call_next(request)

        bucket, max_allowed = matched
        key = f"{bucket}:{_get_client_ip(request)}"
        now = time.time()
        window_start = now - _RATE_WINDOW_SEC
        store = _rate_limit_store[key]
        store[:] = [t for t in store if t > window_start]
        if len(store) >= max_allowed:
            logger.warning("Rate limit exceeded key=%s path=%s", key, path)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please try again later."},
                headers={"Retry-After": str(_RATE_WINDOW_SEC)},
            )
        store.append(now)
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag the request with an id, then log method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)
        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        if request.url.path != "/health":
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "method=%s path=%s status=%d duration=%.1fms ip=%s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                _get_client_ip(request),
                extra={"request_id": request_id},
            )

        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Request-ID"] = request_id
        return response
