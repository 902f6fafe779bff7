import logging
import time
import uuid
from collections import defaultdict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .logging import set_request_id

logger = logging.getLogger("pcbvalues.middleware")

# In-memory rate limit: key -> list of request timestamps (pruned to last window_sec)
_rate_limit_store = defaultdict(list)
_RATE_WINDOW_SEC = 60
_SUBMIT_MAX_PER_WINDOW = 30


def _get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _rate_limit_key(ip: str, method: str, path: str) -> str:
    # Only writes to the score store are throttled; reads are cheap.
    if method in ("POST", "PATCH") and path.rstrip("/").startswith("/api/v1/scores"):
        return f"scores:{ip}"
    return ""


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Return 429 when one IP submits scores too often."""

    async def dispatch(self, request: Request, call_next):
        ip = _get_client_ip(request)
        path = request.url.path
        key = _rate_limit_key(ip, request.method, path)
        if not key:
            return await call_next(request)

        now = time.time()
        window_start = now - _RATE_WINDOW_SEC
        store = _rate_limit_store[key]
        store[:] = [t for t in store if t > window_start]
        if len(store) >= _SUBMIT_MAX_PER_WINDOW:
            logger.warning("Rate limit exceeded key=%s path=%s", key, path)
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": "Too many submissions. Please try again later."},
            )
        store.append(now)
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status, and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)
        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000

        if request.url.path != "/health":
            logger.info(
                "method=%s path=%s status=%d duration=%.1fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )

        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Request-ID"] = request_id

        return response
