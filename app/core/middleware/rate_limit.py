from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from app.api.responses import error_response
from app.core.metrics import rate_limit_rejections_total, rate_limit_tracked_clients
from app.core.rate_limit import RateLimitStore
from app.domain.exceptions import RateLimitExceededError

logger = logging.getLogger("app.rate_limit")


def client_identity(*, request: Request, trust_proxy: bool) -> str:
    """Return the key used to bucket rate-limit counters."""

    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed `max_requests` within the sliding window with a 429."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        store: RateLimitStore,
        trust_proxy: bool = False,
        exempt_paths: Iterable[str] = ("/metrics",),
    ):
        super().__init__(app)
        self._store = store
        self._trust_proxy = trust_proxy
        self._exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        key = client_identity(request=request, trust_proxy=self._trust_proxy)
        decision = self._store.hit(key)
        rate_limit_tracked_clients.set(len(self._store))
        reset_in = math.ceil(decision.reset_after)

        if not decision.allowed:
            exc = RateLimitExceededError(
                retry_after=datetime.now(tz=UTC) + timedelta(seconds=decision.reset_after)
            )
            rate_limit_rejections_total.inc()
            logger.info(
                "Rate limit exceeded",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "http_method": request.method,
                    "request_path": request.url.path,
                    "status_code": exc.status_code,
                    "error": exc.error_kind,
                    "retry_after": exc.retry_after.isoformat(),
                },
            )
            response = error_response(
                status_code=exc.status_code,
                message=exc.message,
                retryAfter=exc.retry_after.isoformat(),
            )
            response.headers["Retry-After"] = str(reset_in)
        else:
            response = await call_next(request)

        response.headers["RateLimit-Limit"] = str(decision.limit)
        response.headers["RateLimit-Remaining"] = str(decision.remaining)
        response.headers["RateLimit-Reset"] = str(reset_in)
        return response
