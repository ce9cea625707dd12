"""Write throttling for coach-facing endpoints.

Reads are never limited. Every POST, PUT and DELETE shares one limit string
per client so a stuck timer loop in the browser cannot flood the database
with session snapshots.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def write_limit() -> str:
    return get_settings().rate_limit_writes


def client_key(request: Request) -> str:
    """Throttle per client address; the first X-Forwarded-For hop wins behind a proxy."""
    if get_settings().rate_limit_trust_forwarded:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=client_key,
        storage_uri=settings.rate_limit_storage_uri,
        enabled=settings.rate_limit_enabled and not settings.is_test,
        headers_enabled=True,
    )


limiter = build_limiter(get_settings())


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    limit = str(exc.limit.limit) if isinstance(exc, RateLimitExceeded) else None
    logger.warning(
        "write_rate_limited",
        extra={
            "method": request.method,
            "path": request.url.path,
            "client_key": client_key(request),
            "limit": limit,
        },
    )
    response = JSONResponse(
        status_code=429,
        content={
            "detail": {
                "code": "RATE_LIMITED",
                "message": "Too many writes, slow down",
                "limit": limit,
            }
        },
    )
    # Adds Retry-After and the X-RateLimit-* headers.
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
