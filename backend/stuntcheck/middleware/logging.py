"""
StuntCheck Gateway — Request Logging Middleware
=================================================

What:  One access log line per HTTP request, correlated by request ID.
How:   Measures the time spent in the rest of the chain and logs method,
       path, status, duration, caller and client IP.
When:  Inside RequestIDMiddleware, outside AuthenticationMiddleware, so the
       request ID is already set and the resolved principal is visible once
       the response comes back.

Log line:
    POST /api/predictions 201 412.3ms [a1b2c3d4] user=3f2a... from 10.0.0.7

Never logged: request bodies (passwords, child data) and the Authorization
header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from stuntcheck.middleware.request_id import request_id_var

logger = logging.getLogger("stuntcheck.access")

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status and duration."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        principal = getattr(request.state, "principal", None)
        user_id = principal.id if principal is not None else "-"
        rid = request_id_var.get("")

        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            user_id,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "user_id": user_id,
                "client_ip": client_ip,
            },
        )
        return response
