"""
SiteList Backend: Request Logging Middleware
===============================================

What:  One access log line per request: method, path, status, duration.
Why:   uvicorn's access log has no request id and no duration.
How:   Times the downstream call and logs on the "sitelist.access" logger,
       choosing the level from the status class.

What we log vs what we DON'T log:
    ✅ method, path, status, duration, client IP, request id
    ❌ request bodies (website records are caller-defined and may hold anything)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from sitelist.middleware.request_id import request_id_var

logger = logging.getLogger("sitelist.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO.
    Preflight (OPTIONS) requests are logged at DEBUG; browsers send one before
    most API calls and they carry no information.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        elif method == "OPTIONS":
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
