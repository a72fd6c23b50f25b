"""
SiteList Backend: Request ID Middleware
==========================================

What:  Assigns a short correlation id to each request.
Why:   Every log line written while handling one request (access line, store
       errors, exception handlers) can be tied together by that id.
How:   Stores the id in a ContextVar and on request.state. The id is echoed
       as X-Request-ID only when EXPOSE_REQUEST_ID is on, since by default
       responses carry nothing beyond CORS and content-type headers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from sitelist.config import settings

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate an 8-character id
        3. Store it in request_id_var and request.state.request_id
        4. Optionally copy it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        if settings.expose_request_id:
            response.headers["X-Request-ID"] = rid
        return response
