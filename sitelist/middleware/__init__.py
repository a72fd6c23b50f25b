"""
SiteList Backend: Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → Gateway route

    Request ID runs first so the access line written by the logging
    middleware carries the id.

CORS is not a middleware here: the gateway and the API exception handlers
attach the headers themselves (see routing.cors_headers).
"""
