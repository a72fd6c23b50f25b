"""
SiteList Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the two request families
       (API actions and static assets) plus the store layer.
Why:   Services raise typed errors; global handlers registered in main.py turn
       them into the fixed plain-text responses clients expect. Causes are
       logged server-side and never reach the response body.
How:   Each exception carries a message and optional context dict, plus the
       HTTP status it maps to.

Exception Hierarchy:
    SiteListError (base)
    ├── ApiError                        → plain text + CORS headers
    │   ├── InvalidActionError          → 400 "Invalid action"
    │   ├── InvalidIndexError           → 400 "Invalid index"
    │   ├── MethodNotAllowedError       → 405 "Method not allowed"
    │   └── RequestProcessingError      → 500 generic, per operation
    ├── AssetError                      → plain text, no CORS
    │   ├── AssetNotFoundError          → 404 "File not found"
    │   └── AssetServeError             → 500 "Error serving file"
    └── StoreError                      → never rendered directly
        └── CollectionCorruptError      → stored value is not a JSON array
"""

from typing import Any, Dict, Optional


class SiteListError(Exception):
    """
    Base exception for all SiteList application errors.

    Attributes:
        message:  Client-facing text (safe to return in a response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# API path errors: rendered with CORS headers
# ══════════════════════════════════════════════════════════════════════════


class ApiError(SiteListError):
    """Any error produced while handling a request on the API path."""


class InvalidActionError(ApiError):
    """
    The body parsed as JSON but did not name a known action.

    Covers a missing `action`, an unknown value, and bodies that are JSON but
    not an object (an array or a bare string has no action to read).
    """

    status_code = 400

    def __init__(self, action: Any = None, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["action"] = action
        super().__init__(message="Invalid action", context=ctx)


class InvalidIndexError(ApiError):
    """`update` was given an index outside [0, len) or not an integer."""

    status_code = 400

    def __init__(self, index: Any = None, length: Optional[int] = None):
        super().__init__(
            message="Invalid index",
            context={"index": index, "length": length},
        )


class MethodNotAllowedError(ApiError):
    status_code = 405

    def __init__(self, method: str = "", path: str = ""):
        super().__init__(
            message="Method not allowed",
            context={"method": method, "path": path},
        )


class RequestProcessingError(ApiError):
    """
    Operational failure while processing an API request.

    The message is generic on purpose: a failed read, a failed write and a
    malformed body all surface as the same status. The underlying cause is
    chained (`raise ... from exc`) and logged by the handler.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Error processing request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Static asset errors: rendered without CORS headers
# ══════════════════════════════════════════════════════════════════════════


class AssetError(SiteListError):
    """Any error produced while serving a static asset."""


class AssetNotFoundError(AssetError):
    status_code = 404

    def __init__(self, key: str = ""):
        super().__init__(message="File not found", context={"key": key})


class AssetServeError(AssetError):
    status_code = 500

    def __init__(self, key: str = "", context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["key"] = key
        super().__init__(message="Error serving file", context=ctx)


# ══════════════════════════════════════════════════════════════════════════
# Store errors: always wrapped by a service before reaching a handler
# ══════════════════════════════════════════════════════════════════════════


class StoreError(SiteListError):
    """
    Raised when a key-value backend cannot complete a read or write.

    Backends translate their native failures (SQLAlchemyError, OSError) into
    this type so services only have to know one error shape.
    """

    def __init__(
        self,
        message: str = "Key-value store operation failed",
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if key is not None:
            ctx["key"] = key
        super().__init__(message=message, context=ctx)
        self.key = key


class CollectionCorruptError(StoreError):
    """The collection key holds something that does not decode to a JSON array."""

    def __init__(self, key: str, found: str):
        super().__init__(
            message="Stored collection is not a JSON array",
            key=key,
            context={"found": found},
        )
