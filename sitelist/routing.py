"""
SiteList Backend: Request Classification
===========================================

What:  Decides, from method and path alone, which handler a request goes to.
Why:   The service has one entry route; keeping the decision a pure function
       makes the precedence rules easy to read and to test without HTTP.

Precedence (first match wins):
    1. OPTIONS, any path                                  → PREFLIGHT
    2. POST and (path ends "/<script>" or starts prefix)  → API
    3. any other method under the API prefix              → METHOD_NOT_ALLOWED
    4. path ends .html .css .js .png .jpg .svg            → ASSET
    5. everything else, including "/"                     → INDEX

Note that GET /worker.js is an ASSET (rule 4), not an API call.
"""

from enum import Enum
from typing import Dict, Optional

from sitelist.config import Settings, settings as default_settings

ASSET_SUFFIXES = (".html", ".css", ".js", ".png", ".jpg", ".svg")


class RouteKind(str, Enum):
    PREFLIGHT = "preflight"
    API = "api"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    ASSET = "asset"
    INDEX = "index"


def classify_request(method: str, path: str, config: Optional[Settings] = None) -> RouteKind:
    """Classify a request by HTTP method and URL path."""
    config = config or default_settings
    method = method.upper()

    if method == "OPTIONS":
        return RouteKind.PREFLIGHT

    under_api_prefix = path.startswith(config.api_prefix)
    if method == "POST" and (path.endswith("/" + config.api_script_name) or under_api_prefix):
        return RouteKind.API
    if under_api_prefix:
        return RouteKind.METHOD_NOT_ALLOWED

    if path.endswith(ASSET_SUFFIXES):
        return RouteKind.ASSET
    return RouteKind.INDEX


def cors_headers(config: Optional[Settings] = None) -> Dict[str, str]:
    """
    Cross-origin headers attached to every API-path response, errors included.

    Sent unconditionally (Starlette's CORSMiddleware only answers requests
    that carry an Origin header).
    """
    config = config or default_settings
    return {
        "Access-Control-Allow-Origin": config.cors_allow_origin,
        "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
