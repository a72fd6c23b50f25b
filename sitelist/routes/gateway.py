"""
SiteList Backend: Gateway Route (single entry point)
=======================================================

What:  One catch-all route that classifies each request and hands it to the
       preflight responder, the API dispatcher, or the asset server.
Why:   The public surface is path-shaped, not resource-shaped: API calls may
       arrive as POST /api/<anything> or POST <anything>/worker.js, and every
       unknown path falls back to the index document. A single route with
       explicit precedence (see routing.py) expresses that directly.

Request Flow (API):
    1. Read the raw body and decode it as JSON
       (not JSON → 500 "Error processing request")
    2. Validate {action, data?, index?, id?}
       (not an object / unknown action → 400 "Invalid action")
    3. Run the action against CollectionService
       (bad update index → 400 "Invalid index"; anything else → 500 with the
       operation's generic message)
    4. Success → JSON body + CORS headers

Error responses are raised as ApiError / AssetError subclasses and rendered by
the handlers registered in main.py.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from sitelist.config import settings
from sitelist.exceptions import (
    InvalidIndexError,
    MethodNotAllowedError,
    RequestProcessingError,
)
from sitelist.routing import RouteKind, classify_request, cors_headers
from sitelist.schemas.website import (
    ActionRequest,
    SuccessResponse,
    WebsiteAction,
    WebsiteListResponse,
    parse_action_request,
)
from sitelist.services.asset_service import AssetService
from sitelist.services.collection_service import CollectionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Gateway"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Generic 500 text per action; the cause is only logged
FAILURE_MESSAGES: Dict[WebsiteAction, str] = {
    WebsiteAction.GET: "Error getting websites",
    WebsiteAction.ADD: "Error adding website",
    WebsiteAction.UPDATE: "Error updating website",
    WebsiteAction.DELETE: "Error deleting website",
}


# ── Dependencies ──────────────────────────────────────────────────────────

def get_collection_service(request: Request) -> CollectionService:
    return request.app.state.collection_service


def get_asset_service(request: Request) -> AssetService:
    return request.app.state.asset_service


# ── Helpers ───────────────────────────────────────────────────────────────

def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_body(raw: bytes) -> Any:
    """
    Decode a request body as strict JSON.

    Raises:
        RequestProcessingError: empty body, invalid JSON, bad encoding, or
            nesting too deep for the decoder.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise RequestProcessingError(context={"reason": "malformed_json", "error": str(e)}) from e


def _json(content: Any) -> JSONResponse:
    return JSONResponse(content=content, headers=cors_headers())


async def run_action(action_request: ActionRequest, collection: CollectionService) -> JSONResponse:
    """Execute one decoded action. Exhaustive over WebsiteAction."""
    action = action_request.action

    if action is WebsiteAction.GET:
        websites = await collection.list_websites()
        return _json(WebsiteListResponse(websites=websites).model_dump())

    if action is WebsiteAction.ADD:
        await collection.add_website(action_request.data)
    elif action is WebsiteAction.UPDATE:
        await collection.update_website(action_request.index, action_request.data)
    elif action is WebsiteAction.DELETE:
        await collection.delete_website(action_request.id)
    else:
        raise AssertionError(f"Unhandled action: {action!r}")

    return _json(SuccessResponse().model_dump())


async def handle_api_request(request: Request, collection: CollectionService) -> JSONResponse:
    payload = decode_body(await request.body())
    action_request = parse_action_request(payload)
    action = action_request.action

    try:
        return await run_action(action_request, collection)
    except InvalidIndexError:
        raise
    except Exception as e:
        raise RequestProcessingError(
            message=FAILURE_MESSAGES[action],
            context={"action": action.value, "error": type(e).__name__},
        ) from e


async def serve_asset(path: str, assets: AssetService) -> Response:
    asset = await assets.get_asset(path)
    return Response(content=asset.content, media_type=asset.media_type)


# ── Route ─────────────────────────────────────────────────────────────────

@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def gateway(
    request: Request,
    collection: CollectionService = Depends(get_collection_service),
    assets: AssetService = Depends(get_asset_service),
) -> Response:
    """
    Produce exactly one response for any method and path.

    PREFLIGHT → 200 "OK" with CORS headers
    API       → handle_api_request()
    405       → MethodNotAllowedError (non-POST under the API prefix)
    ASSET     → the requested path from the store
    INDEX     → the configured index document from the store
    """
    # request.url re-parses the decoded path and cuts it at a literal "?" or "#"
    path = request.scope["path"]
    kind = classify_request(request.method, path)

    if kind is RouteKind.PREFLIGHT:
        return PlainTextResponse("OK", headers=cors_headers())
    if kind is RouteKind.API:
        return await handle_api_request(request, collection)
    if kind is RouteKind.METHOD_NOT_ALLOWED:
        raise MethodNotAllowedError(method=request.method, path=path)
    if kind is RouteKind.ASSET:
        return await serve_asset(path, assets)
    return await serve_asset(settings.index_document, assets)
