"""
SiteList Backend: Static Asset Service
=========================================

What:  Serves raw bytes from the key-value store for a request path.
How:   Strip one leading "/", look the rest up verbatim, derive the
       content-type from the suffix.
Who:   Called by the gateway route for asset paths and the default document.

Deliberately absent: caching headers, range requests, directory listings,
index resolution for sub-directories. "/docs/" looks up "docs/" and 404s.
"""

import logging
from dataclasses import dataclass

from sitelist.exceptions import AssetNotFoundError, AssetServeError
from sitelist.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Checked in order with str.endswith; first match wins
CONTENT_TYPES = (
    (".html", "text/html"),
    (".css", "text/css"),
    (".js", "application/javascript"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".svg", "image/svg+xml"),
)


def content_type_for(key: str) -> str:
    """Content-type for a key by suffix (case-sensitive), octet-stream otherwise."""
    for suffix, media_type in CONTENT_TYPES:
        if key.endswith(suffix):
            return media_type
    return DEFAULT_CONTENT_TYPE


def key_for_path(path: str) -> str:
    """Request path to store key: drop a single leading '/'."""
    return path[1:] if path.startswith("/") else path


@dataclass(frozen=True)
class Asset:
    key: str
    content: bytes
    media_type: str


class AssetService:
    """Looks up assets in the shared store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_asset(self, path: str) -> Asset:
        """
        Fetch the asset for `path`.

        An empty stored value counts as missing.

        Raises:
            AssetNotFoundError: nothing (or nothing but b"") stored under the key.
            AssetServeError: the store lookup itself failed.
        """
        key = key_for_path(path)
        try:
            content = await self.store.read(key)
        except Exception as e:
            logger.error("Asset lookup failed for %r: %s", key, str(e))
            raise AssetServeError(key=key, context={"error": type(e).__name__}) from e

        if not content:
            raise AssetNotFoundError(key=key)

        return Asset(key=key, content=content, media_type=content_type_for(key))
