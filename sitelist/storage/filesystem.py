"""
SiteList Backend: Filesystem Store
=====================================

What:  KeyValueStore that keeps one file per key under a root directory.
Why:   Lets a plain directory of static files (index.html, style.css, ...)
       act as the asset half of the store with no import step, while the
       collection lives in <root>/websites.
How:   Keys map to POSIX relative paths under storage_root. Reads and writes
       use aiofiles so disk I/O does not block the event loop.

Security Model:
    Keys come straight from request paths, so every key is resolved and
    checked to stay inside the root:
    - absolute keys, empty keys and keys with ".." segments are refused
    - the resolved path must be relative to the resolved root (symlinks out
      of the root are refused too)
    A refused key reads as missing; writing one raises StoreError.

Write Strategy:
    Values are written to a temporary sibling and moved into place with
    os.replace(), so a reader never sees a half-written collection.
"""

import logging
import os
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles

from sitelist.exceptions import StoreError
from sitelist.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class FileSystemStore(KeyValueStore):
    """KeyValueStore over a directory tree."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Optional[Path]:
        """Map a key to a file under root, or None if the key would escape it."""
        pure = PurePosixPath(key)
        if not key or pure.is_absolute() or ".." in pure.parts:
            return None
        candidate = (self.root / pure).resolve()
        if candidate == self.root or not candidate.is_relative_to(self.root):
            return None
        return candidate

    async def read(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if path is None or not path.is_file():
            return None
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            # Removed between is_file() and open()
            return None
        except OSError as e:
            logger.error("Failed to read %s: %s", path, str(e))
            raise StoreError(
                message="Could not read from storage",
                key=key,
                context={"os_error": str(e)},
            ) from e

    async def write(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        if path is None:
            raise StoreError(message="Key is outside the storage root", key=key)

        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error("Failed to write %s: %s", path, str(e))
            tmp_path.unlink(missing_ok=True)
            raise StoreError(
                message="Could not write to storage",
                key=key,
                context={"os_error": str(e)},
            ) from e
        logger.debug("Stored %d bytes at %s", len(value), path)
