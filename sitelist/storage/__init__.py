"""
SiteList Backend: Key-Value Store Package
============================================

What:  The external store, abstracted as read(key) / write(key, bytes).
How:   create_store() picks the backend named by STORE_BACKEND.

Backends:
    - memory.py:     MemoryStore      (dict, tests and demos)
    - sql.py:        SQLStore         (kv_entries table, async SQLAlchemy)
    - filesystem.py: FileSystemStore  (one file per key, aiofiles)
"""

import logging
from typing import Optional

from sitelist.config import Settings, settings as default_settings
from sitelist.storage.base import KeyValueStore
from sitelist.storage.filesystem import FileSystemStore
from sitelist.storage.memory import MemoryStore

logger = logging.getLogger(__name__)

__all__ = ["KeyValueStore", "MemoryStore", "FileSystemStore", "create_store"]


def create_store(config: Optional[Settings] = None) -> KeyValueStore:
    """
    Build the configured backend.

    The SQL modules are imported only when the sql backend is selected, so a
    memory or filesystem deployment never needs a database driver installed.
    """
    config = config or default_settings
    backend = config.store_backend

    if backend == "memory":
        logger.info("Using in-memory store (data is not persisted)")
        return MemoryStore()

    if backend == "filesystem":
        store = FileSystemStore(config.storage_root)
        logger.info("Using filesystem store at %s", store.root)
        return store

    if backend == "sql":
        from sitelist.database import build_engine
        from sitelist.storage.sql import SQLStore

        logger.info("Using SQL store (%s)", config.database_url.split("://", 1)[0])
        return SQLStore(build_engine(config.database_url))

    raise ValueError(f"Unknown store backend: {backend!r}")
