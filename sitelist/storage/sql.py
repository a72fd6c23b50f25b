"""
SiteList Backend: SQL Store
==============================

What:  KeyValueStore backed by the `kv_entries` table through async SQLAlchemy.
Why:   Durable storage that survives restarts and is shared by every worker
       pointed at the same database.
How:   read() is a primary-key lookup; write() is a merge (insert or update)
       inside its own short transaction.

Concurrency:
    Each write is its own transaction with no version check. Two processes
    doing read-modify-write on the same key can still lose an update; only
    writers inside one process are serialized (see CollectionService).
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sitelist.database import build_session_factory, dispose_engine, init_models
from sitelist.exceptions import StoreError
from sitelist.models.kv_entry import KVEntry
from sitelist.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class SQLStore(KeyValueStore):
    """
    KeyValueStore over a single SQL table.

    The store owns its engine: close() disposes the pool.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = build_session_factory(engine)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        await init_models(self._engine)

    async def read(self, key: str) -> Optional[bytes]:
        try:
            async with self._session_factory() as session:
                entry = await session.get(KVEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.error("SQL read failed for key %r: %s", key, str(e))
            raise StoreError(
                message="Could not read from the database",
                key=key,
                context={"db_error": type(e).__name__},
            ) from e

    async def write(self, key: str, value: bytes) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.merge(KVEntry(key=key, value=bytes(value)))
        except SQLAlchemyError as e:
            logger.error("SQL write failed for key %r: %s", key, str(e))
            raise StoreError(
                message="Could not write to the database",
                key=key,
                context={"db_error": type(e).__name__},
            ) from e
        logger.debug("Stored %d bytes under %r", len(value), key)

    async def close(self) -> None:
        await dispose_engine(self._engine)
