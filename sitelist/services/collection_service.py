"""
SiteList Backend: Collection Service (Read-Modify-Write Adapter)
===================================================================

What:  Get, append, replace-at-position and remove-by-id against the single
       JSON array stored under the collection key.
Why:   Every mutation has the same shape: one full read of the current value,
       an in-memory change, one full write of the new value. Keeping that
       cycle in one class keeps the encoding rules and the locking in one place.
Who:   Called by the API dispatcher in routes/gateway.py.

Read-with-default:
    An absent (or empty) value reads as []. The key comes into existence on the
    first write; nothing ever deletes it, so removing every record leaves "[]".

Encoding:
    Compact JSON, UTF-8, non-ASCII kept verbatim. A stored value that is not a
    JSON array raises CollectionCorruptError; this class never writes one.

Concurrency:
    add/update/delete hold an asyncio.Lock for the whole read-modify-write, so
    two requests in the same process cannot overwrite each other's change.
    get does not take the lock. Processes sharing one store are NOT
    coordinated: the last write wins.
"""

import asyncio
import json
import logging
from typing import Any, List, Optional

from sitelist.exceptions import CollectionCorruptError, InvalidIndexError
from sitelist.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


def record_id(record: Any) -> Any:
    """The `id` of a record, or None for records that are not objects or lack one."""
    if isinstance(record, dict):
        return record.get("id")
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def ids_match(left: Any, right: Any) -> bool:
    """
    Strict identifier equality.

    - numbers compare by value (1 matches 1.0); booleans are not numbers
    - strings, booleans and null compare by type and value ("1" never matches 1)
    - objects and arrays never match anything, not even an equal copy
    """
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return type(left) is type(right) and left == right


def coerce_index(index: Any) -> Optional[int]:
    """Return `index` as an int if it is a JSON integer (1 or 1.0), else None."""
    if isinstance(index, bool):
        return None
    if isinstance(index, int):
        return index
    if isinstance(index, float) and index.is_integer():
        return int(index)
    return None


class CollectionService:
    """
    Read-modify-write operations on one named collection.

    One instance per application; the lock it owns is what serializes writers.
    """

    def __init__(self, store: KeyValueStore, key: str = "websites"):
        self.store = store
        self.key = key
        self._write_lock = asyncio.Lock()

    # ── Encoding ──────────────────────────────────────────────────────────

    def _decode(self, raw: Optional[bytes]) -> List[Any]:
        if not raw:
            return []
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise CollectionCorruptError(self.key, found="invalid JSON") from e
        if not isinstance(value, list):
            raise CollectionCorruptError(self.key, found=type(value).__name__)
        return value

    @staticmethod
    def _encode(records: List[Any]) -> bytes:
        return json.dumps(records, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    async def _read(self) -> List[Any]:
        return self._decode(await self.store.read(self.key))

    async def _write(self, records: List[Any]) -> None:
        await self.store.write(self.key, self._encode(records))

    # ── Operations ────────────────────────────────────────────────────────

    async def list_websites(self) -> List[Any]:
        """
        Return the whole collection in stored order ([] when the key is absent).

        Raises:
            StoreError: read failed or the stored value is not an array.
        """
        return await self._read()

    async def add_website(self, record: Any) -> int:
        """
        Append `record` to the end of the collection.

        No deduplication: adding a record whose id already exists stores a
        second copy.

        Returns:
            The collection length after the append.
        """
        async with self._write_lock:
            records = await self._read()
            records.append(record)
            await self._write(records)

        logger.info("Added website (id=%r); collection size %d", record_id(record), len(records))
        return len(records)

    async def update_website(self, index: Any, record: Any) -> None:
        """
        Replace the element at `index` with `record`.

        The index refers to the collection as read inside this call, so a
        client must list immediately before updating to address the record it
        means.

        Raises:
            InvalidIndexError: `index` is not an integer or not in [0, len).
                Nothing is written.
            StoreError: read or write failed.
        """
        async with self._write_lock:
            records = await self._read()
            position = coerce_index(index)
            if position is None or not 0 <= position < len(records):
                raise InvalidIndexError(index=index, length=len(records))
            records[position] = record
            await self._write(records)

        logger.info("Updated website at index %d (id=%r)", position, record_id(record))

    async def delete_website(self, website_id: Any) -> int:
        """
        Remove every record whose id matches `website_id`.

        Non-matching records keep their relative order. The collection is
        written back even when nothing matched.

        Returns:
            How many records were removed (for logging; not sent to clients).
        """
        async with self._write_lock:
            records = await self._read()
            kept = [r for r in records if not ids_match(record_id(r), website_id)]
            await self._write(kept)

        removed = len(records) - len(kept)
        if removed:
            logger.info("Deleted %d website(s) with id=%r; collection size %d", removed, website_id, len(kept))
        else:
            logger.debug("Delete for id=%r matched nothing", website_id)
        return removed
