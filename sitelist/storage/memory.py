"""
SiteList Backend: In-Memory Store
====================================

What:  Dict-backed KeyValueStore.
Why:   Zero-setup backend for tests and throwaway local runs.
Caveat: State is per process and lost on restart; multiple uvicorn workers
        each see their own copy.
"""

from typing import Dict, Iterator, Mapping, Optional

from sitelist.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """KeyValueStore over a plain dict. Values are copied in as immutable bytes."""

    def __init__(self, initial: Optional[Mapping[str, bytes]] = None):
        self._data: Dict[str, bytes] = {
            key: bytes(value) for key, value in (initial or {}).items()
        }

    async def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def write(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)
