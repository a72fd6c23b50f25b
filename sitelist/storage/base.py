"""
SiteList Backend: Abstract Key-Value Store Interface
=======================================================

What:  Abstract base class defining the contract every storage backend honours.
Why:   The collection service and the asset service only need two primitives,
       so the backend (dict, SQL table, directory of files) can change without
       touching any calling code.
How:   Concrete implementations inherit from KeyValueStore and implement
       read() and write().
Who:   Called by CollectionService and AssetService; built by create_store().

Design Decision:
    There is no compare-and-swap or transaction primitive. Each mutation of the
    collection is an unconditional read followed by an unconditional write;
    in-process serialization lives in CollectionService, not here.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract mapping from string keys to byte values.

    Contract:
        - read() returns None for a key that was never written
        - write() replaces the whole value; there are no partial updates
        - Backend-specific failures are wrapped in StoreError
        - Keys are used verbatim (no normalisation, no prefixing)
    """

    @abstractmethod
    async def read(self, key: str) -> Optional[bytes]:
        """
        Fetch the value stored under `key`.

        Returns:
            The raw bytes, or None when the key is absent.

        Raises:
            StoreError: The backend could not be reached or queried.
        """
        ...

    @abstractmethod
    async def write(self, key: str, value: bytes) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Raises:
            StoreError: The backend rejected or failed the write.
        """
        ...

    async def close(self) -> None:
        """Release backend resources. Called once during application shutdown."""
        return None
