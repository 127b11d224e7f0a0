"""Abstract base class for the object store behind kvs3."""

from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """Bucket-style store with list/get/put/delete.

    get/put/delete never raise for store failures: they return the status
    the store reported (500 when it reported none). list_keys raises
    StoreError so callers can tell an empty listing from a failed one.
    """

    async def init(self) -> None:
        """Prepare the store (e.g., check the bucket). Override if needed."""

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """Full keys starting with ``prefix``, in store order."""
        ...

    @abstractmethod
    async def get(self, key: str) -> tuple[int, bytes]:
        """Returns (status, raw value). The value is ``b"{}"`` on error."""
        ...

    @abstractmethod
    async def put(self, key: str, value: bytes, cache_max_age: int = 0) -> int:
        """Write ``value``; a positive ``cache_max_age`` sets Cache-Control."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> int:
        ...
