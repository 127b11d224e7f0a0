"""In-process object store for local development and tests."""

from kvs3.storage.base import ObjectStore


class MemoryStore(ObjectStore):
    """Dict-backed store answering with the status codes S3 would use."""

    def __init__(self, items: dict[str, bytes] | None = None):
        self.items: dict[str, bytes] = dict(items or {})
        self.cache_control: dict[str, str] = {}

    async def list_keys(self, prefix: str) -> list[str]:
        return sorted(k for k in self.items if k.startswith(prefix))

    async def get(self, key: str) -> tuple[int, bytes]:
        if key not in self.items:
            return 404, b"{}"
        return 200, self.items[key]

    async def put(self, key: str, value: bytes, cache_max_age: int = 0) -> int:
        self.items[key] = value
        if cache_max_age > 0:
            self.cache_control[key] = f"max-age={cache_max_age}"
        else:
            self.cache_control.pop(key, None)
        return 200

    async def delete(self, key: str) -> int:
        self.items.pop(key, None)
        self.cache_control.pop(key, None)
        return 204
