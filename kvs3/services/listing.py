"""Listing pipeline: scope, order, paginate and optionally fetch values."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from kvs3.exceptions import StoreError
from kvs3.namespace import local_key
from kvs3.services.projection import decode_value, parse_mask, project
from kvs3.storage.base import ObjectStore

logger = logging.getLogger(__name__)


@dataclass
class ListQuery:
    """Options of a `GET /` request."""

    prefix: str | None = None
    limit: int | None = None
    skip: int | None = None
    reverse: bool = False
    values: bool = False
    mask: str | None = None


def paginate(keys: list[str], skip: int | None, limit: int | None) -> list[str]:
    """Drop the first `skip` keys, then keep at most `limit` (0/None = all)."""
    start = skip or 0
    if limit:
        return keys[start:start + limit]
    return keys[start:]


class ListingService:
    def __init__(self, store: ObjectStore, fetch_concurrency: int = 8):
        self.store = store
        self._fetch_concurrency = fetch_concurrency

    async def scan(self, prefix: str) -> list[str]:
        """Keys under `prefix`; a failed listing is logged and reads as empty."""
        try:
            return await self.store.list_keys(prefix)
        except StoreError as e:
            logger.warning("Listing %s failed (status %s): %s", prefix, e.status, e)
            return []

    async def list(self, root: str, query: ListQuery) -> list[Any]:
        """
        List a tenant's keys.

        Args:
            root: tenant root (`<namespace>/`)
            query: listing options

        Returns:
            Local key strings, or `{local_key: value}` singletons when
            `query.values` is set. Order is store order (reversed on
            request) after pagination.

        Raises:
            ValueDecodeError: a fetched value is not UTF-8 JSON
        """
        prefix = root + query.prefix if query.prefix is not None else root
        keys = await self.scan(prefix)
        logger.debug("list %s: %d keys", prefix, len(keys))

        if query.reverse:
            keys.reverse()
        keys = paginate(keys, query.skip, query.limit)

        if not query.values:
            return [local_key(k, root) for k in keys]

        fields = parse_mask(query.mask)
        semaphore = asyncio.Semaphore(self._fetch_concurrency)

        async def fetch(key: str) -> dict[str, Any]:
            async with semaphore:
                _, raw = await self.store.get(key)
            return {local_key(key, root): project(decode_value(raw, key), fields)}

        return list(await asyncio.gather(*(fetch(k) for k in keys)))
