"""S3-compatible object store (AWS S3 / MinIO / any custom endpoint)."""

import asyncio
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from urllib3.exceptions import HTTPError as URLLib3Error

from kvs3.config import Settings
from kvs3.exceptions import StoreError
from kvs3.storage.base import ObjectStore

logger = logging.getLogger(__name__)

EMPTY_VALUE = b"{}"


def _status(response: dict) -> int:
    return response.get("ResponseMetadata", {}).get("HTTPStatusCode", 200)


def _error_status(e: Exception) -> int:
    if isinstance(e, ClientError):
        return _status(e.response) if "ResponseMetadata" in e.response else 500
    return 500


class S3Store(ObjectStore):
    """Object store on a single bucket.

    One boto3 client is built at construction and shared by every request;
    it is never mutated afterwards. Retries are disabled so that each store
    error is terminal for the request that hit it.
    """

    def __init__(self, settings: Settings, client=None):
        self._bucket = settings.bucket
        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=settings.endpoint or None,
                aws_access_key_id=settings.access_key or None,
                aws_secret_access_key=settings.secret_key or None,
                region_name=settings.region,
                config=Config(
                    signature_version="s3v4",
                    s3={"addressing_style": "path"},
                    retries={"max_attempts": 1, "mode": "standard"},
                ),
            )
        self._client = client

    async def init(self) -> None:
        """Log whether the bucket is reachable. Never creates it."""
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self._bucket)
            logger.info("S3 bucket reachable: %s", self._bucket)
        except (BotoCoreError, ClientError) as e:
            logger.warning("S3 bucket %s not reachable: %s", self._bucket, e)

    def _list(self, prefix: str) -> list[str]:
        keys = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for content in page.get("Contents", []):
                keys.append(content["Key"])
        return keys

    async def list_keys(self, prefix: str) -> list[str]:
        try:
            return await asyncio.to_thread(self._list, prefix)
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"list {prefix!r} failed: {e}", _error_status(e)) from e

    async def get(self, key: str) -> tuple[int, bytes]:
        try:
            resp = await asyncio.to_thread(
                self._client.get_object,
                Bucket=self._bucket,
                Key=key,
            )
            data = await asyncio.to_thread(resp["Body"].read)
        except (BotoCoreError, ClientError, URLLib3Error) as e:
            logger.debug("get %s failed: %s", key, e)
            return _error_status(e), EMPTY_VALUE
        return _status(resp), data

    async def put(self, key: str, value: bytes, cache_max_age: int = 0) -> int:
        params = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": value,
            "ContentType": "application/json",
        }
        if cache_max_age > 0:
            params["CacheControl"] = f"max-age={cache_max_age}"
        try:
            resp = await asyncio.to_thread(self._client.put_object, **params)
        except (BotoCoreError, ClientError) as e:
            logger.debug("put %s failed: %s", key, e)
            return _error_status(e)
        return _status(resp)

    async def delete(self, key: str) -> int:
        try:
            resp = await asyncio.to_thread(
                self._client.delete_object,
                Bucket=self._bucket,
                Key=key,
            )
        except (BotoCoreError, ClientError) as e:
            logger.debug("delete %s failed: %s", key, e)
            return _error_status(e)
        return _status(resp)
