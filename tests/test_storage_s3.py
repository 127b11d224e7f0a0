"""Tests for the S3 adapter, stubbed at the botocore layer (no network)."""

import io

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber
from urllib3.exceptions import ProtocolError

from kvs3.exceptions import StoreError
from kvs3.storage.s3 import S3Store

BUCKET = "test-bucket"


def _ok(status: int = 200) -> dict:
    return {"ResponseMetadata": {"HTTPStatusCode": status}}


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def s3(settings, s3_client) -> S3Store:
    return S3Store(settings, client=s3_client)


def test_client_built_from_settings(settings):
    store = S3Store(settings.with_overrides(endpoint="http://localhost:9000"))
    assert store._client.meta.endpoint_url == "http://localhost:9000"
    assert store._client.meta.region_name == "us-east-1"


@pytest.mark.asyncio
async def test_list_keys_follows_pages(s3, stubber):
    stubber.add_response(
        "list_objects_v2",
        {
            "Contents": [{"Key": "ns/a"}, {"Key": "ns/b"}],
            "IsTruncated": True,
            "NextContinuationToken": "t1",
        },
        {"Bucket": BUCKET, "Prefix": "ns/"},
    )
    stubber.add_response(
        "list_objects_v2",
        {"Contents": [{"Key": "ns/c"}], "IsTruncated": False},
        {"Bucket": BUCKET, "Prefix": "ns/", "ContinuationToken": "t1"},
    )
    assert await s3.list_keys("ns/") == ["ns/a", "ns/b", "ns/c"]


@pytest.mark.asyncio
async def test_list_keys_empty(s3, stubber):
    stubber.add_response(
        "list_objects_v2",
        {"IsTruncated": False, "KeyCount": 0},
        {"Bucket": BUCKET, "Prefix": "ns/"},
    )
    assert await s3.list_keys("ns/") == []


@pytest.mark.asyncio
async def test_list_keys_failure_raises(s3, stubber):
    stubber.add_client_error(
        "list_objects_v2",
        service_error_code="AccessDenied",
        http_status_code=403,
    )
    with pytest.raises(StoreError) as exc_info:
        await s3.list_keys("ns/")
    assert exc_info.value.status == 403


@pytest.mark.asyncio
async def test_get(s3, stubber):
    data = b'{"x":5}'
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(io.BytesIO(data), len(data)), **_ok()},
        {"Bucket": BUCKET, "Key": "ns/widget1"},
    )
    assert await s3.get("ns/widget1") == (200, data)


@pytest.mark.asyncio
async def test_get_missing_key(s3, stubber):
    stubber.add_client_error(
        "get_object",
        service_error_code="NoSuchKey",
        http_status_code=404,
    )
    assert await s3.get("ns/missing") == (404, b"{}")


class _BrokenBody:
    """Response body whose connection drops mid-read."""

    def read(self, *args, **kwargs):
        raise ProtocolError("Connection broken: IncompleteRead")


@pytest.mark.asyncio
async def test_get_stream_error(s3, stubber):
    stubber.add_response(
        "get_object",
        {"Body": _BrokenBody(), **_ok()},
        {"Bucket": BUCKET, "Key": "ns/widget1"},
    )
    assert await s3.get("ns/widget1") == (500, b"{}")


@pytest.mark.asyncio
async def test_put_without_cache(s3, stubber):
    stubber.add_response(
        "put_object",
        _ok(),
        {
            "Bucket": BUCKET,
            "Key": "ns/widget1",
            "Body": b'{"x":5}',
            "ContentType": "application/json",
        },
    )
    assert await s3.put("ns/widget1", b'{"x":5}') == 200


@pytest.mark.asyncio
async def test_put_with_cache_max_age(s3, stubber):
    stubber.add_response(
        "put_object",
        _ok(),
        {
            "Bucket": BUCKET,
            "Key": "ns/widget1",
            "Body": b"1",
            "ContentType": "application/json",
            "CacheControl": "max-age=60",
        },
    )
    assert await s3.put("ns/widget1", b"1", cache_max_age=60) == 200


@pytest.mark.asyncio
async def test_put_failure(s3, stubber):
    stubber.add_client_error("put_object", service_error_code="InternalError", http_status_code=500)
    assert await s3.put("ns/widget1", b"1") == 500


@pytest.mark.asyncio
async def test_delete(s3, stubber):
    stubber.add_response(
        "delete_object",
        _ok(204),
        {"Bucket": BUCKET, "Key": "ns/widget1"},
    )
    assert await s3.delete("ns/widget1") == 204


@pytest.mark.asyncio
async def test_delete_failure(s3, stubber):
    stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
    assert await s3.delete("ns/widget1") == 403


@pytest.mark.asyncio
async def test_init_checks_bucket(s3, stubber, caplog):
    stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
    with caplog.at_level("WARNING", logger="kvs3.storage.s3"):
        await s3.init()
    assert "not reachable" in caplog.text
