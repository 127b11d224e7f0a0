"""Test configuration and fixtures for kvs3 tests."""

import pytest
from fastapi.testclient import TestClient

from kvs3.config import Settings
from kvs3.http_server import create_app
from kvs3.storage.memory import MemoryStore


@pytest.fixture
def settings() -> Settings:
    return Settings(
        address="127.0.0.1:5001",
        bucket="test-bucket",
        region="us-east-1",
        endpoint="",
        origin="*",
        access_key="test",
        secret_key="test",
        log_level="DEBUG",
        fetch_concurrency=4,
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings, store)) as c:
        yield c
