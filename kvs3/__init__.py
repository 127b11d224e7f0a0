"""
kvs3 - per-tenant key-value store over HTTP, backed by an S3 bucket.

Each caller's keys live under the BLAKE3 hash of its bearer token.
"""

from kvs3.config import Settings
from kvs3.http_server import create_app
from kvs3.namespace import derive_namespace, object_key

__all__ = ["Settings", "create_app", "derive_namespace", "object_key"]
