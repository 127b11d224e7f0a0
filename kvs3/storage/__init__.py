from kvs3.storage.base import ObjectStore
from kvs3.storage.memory import MemoryStore
from kvs3.storage.s3 import S3Store

__all__ = ["ObjectStore", "MemoryStore", "S3Store"]
