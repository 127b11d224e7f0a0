"""Exceptions raised inside kvs3."""


class Kvs3Error(Exception):
    """Base class for kvs3 errors."""


class StoreError(Kvs3Error):
    """An object-store call failed.

    `status` is the HTTP status the store reported, or 500 when the failure
    never reached the store (network, credentials, ...).
    """

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.status = status


class ValueDecodeError(Kvs3Error, ValueError):
    """A stored value is not UTF-8 JSON text."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"value at {key!r} is not valid JSON: {reason}")
        self.key = key
