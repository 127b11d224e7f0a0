"""Service configuration loaded from environment variables (and .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """All service settings, populated from env vars with sensible defaults.

    Instances are immutable; CLI flags are applied with `with_overrides`,
    which returns a new object.
    """

    # HTTP
    address: str = field(
        default_factory=lambda: os.environ.get("KVS3_ADDRESS", "127.0.0.1:5001")
    )
    origin: str = field(default_factory=lambda: os.environ.get("KVS3_ORIGIN", "*"))

    # Object store
    bucket: str = field(default_factory=lambda: os.environ.get("KVS3_BUCKET", "bucket"))
    region: str = field(
        default_factory=lambda: os.environ.get("KVS3_REGION", "us-east-1")
    )
    # Empty means the region's AWS endpoint
    endpoint: str = field(default_factory=lambda: os.environ.get("KVS3_ENDPOINT", ""))
    access_key: str = field(
        default_factory=lambda: os.environ.get("KVS3_ACCESS_KEY", ""), repr=False
    )
    secret_key: str = field(
        default_factory=lambda: os.environ.get("KVS3_SECRET_KEY", ""), repr=False
    )

    log_level: str = field(
        default_factory=lambda: os.environ.get("KVS3_LOG_LEVEL", "INFO")
    )
    # Max concurrent value fetches per `GET /?values=true`
    fetch_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("KVS3_FETCH_CONCURRENCY", "8"))
    )

    def __post_init__(self) -> None:
        if self.fetch_concurrency < 1:
            raise ValueError("fetch_concurrency must be at least 1")

    @property
    def host(self) -> str:
        return self._split_address()[0]

    @property
    def port(self) -> int:
        return self._split_address()[1]

    def _split_address(self) -> tuple[str, int]:
        host, sep, port = self.address.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"invalid listen address: {self.address!r}")
        return host.strip("[]"), int(port)

    def with_overrides(self, **overrides) -> Settings:
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
