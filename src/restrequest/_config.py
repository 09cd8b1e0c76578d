import os
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import (
    ENV_CONNECT_TIMEOUT,
    ENV_INSECURE,
    ENV_MAX_RETRIES,
    ENV_MAX_WORKERS,
    ENV_PROXY,
    ENV_READ_TIMEOUT,
)


class Timeout(BaseModel):
    """Connect and read timeouts in seconds; ``None`` waits indefinitely."""

    model_config = ConfigDict(frozen=True)

    connect: Optional[float] = Field(default=None, gt=0)
    read: Optional[float] = Field(default=None, gt=0)

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(None, connect=self.connect, read=self.read)


class TransportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout: Timeout = Field(default_factory=Timeout)
    max_workers: int = Field(default=8, ge=1)
    max_retries: int = Field(default=0, ge=0)
    follow_redirects: bool = True
    insecure: bool = False
    proxy: Optional[str] = None

    @classmethod
    def from_env(cls) -> "TransportConfig":
        """Read overrides from ``RESTREQUEST_*`` environment variables."""
        values: dict = {}

        connect = os.getenv(ENV_CONNECT_TIMEOUT)
        read = os.getenv(ENV_READ_TIMEOUT)
        if connect or read:
            values["timeout"] = Timeout(
                connect=float(connect) if connect else None,
                read=float(read) if read else None,
            )

        max_workers = os.getenv(ENV_MAX_WORKERS)
        if max_workers:
            values["max_workers"] = int(max_workers)

        max_retries = os.getenv(ENV_MAX_RETRIES)
        if max_retries:
            values["max_retries"] = int(max_retries)

        insecure = os.getenv(ENV_INSECURE)
        if insecure:
            values["insecure"] = insecure.strip().lower() in ("1", "true", "yes")

        proxy = os.getenv(ENV_PROXY)
        if proxy:
            values["proxy"] = proxy

        return cls(**values)
