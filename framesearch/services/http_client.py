"""Process-wide shared httpx client used for upstream paging and probes."""
from __future__ import annotations

import asyncio
import os
from pathlib import Path

import httpx

from framesearch.config import settings
from framesearch.services.logger import logger


def sanitize_ssl_keylogfile() -> None:
    """Unset SSLKEYLOGFILE when it points to an unusable path.

    httpx builds its SSL context eagerly, and an unwritable keylog target makes
    that fail for every request sharing the client.
    """
    keylog_path = os.getenv("SSLKEYLOGFILE", "").strip()
    if not keylog_path:
        return

    try:
        path = Path(keylog_path)
        if not path.parent.exists():
            os.environ.pop("SSLKEYLOGFILE", None)
            return
        with open(path, "a", encoding="utf-8"):
            pass
    except OSError:
        os.environ.pop("SSLKEYLOGFILE", None)


def build_client(max_connections: int | None = None) -> httpx.AsyncClient:
    limit = max(max_connections or settings.probe_concurrency_cap, 1)
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=settings.upstream_timeout_seconds,
        limits=httpx.Limits(max_connections=limit, max_keepalive_connections=limit),
    )


class HttpClientHandle:
    """Lazily created client, initialized once under a lock and reused.

    A failed or closed client is rebuilt on the next ``acquire``.
    """

    def __init__(self, max_connections: int | None = None):
        self._max_connections = max_connections
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> httpx.AsyncClient:
        if self._client is not None and not self._client.is_closed:
            return self._client
        async with self._lock:
            if self._client is None or self._client.is_closed:
                sanitize_ssl_keylogfile()
                self._client = build_client(self._max_connections)
                logger.debug("Shared HTTP client created")
            return self._client

    async def release(self) -> None:
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
                logger.debug("Shared HTTP client closed")


shared_client = HttpClientHandle()
