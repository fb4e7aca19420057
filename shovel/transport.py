"""shovel.transport - HTTP transport collaborator.

The fetch layer only needs "GET this URL with these headers, do not follow
redirects, give me the status and the bytes".  :class:`HttpTransport` states
that contract; :class:`HttpxTransport` implements it on top of
``httpx.AsyncClient``.  Timeouts and the connection-pool bound are transport
configuration and live here, not in the orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from shovel import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of a completed GET."""

    status_code: int
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class HttpTransport(Protocol):
    """Contract for the network backend used by :class:`~shovel.client.Shovel`."""

    async def get(self, url: str, headers: dict[str, str]) -> TransportResponse:
        """Issue one GET for *url*.  Must never follow redirects."""
        ...

    async def close(self) -> None:
        """Release connections and other resources."""
        ...


class HttpxTransport:
    """:class:`HttpTransport` backed by a pooled ``httpx.AsyncClient``.

    Args:
        timeout:         Per-request timeout in seconds.
        max_connections: Upper bound on simultaneous connections.
        client:          Pre-built client to use instead of creating one
                         (tests pass one wired to ``httpx.MockTransport``).
    """

    def __init__(
        self,
        *,
        timeout: float = settings.TIMEOUT,
        max_connections: int = settings.MAX_CONNECTIONS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            client = httpx.AsyncClient(
                follow_redirects=False,
                timeout=timeout,
                limits=httpx.Limits(max_connections=max_connections),
            )
        self._client = client

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def get(self, url: str, headers: dict[str, str]) -> TransportResponse:
        response = await self._client.get(url, headers=headers, follow_redirects=False)
        logger.debug("GET %s -> %d (%d bytes)", url, response.status_code, len(response.content))
        return TransportResponse(status_code=response.status_code, content=response.content)

    async def close(self) -> None:
        await self._client.aclose()
