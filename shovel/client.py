"""shovel.client - fetch a URL and turn it into a queryable Document.

Basic usage::

    from shovel import fetch

    document = await fetch("https://example.com")
    print(document.title)

Custom headers are applied last and may override the defaults::

    document = await fetch(
        "https://example.com",
        request=lambda headers: headers.update({"Cookie": "a=b"}),
    )

Documents are cached per exact URL for the life of the client, so a second
``fetch`` of the same URL never reaches the network until :func:`clear_cache`
is called.  :func:`fetch_text` and :func:`fetch_bytes` bypass the cache.

Every fetch has an ``*_or_none`` twin that returns ``None`` instead of raising
:class:`~shovel.errors.TransportFailure` or
:class:`~shovel.errors.HttpStatusFailure`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from shovel import settings
from shovel.cache import DocumentCache
from shovel.errors import FetchError, HttpStatusFailure, TransportFailure
from shovel.models import Document
from shovel.transport import HttpTransport, HttpxTransport, TransportResponse

if TYPE_CHECKING:
    from shovel.parser import HtmlParser

logger = logging.getLogger(__name__)

HeaderCustomizer = Callable[[dict[str, str]], None]


def _host_of(url: str) -> str:
    """Strip the scheme and path from *url*, leaving ``host[:port]``."""
    _, sep, rest = url.partition("://")
    if not sep:
        rest = url
    return rest.split("/", 1)[0]


class Shovel:
    """Fetch orchestrator: one transport, one parser binding, one document cache.

    Args:
        transport:  :class:`~shovel.transport.HttpTransport` to use.  When
                    omitted an :class:`~shovel.transport.HttpxTransport` is
                    created on first use (and re-created after
                    :meth:`close_client`).
        parser:     :class:`~shovel.parser.HtmlParser` bound to every fetched
                    document.  ``None`` means the process default.
        cache:      :class:`~shovel.cache.DocumentCache` to share.
        user_agent: ``User-Agent`` header value (default
                    :data:`shovel.settings.USER_AGENT`).
    """

    def __init__(
        self,
        transport: HttpTransport | None = None,
        parser: HtmlParser | None = None,
        cache: DocumentCache | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._transport = transport
        self._owns_transport = transport is None
        self._parser = parser
        self.cache = cache if cache is not None else DocumentCache()
        self.user_agent = user_agent or settings.USER_AGENT

    async def __aenter__(self) -> Shovel:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close_client()

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            self._transport = HttpxTransport()
        return self._transport

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def build_headers(self, url: str, request: HeaderCustomizer | None = None) -> dict[str, str]:
        """Return the headers sent for *url*, with *request* applied last."""
        headers = {
            "User-Agent": self.user_agent,
            "Host": _host_of(url),
            **settings.DEFAULT_HEADERS,
        }
        if request is not None:
            request(headers)
            logger.debug("custom headers applied for %s", url)
        return headers

    async def _perform(self, url: str, request: HeaderCustomizer | None) -> TransportResponse:
        headers = self.build_headers(url, request)
        logger.info("fetch: GET %s", url)
        try:
            response = await self.transport.get(url, headers)
        except Exception as exc:
            raise TransportFailure(url, exc) from exc

        if not response.is_success:
            raise HttpStatusFailure(url, response.status_code, response.text)
        return response

    # ------------------------------------------------------------------
    # Documents (cached)
    # ------------------------------------------------------------------

    async def fetch_document(self, url: str, request: HeaderCustomizer | None = None) -> Document:
        """Fetch *url* and return it as a :class:`~shovel.models.Document`.

        Returns the cached document without any request when *url* was
        fetched before.

        Raises:
            TransportFailure:  The request could not be completed.
            HttpStatusFailure: The response status was not 2xx (redirects
                               included; they are never followed).
        """
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("cache hit: %s", url)
            return cached

        logger.debug("cache miss: %s", url)
        response = await self._perform(url, request)
        document = Document.from_html(url, response.text, parser=self._parser)
        self.cache.put(url, document)
        return document

    fetch = fetch_document

    async def fetch_document_or_none(
        self, url: str, request: HeaderCustomizer | None = None,
    ) -> Document | None:
        try:
            return await self.fetch_document(url, request)
        except FetchError as exc:
            logger.debug("fetch_document_or_none: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Raw text / bytes (never cached)
    # ------------------------------------------------------------------

    async def fetch_text(self, url: str, request: HeaderCustomizer | None = None) -> str:
        """Fetch *url* and return the body decoded as UTF-8."""
        response = await self._perform(url, request)
        return response.text

    async def fetch_text_or_none(
        self, url: str, request: HeaderCustomizer | None = None,
    ) -> str | None:
        try:
            return await self.fetch_text(url, request)
        except FetchError as exc:
            logger.debug("fetch_text_or_none: %s", exc)
            return None

    async def fetch_bytes(self, url: str, request: HeaderCustomizer | None = None) -> bytes:
        """Fetch *url* and return the raw body."""
        response = await self._perform(url, request)
        return response.content

    async def fetch_bytes_or_none(
        self, url: str, request: HeaderCustomizer | None = None,
    ) -> bytes | None:
        try:
            return await self.fetch_bytes(url, request)
        except FetchError as exc:
            logger.debug("fetch_bytes_or_none: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close_client(self) -> None:
        """Release the transport.  The cache is left untouched."""
        if self._transport is None:
            return
        await self._transport.close()
        if self._owns_transport:
            self._transport = None

    def clear_cache(self) -> None:
        self.cache.clear()


# ---------------------------------------------------------------------------
# Module-level API bound to a shared default client
# ---------------------------------------------------------------------------

_default_client: Shovel | None = None


def get_default_client() -> Shovel:
    global _default_client
    if _default_client is None:
        _default_client = Shovel()
    return _default_client


async def fetch(url: str, request: HeaderCustomizer | None = None) -> Document:
    """Fetch *url* with the default client.  See :meth:`Shovel.fetch_document`."""
    return await get_default_client().fetch_document(url, request)


async def fetch_document(url: str, request: HeaderCustomizer | None = None) -> Document:
    return await get_default_client().fetch_document(url, request)


async def fetch_document_or_none(
    url: str, request: HeaderCustomizer | None = None,
) -> Document | None:
    return await get_default_client().fetch_document_or_none(url, request)


async def fetch_text(url: str, request: HeaderCustomizer | None = None) -> str:
    return await get_default_client().fetch_text(url, request)


async def fetch_text_or_none(url: str, request: HeaderCustomizer | None = None) -> str | None:
    return await get_default_client().fetch_text_or_none(url, request)


async def fetch_bytes(url: str, request: HeaderCustomizer | None = None) -> bytes:
    return await get_default_client().fetch_bytes(url, request)


async def fetch_bytes_or_none(url: str, request: HeaderCustomizer | None = None) -> bytes | None:
    return await get_default_client().fetch_bytes_or_none(url, request)


async def close_client() -> None:
    """Close the default client's transport, if one was ever opened."""
    if _default_client is not None:
        await _default_client.close_client()


def clear_cache() -> None:
    """Empty the default client's document cache."""
    if _default_client is not None:
        _default_client.clear_cache()
