"""Tests for shovel.client - fetch orchestration, caching and failure handling."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from shovel import settings
from shovel.client import Shovel, _host_of
from shovel.errors import FetchError, HttpStatusFailure, TransportFailure
from shovel.models import Document
from shovel.parser import SoupParser
from shovel.transport import HttpxTransport, TransportResponse

pytestmark = pytest.mark.asyncio

URL = "https://example.com/shovels"


# ---------------------------------------------------------------------------
# Documents and the cache
# ---------------------------------------------------------------------------

class TestFetchDocument:
    async def test_returns_document(self, client, page_html):
        document = await client.fetch_document(URL)
        assert isinstance(document, Document)
        assert document.url == URL
        assert document.html == page_html
        assert document.title == "Shovels 101 | Example"

    async def test_fetch_alias(self, client, transport):
        document = await client.fetch(URL)
        assert document.url == URL
        assert len(transport.calls) == 1

    async def test_second_fetch_served_from_cache(self, client, transport):
        first = await client.fetch_document(URL)
        second = await client.fetch_document(URL)
        assert (first.url, first.html) == (second.url, second.html)
        assert len(transport.calls) == 1

    async def test_clear_cache_refetches(self, client, transport):
        await client.fetch_document(URL)
        client.clear_cache()
        await client.fetch_document(URL)
        assert len(transport.calls) == 2

    async def test_failed_fetch_not_cached(self, client, transport):
        with pytest.raises(HttpStatusFailure):
            await client.fetch_document("https://example.com/missing")
        assert "https://example.com/missing" not in client.cache

    async def test_utf8_decoding(self, make_transport):
        body = "<html><head><title>Café</title></head></html>".encode()
        client = Shovel(transport=make_transport({URL: TransportResponse(200, body)}))
        document = await client.fetch_document(URL)
        assert document.title == "Café"

    async def test_invalid_utf8_replaced(self, make_transport):
        client = Shovel(transport=make_transport({URL: TransportResponse(200, b"<p>\xff</p>")}))
        document = await client.fetch_document(URL)
        assert "�" in document.html

    async def test_parser_bound_to_document(self, transport):
        class CountingParser(SoupParser):
            parsed = 0

            def parse_document(self, html):
                CountingParser.parsed += 1
                return super().parse_document(html)

        client = Shovel(transport=transport, parser=CountingParser())
        document = await client.fetch_document(URL)
        document.query_selector_all("p")
        document.query_selector_all("a")
        assert CountingParser.parsed == 1

    async def test_concurrent_fetches_not_coalesced(self, page_html, make_transport):
        class SlowTransport(make_transport):
            async def get(self, url, headers):
                await asyncio.sleep(0)
                return await super().get(url, headers)

        transport = SlowTransport({URL: TransportResponse(200, page_html.encode())})
        client = Shovel(transport=transport)
        first, second = await asyncio.gather(
            client.fetch_document(URL), client.fetch_document(URL),
        )
        assert len(transport.calls) == 2
        assert first == second
        assert len(client.cache) == 1


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------

class TestHeaders:
    async def test_fixed_headers(self, client, transport):
        await client.fetch_document(URL)
        _, headers = transport.calls[0]
        assert headers == {
            "User-Agent": settings.USER_AGENT,
            "Host": "example.com",
            "Accept-Language": "en-US,en;q=0.9",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }

    async def test_customizer_applied_last(self, client, transport):
        def customize(headers):
            headers["User-Agent"] = "custom-agent"
            headers["Cookie"] = "a=b"

        await client.fetch_document(URL, customize)
        _, headers = transport.calls[0]
        assert headers["User-Agent"] == "custom-agent"
        assert headers["Cookie"] == "a=b"
        assert headers["Host"] == "example.com"

    async def test_custom_user_agent(self, transport):
        client = Shovel(transport=transport, user_agent="bot/1.0")
        await client.fetch_text(URL)
        assert transport.calls[0][1]["User-Agent"] == "bot/1.0"

    async def test_host_derivation(self):
        assert _host_of("https://example.com/a/b?c=d") == "example.com"
        assert _host_of("http://localhost:8080/x") == "localhost:8080"
        assert _host_of("https://example.com") == "example.com"
        assert _host_of("example.com/path") == "example.com"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    async def test_http_status_failure(self, client):
        with pytest.raises(HttpStatusFailure) as exc_info:
            await client.fetch_document("https://example.com/missing")
        assert exc_info.value.status == 404
        assert exc_info.value.body == "not found"
        assert exc_info.value.url == "https://example.com/missing"

    async def test_redirect_is_failure(self, make_transport):
        transport = make_transport({URL: TransportResponse(301, b"moved")})
        client = Shovel(transport=transport)
        with pytest.raises(HttpStatusFailure) as exc_info:
            await client.fetch_document(URL)
        assert exc_info.value.status == 301

    async def test_transport_failure(self, make_transport):
        cause = OSError("connection refused")
        client = Shovel(transport=make_transport({URL: cause}))
        with pytest.raises(TransportFailure) as exc_info:
            await client.fetch_document(URL)
        assert exc_info.value.url == URL
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.status == 0

    async def test_failures_share_base(self):
        assert issubclass(TransportFailure, FetchError)
        assert issubclass(HttpStatusFailure, FetchError)

    async def test_no_retry(self, client, transport):
        with pytest.raises(HttpStatusFailure):
            await client.fetch_text("https://example.com/missing")
        assert len(transport.calls) == 1


class TestOrNone:
    async def test_document_or_none_on_404(self, client):
        assert await client.fetch_document_or_none("https://example.com/missing") is None

    async def test_document_or_none_on_unreachable(self, make_transport):
        client = Shovel(transport=make_transport({URL: OSError("unreachable")}))
        assert await client.fetch_document_or_none(URL) is None

    async def test_document_or_none_success(self, client):
        document = await client.fetch_document_or_none(URL)
        assert document is not None
        assert document.url == URL

    async def test_text_and_bytes_or_none(self, client):
        assert await client.fetch_text_or_none("https://example.com/missing") is None
        assert await client.fetch_bytes_or_none("https://example.com/missing") is None
        assert await client.fetch_text_or_none(URL) is not None

    async def test_other_errors_propagate(self, client):
        def broken(headers):
            raise ValueError("bad customizer")

        with pytest.raises(ValueError):
            await client.fetch_document_or_none(URL, broken)


# ---------------------------------------------------------------------------
# Text / bytes bypass the cache
# ---------------------------------------------------------------------------

class TestRawFetches:
    async def test_fetch_text(self, client, transport, page_html):
        assert await client.fetch_text(URL) == page_html
        assert await client.fetch_text(URL) == page_html
        assert len(transport.calls) == 2
        assert len(client.cache) == 0

    async def test_fetch_bytes(self, client, transport, page_html):
        assert await client.fetch_bytes(URL) == page_html.encode("utf-8")
        await client.fetch_bytes(URL)
        assert len(transport.calls) == 2
        assert URL not in client.cache

    async def test_text_ignores_cached_document(self, client, transport):
        await client.fetch_document(URL)
        await client.fetch_text(URL)
        assert len(transport.calls) == 2


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    async def test_close_client(self, client, transport):
        await client.close_client()
        assert transport.closed

    async def test_close_keeps_cache(self, client):
        await client.fetch_document(URL)
        await client.close_client()
        assert URL in client.cache

    async def test_async_context_manager(self, transport):
        async with Shovel(transport=transport) as client:
            await client.fetch_text(URL)
        assert transport.closed

    async def test_close_without_transport_is_noop(self):
        await Shovel().close_client()


class TestModuleLevelApi:
    async def test_functions_use_default_client(self, monkeypatch, transport):
        import shovel

        monkeypatch.setattr("shovel.client._default_client", Shovel(transport=transport))
        document = await shovel.fetch(URL)
        assert document.url == URL
        assert await shovel.fetch_document(URL) is document
        assert len(transport.calls) == 1

        shovel.clear_cache()
        assert await shovel.fetch_document_or_none("https://example.com/missing") is None
        assert await shovel.fetch_text_or_none(URL) is not None
        assert await shovel.fetch_bytes(URL) is not None

        await shovel.close_client()
        assert transport.closed


# ---------------------------------------------------------------------------
# httpx binding
# ---------------------------------------------------------------------------

def _httpx_transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestHttpxTransport:
    async def test_get_sends_headers(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, text="<html><title>ok</title></html>")

        client = Shovel(transport=_httpx_transport(handler))
        document = await client.fetch_document(URL)
        assert document.title == "ok"
        assert seen["host"] == "example.com"
        assert seen["user-agent"] == settings.USER_AGENT
        assert seen["upgrade-insecure-requests"] == "1"

    async def test_redirect_not_followed(self):
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            return httpx.Response(302, headers={"Location": "https://example.com/other"})

        client = Shovel(transport=_httpx_transport(handler))
        with pytest.raises(HttpStatusFailure) as exc_info:
            await client.fetch_document(URL)
        assert exc_info.value.status == 302
        assert calls == [URL]

    async def test_connect_error_is_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = Shovel(transport=_httpx_transport(handler))
        with pytest.raises(TransportFailure) as exc_info:
            await client.fetch_bytes(URL)
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert await client.fetch_bytes_or_none(URL) is None

    async def test_close(self):
        transport = _httpx_transport(lambda request: httpx.Response(200))
        await transport.close()
        assert transport.is_closed

    async def test_default_transport_recreated_after_close(self):
        client = Shovel()
        first = client.transport
        assert isinstance(first, HttpxTransport)
        await client.close_client()
        assert first.is_closed
        assert client.transport is not first
        await client.close_client()
