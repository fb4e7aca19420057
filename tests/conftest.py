"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from shovel.client import Shovel
from shovel.models import Document
from shovel.transport import TransportResponse

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeTransport:
    """In-memory :class:`~shovel.transport.HttpTransport` that records every call."""

    def __init__(self, routes: dict[str, TransportResponse | Exception] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.closed = False

    async def get(self, url: str, headers: dict[str, str]) -> TransportResponse:
        self.calls.append((url, dict(headers)))
        outcome = self.routes.get(url, TransportResponse(404, b"not found"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def page_html() -> str:
    return _read_fixture("page.html")


@pytest.fixture
def minimal_html() -> str:
    return _read_fixture("minimal.html")


@pytest.fixture
def page(page_html: str) -> Document:
    return Document(url="https://example.com/shovels", html=page_html)


@pytest.fixture
def minimal(minimal_html: str) -> Document:
    return Document(url="https://example.com/minimal", html=minimal_html)


@pytest.fixture
def transport(page_html: str) -> FakeTransport:
    return FakeTransport({
        "https://example.com/shovels": TransportResponse(200, page_html.encode("utf-8")),
    })


@pytest.fixture
def client(transport: FakeTransport) -> Shovel:
    return Shovel(transport=transport)


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    return FakeTransport
