"""Exception hierarchy for shovel.

Fetch failures (:class:`TransportFailure`, :class:`HttpStatusFailure`) share
the :class:`FetchError` base so the ``*_or_none`` helpers can suppress exactly
those two kinds.  Query and structure errors always propagate.
"""

from __future__ import annotations


class ShovelError(Exception):
    """Base class for every error raised by shovel."""


class FetchError(ShovelError, RuntimeError):
    """Raised when a URL cannot be fetched.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
        body   -- decoded response body, when a response was received
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


class TransportFailure(FetchError):
    """The GET could not be completed (DNS, connect, TLS, timeout, ...)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(
            f"Error happened when trying to fetch {url!r}: {cause}",
            url=url,
        )
        self.cause = cause


class HttpStatusFailure(FetchError):
    """A response arrived but its status code was not 2xx."""

    def __init__(self, url: str, status: int, body: str) -> None:
        super().__init__(
            f"Failed to fetch {url!r}: HTTP {status}",
            url=url,
            status=status,
            body=body,
        )


class ElementNotFound(ShovelError, LookupError):
    """A helper required a matching element and found none."""

    def __init__(self, selector: str) -> None:
        super().__init__(f"Element not found: {selector!r}")
        self.selector = selector


class IllegalDocumentStructure(ShovelError, RuntimeError):
    """A required structural element (``body``, ``head``, ``title``) is missing."""

    def __init__(self, tag_name: str) -> None:
        super().__init__(f"Document does not have a {tag_name} element")
        self.tag_name = tag_name
