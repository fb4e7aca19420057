"""shovel.parser - HTML parsing collaborator.

The core never tokenizes HTML itself.  It talks to an :class:`HtmlParser`,
which turns markup into an opaque tree handle and evaluates CSS selectors
against it, returning canonical :class:`~shovel.models.Element` snapshots.

The default binding, :class:`SoupParser`, uses BeautifulSoup with the lxml
tree builder for whole documents and soupsieve (through ``Tag.select``) for
selector matching.  Swap it process-wide with :func:`set_default_parser` or
per client by passing ``parser=`` to :class:`~shovel.client.Shovel`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from bs4 import BeautifulSoup, CData, NavigableString, Tag

from shovel.models import Element

logger = logging.getLogger(__name__)


@runtime_checkable
class HtmlParser(Protocol):
    """Contract every parsing backend must satisfy."""

    def parse_document(self, html: str) -> Any:
        """Parse a full HTML document and return its root handle."""
        ...

    def parse_fragment(self, html: str) -> Any:
        """Parse the outer HTML of a single element and return that element's handle."""
        ...

    def select(self, node: Any, selector: str) -> list[Element]:
        """Return the descendants of *node* matching *selector*, in document order."""
        ...

    def select_first(
        self,
        node: Any,
        selector: str,
        predicate: Callable[[Element], bool] | None = None,
    ) -> Element | None:
        """Return the first descendant of *node* matching *selector* and *predicate*."""
        ...


# ---------------------------------------------------------------------------
# BeautifulSoup binding
# ---------------------------------------------------------------------------

_TEXT_TYPES = (NavigableString, CData)


def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _collapse(text: str) -> str:
    return " ".join(text.split())


class SoupParser:
    """:class:`HtmlParser` backed by BeautifulSoup + soupsieve.

    Multi-valued attributes (``class``, ``rel``, ...) are kept as the exact
    strings found in the markup, so ``[rel='shortcut icon']`` matches the way
    it does in a browser.

    Args:
        features: Tree builder for whole documents (default ``"lxml"``).
        fragment_features: Tree builder for element fragments.  ``html.parser``
            does not wrap fragments in ``<html><body>``, so the parsed root is
            the element itself.
    """

    def __init__(
        self,
        features: str = "lxml",
        fragment_features: str = "html.parser",
    ) -> None:
        self._features = features
        self._fragment_features = fragment_features

    def parse_document(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, self._features, multi_valued_attributes=None)

    def parse_fragment(self, html: str) -> Tag:
        soup = BeautifulSoup(html, self._fragment_features, multi_valued_attributes=None)
        root = soup.find(True)
        return root if isinstance(root, Tag) else soup

    def select(self, node: Tag, selector: str) -> list[Element]:
        return [self.to_element(tag) for tag in node.select(selector)]

    def select_first(
        self,
        node: Tag,
        selector: str,
        predicate: Callable[[Element], bool] | None = None,
    ) -> Element | None:
        if predicate is None:
            tag = node.select_one(selector)
            return None if tag is None else self.to_element(tag)
        # Matches are snapshotted one at a time, up to the first accepted.
        for tag in node.select(selector):
            element = self.to_element(tag)
            if predicate(element):
                return element
        return None

    def to_element(self, tag: Tag) -> Element:
        """Snapshot *tag* and its subtree as an :class:`Element`."""
        own_text = " ".join(
            str(child) for child in tag.children if type(child) in _TEXT_TYPES
        )
        element = Element(
            tag_name=tag.name,
            inner_html=tag.decode_contents(),
            outer_html=str(tag),
            text_content=_collapse(tag.get_text(separator=" ")),
            own_text_content=_collapse(own_text),
            attributes={name: _safe_str(value) for name, value in tag.attrs.items()},
            children=tuple(
                self.to_element(child) for child in tag.children if isinstance(child, Tag)
            ),
        )
        element._parser = self
        return element


# ---------------------------------------------------------------------------
# Process-wide default
# ---------------------------------------------------------------------------

_default_parser: HtmlParser = SoupParser()


def get_default_parser() -> HtmlParser:
    return _default_parser


def set_default_parser(parser: HtmlParser) -> None:
    """Replace the parser used by documents that were not bound to one explicitly."""
    global _default_parser
    logger.debug("default parser set to %s", type(parser).__name__)
    _default_parser = parser
