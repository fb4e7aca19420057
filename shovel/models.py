"""Immutable Document / Element value types.

A :class:`Document` is the pair ``(url, html)``; its tree is parsed lazily by
the active :class:`~shovel.parser.HtmlParser` on the first query and reused
afterwards.  An :class:`Element` is a fully materialised snapshot of one node
and its descendants.  Neither type supports structural edits.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from shovel.errors import IllegalDocumentStructure
from shovel.query import Queryable

_SCRIPT_RE = re.compile(r"<script\b[^>]*>([\s\S]*?)</script>")
_STYLE_RE = re.compile(r"<style\b[^>]*>([\s\S]*?)</style>")


def _resolve_parser(parser: Any) -> Any:
    if parser is not None:
        return parser
    from shovel.parser import get_default_parser
    return get_default_parser()


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------

class Element(Queryable, BaseModel):
    """A single HTML element and its subtree."""

    model_config = ConfigDict(frozen=True)

    tag_name: str
    inner_html: str = ""
    outer_html: str = ""
    text_content: str = ""
    own_text_content: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)
    children: tuple[Element, ...] = ()

    _parser: Any = PrivateAttr(default=None)
    _fragment: Any = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def default_own_text(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("own_text_content") is None:
            data = {**data, "own_text_content": data.get("text_content", "")}
        return data

    @field_validator("tag_name", mode="before")
    @classmethod
    def lower_tag_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower()
        return v

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((self.tag_name, self.outer_html))

    # ------------------------------------------------------------------
    # Attribute projections
    # ------------------------------------------------------------------

    def get(self, attribute: str) -> str | None:
        """Return the value of *attribute*, or ``None`` when it is absent."""
        return self.attributes.get(attribute)

    def __getitem__(self, attribute: str) -> str | None:
        return self.get(attribute)

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    @property
    def classes(self) -> list[str]:
        return self.attributes.get("class", "").split()

    @property
    def style(self) -> str | None:
        return self.attributes.get("style")

    # ------------------------------------------------------------------
    # Queries (descendants only)
    # ------------------------------------------------------------------

    def _tree(self) -> tuple[Any, Any]:
        parser = _resolve_parser(self._parser)
        if self._fragment is None:
            self._parser = parser
            self._fragment = parser.parse_fragment(self.outer_html)
        return parser, self._fragment

    def query_selector_all(self, selector: str) -> list[Element]:
        parser, node = self._tree()
        return parser.select(node, selector)

    def _select_first(self, selector, predicate):
        parser, node = self._tree()
        return parser.select_first(node, selector, predicate)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

class Document(Queryable, BaseModel):
    """A fetched HTML page: the URL it was fetched from and its raw markup."""

    model_config = ConfigDict(frozen=True)

    url: str
    html: str

    _parser: Any = PrivateAttr(default=None)
    _root: Any = PrivateAttr(default=None)

    @classmethod
    def from_html(cls, url: str, html: str, parser: Any = None) -> Document:
        """Build a document bound to *parser* instead of the process default."""
        document = cls(url=url, html=html)
        document._parser = parser
        return document

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.url == other.url and self.html == other.html

    def __hash__(self) -> int:
        return hash((self.url, self.html))

    def _tree(self) -> tuple[Any, Any]:
        parser = _resolve_parser(self._parser)
        if self._root is None:
            self._parser = parser
            self._root = parser.parse_document(self.html)
        return parser, self._root

    def query_selector_all(self, selector: str) -> list[Element]:
        parser, node = self._tree()
        return parser.select(node, selector)

    def _select_first(self, selector, predicate):
        parser, node = self._tree()
        return parser.select_first(node, selector, predicate)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _require(self, tag_name: str) -> Element:
        element = self.query_selector(tag_name)
        if element is None:
            raise IllegalDocumentStructure(tag_name)
        return element

    @property
    def body(self) -> Element:
        """The ``<body>`` element.

        Raises:
            IllegalDocumentStructure: If the document has no body.
        """
        return self._require("body")

    @property
    def head(self) -> Element:
        """The ``<head>`` element.

        Raises:
            IllegalDocumentStructure: If the document has no head.
        """
        return self._require("head")

    @property
    def title(self) -> str:
        """Text of the first ``<title>`` element.

        Raises:
            IllegalDocumentStructure: If the document has no title.
        """
        return self._require("title").text_content

    @property
    def body_elements(self) -> str:
        """Body inner HTML with ``<script>`` and ``<style>`` blocks removed.

        This is a single regex pass per tag, not a sanitizer: nested or
        malformed tags are left as they are.
        """
        html = self.body.inner_html
        html = _SCRIPT_RE.sub("", html)
        return _STYLE_RE.sub("", html)

    # ------------------------------------------------------------------
    # Grouped meta / link maps (every value kept, in document order)
    # ------------------------------------------------------------------

    @property
    def metadata(self) -> dict[str, list[str]]:
        """Map each ``<meta>`` name (or property) to all of its non-empty contents."""
        return _group(self.query_selector_all("meta"), ("name", "property"), "content")

    @property
    def link_tags(self) -> dict[str, list[str]]:
        """Map each ``<link>`` rel to all of its non-empty hrefs."""
        return _group(self.query_selector_all("link"), ("rel",), "href")


def _group(
    elements: list[Element],
    key_attrs: tuple[str, ...],
    value_attr: str,
) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for element in elements:
        key = None
        for attr in key_attrs:
            key = element.get(attr)
            if key is not None:
                break
        if not key:
            continue
        value = element.get(value_attr) or ""
        bucket = grouped.setdefault(key, [])
        if value:
            bucket.append(value)
    return {key: values for key, values in grouped.items() if values}
