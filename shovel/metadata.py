"""Page-level metadata helpers built only on the query API.

Every function takes a :class:`~shovel.models.Document` and returns plain
values; nothing is cached or mutated.

Two aggregation policies coexist on purpose:

- :func:`get_open_graph_metadata`, :func:`get_twitter_card_metadata` and
  :func:`get_meta_tags` build single-valued maps where the **last** matching
  element wins;
- :attr:`Document.metadata <shovel.models.Document.metadata>` and
  :attr:`Document.link_tags <shovel.models.Document.link_tags>` keep **every**
  value in a list.
"""

from __future__ import annotations

import logging
import re

from shovel.models import Document, Element
from shovel.schemas import PageMetadata

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r"charset=", re.IGNORECASE)

# Highest priority first.
_FAVICON_RELS: tuple[str, ...] = (
    "icon",
    "shortcut icon",
    "apple-touch-icon",
    "apple-touch-icon-precomposed",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _trimmed(value: str | None) -> str | None:
    """Strip *value*; map missing or blank values to ``None``."""
    if value is None:
        return None
    return value.strip() or None


def _attr_of_first(document: Document, selector: str, attribute: str) -> str | None:
    element = document.query_selector(selector)
    if element is None:
        return None
    return _trimmed(element.get(attribute))


def _collect(document: Document, selector: str, attribute: str) -> list[str]:
    """Non-empty, stripped *attribute* values of every match, in document order."""
    values: list[str] = []
    for element in document.query_selector_all(selector):
        value = _trimmed(element.get(attribute))
        if value:
            values.append(value)
    return values


def _prefixed_map(document: Document, attribute: str, prefix: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for element in document.query_selector_all(f"meta[{attribute}^='{prefix}']"):
        key = element.get(attribute)
        content = element.get("content")
        if key is None or content is None:
            continue
        result[key[len(prefix):].strip()] = content.strip()
    return result


# ---------------------------------------------------------------------------
# Language
# ---------------------------------------------------------------------------

def get_language(document: Document) -> str | None:
    """``<html lang>`` if set, else ``<meta http-equiv="Content-Language">``."""
    html = document.query_selector("html")
    if html is not None:
        lang = _trimmed(html.get("lang"))
        if lang:
            return lang
    return _attr_of_first(document, "meta[http-equiv='Content-Language' i]", "content")


def get_language_codes(document: Document) -> list[str]:
    language = get_language(document)
    if language is None:
        return []
    return [code.strip() for code in language.split(",") if code.strip()]


# ---------------------------------------------------------------------------
# Head
# ---------------------------------------------------------------------------

def get_title(document: Document) -> str | None:
    title = document.query_selector("title")
    if title is None:
        return None
    return title.text_content.strip()


def get_description(document: Document) -> str | None:
    return _attr_of_first(document, "meta[name='description']", "content")


def get_canonical_url(document: Document) -> str | None:
    return _attr_of_first(document, "link[rel='canonical' i]", "href")


def get_viewport(document: Document) -> str | None:
    return _attr_of_first(document, "meta[name='viewport']", "content")


def get_charset(document: Document) -> str | None:
    """Charset from ``<meta charset>``, else from a ``Content-Type`` http-equiv.

    For the http-equiv form, the text after ``charset=`` in ``content`` is
    returned; ``None`` when the content carries no charset parameter.
    """
    charset = _attr_of_first(document, "meta[charset]", "charset")
    if charset:
        return charset

    content_type = document.query_selector(
        "[http-equiv]",
        lambda element: (element.get("http-equiv") or "").lower() == "content-type",
    )
    if content_type is None:
        return None
    content = content_type.get("content") or ""
    match = _CHARSET_RE.search(content)
    if match is None:
        return None
    return _trimmed(content[match.end():])


def get_open_graph_metadata(document: Document) -> dict[str, str]:
    """``og:*`` properties keyed without the prefix; the last duplicate wins."""
    return _prefixed_map(document, "property", "og:")


def get_twitter_card_metadata(document: Document) -> dict[str, str]:
    """``twitter:*`` names keyed without the prefix; the last duplicate wins."""
    return _prefixed_map(document, "name", "twitter:")


def get_meta_tags(document: Document) -> dict[str, str]:
    """Every ``<meta>`` name (or property) mapped to its content; the last duplicate wins."""
    tags: dict[str, str] = {}
    for element in document.query_selector_all("meta"):
        key = element.get("name")
        if key is None:
            key = element.get("property")
        content = element.get("content")
        if key is None or content is None:
            continue
        tags[key.strip()] = content.strip()
    return tags


def get_icon_links(document: Document) -> list[str]:
    return _collect(document, "link[rel='icon' i], link[rel='shortcut icon' i]", "href")


def get_favicon_url(document: Document) -> str | None:
    """First ``href`` found walking ``icon``, ``shortcut icon``, then the Apple touch icons."""
    for rel in _FAVICON_RELS:
        link = document.query_selector(f"link[rel='{rel}' i]")
        if link is not None and link.get("href") is not None:
            return link.get("href")
    return None


def get_style_sheets(document: Document) -> list[str]:
    return _collect(document, "link[rel='stylesheet' i]", "href")


def get_head_links(document: Document) -> list[str]:
    return _collect(document, "head link", "href")


def get_scripts(document: Document) -> list[str]:
    return _collect(document, "script", "src")


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

def get_body_text(document: Document) -> str:
    """Whole body text, stripped.

    Raises:
        IllegalDocumentStructure: If the document has no body.
    """
    return document.body.text_content.strip()


def get_main_text(document: Document) -> str:
    """Text of the first ``<main>``, falling back to the whole body."""
    main: Element = document.query_selector("main") or document.body
    return main.text_content.strip()


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

def extract_metadata(document: Document) -> PageMetadata:
    """Run every single-valued helper above and return the results together.

    Unlike :func:`get_body_text`, a document without ``<body>`` is accepted:
    the text fields are ``None`` in that case.
    """
    if document.query_selector("body") is None:
        logger.debug("extract_metadata: %s has no body", document.url)
        body_text = main_text = None
    else:
        body_text = get_body_text(document)
        main_text = get_main_text(document)

    return PageMetadata(
        url=document.url,
        title=get_title(document),
        description=get_description(document),
        canonical_url=get_canonical_url(document),
        charset=get_charset(document),
        viewport=get_viewport(document),
        language=get_language(document),
        language_codes=get_language_codes(document),
        favicon_url=get_favicon_url(document),
        open_graph=get_open_graph_metadata(document),
        twitter_card=get_twitter_card_metadata(document),
        meta_tags=get_meta_tags(document),
        icon_links=get_icon_links(document),
        style_sheets=get_style_sheets(document),
        head_links=get_head_links(document),
        scripts=get_scripts(document),
        body_text=body_text,
        main_text=main_text,
    )
