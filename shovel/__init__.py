"""shovel - fetch a web page and query it with CSS selectors.

Quick usage::

    from shovel import fetch, get_title, get_favicon_url

    document = await fetch("https://example.com")
    print(get_title(document))
    print(get_favicon_url(document))
    for link in document.query_selector_all("a[href^='https://']"):
        print(link["href"], link.text_content)

Offline parsing::

    from shovel import Document, get_open_graph_metadata

    document = Document(url="https://example.com", html=html)
    print(get_open_graph_metadata(document))

Custom transport / parser::

    from shovel import Shovel, HttpxTransport

    async with Shovel(transport=HttpxTransport(timeout=5)) as client:
        document = await client.fetch("https://example.com")
"""

from shovel.cache import DocumentCache
from shovel.errors import (
    ElementNotFound,
    FetchError,
    HttpStatusFailure,
    IllegalDocumentStructure,
    ShovelError,
    TransportFailure,
)
from shovel.client import (
    Shovel,
    clear_cache,
    close_client,
    fetch,
    fetch_bytes,
    fetch_bytes_or_none,
    fetch_document,
    fetch_document_or_none,
    fetch_text,
    fetch_text_or_none,
    get_default_client,
)
from shovel.metadata import (
    extract_metadata,
    get_body_text,
    get_canonical_url,
    get_charset,
    get_description,
    get_favicon_url,
    get_head_links,
    get_icon_links,
    get_language,
    get_language_codes,
    get_main_text,
    get_meta_tags,
    get_open_graph_metadata,
    get_scripts,
    get_style_sheets,
    get_title,
    get_twitter_card_metadata,
    get_viewport,
)
from shovel.models import Document, Element
from shovel.parser import HtmlParser, SoupParser, get_default_parser, set_default_parser
from shovel.profiles import load_profile, profile_headers
from shovel.query import Queryable
from shovel.schemas import PageMetadata
from shovel.transform import (
    transform_class_name,
    transform_id,
    transform_query_selector,
    transform_query_selector_all,
)
from shovel.transport import HttpTransport, HttpxTransport, TransportResponse

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocumentCache",
    "Element",
    "ElementNotFound",
    "FetchError",
    "HtmlParser",
    "HttpStatusFailure",
    "HttpTransport",
    "HttpxTransport",
    "IllegalDocumentStructure",
    "PageMetadata",
    "Queryable",
    "Shovel",
    "ShovelError",
    "SoupParser",
    "TransportFailure",
    "TransportResponse",
    "clear_cache",
    "close_client",
    "extract_metadata",
    "fetch",
    "fetch_bytes",
    "fetch_bytes_or_none",
    "fetch_document",
    "fetch_document_or_none",
    "fetch_text",
    "fetch_text_or_none",
    "get_body_text",
    "get_canonical_url",
    "get_charset",
    "get_default_client",
    "get_default_parser",
    "get_description",
    "get_favicon_url",
    "get_head_links",
    "get_icon_links",
    "get_language",
    "get_language_codes",
    "get_main_text",
    "get_meta_tags",
    "get_open_graph_metadata",
    "get_scripts",
    "get_style_sheets",
    "get_title",
    "get_twitter_card_metadata",
    "get_viewport",
    "load_profile",
    "profile_headers",
    "set_default_parser",
    "transform_class_name",
    "transform_id",
    "transform_query_selector",
    "transform_query_selector_all",
]
