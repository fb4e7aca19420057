"""URL-keyed document cache.

Keys are compared byte-for-byte (no URL normalization).  Entries never
expire; :meth:`DocumentCache.clear` drops all of them at once.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shovel.models import Document

logger = logging.getLogger(__name__)


class DocumentCache:
    """Lock-guarded ``url -> Document`` map shared by every fetch of a client."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, Document] = {}

    def get(self, url: str) -> Document | None:
        with self._lock:
            return self._entries.get(url)

    def put(self, url: str, document: Document) -> None:
        with self._lock:
            self._entries[url] = document

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("cache cleared (%d entries)", count)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
