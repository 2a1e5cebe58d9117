"""Per-document cache of detected SQL regions."""

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from .document import Document
from .models import CachedRegion, CachedRegionSet

logger = logging.getLogger(__name__)


class DocumentCache:
    """
    Keyed store of the last region scan per document.

    Entries are replaced wholesale and hold immutable tuples, so a caller can
    never mutate cached state. A hit requires the same document version and an
    entry younger than the TTL; a miss on either condition evicts the entry.
    """

    def __init__(self, ttl_ms: int = 5000, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_ms: Time-to-live of an entry in milliseconds
            clock: Returns the current time in seconds
        """
        self._ttl = ttl_ms / 1000.0
        self._clock = clock
        self._entries: Dict[str, CachedRegionSet] = {}

    def get(self, document: Document) -> Optional[Tuple[CachedRegion, ...]]:
        entry = self._entries.get(document.uri)
        if entry is None:
            return None

        if entry.document_version != document.version:
            logger.debug(f"Cache entry for {document.uri} is stale (version {entry.document_version})")
            del self._entries[document.uri]
            return None

        if self._clock() - entry.timestamp >= self._ttl:
            logger.debug(f"Cache entry for {document.uri} expired")
            del self._entries[document.uri]
            return None

        return entry.regions

    def put(self, document: Document, regions: Iterable[CachedRegion]) -> CachedRegionSet:
        entry = CachedRegionSet(
            document_version=document.version,
            regions=tuple(regions),
            timestamp=self._clock(),
        )
        self._entries[document.uri] = entry
        return entry

    def invalidate(self, document: Union[Document, str]) -> None:
        """Drop the entry of a document (or URI), if any."""
        uri = document if isinstance(document, str) else document.uri
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
