"""
Shared access to the SQL regions of open documents.

Every feature that needs the document-wide region list goes through one
RegionService so that a scan is computed once per document version and the
cache is invalidated on edit and close.
"""

import logging
import threading
from typing import Optional, Tuple

from lsprotocol import types

from rsql_lsp.config.models import DetectionConfigModel
from rsql_lsp.core.cache import DocumentCache
from rsql_lsp.core.document import Document
from rsql_lsp.core.models import CachedRegion
from rsql_lsp.core.regions import find_all_regions

logger = logging.getLogger(__name__)


class RegionService:
    """Region lookups backed by the per-document cache."""

    def __init__(self, config: DetectionConfigModel, cache: Optional[DocumentCache] = None):
        self.config = config
        self.cache = cache or DocumentCache(ttl_ms=config.limits.cache_ttl_ms)

    def get_regions(
        self, document: Document, cancel: Optional[threading.Event] = None
    ) -> Optional[Tuple[CachedRegion, ...]]:
        """
        Regions of ``document``, from the cache when still valid.

        Returns:
            The regions, or None when the scan was cancelled
        """
        cached = self.cache.get(document)
        if cached is not None:
            return cached

        regions = find_all_regions(document, self.config, cancel)
        if regions is None:
            logger.debug(f"Region scan of {document.uri} cancelled")
            return None
        return self.cache.put(document, regions).regions

    def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> None:
        self.cache.invalidate(params.text_document.uri)

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        self.cache.invalidate(params.text_document.uri)

    def update_config(self, config: DetectionConfigModel) -> None:
        """Switch to a new detection configuration; cached regions are dropped."""
        self.config = config
        self.cache = DocumentCache(ttl_ms=config.limits.cache_ttl_ms)

    def clear(self) -> None:
        self.cache.clear()
