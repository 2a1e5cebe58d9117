"""
Per-request view of an R document open in the editor.

Wraps a pygls TextDocument: decides whether the language server should handle
it, builds the core Document snapshot and converts positions between client
units (UTF-16 by default) and the string indices used by the detection engine.
"""

import logging
from typing import Optional

from lsprotocol import types
from pygls.workspace import TextDocument

from rsql_lsp.core.document import Document

logger = logging.getLogger(__name__)

R_LANGUAGE_IDS = {"r", "rmd"}
R_EXTENSIONS = (".r", ".rmd")


class RDocument:
    """Bridges a pygls TextDocument and the detection engine."""

    def __init__(self, text_document: TextDocument):
        self.text_document = text_document
        self._document: Optional[Document] = None

    @property
    def uri(self) -> str:
        return self.text_document.uri

    @property
    def document(self) -> Document:
        """Core snapshot of the current text, built once per request."""
        if self._document is None:
            self._document = Document.from_text_document(self.text_document)
        return self._document

    def should_provide_lsp(self) -> bool:
        """Check if this document is R source."""
        language_id = (getattr(self.text_document, "language_id", None) or "").lower()
        if language_id in R_LANGUAGE_IDS:
            return True
        return self.uri.lower().endswith(R_EXTENSIONS)

    def to_core_position(self, position: types.Position) -> types.Position:
        """Convert a client position to string-index columns."""
        return self.text_document.position_codec.position_from_client_units(
            self.text_document.lines, position
        )

    def to_client_position(self, position: types.Position) -> types.Position:
        """Convert a string-index position to client units."""
        return self.text_document.position_codec.position_to_client_units(
            self.text_document.lines, position
        )

    def to_client_range(self, text_range: types.Range) -> types.Range:
        return types.Range(
            start=self.to_client_position(text_range.start),
            end=self.to_client_position(text_range.end),
        )

    def client_length(self, text: str) -> int:
        """Length of ``text`` in client units."""
        return self.text_document.position_codec.client_num_units(text)
