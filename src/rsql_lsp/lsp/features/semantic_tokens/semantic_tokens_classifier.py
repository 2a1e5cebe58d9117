"""Semantic token classification and per-document token storage."""

import enum
import logging
from typing import Dict, List, Optional

import attrs

from rsql_lsp.core.document import Document
from rsql_lsp.lsp.utils.region_service import RegionService

logger = logging.getLogger(__name__)


class TokenModifier(enum.IntFlag):
    """Token modifiers, in legend order."""

    defaultLibrary = enum.auto()


def _validate_non_negative(instance, attribute, value):
    """Validator for non-negative integer values."""
    if value < 0:
        raise ValueError(f"Token {attribute.name} must be non-negative")


def _validate_non_empty_text(instance, attribute, value):
    """Validator for non-empty text values."""
    if not value:
        raise ValueError("Token text cannot be empty")


@attrs.define
class Token:
    """
    A single-line semantic token in document coordinates.

    ``offset`` is a string index into the line; conversion to client units
    happens when the token data is encoded.
    """

    line: int = attrs.field(validator=_validate_non_negative)
    offset: int = attrs.field(validator=_validate_non_negative)
    text: str = attrs.field(validator=_validate_non_empty_text)
    tok_type: str = ""
    tok_modifiers: List[TokenModifier] = attrs.field(factory=list)


class SemanticTokensParser:
    """Computes and stores the semantic tokens of each document."""

    def __init__(self, region_service: RegionService, processor=None):
        # Imported here to avoid circular imports
        from .token_processor import TokenProcessor

        self._tokens: Dict[str, List[Token]] = {}
        self._versions: Dict[str, int] = {}
        self._region_service = region_service
        self._processor = processor or TokenProcessor()

    @property
    def tokens(self) -> Dict[str, List[Token]]:
        return self._tokens.copy()

    def parse(self, document: Document, cancel=None) -> Optional[List[Token]]:
        """
        Compute and store the tokens of every SQL region of ``document``.

        Returns:
            The tokens, or None when cancelled (nothing is stored)
        """
        if not document.uri:
            raise ValueError("URI cannot be empty or None")

        regions = self._region_service.get_regions(document, cancel)
        if regions is None:
            return None

        tokens: List[Token] = []
        for region in regions:
            if cancel is not None and cancel.is_set():
                return None
            if not region.raw_text.strip():
                continue
            tokens.extend(self._processor.process_region(region, document))

        self._tokens[document.uri] = tokens
        self._versions[document.uri] = document.version
        logger.debug(f"Parsed {len(tokens)} tokens for URI: {document.uri}")
        return tokens

    def get_tokens(self, document: Document) -> List[Token]:
        """Stored tokens when they match the document version, else a fresh parse."""
        if self._versions.get(document.uri) == document.version and document.uri in self._tokens:
            return self._tokens[document.uri]
        return self.parse(document) or []

    def get_tokens_for_uri(self, uri: str) -> List[Token]:
        return self._tokens.get(uri, [])

    def clear_tokens_for_uri(self, uri: str) -> None:
        self._tokens.pop(uri, None)
        self._versions.pop(uri, None)
        logger.debug(f"Cleared tokens for URI: {uri}")
