"""Document event handlers for semantic tokens."""

import logging

from lsprotocol import types
from pygls.server import LanguageServer

from rsql_lsp.lsp.utils.r_document import RDocument

from .semantic_tokens_classifier import SemanticTokensParser

logger = logging.getLogger(__name__)


class DocumentEventHandler:
    """Re-parses semantic tokens when an R document is opened or edited."""

    def __init__(self, server: LanguageServer, parser: SemanticTokensParser):
        self._server = server
        self._parser = parser

    def handle_document_open(self, params: types.DidOpenTextDocumentParams) -> None:
        self._parse_document_if_needed(params.text_document.uri)

    def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> None:
        self._parse_document_if_needed(params.text_document.uri)

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        self._parser.clear_tokens_for_uri(params.text_document.uri)

    def _parse_document_if_needed(self, document_uri: str) -> None:
        try:
            r_document = RDocument(self._server.workspace.get_text_document(document_uri))
            if r_document.should_provide_lsp():
                self._parser.parse(r_document.document)
                logger.debug(f"Parsed document: {document_uri}")
        except Exception as e:
            logger.warning(f"Error parsing document {document_uri}: {e}")
