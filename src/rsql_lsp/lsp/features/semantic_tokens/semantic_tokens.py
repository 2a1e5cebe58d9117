"""Main semantic tokens functionality for the LSP server."""

import logging
from typing import Optional

from lsprotocol import types
from pygls.server import LanguageServer

from rsql_lsp.lsp.utils.r_document import RDocument
from rsql_lsp.lsp.utils.region_service import RegionService

from .document_handler import DocumentEventHandler
from .position_calculator import PositionCalculator
from .semantic_tokens_classifier import SemanticTokensParser
from .semantic_tokens_config import SemanticTokensConfig

logger = logging.getLogger(__name__)


class SemanticTokensService:
    """Main service class for semantic tokens functionality."""

    def __init__(self, region_service: RegionService):
        self._config = SemanticTokensConfig()
        self._parser = SemanticTokensParser(region_service)
        self._position_calculator = PositionCalculator()
        self._server: Optional[LanguageServer] = None

    @property
    def parser(self) -> SemanticTokensParser:
        return self._parser

    def get_semantic_tokens_full(self, params: types.SemanticTokensParams) -> Optional[types.SemanticTokens]:
        """
        Return the semantic tokens for the entire document.

        Args:
            params: Semantic tokens parameters

        Returns:
            SemanticTokens object with token data, or None if not applicable
        """
        logger.debug(f"Semantic tokens request received for {params.text_document.uri}")
        return self._compute(params.text_document.uri, None)

    def get_semantic_tokens_range(
        self, params: types.SemanticTokensRangeParams
    ) -> Optional[types.SemanticTokens]:
        """
        Return the semantic tokens starting inside the requested range.

        Args:
            params: Semantic tokens range parameters

        Returns:
            SemanticTokens object with token data for the range, or None if not applicable
        """
        logger.debug(f"Semantic tokens range request received for {params.text_document.uri}")
        return self._compute(params.text_document.uri, params.range)

    def _compute(self, document_uri: str, text_range: Optional[types.Range]) -> Optional[types.SemanticTokens]:
        if self._server is None:
            logger.error("Server not set - register_semantic_tokens must be called first")
            return None

        try:
            r_document = RDocument(self._server.workspace.get_text_document(document_uri))
            if not r_document.should_provide_lsp():
                logger.debug("Not providing LSP for this document - returning None")
                return None

            tokens = self._parser.get_tokens(r_document.document)
            data = self._position_calculator.calculate_relative_positions(tokens, r_document, text_range)

            logger.debug(f"Returning semantic tokens with {len(data)} data points")
            return types.SemanticTokens(data=data)

        except Exception as e:
            logger.error(f"Error generating semantic tokens for {document_uri}: {e}")
            return None

    def _set_server(self, server: LanguageServer) -> None:
        """Set the server instance (called by register function)."""
        self._server = server


def register_semantic_tokens(
    server: LanguageServer, region_service: RegionService
) -> tuple[SemanticTokensService, DocumentEventHandler]:
    """
    Register semantic tokens functionality with the LSP server.

    Args:
        server: The language server instance
        region_service: Shared region lookups

    Returns:
        Tuple of (semantic tokens service, document event handler)
    """
    try:
        service = SemanticTokensService(region_service)
        service._set_server(server)

        document_handler = DocumentEventHandler(server, service.parser)

        legend = types.SemanticTokensLegend(
            token_types=SemanticTokensConfig.TOKEN_TYPES,
            token_modifiers=SemanticTokensConfig.TOKEN_MODIFIERS,
        )
        semantic_tokens_options = types.SemanticTokensOptions(legend=legend, full=True, range=True)

        @server.feature(types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, semantic_tokens_options)
        def semantic_tokens_full(ls: LanguageServer, params: types.SemanticTokensParams):
            """Return the semantic tokens for the entire document."""
            return service.get_semantic_tokens_full(params)

        @server.feature(types.TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE)
        def semantic_tokens_range(ls: LanguageServer, params: types.SemanticTokensRangeParams):
            """Return the semantic tokens for a range in the document."""
            return service.get_semantic_tokens_range(params)

        logger.info("Semantic tokens functionality registered successfully")
        return service, document_handler

    except Exception as e:
        logger.error(f"Error registering semantic tokens functionality: {e}")
        raise
