"""Main diagnostics functionality for the LSP server."""

import logging
from typing import Dict, List, Optional, Tuple

from lsprotocol import types
from pygls.server import LanguageServer
from pygls.workspace import TextDocument

from rsql_lsp.config.models import DiagnosticsConfigModel
from rsql_lsp.core.context import clean_sql_string
from rsql_lsp.core.escapes import decode_r_string
from rsql_lsp.core.interpolation import strip_interpolations
from rsql_lsp.core.models import CachedRegion
from rsql_lsp.core.positions import to_position
from rsql_lsp.lsp.utils.duckdb_connector import DuckDBConnector
from rsql_lsp.lsp.utils.r_document import RDocument
from rsql_lsp.lsp.utils.region_service import RegionService

from .sql_checks import check_sql

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "rsql-lsp"
DIAGNOSTIC_CODE = "sql-syntax"


class DiagnosticsService:
    """Main service class for diagnostics functionality."""

    def __init__(
        self,
        region_service: RegionService,
        config: Optional[DiagnosticsConfigModel] = None,
        duck_db_connector: Optional[DuckDBConnector] = None,
    ):
        self._region_service = region_service
        self._config = config or DiagnosticsConfigModel()
        self._duck_db_connector = duck_db_connector
        self._diagnostics: Dict[str, Tuple[int, List[types.Diagnostic]]] = {}
        self._server: Optional[LanguageServer] = None

    def set_server(self, server: LanguageServer) -> None:
        """Set the server instance for publishing diagnostics."""
        self._server = server

    def update_config(self, config: DiagnosticsConfigModel) -> None:
        self._config = config

    def handle_document_open(self, params: types.DidOpenTextDocumentParams) -> None:
        self._refresh(params.text_document.uri)

    def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> None:
        self._refresh(params.text_document.uri)

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close events by clearing diagnostics."""
        self._diagnostics.pop(params.text_document.uri, None)
        if self._server:
            self._server.publish_diagnostics(params.text_document.uri, [])

    def _refresh(self, document_uri: str) -> None:
        if not self._server:
            logger.error("Server not set - cannot parse document")
            return
        self.parse_document(self._server.workspace.get_text_document(document_uri))
        self.publish_diagnostics(document_uri)

    def parse_document(self, text_document: TextDocument) -> None:
        """
        Check every SQL region of a document and store the diagnostics.

        Args:
            text_document: The pygls document; its position codec decides
                the client units of the published ranges
        """
        r_document = RDocument(text_document)
        version = text_document.version or 0

        try:
            if not self._config.enabled or not r_document.should_provide_lsp():
                self._diagnostics[r_document.uri] = (version, [])
                return

            regions = self._region_service.get_regions(r_document.document) or ()
            diagnostics: List[types.Diagnostic] = []
            for region in regions:
                diagnostics.extend(self._check_region(region, r_document))

            self._diagnostics[r_document.uri] = (version, diagnostics)
            logger.debug(f"Found {len(diagnostics)} diagnostics in {r_document.uri}")

        except Exception as e:
            logger.error(f"Error parsing document {r_document.uri}: {e}")
            self._diagnostics[r_document.uri] = (version, [])

    def _check_region(self, region: CachedRegion, r_document: RDocument) -> List[types.Diagnostic]:
        if not region.is_direct_argument:
            logger.debug(f"Skipping nested literal in {region.function_name} call in {r_document.uri}")
            return []

        query = clean_sql_string(region.raw_text)
        if region.is_interpolating:
            query = strip_interpolations(query)
        if not query:
            return []

        region_range = r_document.to_client_range(region.range)
        diagnostics = [
            self._make_diagnostic(finding.message, finding.severity, region_range)
            for finding in check_sql(query)
        ]

        if self._duck_db_connector is not None and self._config.validate_with_duckdb:
            validation = self._duck_db_connector.validate_sql(query)
            if validation.is_error():
                error_range = region_range
                # Interpolations are stripped, so their offsets do not map back
                if not region.is_interpolating:
                    decoded, raw_offsets = decode_r_string(region.raw_text)
                    leading = len(decoded) - len(decoded.lstrip())
                    offset = raw_offsets[min(leading + validation.position, len(decoded))]
                    start = to_position(offset, region.range.start, r_document.document)
                    end = types.Position(line=start.line, character=start.character + 1)
                    error_range = r_document.to_client_range(types.Range(start=start, end=end))
                diagnostics.append(
                    self._make_diagnostic(
                        validation.error_message,
                        validation.get_diagnostic_severity(),
                        error_range,
                    )
                )

        return diagnostics

    @staticmethod
    def _make_diagnostic(
        message: str, severity: types.DiagnosticSeverity, text_range: types.Range
    ) -> types.Diagnostic:
        return types.Diagnostic(
            message=message,
            severity=severity,
            range=text_range,
            code=DIAGNOSTIC_CODE,
            source=DIAGNOSTIC_SOURCE,
        )

    def get_diagnostics(self, document_uri: str) -> Tuple[int, List[types.Diagnostic]]:
        """
        Get diagnostics for a document.

        Returns:
            Tuple of (version, diagnostics)
        """
        return self._diagnostics.get(document_uri, (0, []))

    def publish_diagnostics(self, document_uri: str) -> None:
        if not self._server:
            logger.error("Server not set - cannot publish diagnostics")
            return

        version, diagnostics = self.get_diagnostics(document_uri)
        self._server.publish_diagnostics(uri=document_uri, diagnostics=diagnostics, version=version)


def register_diagnostics(
    server: LanguageServer,
    region_service: RegionService,
    config: Optional[DiagnosticsConfigModel] = None,
    duck_db_connector: Optional[DuckDBConnector] = None,
) -> DiagnosticsService:
    """
    Create the diagnostics service for the LSP server.

    Document notifications reach the service through the
    DocumentEventCoordinator, so nothing is registered here directly.

    Args:
        server: The language server instance
        region_service: Shared region lookups
        config: Diagnostics configuration
        duck_db_connector: Optional DuckDB connector for parser validation

    Returns:
        The diagnostics service instance
    """
    try:
        service = DiagnosticsService(region_service, config, duck_db_connector)
        service.set_server(server)
        logger.info("Diagnostics functionality registered successfully")
        return service

    except Exception as e:
        logger.error(f"Error registering diagnostics functionality: {e}")
        raise
