import logging
from typing import Any, Dict, Optional

from pygls.server import LanguageServer
from pygls.protocol import LanguageServerProtocol
from lsprotocol.types import (
    INITIALIZE,
    INITIALIZED,
    InitializedParams,
    InitializeParams,
    ServerCapabilities,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
)

from rsql_lsp.config.loader import merge_overrides
from rsql_lsp.config.models import ServerConfigModel
from rsql_lsp.errors import ConfigError

from .features.completion import register_completion
from .features.diagnostics import DiagnosticsService, register_diagnostics
from .features.formatting import SQLFormatter, register_formatting
from .features.semantic_tokens import register_semantic_tokens
from .utils.duckdb_connector import DuckDBConnector
from .utils.document_event_coordinator import DocumentEventCoordinator
from .utils.region_service import RegionService

logger = logging.getLogger(__name__)

SERVER_NAME = "rsql-lsp"
SERVER_VERSION = "v0.1.0"


class ServerInitializationState:
    """Tracks the initialization state of the LSP server components."""

    def __init__(self):
        self.duckdb_connector_ready = False
        self.features_registered = False
        self.initialization_errors = []

    def add_error(self, component: str, error: Exception):
        """Add an initialization error for tracking."""
        self.initialization_errors.append((component, str(error)))
        logger.error(f"Initialization error in {component}: {error}")

    def get_error_summary(self) -> str:
        """Get a summary of initialization errors."""
        if not self.initialization_errors:
            return "No initialization errors"

        return f"Initialization errors: {'; '.join([f'{comp}: {err}' for comp, err in self.initialization_errors])}"


class PatchedLanguageServerProtocol(LanguageServerProtocol):
    """A patched version of the language server protocol to handle semantic tokens capabilities."""

    def __init__(self, *args, **kwargs):
        self._server_capabilities = ServerCapabilities()
        super().__init__(*args, **kwargs)

    @property
    def server_capabilities(self):
        return self._server_capabilities

    @server_capabilities.setter
    def server_capabilities(self, value: ServerCapabilities):
        # Check if semantic tokens full feature is registered and set the capability
        if TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL in self.fm.features:
            opts = self.fm.feature_options.get(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, None)
            if opts:
                value.semantic_tokens_provider = opts
        self._server_capabilities = value


class RSqlLanguageServer:
    """
    LSP Server providing SQL language support inside R source files.

    SQL strings passed to DBI, dbplyr and glue functions get:
    - Semantic tokens for syntax highlighting
    - Code completion for SQL keywords, functions and DuckDB suggestions
    - Diagnostics from heuristic checks and the DuckDB parser
    - A format-SQL command

    The server owns the shared region cache and the optional DuckDB
    connection, and fans document events out to every feature.
    """

    def __init__(
        self,
        config: Optional[ServerConfigModel] = None,
        use_duckdb: bool = True,
        database: str = ":memory:",
        port: Optional[int] = None,
    ):
        """
        Initialize the rsql-lsp server.

        Args:
            config: Server configuration; defaults apply when omitted
            use_duckdb: Whether to open a DuckDB connection for completion and validation
            database: DuckDB database path
            port: Port number for TCP mode
        """
        self.config = config or ServerConfigModel()
        self.use_duckdb = use_duckdb
        self.database = database
        self.port = port or 3000

        # Core components
        self.duck_db_connector: Optional[DuckDBConnector] = None
        self.region_service = RegionService(self.config.detection)
        self.formatter = SQLFormatter(self.config.formatting, self.config.detection)
        self.diagnostics_service: Optional[DiagnosticsService] = None
        self.ls = LanguageServer(SERVER_NAME, SERVER_VERSION, protocol_cls=PatchedLanguageServerProtocol)
        self.document_coordinator = DocumentEventCoordinator()

        # Initialization state tracking
        self.init_state = ServerInitializationState()

        self._setup_server()

        logger.info(f"rsql-lsp server initialized on port {self.port}")
        if not use_duckdb:
            logger.info("Running without DuckDB")
        logger.info(self.init_state.get_error_summary())

    def _setup_server(self):
        """
        Set up the server components in the correct order.

        A missing DuckDB only disables DuckDB suggestions and parser
        validation; every feature is still registered.
        """
        self._register_handlers()

        if self.use_duckdb:
            self._initialize_database_components()

        try:
            self._register_features()
            self.init_state.features_registered = True
            logger.info("LSP features initialized successfully")
        except Exception as e:
            self.init_state.add_error("Feature Registration", e)

    def _initialize_database_components(self):
        """Create the DuckDB connector with proper error handling."""
        try:
            connector = DuckDBConnector(database=self.database)
            connector.connect()
            self.duck_db_connector = connector
            self.init_state.duckdb_connector_ready = True
            logger.info("DuckDB connector initialized successfully")
        except Exception as e:
            self.init_state.add_error("DuckDB Connector", e)

    def _register_handlers(self):
        """Register LSP protocol handlers."""

        @self.ls.feature(INITIALIZE)
        def initialize(params: InitializeParams):
            """Apply initializationOptions on top of the loaded configuration."""
            options = params.initialization_options
            if options:
                self.apply_overrides(options)

        @self.ls.feature(INITIALIZED)
        def initialized(params: InitializedParams):
            """Handle the initialized notification."""
            logger.info("LSP: Server initialized successfully")

        @self.ls.feature("shutdown")
        def shutdown(params=None):
            """Handle LSP shutdown request."""
            logger.info("LSP: Handling shutdown request")
            self._cleanup_resources()
            return None

        @self.ls.feature("exit")
        def exit_handler(params=None):
            """Handle exit notification."""
            logger.info("LSP: Server exiting")

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """
        Merge client-supplied settings into the configuration.

        Invalid overrides are logged and ignored; the previous configuration
        stays in effect.
        """
        try:
            config = merge_overrides(self.config, overrides)
        except ConfigError as e:
            logger.warning(f"Ignoring invalid initializationOptions: {e}")
            return

        self.config = config
        self.region_service.update_config(config.detection)
        self.formatter.config = config.formatting
        self.formatter.detection = config.detection
        if self.diagnostics_service:
            self.diagnostics_service.update_config(config.diagnostics)
        logger.info("Applied configuration overrides from the client")

    def _register_features(self):
        """
        Register LSP features with the server.

        The region service subscribes to document events first so that the
        cache is invalidated before diagnostics and semantic tokens re-scan.

        Raises:
            RuntimeError: If no features could be registered
        """
        logger.info("LSP: Registering features...")

        feature_results = {
            'completion': False,
            'diagnostics': False,
            'semantic_tokens': False,
            'formatting': False,
        }

        self.document_coordinator.register_handler(self.region_service)

        if self.config.completion:
            try:
                register_completion(self.ls, self.region_service, self.duck_db_connector)
                feature_results['completion'] = True
                logger.info("LSP: Completion feature registered")
            except Exception as e:
                self.init_state.add_error("Completion Feature", e)

        try:
            self.diagnostics_service = register_diagnostics(
                self.ls, self.region_service, self.config.diagnostics, self.duck_db_connector
            )
            self.document_coordinator.register_handler(self.diagnostics_service)
            feature_results['diagnostics'] = True
            logger.info("LSP: Diagnostics feature registered")
        except Exception as e:
            self.init_state.add_error("Diagnostics Feature", e)

        if self.config.semantic_tokens:
            try:
                _, semantic_tokens_handler = register_semantic_tokens(self.ls, self.region_service)
                self.document_coordinator.register_handler(semantic_tokens_handler)
                feature_results['semantic_tokens'] = True
                logger.info("LSP: Semantic tokens feature registered")
            except Exception as e:
                self.init_state.add_error("Semantic Tokens Feature", e)

        try:
            register_formatting(self.ls, self.formatter)
            feature_results['formatting'] = True
            logger.info("LSP: Formatting command registered")
        except Exception as e:
            self.init_state.add_error("Formatting Feature", e)

        self.document_coordinator.register_with_server(self.ls)

        registered_count = sum(feature_results.values())
        total_features = len(feature_results)

        logger.info(f"LSP: Feature registration completed - {registered_count}/{total_features} features registered")

        if registered_count == 0:
            raise RuntimeError("No LSP features could be registered - server cannot provide language support")

    def _cleanup_resources(self):
        """Clean up server resources in reverse order of initialization."""
        logger.info("Cleaning up LSP server resources...")

        try:
            if self.document_coordinator:
                self.document_coordinator.clear_handlers()
        except Exception as e:
            logger.error(f"Error clearing document handlers: {e}")

        try:
            self.region_service.clear()
        except Exception as e:
            logger.error(f"Error clearing region cache: {e}")

        try:
            if self.duck_db_connector:
                self.duck_db_connector.close()
                self.duck_db_connector = None
                logger.info("DuckDB connection closed")
        except Exception as e:
            logger.error(f"Error closing DuckDB connector: {e}")

        logger.info("LSP server resource cleanup completed")

    def start(self, host: str = "localhost", use_tcp: bool = False):
        """Start the LSP server

        Args:
            host: Host to bind to when using TCP (default: localhost)
            use_tcp: Whether to use TCP instead of stdio
        """
        logger.info("Starting rsql-lsp server...")

        try:
            if use_tcp:
                logger.info(f"Starting LSP TCP server on {host}:{self.port}...")
                self.ls.start_tcp(host, self.port)
                logger.info("LSP TCP server finished")
            else:
                logger.info("Starting LSP IO server...")
                self.ls.start_io()
                logger.info("LSP IO server finished")
        except KeyboardInterrupt:
            logger.info("Received shutdown signal")
        except BrokenPipeError:
            logger.info("Broken pipe - client disconnected")
        except EOFError:
            logger.info("EOF - no more input from client")
        except Exception as e:
            logger.exception(f"Error in LSP server: {e}")
        finally:
            self.shutdown()

    def shutdown(self):
        """Shutdown the LSP server and cleanup resources"""
        logger.info("Shutting down rsql-lsp server...")
        self._cleanup_resources()
