"""
LSP server implementation for rsql-lsp.

Provides SQL language support for SQL strings embedded in R source files:
semantic tokens, completion, diagnostics and a format-SQL command.

Usage Example:
    from rsql_lsp.config import load_config
    from rsql_lsp.lsp import RSqlLanguageServer

    server = RSqlLanguageServer(config=load_config())

    # Start server (stdio mode for IDE integration)
    server.start()

    # Or start in TCP mode for testing
    server.start(use_tcp=True, host="localhost")
"""

from .server import RSqlLanguageServer, ServerInitializationState

from .features import (
    register_completion,
    register_diagnostics,
    register_formatting,
    register_semantic_tokens,
)

from .utils import (
    DocumentEventCoordinator,
    DuckDBConnector,
    RDocument,
    RegionService,
    SQLErrorType,
    SQLValidation,
)

__all__ = [
    "RSqlLanguageServer",
    "ServerInitializationState",
    "register_completion",
    "register_diagnostics",
    "register_formatting",
    "register_semantic_tokens",
    "DocumentEventCoordinator",
    "DuckDBConnector",
    "RDocument",
    "RegionService",
    "SQLErrorType",
    "SQLValidation",
]
