"""LSP utility modules for rsql-lsp."""

from .document_event_coordinator import DocumentEventCoordinator
from .duckdb_connector import DuckDBConnector
from .models import SQLErrorType, SQLFinding, SQLValidation
from .r_document import RDocument
from .region_service import RegionService

__all__ = [
    "DocumentEventCoordinator",
    "DuckDBConnector",
    "RDocument",
    "RegionService",
    "SQLErrorType",
    "SQLFinding",
    "SQLValidation",
]
