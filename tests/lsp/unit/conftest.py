import pytest
from unittest.mock import Mock

import duckdb
from pygls.workspace import TextDocument

from rsql_lsp.config.models import DetectionConfigModel
from rsql_lsp.lsp.utils.duckdb_connector import DuckDBConnector
from rsql_lsp.lsp.utils.r_document import RDocument
from rsql_lsp.lsp.utils.region_service import RegionService

TEST_URI = "file:///analysis.R"


@pytest.fixture
def duckdb_connector():
    """Create a DuckDB connector over a real in-memory connection."""
    connection = duckdb.connect(":memory:")
    try:
        yield DuckDBConnector(connection=connection)
    finally:
        connection.close()


@pytest.fixture
def region_service():
    return RegionService(DetectionConfigModel())


@pytest.fixture
def make_text_document():
    """Factory for pygls documents; language id defaults to R."""

    def _make(source: str, uri: str = TEST_URI, version: int = 1, language_id: str = "r") -> TextDocument:
        return TextDocument(uri, source, version=version, language_id=language_id)

    return _make


@pytest.fixture
def make_r_document(make_text_document):
    def _make(source: str, **kwargs) -> RDocument:
        return RDocument(make_text_document(source, **kwargs))

    return _make


@pytest.fixture
def mock_server():
    """
    A server stand-in whose workspace serves the documents in ``server.documents``.
    """
    server = Mock()
    server.documents = {}
    server.workspace.get_text_document.side_effect = lambda uri: server.documents[uri]
    return server
