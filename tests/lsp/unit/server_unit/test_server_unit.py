import pytest
from lsprotocol import types

from rsql_lsp.config.models import ServerConfigModel
from rsql_lsp.lsp.features.formatting import FORMAT_SQL_COMMAND
from rsql_lsp.lsp.server import RSqlLanguageServer


@pytest.fixture
def server():
    server = RSqlLanguageServer(use_duckdb=False)
    yield server
    server.shutdown()


def test_all_features_registered(server):
    """Test that every feature is registered without DuckDB."""
    features = server.ls.lsp.fm.features

    assert server.init_state.features_registered is True
    assert server.init_state.initialization_errors == []
    assert server.init_state.duckdb_connector_ready is False
    assert types.TEXT_DOCUMENT_COMPLETION in features
    assert types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL in features
    assert types.TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE in features
    assert types.TEXT_DOCUMENT_DID_OPEN in features
    assert FORMAT_SQL_COMMAND in server.ls.lsp.fm.commands


def test_document_handlers(server):
    # region cache, diagnostics, semantic tokens
    assert server.document_coordinator.get_handler_count() == 3


def test_optional_features_can_be_disabled():
    config = ServerConfigModel(completion=False, semantic_tokens=False)
    server = RSqlLanguageServer(config=config, use_duckdb=False)
    try:
        features = server.ls.lsp.fm.features
        assert types.TEXT_DOCUMENT_COMPLETION not in features
        assert types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL not in features
        assert server.document_coordinator.get_handler_count() == 2
    finally:
        server.shutdown()


def test_duckdb_connector_is_opened():
    server = RSqlLanguageServer()
    try:
        assert server.init_state.duckdb_connector_ready is True
        assert server.duck_db_connector.execute_query("SELECT 1") == [(1,)]
    finally:
        server.shutdown()
    assert server.duck_db_connector is None, "Shutdown closes the connection"


def test_apply_overrides(server):
    server.apply_overrides(
        {
            "detection": {"sql_functions": ["run_query"], "limits": {"cache_ttl_ms": 10}},
            "formatting": {"keyword_case": "lower"},
            "diagnostics": {"enabled": False},
        }
    )

    assert server.config.detection.sql_functions == ("run_query",)
    assert server.region_service.config.sql_functions == ("run_query",)
    assert server.formatter.detection.sql_functions == ("run_query",)
    assert server.formatter.config.keyword_case == "lower"
    assert server.diagnostics_service._config.enabled is False


def test_invalid_overrides_are_ignored(server):
    before = server.config

    server.apply_overrides({"detection": {"comment_char": "##"}})

    assert server.config is before
    assert server.region_service.config is before.detection
