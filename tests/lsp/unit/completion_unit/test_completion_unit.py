from unittest.mock import Mock

import pytest
from lsprotocol import types

from rsql_lsp.config.models import DetectionConfigModel
from rsql_lsp.lsp.features.completion import provide_completions
from rsql_lsp.lsp.utils.duckdb_connector import DuckDBConnector


@pytest.fixture
def config():
    return DetectionConfigModel()


def _labels(result):
    return [item.label for item in result.items]


def test_no_completions_outside_sql(make_r_document, config):
    """Test that plain R code gets no completions."""
    r_document = make_r_document('x <- paste("SELECT", 1)')

    result = provide_completions(r_document, types.Position(line=0, character=14), config)

    assert result is None, "Expected no completions outside SQL strings"


def test_static_completions(make_r_document, config):
    r_document = make_r_document('dbGetQuery(con, "SEL")')

    result = provide_completions(r_document, types.Position(line=0, character=20), config)

    assert result is not None, "Expected completions inside a SQL string"
    assert result.is_incomplete is False
    labels = _labels(result)
    assert "SELECT" in labels
    assert "GROUP BY" in labels

    by_label = {item.label: item for item in result.items}
    assert by_label["SELECT"].kind == types.CompletionItemKind.Keyword
    assert by_label["SELECT"].sort_text == "1_SELECT"
    assert by_label["COUNT"].kind == types.CompletionItemKind.Function
    assert by_label["COUNT"].insert_text == "COUNT($0)"
    assert by_label["COUNT"].insert_text_format == types.InsertTextFormat.Snippet


def test_duckdb_suggestions_shadow_static_items(make_r_document, config):
    connector = Mock(spec=DuckDBConnector)
    connector.get_completions.return_value = [
        types.CompletionItem(label="select", kind=types.CompletionItemKind.Keyword, sort_text="0_select")
    ]
    r_document = make_r_document('dbGetQuery(con, "SEL")')

    result = provide_completions(r_document, types.Position(line=0, character=20), config, connector)

    connector.get_completions.assert_called_once_with("SEL")
    labels = _labels(result)
    assert labels[0] == "select", "DuckDB suggestions come first"
    assert "SELECT" not in labels, "Static items with the same label are dropped"


def test_prefix_stops_at_closing_quote(make_r_document, config):
    connector = Mock(spec=DuckDBConnector)
    connector.get_completions.return_value = []
    r_document = make_r_document('dbGetQuery(con, "SEL")')

    result = provide_completions(r_document, types.Position(line=0, character=21), config, connector)

    assert result is not None, "Just after the closing quote is still in the string"
    connector.get_completions.assert_called_once_with("SEL")


def test_duckdb_prefix_is_unescaped(make_r_document, config):
    connector = Mock(spec=DuckDBConnector)
    connector.get_completions.return_value = []
    text = 'dbGetQuery(con, "SELECT \\"a\\" FROM t")'
    r_document = make_r_document(text)

    provide_completions(r_document, types.Position(line=0, character=text.index('")')), config, connector)

    connector.get_completions.assert_called_once_with('SELECT "a" FROM t')


def test_no_completions_inside_interpolation(make_r_document, config):
    r_document = make_r_document('glue_sql("SELECT * FROM {tbl}", .con = con)')

    result = provide_completions(r_document, types.Position(line=0, character=26), config)

    assert result is None, "The inside of {...} is R code"


def test_interpolations_are_stripped_for_duckdb(make_r_document, config):
    connector = Mock(spec=DuckDBConnector)
    connector.get_completions.return_value = []
    text = 'glue_sql("SELECT * FROM {tbl} W", .con = con)'
    r_document = make_r_document(text)

    result = provide_completions(r_document, types.Position(line=0, character=text.index(" W") + 2), config, connector)

    assert result is not None
    connector.get_completions.assert_called_once_with("SELECT * FROM PLACEHOLDER_VALUE W")


def test_multiline_prefix(make_r_document, config):
    connector = Mock(spec=DuckDBConnector)
    connector.get_completions.return_value = []
    r_document = make_r_document('dbGetQuery(con, "\n  SELECT *\n  FR\n")')

    provide_completions(r_document, types.Position(line=2, character=4), config, connector)

    connector.get_completions.assert_called_once_with("\n  SELECT *\n  FR")


def test_completions_with_real_duckdb(make_r_document, config, duckdb_connector):
    r_document = make_r_document('dbGetQuery(con, "SELECT * FR")')

    result = provide_completions(r_document, types.Position(line=0, character=28), config, duckdb_connector)

    labels = [label.upper() for label in _labels(result)]
    assert len(labels) == len(set(labels)), "Labels are unique"
    assert "FROM" in labels
