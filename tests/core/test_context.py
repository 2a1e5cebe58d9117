"""Tests for SQL context detection."""

import pytest
from lsprotocol import types

from rsql_lsp.config.models import DetectionConfigModel
from rsql_lsp.core.context import (
    accepts_argument,
    clean_sql_string,
    detect_sql_context,
    named_argument_before,
    sql_cursor_offset,
)
from rsql_lsp.core.interpolation import is_inside_interpolation, strip_interpolations


class TestDetectSqlContext:
    def test_single_line_query(self, document_with_cursor, detection_config):
        # Arrange
        document, position = document_with_cursor('dbGetQuery(con, "SELECT * F|ROM t")')

        # Act
        context = detect_sql_context(document, position, detection_config)

        # Assert
        assert context is not None
        assert context.query == "SELECT * FROM t"
        assert context.function_name == "dbGetQuery"
        assert context.is_multiline is False
        assert context.is_interpolating is False
        assert context.quote == '"'

    def test_glue_interpolation(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('glue_sql("SELECT * FROM {|tbl}", .con = con)')

        context = detect_sql_context(document, position, detection_config)

        assert context is not None
        assert context.function_name == "glue_sql"
        assert context.is_interpolating is True
        offset = sql_cursor_offset(document, position, context)
        assert is_inside_interpolation(context.query, offset), "Cursor at the 't' of tbl is inside {...}"
        assert strip_interpolations(context.query) == "SELECT * FROM PLACEHOLDER_VALUE"

    def test_multiline_query(self, make_document, detection_config):
        document = make_document('dbExecute(con,\n  "UPDATE t SET x = 1\n   WHERE id = 2")')

        context = detect_sql_context(document, types.Position(line=1, character=10), detection_config)

        assert context is not None
        assert context.function_name == "dbExecute"
        assert context.is_multiline is True
        assert context.query == "UPDATE t SET x = 1\n   WHERE id = 2"
        assert context.range.start.line == 1
        assert context.range.end.line == 2

    def test_named_argument_not_a_statement(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('dbGetQuery(con, query = "SELECT| 1")')
        assert detect_sql_context(document, position, detection_config) is None

    def test_statement_argument(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('dbGetQuery(con, statement = "SELECT| 1")')
        context = detect_sql_context(document, position, detection_config)
        assert context is not None
        assert context.query == "SELECT 1"

    def test_configured_statement_parameters(self, document_with_cursor):
        config = DetectionConfigModel(statement_parameters=["statement", "query"])
        document, position = document_with_cursor('dbGetQuery(con, query = "SELECT| 1")')
        assert detect_sql_context(document, position, config) is not None

    def test_glue_positional_string_after_named_con(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('glue_sql(.con = con, "SELECT {x}|")')
        context = detect_sql_context(document, position, detection_config)
        assert context is not None
        assert context.query == "SELECT {x}"

    def test_glue_named_string_rejected(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('glue_sql("SELECT {x}", .con = "co|n")')
        assert detect_sql_context(document, position, detection_config) is None

    def test_innermost_call_wins(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('dbGetQuery(con, sql("SELECT |1"))')
        context = detect_sql_context(document, position, detection_config)
        assert context.function_name == "sql"

    def test_qualified_name(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('DBI::dbGetQuery(con, "SELECT |1")')
        context = detect_sql_context(document, position, detection_config)
        assert context.function_name == "DBI::dbGetQuery"

    def test_escaped_quotes_are_cleaned(self, document_with_cursor, detection_config):
        document, position = document_with_cursor('dbGetQuery(con, "SELECT \\"a\\" FROM |t")')
        context = detect_sql_context(document, position, detection_config)
        assert context.query == 'SELECT "a" FROM t'

    def test_cursor_after_closing_quote(self, document_with_cursor, detection_config):
        document, position = document_with_cursor("dbGetQuery(con, 'SELECT 1'|)")
        context = detect_sql_context(document, position, detection_config)
        assert context is not None
        assert context.quote == "'"

    @pytest.mark.parametrize(
        "marked",
        [
            '# dbGetQuery(con, "SELECT |1")',
            'paste0("SELECT |1")',
            'glue("SELECT {|x}")',
            'my_dbGetQuery(con, "SELECT |1")',
            'dbGetQuery.extra(con, "SELECT |1")',
            'dbGetQuery(con, "SELECT 1"); x <- "not |sql"',
            'dbGetQuery(con, "SELECT 1")\nprint("hel|lo")',
        ],
    )
    def test_not_sql(self, document_with_cursor, detection_config, marked):
        document, position = document_with_cursor(marked)
        assert detect_sql_context(document, position, detection_config) is None

    def test_quote_in_comment_does_not_break_detection(self, make_document, detection_config):
        document = make_document("# don't\ndbGetQuery(con, 'SELECT 1') # it's fine")
        context = detect_sql_context(document, types.Position(line=1, character=20), detection_config)
        assert context is not None
        assert context.query == "SELECT 1"

    def test_lookback_limit(self, make_document, small_limits_config, detection_config):
        document = make_document("dbGetQuery(con,\n\n\n\n\n  'SELECT 1')")
        position = types.Position(line=5, character=5)

        assert detect_sql_context(document, position, detection_config) is not None
        assert detect_sql_context(document, position, small_limits_config) is None


class TestHelpers:
    def test_named_argument_before(self):
        text = 'dbGetQuery(con, statement = "SELECT 1")'
        assert named_argument_before(text, text.index('"'), 50) == "statement"
        text = 'dbGetQuery(con, "SELECT 1")'
        assert named_argument_before(text, text.index('"'), 50) is None

    def test_dotted_argument_name(self):
        text = 'glue_sql("x", .con = "y")'
        assert named_argument_before(text, text.index('"y'), 50) == ".con"

    def test_accepts_argument(self, detection_config):
        assert accepts_argument("dbGetQuery", None, detection_config)
        assert accepts_argument("dbGetQuery", "statement", detection_config)
        assert not accepts_argument("dbGetQuery", "params", detection_config)
        assert not accepts_argument("glue_sql", "statement", detection_config)
        assert accepts_argument("glue_sql", None, detection_config)

    def test_clean_sql_string(self):
        assert clean_sql_string('  SELECT \\"a\\"\\tFROM t\\n ') == 'SELECT "a"\tFROM t'
        assert clean_sql_string("it\\'s") == "it's"
