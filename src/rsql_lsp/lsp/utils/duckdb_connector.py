"""
DuckDB connector for the rsql-lsp server.

Wraps an in-process DuckDB connection used for keyword/function completion
(``sql_auto_complete``) and parser validation (``json_serialize_sql``). The
connection never touches user data: it is an empty in-memory database unless a
database path is configured.
"""

import json
import logging
from typing import Any, List, Optional

import duckdb
from lsprotocol import types

from rsql_lsp.errors import DuckDBConnectionError
from .models import SQLErrorType, SQLValidation

logger = logging.getLogger(__name__)

# json_serialize_sql reports non-SELECT statements as "not implemented";
# only parser failures are user errors.
PARSER_ERROR_TYPE = "parser"


class DuckDBConnector:
    """
    SQL services backed by a DuckDB connection.

    Every public method degrades to an empty or error result instead of raising
    so that one bad query never breaks an LSP request.
    """

    def __init__(self, database: str = ":memory:", connection: Optional[Any] = None):
        """
        Args:
            database: Database path opened by connect()
            connection: Already open connection to use instead (not owned)
        """
        self.database = database
        self._conn = connection
        self._owns_connection = connection is None

    def connect(self) -> None:
        """Open the connection if it is not open yet."""
        if self._conn is not None:
            return
        try:
            self._conn = duckdb.connect(self.database)
            logger.info(f"DuckDB connection opened: {self.database}")
        except duckdb.Error as e:
            raise DuckDBConnectionError(f"Failed to open DuckDB database {self.database}: {e}") from e

    @property
    def connection(self):
        """
        Get the active DuckDB connection.

        Raises:
            DuckDBConnectionError: If connection is not available
        """
        if self._conn is None:
            raise DuckDBConnectionError("No active DuckDB connection available")
        return self._conn

    def close(self) -> None:
        if self._conn is not None and self._owns_connection:
            self._conn.close()
            logger.info("DuckDB connection closed")
        self._conn = None

    def execute_query(self, query: str, parameters: Optional[List] = None) -> List[Any]:
        """
        Execute a query and return its rows, or an empty list on error.
        """
        if not query or not isinstance(query, str):
            logger.warning("Invalid query provided to execute_query")
            return []

        try:
            conn = self.connection
            if parameters:
                result = conn.execute(query, parameters)
            else:
                result = conn.execute(query)
            return result.fetchall()
        except duckdb.Error as e:
            logger.error(f"DuckDB error executing query '{query[:50]}...': {e}")
            return []
        except DuckDBConnectionError as e:
            logger.error(f"Cannot execute query: {e}")
            return []

    def get_completions(self, code: str) -> List[types.CompletionItem]:
        """
        Get DuckDB's completion suggestions for ``code``.

        Args:
            code: SQL text up to the cursor

        Returns:
            Completion items, empty on error
        """
        if not code or not isinstance(code, str):
            return []

        escaped_code = code.replace("'", "''")
        rows = self.execute_query(f"SELECT suggestion FROM sql_auto_complete('{escaped_code}')")
        items = [
            types.CompletionItem(
                label=str(row[0]),
                kind=types.CompletionItemKind.Keyword,
                detail="DuckDB suggestion",
                sort_text=f"0_{row[0]}",
            )
            for row in rows
            if row and row[0] is not None and str(row[0]).strip()
        ]
        logger.debug(f"DuckDB suggested {len(items)} completions")
        return items

    def validate_sql(self, code: str) -> SQLValidation:
        """
        Validate SQL with DuckDB's parser.

        Args:
            code: SQL code to validate

        Returns:
            SQLValidation object; statements the serializer cannot handle are
            reported as valid
        """
        if not code or not isinstance(code, str):
            logger.warning("Invalid code provided for validation")
            return self._create_error_validation("Invalid input", code or "")

        try:
            escaped_code = code.replace("'", "''")
            result = self.connection.execute(f"SELECT json_serialize_sql('{escaped_code}')").fetchone()
            if not result or not result[0]:
                return self._create_error_validation("No validation result", code)

            validation_data = json.loads(result[0])
            if validation_data.get("error") and str(validation_data.get("error_type", "")).lower() != PARSER_ERROR_TYPE:
                logger.debug(f"Skipping non-parser validation result: {validation_data.get('error_message')}")
                return SQLValidation({"error": False}, code)
            return SQLValidation(validation_data, code)

        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error during SQL validation: {e}")
            return self._create_error_validation(f"Validation result parsing error: {e}", code)
        except duckdb.Error as e:
            logger.error(f"DuckDB error validating SQL '{code[:50]}...': {e}")
            return self._create_error_validation(f"SQL validation error: {e}", code)
        except DuckDBConnectionError as e:
            logger.error(f"Cannot validate SQL: {e}")
            return self._create_error_validation(str(e), code)

    def _create_error_validation(self, error_message: str, code: str) -> SQLValidation:
        error_result = {
            "error": True,
            "error_type": SQLErrorType.VALIDATION_ERROR,
            "error_message": error_message,
            "error_subtype": SQLErrorType.VALIDATION_ERROR,
            "position": 0,
        }
        return SQLValidation(error_result, code)
