"""
Validation result models for the rsql-lsp diagnostics.

Two kinds of findings are produced for a SQL string: parser errors reported by
DuckDB's ``json_serialize_sql`` and lightweight heuristic findings computed on
the interpolation-stripped query.
"""

import attrs
from lsprotocol import types


class SQLErrorType:
    """
    Constants for SQL validation error types.

    DuckDB reports parser failures with ``error_subtype`` values such as
    SYNTAX_ERROR.
    """

    SYNTAX_ERROR = "SYNTAX_ERROR"
    PARSER_ERROR = "PARSER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def get_severity(cls, error_type: str) -> types.DiagnosticSeverity:
        if error_type in (cls.SYNTAX_ERROR, cls.PARSER_ERROR):
            return types.DiagnosticSeverity.Error
        if error_type == cls.VALIDATION_ERROR:
            return types.DiagnosticSeverity.Warning
        return types.DiagnosticSeverity.Error


class SQLValidation:
    """
    Result of validating SQL with DuckDB's json_serialize_sql.

    Expected validation_result structure:
        {
            "error": bool,
            "error_type": str,
            "error_message": str,
            "error_subtype": str,
            "position": int or str   # character offset in the SQL code
        }
    """

    def __init__(self, validation_result: dict, code: str):
        self.code = code
        self.error = bool(validation_result.get("error", False))

        if self.error:
            self.error_type = (
                validation_result.get("error_subtype")
                or validation_result.get("error_type")
                or SQLErrorType.UNKNOWN
            )
            self.error_message = validation_result.get("error_message", "Unknown SQL error")
            try:
                self.position = int(validation_result.get("position", 0))
            except (TypeError, ValueError):
                self.position = 0
            self.position = min(max(self.position, 0), len(code))
        else:
            self.error_type = None
            self.error_message = None
            self.position = 0

    def is_error(self) -> bool:
        return self.error

    def get_diagnostic_severity(self) -> types.DiagnosticSeverity:
        if not self.is_error():
            return types.DiagnosticSeverity.Hint
        return SQLErrorType.get_severity(self.error_type)

    def __str__(self) -> str:
        if not self.is_error():
            return "SQLValidation(valid)"
        return (
            f"SQLValidation(error_type={self.error_type}, "
            f"message='{self.error_message}', "
            f"position={self.position})"
        )


@attrs.frozen
class SQLFinding:
    """A heuristic problem found in a whole SQL string."""

    message: str
    severity: types.DiagnosticSeverity = types.DiagnosticSeverity.Warning
