"""
Formatting of the SQL string under the cursor.

The formatter works on the cleaned query text, so glue interpolations are
swapped for placeholders before pretty-printing and swapped back afterwards.
Every step is checked; a failed check aborts with an exception and the buffer
is left untouched.
"""

import logging
import re
from typing import Optional

import sqlparse
from lsprotocol import types

from rsql_lsp.config.models import DetectionConfigModel, FormattingConfigModel
from rsql_lsp.core.context import detect_sql_context
from rsql_lsp.core.escapes import escape_r_string, unescape_r_string
from rsql_lsp.core.interpolation import (
    extract_interpolations,
    restore_interpolations,
    verify_round_trip,
)
from rsql_lsp.errors import FormattingError
from rsql_lsp.lsp.utils.r_document import RDocument

logger = logging.getLogger(__name__)

NOT_IN_SQL_MESSAGE = "Cursor is not inside a SQL string in a DBI function call"
UNSUPPORTED_ESCAPES_MESSAGE = "SQL string contains escape sequences that cannot be written back unchanged"
CONTENT_INDENT = "  "
_LEADING_WHITESPACE = re.compile(r"^\s*")


def apply_indentation(sql: str, base_indent: str) -> str:
    """
    Indent every line but the first with ``base_indent``.

    Blank lines become empty so no trailing whitespace is written.
    """
    lines = sql.split("\n")
    if len(lines) == 1:
        return sql
    return "\n".join(
        [lines[0]] + [base_indent + line if line.strip() else "" for line in lines[1:]]
    )


class SQLFormatter:
    """Pretty-prints SQL strings in R documents with sqlparse."""

    def __init__(
        self,
        config: Optional[FormattingConfigModel] = None,
        detection: Optional[DetectionConfigModel] = None,
    ):
        self.config = config or FormattingConfigModel()
        self.detection = detection or DetectionConfigModel()

    def format_sql(self, sql: str) -> str:
        """
        Format plain SQL text.

        Raises:
            FormattingError: If sqlparse fails
        """
        try:
            formatted = sqlparse.format(
                sql,
                reindent=self.config.reindent,
                keyword_case=self.config.keyword_case,
                indent_width=self.config.indent_width,
            )
        except Exception as e:
            raise FormattingError(f"SQL formatting failed: {e}") from e
        return formatted.strip()

    def format_query(self, query: str, is_interpolating: bool) -> str:
        """
        Format a cleaned query, keeping glue interpolations verbatim.

        Raises:
            FormattingError: If sqlparse fails
            InterpolationRoundTripError: If an interpolation would be lost
        """
        if not is_interpolating:
            return self.format_sql(query)

        cleaned, replacements = extract_interpolations(query)
        formatted = self.format_sql(cleaned)
        restored = restore_interpolations(formatted, replacements)
        verify_round_trip(query, formatted, restored, replacements)
        return restored

    def format_at(self, r_document: RDocument, position: types.Position) -> Optional[types.TextEdit]:
        """
        Build the edit that formats the SQL string at a client position.

        Returns:
            The edit, or None when the string is already formatted

        Raises:
            FormattingError: If the cursor is not in a SQL string, the string uses
                escapes that cannot be written back, or sqlparse fails
            InterpolationRoundTripError: If an interpolation would be lost
        """
        document = r_document.document
        context = detect_sql_context(document, r_document.to_core_position(position), self.detection)
        if context is None:
            raise FormattingError(NOT_IN_SQL_MESSAGE)

        # Content must survive a decode and re-encode unchanged.
        raw = document.get_text(context.range)
        if escape_r_string(unescape_r_string(raw), context.quote) != raw:
            raise FormattingError(UNSUPPORTED_ESCAPES_MESSAGE)

        formatted = self.format_query(context.query, context.is_interpolating)
        if formatted == context.query:
            logger.debug(f"SQL in {r_document.uri} is already formatted")
            return None

        line_text = document.line_at(context.range.start.line)
        base_indent = _LEADING_WHITESPACE.match(line_text).group(0) + CONTENT_INDENT
        new_text = apply_indentation(escape_r_string(formatted, context.quote), base_indent)

        return types.TextEdit(range=r_document.to_client_range(context.range), new_text=new_text)
