"""Lightweight SQL sanity checks that need no database."""

import re
from typing import List

from lsprotocol import types

from rsql_lsp.lsp.utils.models import SQLFinding

# SELECT 1, SELECT now(), SELECT 'a', 2 ... need no FROM
_SELECT_EXPRESSION = re.compile(r"SELECT\s+[\w()'\",\s]+$", re.IGNORECASE)

_TYPOS = (
    (re.compile(r"\bSELECT\s+FROM\b"), "Missing column list after SELECT"),
    (re.compile(r"\bWHERE\s+(GROUP BY|ORDER BY|LIMIT)\b"), "WHERE clause appears to be incomplete"),
)


def is_select_expression(query: str) -> bool:
    return _SELECT_EXPRESSION.search(query.strip()) is not None


def check_sql(query: str) -> List[SQLFinding]:
    """
    Run the heuristic checks on one SQL string.

    Args:
        query: Cleaned SQL, interpolations already replaced by a placeholder

    Returns:
        One finding per failed check, in a stable order
    """
    findings: List[SQLFinding] = []
    upper = query.upper()

    if "SELECT" in upper and "FROM" not in upper and not is_select_expression(upper):
        findings.append(SQLFinding("SELECT statement is missing FROM clause"))

    opening = upper.count("(")
    closing = upper.count(")")
    if opening != closing:
        findings.append(
            SQLFinding(
                f"Unmatched parentheses: {opening} opening, {closing} closing",
                types.DiagnosticSeverity.Error,
            )
        )

    for pattern, message in _TYPOS:
        if pattern.search(upper):
            findings.append(SQLFinding(message))

    return findings
