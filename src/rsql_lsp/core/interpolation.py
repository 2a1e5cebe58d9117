"""
Handling of glue-style ``{expr}`` interpolations inside SQL strings.

All operations share one forward state machine:

* ``SQL``: plain query text. ``--`` starts a SQL line comment, a quote starts
  a SQL string literal, ``{`` opens an interpolation.
* ``SQL_STRING``: inside a SQL string literal. ``--`` is not a comment here,
  but ``{`` still opens an interpolation, as glue substitutes inside quotes.
* ``SQL_COMMENT``: until the next newline; braces are plain text.
* ``EXPR``: inside ``{...}``; nested braces change the depth.
* ``EXPR_STRING``: an R string inside the expression. Braces are plain text,
  a backslash escapes the next character and a doubled quote is a literal
  quote.

Only complete top-level ``{...}`` spans are treated as interpolations. An
unterminated trailing ``{`` is kept verbatim so that extraction followed by
restoration always reproduces the input.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..errors import InterpolationRoundTripError
from .models import InterpolationReplacement

logger = logging.getLogger(__name__)

PLACEHOLDER_VALUE = "PLACEHOLDER_VALUE"
PLACEHOLDER_PREFIX = "GLUE_INTERPOLATION_"

_SQL_QUOTES = "'\""
_EXPR_QUOTES = "'\"`"


class _Mode(Enum):
    SQL = "sql"
    SQL_STRING = "sql_string"
    SQL_COMMENT = "sql_comment"
    EXPR = "expr"
    EXPR_STRING = "expr_string"


def _scan(text: str, stop: Optional[int] = None) -> Tuple[List[Tuple[int, int]], int]:
    """
    Run the interpolation state machine over ``text[:stop]``.

    Returns:
        The complete top-level interpolation spans as ``(start, end)`` pairs
        (``end`` exclusive, braces included) and the brace depth at ``stop``
    """
    stop = len(text) if stop is None else min(max(stop, 0), len(text))
    spans: List[Tuple[int, int]] = []
    mode = _Mode.SQL
    resume = _Mode.SQL
    sql_quote = ""
    expr_quote = ""
    depth = 0
    span_start = 0
    i = 0

    while i < stop:
        char = text[i]

        if mode is _Mode.SQL:
            if char == "-" and text.startswith("--", i):
                mode = _Mode.SQL_COMMENT
                i += 2
                continue
            if char in _SQL_QUOTES:
                mode = _Mode.SQL_STRING
                sql_quote = char
            elif char == "{":
                mode, resume, depth, span_start = _Mode.EXPR, _Mode.SQL, 1, i

        elif mode is _Mode.SQL_STRING:
            if char == sql_quote:
                mode = _Mode.SQL
            elif char == "{":
                mode, resume, depth, span_start = _Mode.EXPR, _Mode.SQL_STRING, 1, i

        elif mode is _Mode.SQL_COMMENT:
            if char == "\n":
                mode = _Mode.SQL

        elif mode is _Mode.EXPR:
            if char in _EXPR_QUOTES:
                mode = _Mode.EXPR_STRING
                expr_quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    spans.append((span_start, i + 1))
                    mode = resume

        else:
            if char == "\\":
                i += 2
                continue
            if char == expr_quote:
                if i + 1 < stop and text[i + 1] == expr_quote:
                    i += 2
                    continue
                mode = _Mode.EXPR

        i += 1

    return spans, depth


def interpolation_spans(text: str) -> List[Tuple[int, int]]:
    """Complete top-level ``{...}`` spans as ``(start, end)`` pairs, braces included."""
    spans, _ = _scan(text)
    return spans


def is_inside_interpolation(text: str, offset: int) -> bool:
    """
    Check if ``offset`` lies inside a ``{...}`` block.

    Args:
        text: Raw SQL string content of an interpolating call
        offset: Cursor offset within ``text``

    Returns:
        True if the brace depth before ``offset`` is positive
    """
    _, depth = _scan(text, offset)
    return depth > 0


def _replace_spans(text: str, spans: Sequence[Tuple[int, int]], placeholders: Sequence[str]) -> str:
    parts = []
    last = 0
    for (start, end), placeholder in zip(spans, placeholders):
        parts.append(text[last:start])
        parts.append(placeholder)
        last = end
    parts.append(text[last:])
    return "".join(parts)


def strip_interpolations(text: str, placeholder: str = PLACEHOLDER_VALUE) -> str:
    """
    Replace every complete top-level interpolation with one fixed token.

    Example:
        "SELECT * FROM {tbl}" -> "SELECT * FROM PLACEHOLDER_VALUE"
    """
    spans, _ = _scan(text)
    return _replace_spans(text, spans, [placeholder] * len(spans))


def _placeholder_prefix(text: str) -> str:
    prefix = PLACEHOLDER_PREFIX
    attempt = 0
    while prefix in text:
        attempt += 1
        prefix = f"GLUE{attempt}_INTERPOLATION_"
    return prefix


def extract_interpolations(text: str) -> Tuple[str, List[InterpolationReplacement]]:
    """
    Replace each top-level interpolation with a unique placeholder.

    Placeholders share a prefix that does not occur in ``text`` and carry
    zero-padded indices of equal width, so no placeholder is a prefix of
    another and each one occurs exactly once in the cleaned text.

    Returns:
        The cleaned text and the replacements in order of appearance
    """
    spans, _ = _scan(text)
    if not spans:
        return text, []

    prefix = _placeholder_prefix(text)
    width = len(str(len(spans) - 1))
    replacements = [
        InterpolationReplacement(placeholder=f"{prefix}{index:0{width}d}", original=text[start:end])
        for index, (start, end) in enumerate(spans)
    ]
    cleaned = _replace_spans(text, spans, [r.placeholder for r in replacements])
    return cleaned, replacements


def restore_interpolations(cleaned: str, replacements: Sequence[InterpolationReplacement]) -> str:
    """Substitute each placeholder (first occurrence) back to its original text."""
    result = cleaned
    for replacement in replacements:
        result = result.replace(replacement.placeholder, replacement.original, 1)
    return result


def verify_round_trip(
    original: str,
    transformed: str,
    restored: str,
    replacements: Sequence[InterpolationReplacement],
) -> None:
    """
    Check that restoring interpolations into transformed SQL is lossless.

    Args:
        original: Text the interpolations were extracted from
        transformed: Cleaned text after any processing (e.g. formatting)
        restored: Result of restore_interpolations on ``transformed``
        replacements: The extraction's replacement list

    Raises:
        InterpolationRoundTripError: If a placeholder went missing, a
            placeholder survived restoration or the brace counts differ
    """
    for replacement in replacements:
        if replacement.placeholder not in transformed:
            raise InterpolationRoundTripError(
                f"Placeholder {replacement.placeholder} not found in processed SQL"
            )
        if replacement.placeholder in restored:
            raise InterpolationRoundTripError(
                f"Placeholder {replacement.placeholder} still present after restoration"
            )

    for brace in "{}":
        before, after = original.count(brace), restored.count(brace)
        if before != after:
            raise InterpolationRoundTripError(
                f"Brace count mismatch for '{brace}': original {before}, restored {after}"
            )
