"""
Function-call context resolution.

Decides whether a string literal is the query argument of one of the
configured SQL-bearing R functions, and composes the scanner and the resolver
into a single ``detect_sql_context`` entry point.
"""

import functools
import logging
import re
from typing import List, Optional, Tuple

from lsprotocol import types

from ..config.models import DetectionConfigModel
from .document import Document
from .escapes import unescape_r_string
from .models import SQLContext, StringRegion
from .parens import NOT_FOUND, find_call_open_paren, find_matching_close
from .positions import to_offset
from .scanner import scan_literals, span_containing, string_range_at

logger = logging.getLogger(__name__)

# R identifiers are letters, digits, '.' and '_'; ':' covers pkg::name
_IDENTIFIER_CHARS = r"A-Za-z0-9._"
_NAMED_ARGUMENT = re.compile(r"([A-Za-z.][A-Za-z0-9._]*)\s*=\s*$")


@functools.lru_cache(maxsize=None)
def call_pattern(function_name: str) -> "re.Pattern[str]":
    """Pattern matching ``function_name`` as a whole R identifier."""
    return re.compile(
        rf"(?<![{_IDENTIFIER_CHARS}:]){re.escape(function_name)}(?![{_IDENTIFIER_CHARS}])"
    )


def call_span(text: str, paren: int, config: DetectionConfigModel) -> int:
    """
    Offset of the closing parenthesis of the call opened at ``paren``.

    An unterminated call extends to the end of the buffer, bounded by the
    per-call length limit.
    """
    limits = config.limits
    close = find_matching_close(
        text, paren, limits.max_function_call_length, config.quote_chars, config.comment_char
    )
    if close == NOT_FOUND:
        return min(len(text), paren + 1 + limits.max_function_call_length)
    return close


def named_argument_before(text: str, quote_offset: int, budget: int) -> Optional[str]:
    """Return ``name`` when the literal at ``quote_offset`` follows ``name =``."""
    preceding = text[max(0, quote_offset - budget):quote_offset]
    match = _NAMED_ARGUMENT.search(preceding)
    if match is None:
        return None
    return match.group(1)


def accepts_argument(function_name: str, argument_name: Optional[str], config: DetectionConfigModel) -> bool:
    """
    Apply the named-argument filter.

    Positional strings are always accepted. Interpolating functions treat every
    keyword argument as non-query text; other functions accept only the
    configured statement-carrier parameters.
    """
    if argument_name is None:
        return True
    if config.is_interpolating(function_name):
        return False
    return argument_name in config.statement_parameters


def function_context_of(
    document: Document, region: StringRegion, config: DetectionConfigModel
) -> Optional[str]:
    """
    Find the SQL-bearing function call whose arguments contain ``region``.

    Calls are searched in a bounded window of lines ending at the string's
    first line. When several calls contain the string the innermost one wins;
    for the same call the longest configured name wins.

    Returns:
        The configured function name, or None
    """
    text = document.text
    limits = config.limits
    quote_offset = region.open_quote_offset

    first_line = max(0, region.range.start.line - limits.context_line_lookback)
    window_start = document.line_offsets[first_line]
    spans = scan_literals(text, window_start, quote_offset, config.quote_chars, config.comment_char)

    candidates: List[Tuple[int, int, int, str]] = []
    for index, name in enumerate(config.all_functions):
        for match in call_pattern(name).finditer(text, window_start, quote_offset):
            if span_containing(spans, match.start()) is not None:
                continue

            paren = find_call_open_paren(text, match.end(), limits.max_paren_search_distance)
            if paren == NOT_FOUND or paren >= quote_offset:
                continue

            if region.end < call_span(text, paren, config):
                candidates.append((paren, len(name), -index, name))

    if not candidates:
        return None

    function_name = max(candidates)[3]
    argument_name = named_argument_before(text, quote_offset, limits.named_argument_lookback)
    if not accepts_argument(function_name, argument_name, config):
        logger.debug(f"Rejected string bound to argument '{argument_name}' of {function_name}")
        return None

    return function_name


def clean_sql_string(raw: str) -> str:
    """Resolve the R escapes in a literal's content and trim it."""
    return unescape_r_string(raw).strip()


def detect_sql_context(
    document: Document, position: types.Position, config: DetectionConfigModel
) -> Optional[SQLContext]:
    """
    Detect the SQL string under the cursor.

    Args:
        document: The document snapshot
        position: Cursor position
        config: Detection configuration

    Returns:
        SQLContext when the cursor is inside a string passed as query text to a
        SQL-bearing function, otherwise None
    """
    region = string_range_at(document, position, config)
    if region is None:
        return None

    function_name = function_context_of(document, region, config)
    if function_name is None:
        return None

    return SQLContext(
        query=clean_sql_string(document.text[region.start:region.end]),
        range=region.range,
        function_name=function_name,
        is_multiline=region.is_multiline,
        is_interpolating=config.is_interpolating(function_name),
        quote=region.quote,
    )


def sql_cursor_offset(document: Document, position: types.Position, context: SQLContext) -> int:
    """Offset of the cursor inside the raw (uncleaned) string content."""
    return to_offset(position, context.range.start, document)
