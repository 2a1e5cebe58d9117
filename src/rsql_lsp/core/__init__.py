"""
Detection engine for SQL embedded in R string literals.

The functions in this package are pure: they take a Document snapshot and an
immutable DetectionConfigModel and never touch editor state.
"""

from .cache import DocumentCache
from .context import clean_sql_string, detect_sql_context, function_context_of, sql_cursor_offset
from .document import Document
from .escapes import decode_r_string, escape_r_string, unescape_r_string
from .interpolation import (
    PLACEHOLDER_VALUE,
    extract_interpolations,
    is_inside_interpolation,
    restore_interpolations,
    strip_interpolations,
    verify_round_trip,
)
from .models import CachedRegion, CachedRegionSet, InterpolationReplacement, SQLContext, StringRegion
from .parens import NOT_FOUND, find_matching_close
from .positions import is_position_in_range, offset_at, position_at, to_offset, to_position
from .regions import find_all_regions
from .scanner import string_range_at
from .tokenizer import SQLToken, TokenType, tokenize

__all__ = [
    "CachedRegion",
    "CachedRegionSet",
    "Document",
    "DocumentCache",
    "InterpolationReplacement",
    "NOT_FOUND",
    "PLACEHOLDER_VALUE",
    "SQLContext",
    "SQLToken",
    "StringRegion",
    "TokenType",
    "clean_sql_string",
    "detect_sql_context",
    "extract_interpolations",
    "decode_r_string",
    "escape_r_string",
    "find_all_regions",
    "find_matching_close",
    "function_context_of",
    "is_inside_interpolation",
    "is_position_in_range",
    "offset_at",
    "position_at",
    "restore_interpolations",
    "sql_cursor_offset",
    "string_range_at",
    "strip_interpolations",
    "to_offset",
    "to_position",
    "tokenize",
    "unescape_r_string",
    "verify_round_trip",
]
