"""
Value objects shared by the detection engine.

Every object here is frozen: detection results are computed on demand from the
live buffer and never mutated afterwards. Positions and ranges are the
lsprotocol types so results can be handed to the LSP layer without copying.
"""

from typing import Tuple

import attrs
from lsprotocol import types


def _validate_non_negative(instance, attribute, value):
    """Validator for non-negative offsets."""
    if value < 0:
        raise ValueError(f"{attribute.name} must be non-negative")


@attrs.frozen
class StringRegion:
    """
    Content-only span of a quoted string literal.

    Attributes:
        range: Document range of the content, quote characters excluded
        start: Flat offset of the first content character
        end: Flat offset of the closing quote
        quote: The quote character that delimits the literal
    """

    range: types.Range
    start: int = attrs.field(validator=_validate_non_negative)
    end: int = attrs.field(validator=_validate_non_negative)
    quote: str = '"'

    @property
    def open_quote_offset(self) -> int:
        return self.start - 1

    @property
    def is_multiline(self) -> bool:
        return self.range.start.line != self.range.end.line


@attrs.frozen
class SQLContext:
    """
    A string literal confirmed to be SQL passed to a SQL-bearing function.

    Attributes:
        query: Cleaned SQL text (R escapes resolved, whitespace trimmed)
        range: Content range of the literal in the document
        function_name: The configured function name the string belongs to
        is_multiline: True when the literal spans more than one line
        is_interpolating: True for glue-style functions accepting {expr}
        quote: Quote character delimiting the literal
    """

    query: str
    range: types.Range
    function_name: str
    is_multiline: bool
    is_interpolating: bool
    quote: str = '"'


@attrs.frozen
class CachedRegion:
    """
    A SQL region found by the document-wide scan.

    ``is_direct_argument`` is False for literals nested in a bracket inside
    the owning call, e.g. the elements of ``params = list(...)``.
    """

    range: types.Range
    function_name: str
    is_multiline: bool
    is_interpolating: bool
    raw_text: str
    is_direct_argument: bool = True


@attrs.frozen
class CachedRegionSet:
    """Cache entry: every region of one document version."""

    document_version: int
    regions: Tuple[CachedRegion, ...]
    timestamp: float


@attrs.frozen
class InterpolationReplacement:
    """Mapping from a generated placeholder back to the verbatim {expr} text."""

    placeholder: str
    original: str
