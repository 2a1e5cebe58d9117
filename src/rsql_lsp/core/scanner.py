"""
String literal scanning for R source text.

Every scan here is a single forward pass carrying an explicit state
(``NORMAL``, ``STRING`` or ``COMMENT``). A string and a comment are mutually
exclusive: a quote inside a comment never opens a string and a comment
character inside a string never starts a comment.

Escaping follows R: inside a string a backslash escapes the next character, so
a quote preceded by a backslash never terminates the literal.
"""

import logging
from bisect import bisect_right
from enum import Enum
from typing import List, NamedTuple, Optional

from lsprotocol import types

from ..config.models import DetectionConfigModel
from .document import Document
from .models import StringRegion
from .positions import offset_at, position_at

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class ScanState(Enum):
    NORMAL = "normal"
    STRING = "string"
    COMMENT = "comment"


class LiteralSpan(NamedTuple):
    """
    A string literal or line comment found by a forward scan.

    ``start`` is the offset of the opening quote (or comment character).
    ``end`` is the offset of the closing quote (or newline) when ``closed`` is
    True, otherwise the offset where the scan stopped.
    """

    kind: ScanState
    start: int
    end: int
    quote: str
    closed: bool


def scan_literals(
    text: str,
    start: int = 0,
    stop: Optional[int] = None,
    quote_chars: str = "\"'`",
    comment_char: str = "#",
) -> List[LiteralSpan]:
    """
    Enumerate string literals and comments in ``text[start:stop]``.

    The scan assumes ``start`` is in normal code. Spans are returned in
    document order and never overlap; at most the last one is unclosed.
    """
    stop = len(text) if stop is None else min(stop, len(text))
    spans: List[LiteralSpan] = []
    i = start

    while i < stop:
        char = text[i]
        if char in quote_chars:
            close = find_closing_quote(text, i + 1, char, stop)
            if close == NOT_FOUND:
                spans.append(LiteralSpan(ScanState.STRING, i, stop, char, False))
                break
            spans.append(LiteralSpan(ScanState.STRING, i, close, char, True))
            i = close + 1
        elif char == comment_char:
            newline = text.find("\n", i, stop)
            if newline == -1:
                spans.append(LiteralSpan(ScanState.COMMENT, i, stop, char, False))
                break
            spans.append(LiteralSpan(ScanState.COMMENT, i, newline, char, True))
            i = newline + 1
        else:
            i += 1

    return spans


def find_closing_quote(text: str, start: int, quote: str, limit: int) -> int:
    """
    Find the unescaped ``quote`` closing a string whose content starts at ``start``.

    Returns:
        Offset of the closing quote, or NOT_FOUND before ``limit``
    """
    limit = min(limit, len(text))
    i = start
    while i < limit:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i
        i += 1
    return NOT_FOUND


def span_containing(spans: List[LiteralSpan], offset: int) -> Optional[LiteralSpan]:
    """Return the span covering ``offset`` (opening character included), if any."""
    index = bisect_right([span.start for span in spans], offset) - 1
    if index < 0:
        return None
    span = spans[index]
    if span.start <= offset <= span.end:
        return span
    return None


def string_range_at(
    document: Document,
    position: types.Position,
    config: DetectionConfigModel,
) -> Optional[StringRegion]:
    """
    Find the quoted string literal enclosing ``position``.

    The scan starts at the first line of a bounded lookback window and runs
    forward to the cursor. If the cursor is inside a string, the closing quote
    is searched forward across lines, bounded by the per-call length limit.
    A cursor placed right after a closing quote resolves to the string it just
    closed.

    Args:
        document: The document snapshot
        position: Cursor position
        config: Detection configuration (quote characters, comment character,
            lookback and length limits)

    Returns:
        The content-only region of the literal, or None
    """
    text = document.text
    offset = offset_at(document, position)
    limits = config.limits

    first_line = max(0, min(position.line, document.line_count - 1) - limits.context_line_lookback)
    window_start = document.line_offsets[first_line]

    spans = scan_literals(text, window_start, offset, config.quote_chars, config.comment_char)
    if not spans:
        return None
    last = spans[-1]
    if last.kind is not ScanState.STRING:
        return None

    if last.closed:
        # Cursor just after the closing quote
        if last.end != offset - 1:
            return None
        open_quote, close_quote = last.start, last.end
    else:
        open_quote = last.start
        close_quote = find_closing_quote(
            text, open_quote + 1, last.quote, open_quote + 1 + limits.max_function_call_length
        )
        if close_quote == NOT_FOUND:
            logger.debug(f"No closing {last.quote} for string opened at offset {open_quote}")
            return None

    start = open_quote + 1
    if close_quote < start or offset < start:
        return None

    return StringRegion(
        range=types.Range(start=position_at(document, start), end=position_at(document, close_quote)),
        start=start,
        end=close_quote,
        quote=last.quote,
    )
