"""
Document-wide discovery of SQL string regions.

Used by batch consumers (semantic tokens, diagnostics, the ``regions`` CLI
command). The whole document is scanned once for string literals and
comments; every configured call found in code is then resolved to its
argument span and the literals inside it are collected.
"""

import logging
from bisect import bisect_right
from typing import Dict, List, Optional, Protocol, Tuple

from lsprotocol import types

from ..config.models import DetectionConfigModel
from .context import accepts_argument, call_pattern, call_span, named_argument_before
from .document import Document
from .models import CachedRegion
from .parens import NOT_FOUND, find_call_open_paren
from .positions import position_at
from .scanner import ScanState, scan_literals, span_containing

logger = logging.getLogger(__name__)

_OPEN_BRACKETS = "([{"
_CLOSE_BRACKETS = ")]}"


class CancellationFlag(Protocol):
    """Anything with a threading.Event-like ``is_set``."""

    def is_set(self) -> bool:
        ...


def _cancelled(cancel: Optional[CancellationFlag]) -> bool:
    return cancel is not None and cancel.is_set()


def _bracket_delta(text: str, start: int, end: int) -> int:
    """Net bracket depth change over code in text[start:end]."""
    chunk = text[start:end]
    return sum(chunk.count(c) for c in _OPEN_BRACKETS) - sum(chunk.count(c) for c in _CLOSE_BRACKETS)


def find_all_regions(
    document: Document,
    config: DetectionConfigModel,
    cancel: Optional[CancellationFlag] = None,
) -> Optional[List[CachedRegion]]:
    """
    Find every SQL string literal passed to a configured function.

    A literal reachable from several nested calls is reported once and
    attributed to the innermost call. Literals nested in another bracket
    inside that call, such as ``params = list("a")`` or the pieces of a
    ``paste0()``, are reported with ``is_direct_argument=False``.

    Args:
        document: The document snapshot
        config: Detection configuration
        cancel: Optional cancellation flag, polled between function names
            and between call matches

    Returns:
        Regions in document order (possibly partial when a safety limit was
        hit), or None when cancelled
    """
    text = document.text
    limits = config.limits

    if len(text) > limits.max_document_size:
        logger.warning(
            f"Document {document.uri} too large ({len(text)} chars), skipping SQL detection"
        )
        return []

    spans = scan_literals(text, 0, None, config.quote_chars, config.comment_char)
    span_starts = [span.start for span in spans]

    # (content start, closing quote) -> (paren offset of owning call, function name, direct)
    owners: Dict[Tuple[int, int], Tuple[int, str, bool]] = {}

    for name in config.all_functions:
        if _cancelled(cancel):
            return None

        match_count = 0
        for match in call_pattern(name).finditer(text):
            if _cancelled(cancel):
                return None
            if span_containing(spans, match.start()) is not None:
                continue

            match_count += 1
            if match_count > limits.max_function_matches:
                logger.warning(
                    f"More than {limits.max_function_matches} calls to {name} in {document.uri}, "
                    f"ignoring the rest"
                )
                break

            paren = find_call_open_paren(text, match.end(), limits.max_paren_search_distance)
            if paren == NOT_FOUND:
                continue
            close = call_span(text, paren, config)

            depth = 0
            code_start = paren + 1
            for span in spans[bisect_right(span_starts, paren):]:
                if span.start >= close:
                    break
                depth += _bracket_delta(text, code_start, span.start)
                code_start = span.end + 1
                if span.kind is not ScanState.STRING or not span.closed or span.end >= close:
                    continue

                argument = named_argument_before(text, span.start, limits.named_argument_lookback)
                if not accepts_argument(name, argument, config):
                    continue

                key = (span.start + 1, span.end)
                owner = owners.get(key)
                if owner is None or owner[0] < paren:
                    owners[key] = (paren, name, depth == 0)

    regions = []
    for (start, end), (_, name, direct) in sorted(owners.items()):
        text_range = types.Range(start=position_at(document, start), end=position_at(document, end))
        regions.append(
            CachedRegion(
                range=text_range,
                function_name=name,
                is_multiline=text_range.start.line != text_range.end.line,
                is_interpolating=config.is_interpolating(name),
                raw_text=text[start:end],
                is_direct_argument=direct,
            )
        )

    logger.debug(f"Found {len(regions)} SQL regions in {document.uri}")
    return regions
