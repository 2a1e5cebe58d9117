"""
Offset and position mapping for SQL fragments.

This module converts between flat character offsets (inside a document or
inside an extracted fragment) and line/character positions of the full
document. A newline between two lines always counts as one character.

Every function clamps instead of raising: callers operate on a live buffer that
may have changed since the offsets were computed.
"""

from bisect import bisect_right

from lsprotocol import types

from .document import Document


def offset_at(document: Document, position: types.Position) -> int:
    """
    Convert a document position to a flat offset.

    Args:
        document: The document snapshot
        position: Position within the document (0-based)

    Returns:
        Flat offset, clamped to the document bounds
    """
    if position.line < 0:
        return 0
    if position.line >= document.line_count:
        return len(document.text)

    line_text = document.lines[position.line]
    character = min(max(position.character, 0), len(line_text))
    return document.line_offsets[position.line] + character


def position_at(document: Document, offset: int) -> types.Position:
    """
    Convert a flat offset to a document position.

    Uses binary search over the line start offsets.

    Example:
        For text "SELECT *\\nFROM t", offset 9 points to 'F'
        and returns Position(line=1, character=0)
    """
    offset = min(max(offset, 0), len(document.text))
    line = bisect_right(document.line_offsets, offset) - 1
    return types.Position(line=line, character=offset - document.line_offsets[line])


def to_position(
    offset: int, reference_start: types.Position, document: Document
) -> types.Position:
    """
    Transform an offset inside a fragment into a document position.

    Args:
        offset: 0-based offset relative to the fragment start
        reference_start: Document position of the fragment's first character
        document: The document the fragment was taken from

    Returns:
        Document position; offsets past the end of the document are clamped to
        the end of the last line
    """
    line = reference_start.line
    character = reference_start.character
    remaining = max(offset, 0)

    while remaining > 0:
        if line >= document.line_count:
            break

        line_text = document.lines[line]
        available = len(line_text) - character
        if remaining <= available:
            return types.Position(line=line, character=character + remaining)

        # +1 for the newline
        remaining -= available + 1
        if line + 1 >= document.line_count:
            return types.Position(line=line, character=len(line_text))
        line += 1
        character = 0

    if line >= document.line_count:
        last = document.line_count - 1
        return types.Position(line=last, character=len(document.lines[last]))
    return types.Position(line=line, character=character)


def to_offset(
    position: types.Position, reference_start: types.Position, document: Document
) -> int:
    """
    Transform a document position into an offset inside a fragment.

    This is the inverse operation of to_position. Positions before the
    fragment start map to 0.
    """
    return max(0, offset_at(document, position) - offset_at(document, reference_start))


def compare_positions(a: types.Position, b: types.Position) -> int:
    """Return -1, 0 or 1 following document order."""
    key_a = (a.line, a.character)
    key_b = (b.line, b.character)
    return (key_a > key_b) - (key_a < key_b)


def is_position_in_range(position: types.Position, text_range: types.Range) -> bool:
    """
    Check if a position falls within a range, both ends inclusive.

    Args:
        position: Position to check
        text_range: Range of the fragment

    Returns:
        True if position is within the range, False otherwise
    """
    if text_range is None:
        return False

    return (
        compare_positions(text_range.start, position) <= 0
        and compare_positions(position, text_range.end) <= 0
    )
