"""
Parenthesis matching over R source text.

Depth counting ignores parentheses that occur inside quoted strings or inside
R line comments. Both scans are bounded so a single call stays cheap on
pathological buffers.
"""

from .scanner import ScanState

NOT_FOUND = -1


def find_call_open_paren(text: str, name_end: int, max_distance: int) -> int:
    """
    Find the opening parenthesis of a call whose name ends at ``name_end``.

    Only whitespace may separate the name from the parenthesis.

    Returns:
        Offset of ``(`` or NOT_FOUND
    """
    limit = min(len(text), name_end + max_distance)
    i = name_end
    while i < limit:
        char = text[i]
        if char == "(":
            return i
        if not char.isspace():
            return NOT_FOUND
        i += 1
    return NOT_FOUND


def find_matching_close(
    text: str,
    open_offset: int,
    max_distance: int,
    quote_chars: str = "\"'`",
    comment_char: str = "#",
) -> int:
    """
    Find the parenthesis closing the one at ``open_offset``.

    Args:
        text: Text to scan
        open_offset: Offset of an opening parenthesis
        max_distance: Maximum number of characters scanned after ``open_offset``
        quote_chars: Characters that open and close R strings
        comment_char: Character starting an R line comment

    Returns:
        Offset of the matching ``)``, or NOT_FOUND if the depth never returns
        to zero within the text or the distance limit
    """
    if open_offset < 0 or open_offset >= len(text) or text[open_offset] != "(":
        return NOT_FOUND

    limit = min(len(text), open_offset + 1 + max_distance)
    state = ScanState.NORMAL
    quote = ""
    depth = 0
    i = open_offset + 1

    while i < limit:
        char = text[i]

        if state is ScanState.STRING:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                state = ScanState.NORMAL
        elif state is ScanState.COMMENT:
            if char == "\n":
                state = ScanState.NORMAL
        elif char in quote_chars:
            state = ScanState.STRING
            quote = char
        elif char == comment_char:
            state = ScanState.COMMENT
        elif char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                return i
            depth -= 1

        i += 1

    return NOT_FOUND
