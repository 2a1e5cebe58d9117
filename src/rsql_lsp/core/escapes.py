"""
R string escapes.

Only the escapes that matter for SQL text are decoded: ``\\\\``, the three
quote characters, ``\\n`` and ``\\t``. Any other backslash sequence is kept
verbatim. Decoding is a single left-to-right pass so that ``\\\\n`` reads as
an escaped backslash followed by ``n``.
"""

from typing import List, Tuple

R_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "`": "`",
    "n": "\n",
    "t": "\t",
}


def decode_r_string(raw: str) -> Tuple[str, List[int]]:
    """
    Decode the content of an R string literal.

    Returns:
        The decoded text and, for every decoded character, the offset in
        ``raw`` where it starts. One extra trailing entry equals ``len(raw)``
        so that decoded end offsets map back as well.
    """
    chars: List[str] = []
    offsets: List[int] = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == "\\" and i + 1 < len(raw) and raw[i + 1] in R_ESCAPES:
            chars.append(R_ESCAPES[raw[i + 1]])
            offsets.append(i)
            i += 2
            continue
        chars.append(char)
        offsets.append(i)
        i += 1
    offsets.append(len(raw))
    return "".join(chars), offsets


def unescape_r_string(raw: str) -> str:
    return decode_r_string(raw)[0]


def escape_r_string(text: str, quote: str) -> str:
    """
    Encode ``text`` as the content of an R literal delimited by ``quote``.

    Backslashes are escaped first, then the delimiting quote. Newlines stay
    literal: R strings may span lines.
    """
    return text.replace("\\", "\\\\").replace(quote, "\\" + quote)
