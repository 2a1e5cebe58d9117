"""Immutable snapshot of an R source buffer."""

import functools
from typing import List, Optional

import attrs
from lsprotocol import types


@attrs.frozen(slots=False)
class Document:
    """
    A snapshot of a document as seen by the detection engine.

    The engine never holds on to editor objects; callers build a Document from
    whatever buffer they have (a pygls TextDocument, a file, a test string).

    Attributes:
        uri: Stable identity of the document (stable across edits)
        text: Full text, lines separated by a single newline
        version: Monotonically increasing edit counter
    """

    uri: str
    text: str = attrs.field(converter=lambda value: value.replace("\r\n", "\n"))
    version: int = 0

    @classmethod
    def from_text_document(cls, text_document) -> "Document":
        """Build a snapshot from a pygls TextDocument."""
        return cls(
            uri=text_document.uri,
            text=text_document.source,
            version=text_document.version or 0,
        )

    @functools.cached_property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    @functools.cached_property
    def line_offsets(self) -> List[int]:
        """Flat offset of the first character of every line."""
        offsets = [0]
        for line in self.lines[:-1]:
            offsets.append(offsets[-1] + len(line) + 1)
        return offsets

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def get_text(self, text_range: Optional[types.Range] = None) -> str:
        """Return the text of a range, or the whole document."""
        if text_range is None:
            return self.text

        # Imported lazily: positions imports this module
        from .positions import offset_at

        return self.text[offset_at(self, text_range.start):offset_at(self, text_range.end)]
