"""Tests for offset and position mapping."""

from lsprotocol import types

from rsql_lsp.core.document import Document
from rsql_lsp.core.positions import (
    compare_positions,
    is_position_in_range,
    offset_at,
    position_at,
    to_offset,
    to_position,
)


def _doc(text: str) -> Document:
    return Document(uri="file:///positions.R", text=text)


class TestOffsetAt:
    def test_first_line(self):
        document = _doc("SELECT *\nFROM t")
        assert offset_at(document, types.Position(line=0, character=3)) == 3

    def test_second_line_counts_newline_once(self):
        document = _doc("SELECT *\nFROM t")
        assert offset_at(document, types.Position(line=1, character=0)) == 9

    def test_clamps_character_to_line_length(self):
        document = _doc("ab\ncd")
        assert offset_at(document, types.Position(line=0, character=99)) == 2

    def test_clamps_line_past_end(self):
        document = _doc("ab\ncd")
        assert offset_at(document, types.Position(line=10, character=0)) == len(document.text)

    def test_crlf_is_normalized(self):
        document = _doc("ab\r\ncd")
        assert document.text == "ab\ncd"
        assert offset_at(document, types.Position(line=1, character=1)) == 4


class TestPositionAt:
    def test_offset_at_line_start(self):
        document = _doc("SELECT *\nFROM t")
        assert position_at(document, 9) == types.Position(line=1, character=0)

    def test_is_inverse_of_offset_at(self):
        document = _doc("one\n\nthree\nfour")
        for offset in range(len(document.text) + 1):
            assert offset_at(document, position_at(document, offset)) == offset

    def test_clamps_negative_and_large_offsets(self):
        document = _doc("ab\ncd")
        assert position_at(document, -5) == types.Position(line=0, character=0)
        assert position_at(document, 100) == types.Position(line=1, character=2)


class TestFragmentMapping:
    def test_to_position_on_same_line(self):
        document = _doc('dbGetQuery(con, "SELECT 1")')
        start = types.Position(line=0, character=17)
        assert to_position(7, start, document) == types.Position(line=0, character=24)

    def test_to_position_across_lines(self):
        document = _doc('dbExecute(con,\n  "UPDATE t\n   SET x = 1")')
        start = types.Position(line=1, character=3)
        # "UPDATE t" is 8 characters, +1 for the newline
        assert to_position(9, start, document) == types.Position(line=2, character=0)

    def test_to_position_clamps_to_document_end(self):
        document = _doc("ab\ncd")
        assert to_position(100, types.Position(line=0, character=0), document) == types.Position(
            line=1, character=2
        )

    def test_to_offset_is_inverse_of_to_position(self):
        document = _doc('dbExecute(con,\n  "UPDATE t\n   SET x = 1")')
        start = types.Position(line=1, character=3)
        for offset in range(0, 20):
            assert to_offset(to_position(offset, start, document), start, document) == offset

    def test_to_offset_before_fragment_is_zero(self):
        document = _doc("abc\ndef")
        assert to_offset(types.Position(line=0, character=0), types.Position(line=1, character=1), document) == 0


class TestRangeHelpers:
    def test_compare_positions(self):
        a = types.Position(line=1, character=5)
        b = types.Position(line=2, character=0)
        assert compare_positions(a, b) == -1
        assert compare_positions(b, a) == 1
        assert compare_positions(a, types.Position(line=1, character=5)) == 0

    def test_range_is_inclusive(self):
        text_range = types.Range(
            start=types.Position(line=0, character=2), end=types.Position(line=1, character=3)
        )
        assert is_position_in_range(types.Position(line=0, character=2), text_range)
        assert is_position_in_range(types.Position(line=1, character=3), text_range)
        assert is_position_in_range(types.Position(line=0, character=80), text_range)
        assert not is_position_in_range(types.Position(line=1, character=4), text_range)
        assert not is_position_in_range(types.Position(line=0, character=1), text_range)
