"""Encoding of semantic tokens into the LSP relative integer format."""

import operator
from functools import reduce
from typing import List, Optional

from lsprotocol import types

from rsql_lsp.lsp.utils.r_document import RDocument

from .semantic_tokens_classifier import Token
from .token_processor import TokenProcessor


class PositionCalculator:
    """Calculates relative positions for semantic tokens."""

    def __init__(self, processor: Optional[TokenProcessor] = None):
        self._processor = processor or TokenProcessor()

    def calculate_relative_positions(
        self,
        tokens: List[Token],
        r_document: RDocument,
        text_range: Optional[types.Range] = None,
    ) -> List[int]:
        """
        Calculate relative positions for tokens in LSP semantic tokens format.

        Args:
            tokens: Tokens in document order, string-index columns
            r_document: Document used to convert columns to client units
            text_range: Optional client range; tokens outside it are dropped

        Returns:
            List of integers in LSP semantic tokens format:
            [delta_line, delta_start, length, token_type, token_modifiers, ...]
        """
        data: List[int] = []
        prev_line = 0
        prev_start = 0

        for token in sorted(tokens, key=lambda t: (t.line, t.offset)):
            start = r_document.to_client_position(types.Position(line=token.line, character=token.offset))
            if text_range is not None and not _in_range(start, text_range):
                continue

            delta_line = start.line - prev_line
            delta_start = start.character - prev_start if delta_line == 0 else start.character
            prev_line = start.line
            prev_start = start.character

            data.extend(
                [
                    delta_line,
                    delta_start,
                    r_document.client_length(token.text),
                    self._processor.get_token_type_index(token),
                    reduce(operator.or_, token.tok_modifiers, 0),
                ]
            )

        return data


def _in_range(position: types.Position, text_range: types.Range) -> bool:
    key = (position.line, position.character)
    return (text_range.start.line, text_range.start.character) <= key < (
        text_range.end.line,
        text_range.end.character,
    )
