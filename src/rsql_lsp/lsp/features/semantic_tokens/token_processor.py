"""Turns SQL regions into classified semantic tokens."""

import logging
from typing import List, Optional

from rsql_lsp.core.document import Document
from rsql_lsp.core.escapes import decode_r_string
from rsql_lsp.core.interpolation import interpolation_spans
from rsql_lsp.core.keywords import SQL_FUNCTION_TOKENS, SQL_KEYWORD_TOKENS, TABLE_CONTEXT_KEYWORDS
from rsql_lsp.core.models import CachedRegion
from rsql_lsp.core.positions import to_position
from rsql_lsp.core.tokenizer import SQLToken, TokenType, tokenize

from .semantic_tokens_classifier import Token, TokenModifier
from .semantic_tokens_config import SemanticTokensConfig

logger = logging.getLogger(__name__)


class TokenProcessor:
    """Tokenizes a region's raw text and resolves the legend type of each token."""

    def __init__(self, config: Optional[SemanticTokensConfig] = None):
        self._config = config or SemanticTokensConfig()

    def process_region(self, region: CachedRegion, document: Document) -> List[Token]:
        """
        Produce document-positioned tokens for one SQL region.

        The R escapes are decoded before lexing, so an escaped quote does not
        open a SQL string. Each token is then positioned by its raw extent,
        which includes the backslashes. Tokens overlapping a glue
        interpolation are dropped and tokens spanning lines are split into
        one token per line.
        """
        raw = region.raw_text
        if not raw:
            return []
        sql, raw_offsets = decode_r_string(raw)

        skipped = interpolation_spans(sql) if region.is_interpolating else []
        result: List[Token] = []
        previous_keyword = ""

        for sql_token in tokenize(sql, SQL_KEYWORD_TOKENS):
            if sql_token.type is TokenType.KEYWORD:
                previous_keyword = sql_token.text.upper()

            if any(start < sql_token.end and sql_token.offset < end for start, end in skipped):
                continue

            tok_type = self.resolve_token_type(sql_token, previous_keyword)
            modifiers = []
            if tok_type == "function" and sql_token.text.upper() in SQL_FUNCTION_TOKENS:
                modifiers.append(TokenModifier.defaultLibrary)

            raw_start = raw_offsets[sql_token.offset]
            raw_text = raw[raw_start:raw_offsets[sql_token.end]]
            start = to_position(raw_start, region.range.start, document)
            result.extend(self._split_lines(raw_text, start.line, start.character, tok_type, modifiers))

        return result

    def resolve_token_type(self, sql_token: SQLToken, previous_keyword: str) -> str:
        """
        Map a lexer token to a legend type.

        Identifiers become table-like when the nearest preceding keyword
        introduces a table (FROM, JOIN, INTO, ...), column-like otherwise.
        Known DuckDB functions are functions even without a call.
        """
        if sql_token.type is TokenType.IDENTIFIER:
            if sql_token.text.upper() in SQL_FUNCTION_TOKENS:
                return "function"
            if previous_keyword in TABLE_CONTEXT_KEYWORDS:
                return self._config.TABLE_TOKEN_TYPE
            return self._config.COLUMN_TOKEN_TYPE
        return self._config.TOKEN_TYPE_NAMES[sql_token.type]

    def get_token_type_index(self, token: Token) -> int:
        """Legend index of a token's type."""
        return self._config.index_of(token.tok_type)

    @staticmethod
    def _split_lines(text: str, line: int, character: int, tok_type: str, modifiers) -> List[Token]:
        tokens = []
        for index, piece in enumerate(text.split("\n")):
            if piece:
                tokens.append(
                    Token(
                        line=line + index,
                        offset=character if index == 0 else 0,
                        text=piece,
                        tok_type=tok_type,
                        tok_modifiers=list(modifiers),
                    )
                )
        return tokens
