"""Configuration for semantic tokens functionality."""

from typing import Dict, List

from rsql_lsp.core.tokenizer import TokenType


class SemanticTokensConfig:
    """Legend and token type mappings."""

    # LSP standard token types, in legend order
    TOKEN_TYPES: List[str] = [
        "keyword",
        "function",
        "string",
        "number",
        "operator",
        "comment",
        "variable",
        "class",
    ]

    TOKEN_MODIFIERS: List[str] = ["defaultLibrary"]

    # Lexer token type -> legend entry
    TOKEN_TYPE_NAMES: Dict[TokenType, str] = {
        TokenType.KEYWORD: "keyword",
        TokenType.FUNCTION: "function",
        TokenType.STRING: "string",
        TokenType.NUMBER: "number",
        TokenType.OPERATOR: "operator",
        TokenType.COMMENT: "comment",
        TokenType.IDENTIFIER: "variable",
    }

    # Identifiers after FROM/JOIN/INTO/... are table-like
    TABLE_TOKEN_TYPE = "class"
    COLUMN_TOKEN_TYPE = "variable"

    @classmethod
    def index_of(cls, token_type: str) -> int:
        return cls.TOKEN_TYPES.index(token_type)
