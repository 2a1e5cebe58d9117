"""
Minimal SQL lexer for semantic highlighting.

The tokenizer never fails: partially typed or invalid SQL yields whatever
tokens can be recognized and unknown characters are skipped.
"""

from enum import Enum
from typing import AbstractSet, List

import attrs

MULTI_CHAR_OPERATORS = ("<=", ">=", "<>", "!=", "||")
SINGLE_CHAR_OPERATORS = frozenset("=<>+-*/%")


class TokenType(Enum):
    KEYWORD = "keyword"
    FUNCTION = "function"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    COMMENT = "comment"
    IDENTIFIER = "identifier"


@attrs.frozen
class SQLToken:
    """A token with its offset inside the SQL text."""

    type: TokenType
    text: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


def _is_identifier_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _string_end(sql: str, start: int) -> int:
    """Offset just past the string literal opened at ``start``."""
    quote = sql[start]
    i = start + 1
    while i < len(sql):
        if sql[i] == quote:
            # SQL doubled quote: 'it''s'
            if i + 1 < len(sql) and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return len(sql)


def tokenize(sql: str, keywords: AbstractSet[str] = frozenset()) -> List[SQLToken]:
    """
    Tokenize SQL text in a single left-to-right pass.

    Args:
        sql: SQL text
        keywords: Upper-case words reported as KEYWORD instead of IDENTIFIER
            or FUNCTION

    Returns:
        Tokens in order of appearance
    """
    tokens: List[SQLToken] = []
    length = len(sql)
    i = 0

    while i < length:
        char = sql[i]

        if char.isspace():
            i += 1
            continue

        if sql.startswith("--", i):
            end = sql.find("\n", i)
            if end == -1:
                end = length
            tokens.append(SQLToken(TokenType.COMMENT, sql[i:end], i))
            i = end
            continue

        if char in "'\"":
            end = _string_end(sql, i)
            tokens.append(SQLToken(TokenType.STRING, sql[i:end], i))
            i = end
            continue

        if char.isdigit():
            end = i
            seen_dot = False
            while end < length:
                if sql[end].isdigit():
                    end += 1
                elif sql[end] == "." and not seen_dot and end + 1 < length and sql[end + 1].isdigit():
                    seen_dot = True
                    end += 1
                else:
                    break
            tokens.append(SQLToken(TokenType.NUMBER, sql[i:end], i))
            i = end
            continue

        if _is_identifier_start(char):
            end = i
            while end < length and _is_identifier_char(sql[end]):
                end += 1
            text = sql[i:end]

            if text.upper() in keywords:
                token_type = TokenType.KEYWORD
            else:
                lookahead = end
                while lookahead < length and sql[lookahead].isspace():
                    lookahead += 1
                is_call = lookahead < length and sql[lookahead] == "("
                token_type = TokenType.FUNCTION if is_call else TokenType.IDENTIFIER

            tokens.append(SQLToken(token_type, text, i))
            i = end
            continue

        operator = next((op for op in MULTI_CHAR_OPERATORS if sql.startswith(op, i)), None)
        if operator is None and char in SINGLE_CHAR_OPERATORS:
            operator = char
        if operator is not None:
            tokens.append(SQLToken(TokenType.OPERATOR, operator, i))
            i += len(operator)
            continue

        i += 1

    return tokens
