"""Tests for the SQL tokenizer."""

from rsql_lsp.core.keywords import SQL_KEYWORD_TOKENS
from rsql_lsp.core.tokenizer import SQLToken, TokenType, tokenize


def _types_and_text(tokens):
    return [(t.type, t.text) for t in tokens]


def test_select_statement():
    tokens = tokenize("SELECT count(*) FROM t WHERE a >= 1.5 -- trailing", SQL_KEYWORD_TOKENS)

    assert _types_and_text(tokens) == [
        (TokenType.KEYWORD, "SELECT"),
        (TokenType.FUNCTION, "count"),
        (TokenType.OPERATOR, "*"),
        (TokenType.KEYWORD, "FROM"),
        (TokenType.IDENTIFIER, "t"),
        (TokenType.KEYWORD, "WHERE"),
        (TokenType.IDENTIFIER, "a"),
        (TokenType.OPERATOR, ">="),
        (TokenType.NUMBER, "1.5"),
        (TokenType.COMMENT, "-- trailing"),
    ]


def test_offsets_point_into_source():
    sql = "select  x\nfrom tbl"
    for token in tokenize(sql, SQL_KEYWORD_TOKENS):
        assert sql[token.offset:token.end] == token.text


def test_keywords_are_case_insensitive():
    tokens = tokenize("select From", SQL_KEYWORD_TOKENS)
    assert [t.type for t in tokens] == [TokenType.KEYWORD, TokenType.KEYWORD]


def test_without_keywords_everything_is_identifier():
    tokens = tokenize("SELECT x")
    assert [t.type for t in tokens] == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]


def test_function_call_with_space_before_paren():
    tokens = tokenize("upper (name)")
    assert tokens[0] == SQLToken(TokenType.FUNCTION, "upper", 0)


def test_string_literals():
    tokens = tokenize("'it''s' || \"col\"")

    assert _types_and_text(tokens) == [
        (TokenType.STRING, "'it''s'"),
        (TokenType.OPERATOR, "||"),
        (TokenType.STRING, '"col"'),
    ]


def test_backslash_does_not_escape_in_sql_strings():
    tokens = tokenize("'C:\\' AS p", SQL_KEYWORD_TOKENS)

    assert _types_and_text(tokens) == [
        (TokenType.STRING, "'C:\\'"),
        (TokenType.KEYWORD, "AS"),
        (TokenType.IDENTIFIER, "p"),
    ]


def test_unterminated_string_runs_to_end():
    tokens = tokenize("SELECT 'abc", SQL_KEYWORD_TOKENS)
    assert tokens[-1] == SQLToken(TokenType.STRING, "'abc", 7)


def test_invalid_input_never_fails():
    assert tokenize("") == []
    assert tokenize("(),;.") == []
    tokens = tokenize("1. ?? x", SQL_KEYWORD_TOKENS)
    assert _types_and_text(tokens) == [(TokenType.NUMBER, "1"), (TokenType.IDENTIFIER, "x")]
