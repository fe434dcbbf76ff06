"""Tests for the Asa tokenizer and token stream."""

from __future__ import annotations

import pytest

from asalang.core.errors import InvalidEncodingError, ParseError, TokenizeError
from asalang.core.lang.tokenizer import Token, TokenKind, TokenStream, tokenize


def _kinds(source: str | bytes) -> list[TokenKind]:
    return [t.kind for t in tokenize(source) if t.kind != TokenKind.WHITESPACE]


class TestTokenizer:
    """Tokenizer produces classified, position-tracked tokens."""

    def test_digit_run(self) -> None:
        tokens = tokenize("123")
        assert tokens[0].kind == TokenKind.DIGIT
        assert tokens[0].lexeme == "123"
        assert tokens[-1].kind == TokenKind.EOF

    def test_letters_and_digits_are_separate_runs(self) -> None:
        tokens = tokenize("hello123")
        assert [(t.kind, t.lexeme) for t in tokens[:-1]] == [
            (TokenKind.ALPHA, "hello"),
            (TokenKind.DIGIT, "123"),
        ]

    def test_keywords(self) -> None:
        assert _kinds("true false let fn return") == [
            TokenKind.TRUE,
            TokenKind.FALSE,
            TokenKind.LET,
            TokenKind.FN,
            TokenKind.RETURN,
            TokenKind.EOF,
        ]

    def test_keyword_prefix_is_alpha(self) -> None:
        assert _kinds("letter") == [TokenKind.ALPHA, TokenKind.EOF]

    def test_punctuation_and_operators(self) -> None:
        assert _kinds('(){}",;+-*/=') == [
            TokenKind.LEFT_PAREN,
            TokenKind.RIGHT_PAREN,
            TokenKind.LEFT_CURLY,
            TokenKind.RIGHT_CURLY,
            TokenKind.QUOTE,
            TokenKind.COMMA,
            TokenKind.SEMICOLON,
            TokenKind.PLUS,
            TokenKind.DASH,
            TokenKind.STAR,
            TokenKind.SLASH,
            TokenKind.EQUAL,
            TokenKind.EOF,
        ]

    def test_whitespace_is_kept_as_tokens(self) -> None:
        kinds = [t.kind for t in tokenize("let x = 123;")]
        assert kinds == [
            TokenKind.LET,
            TokenKind.WHITESPACE,
            TokenKind.ALPHA,
            TokenKind.WHITESPACE,
            TokenKind.EQUAL,
            TokenKind.WHITESPACE,
            TokenKind.DIGIT,
            TokenKind.SEMICOLON,
            TokenKind.EOF,
        ]

    def test_line_and_column(self) -> None:
        tokens = [t for t in tokenize("let x\n  = 1") if t.kind != TokenKind.WHITESPACE]
        equal = tokens[2]
        assert equal.kind == TokenKind.EQUAL
        assert (equal.line, equal.column) == (2, 3)
        assert equal.pos == 8

    def test_unexpected_character(self) -> None:
        with pytest.raises(TokenizeError, match="Unexpected") as exc_info:
            tokenize("let x = 1;\nlet y = @;")
        assert exc_info.value.context is not None
        assert (exc_info.value.context.line, exc_info.value.context.column) == (2, 9)

    def test_tokenize_error_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            tokenize("x_y")

    def test_utf8_bytes(self) -> None:
        assert _kinds(b"let x = 1;") == _kinds("let x = 1;")

    def test_invalid_utf8_bytes(self) -> None:
        with pytest.raises(InvalidEncodingError, match="UTF-8"):
            tokenize(b"let \xff = 1;")

    def test_non_ascii_digits_are_not_digit_runs(self) -> None:
        with pytest.raises(TokenizeError):
            tokenize("²")


class TestTokenStream:
    """TokenStream supports the parser's backtracking."""

    def test_whitespace_is_skipped(self) -> None:
        stream = TokenStream.from_source("1 + 2")
        assert [t.kind for t in stream.tokens] == [
            TokenKind.DIGIT,
            TokenKind.PLUS,
            TokenKind.DIGIT,
            TokenKind.EOF,
        ]

    def test_mark_and_reset(self) -> None:
        stream = TokenStream.from_source("a b")
        mark = stream.mark()
        assert stream.advance().lexeme == "a"
        assert stream.current.lexeme == "b"
        stream.reset(mark)
        assert stream.current.lexeme == "a"

    def test_match(self) -> None:
        stream = TokenStream.from_source("let x")
        assert stream.match(TokenKind.ALPHA) is None
        assert stream.match(TokenKind.LET) is not None
        assert stream.current.lexeme == "x"

    def test_is_done(self) -> None:
        stream = TokenStream.from_source("x")
        assert not stream.is_done()
        stream.advance()
        assert stream.is_done()

    def test_advance_stops_at_eof(self) -> None:
        stream = TokenStream.from_source("")
        assert stream.advance().kind == TokenKind.EOF
        assert stream.advance().kind == TokenKind.EOF

    def test_eof_appended_to_bare_token_list(self) -> None:
        stream = TokenStream([Token(TokenKind.DIGIT, "1", 0)])
        assert stream.tokens[-1].kind == TokenKind.EOF

    def test_adjacent(self) -> None:
        tokens = tokenize("ab12 34")
        alpha, digit, space, other = tokens[:4]
        assert TokenStream.adjacent(alpha, digit)
        assert not TokenStream.adjacent(digit, other)
        assert space.kind == TokenKind.WHITESPACE

    def test_snippet(self) -> None:
        stream = TokenStream.from_source("let x = 1;\nlet y = 2;")
        last = stream.tokens[-2]
        assert stream.snippet(last) == "let y = 2;"
