"""
Tokenizer for the Asa language.

Converts source text into a sequence of classified, position-tracked
tokens. Letters and digits are emitted as separate runs ("abc12" is an
ALPHA token followed by a DIGIT token); the parser decides how adjacent
runs combine into identifiers and numbers.
"""

from __future__ import annotations

from enum import StrEnum, auto

from asalang.core.errors import InvalidEncodingError, TokenizeError, make_parse_error


class TokenKind(StrEnum):
    """Token types for the Asa language."""

    # Runs
    ALPHA = auto()
    DIGIT = auto()
    WHITESPACE = auto()

    # Keywords
    TRUE = auto()
    FALSE = auto()
    LET = auto()
    FN = auto()
    RETURN = auto()

    # Punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_CURLY = auto()
    RIGHT_CURLY = auto()
    QUOTE = auto()
    COMMA = auto()
    SEMICOLON = auto()

    # Operators
    PLUS = auto()
    DASH = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token with its source position."""

    __slots__ = ("kind", "lexeme", "pos", "line", "column")

    def __init__(self, kind: TokenKind, lexeme: str, pos: int, line: int = 1, column: int = 1) -> None:
        self.kind = kind
        self.lexeme = lexeme
        self.pos = pos
        self.line = line
        self.column = column

    @property
    def end(self) -> int:
        """Offset just past the last character of the token."""
        return self.pos + len(self.lexeme)

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.lexeme, self.pos) == (other.kind, other.lexeme, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.lexeme, self.pos))


_KEYWORDS: dict[str, TokenKind] = {
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "let": TokenKind.LET,
    "fn": TokenKind.FN,
    "return": TokenKind.RETURN,
}

_SINGLE_MAP: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_CURLY,
    "}": TokenKind.RIGHT_CURLY,
    '"': TokenKind.QUOTE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "+": TokenKind.PLUS,
    "-": TokenKind.DASH,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQUAL,
}

_WHITESPACE = " \t\n\r"


def decode_source(source: str | bytes) -> str:
    """Return source as text, rejecting byte input that is not UTF-8."""
    if isinstance(source, str):
        return source
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as e:
        prefix = source[: e.start]
        line = prefix.count(b"\n") + 1
        column = e.start - (prefix.rfind(b"\n") + 1) + 1
        raise make_parse_error(
            f"Invalid UTF-8 byte sequence at offset {e.start}",
            line,
            column,
            error_class=InvalidEncodingError,
        ) from e


def tokenize(source: str | bytes) -> list[Token]:
    """Tokenize Asa source into a list of tokens ending with EOF.

    Whitespace runs are kept as WHITESPACE tokens; TokenStream skips them.

    Raises:
        InvalidEncodingError: If bytes input is not valid UTF-8.
        TokenizeError: On a character that starts no token.
    """
    text = decode_source(source)
    tokens: list[Token] = []
    i = 0
    n = len(text)
    line = 1
    line_start = 0

    while i < n:
        c = text[i]
        column = i - line_start + 1

        if c in _WHITESPACE:
            start, start_line = i, line
            while i < n and text[i] in _WHITESPACE:
                if text[i] == "\n":
                    line += 1
                    line_start = i + 1
                i += 1
            tokens.append(Token(TokenKind.WHITESPACE, text[start:i], start, start_line, column))
            continue

        if c.isalpha():
            start = i
            while i < n and text[i].isalpha():
                i += 1
            word = text[start:i]
            tokens.append(Token(_KEYWORDS.get(word, TokenKind.ALPHA), word, start, line, column))
            continue

        if c.isascii() and c.isdigit():
            start = i
            while i < n and text[i].isascii() and text[i].isdigit():
                i += 1
            tokens.append(Token(TokenKind.DIGIT, text[start:i], start, line, column))
            continue

        kind = _SINGLE_MAP.get(c)
        if kind is not None:
            tokens.append(Token(kind, c, i, line, column))
            i += 1
            continue

        raise make_parse_error(
            f"Unexpected character: {c!r}",
            line,
            column,
            snippet=_line_text(text, line_start),
            error_class=TokenizeError,
        )

    tokens.append(Token(TokenKind.EOF, "", n, line, n - line_start + 1))
    return tokens


def _line_text(text: str, line_start: int) -> str:
    end = text.find("\n", line_start)
    return text[line_start:] if end == -1 else text[line_start:end]


class TokenStream:
    """
    Cursor over a token list for backtracking parsers.

    Whitespace tokens are dropped on construction. ``mark()`` and
    ``reset()`` save and restore the cursor so a failed grammar alternative
    consumes no input.
    """

    def __init__(self, tokens: list[Token], source: str | None = None) -> None:
        self.tokens = [t for t in tokens if t.kind != TokenKind.WHITESPACE]
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            end = self.tokens[-1].end if self.tokens else 0
            self.tokens.append(Token(TokenKind.EOF, "", end))
        self.source = source
        self.pos = 0

    @classmethod
    def from_source(cls, source: str | bytes) -> TokenStream:
        text = decode_source(source)
        return cls(tokenize(text), text)

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    @property
    def previous(self) -> Token | None:
        return self.tokens[self.pos - 1] if self.pos > 0 else None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def match(self, *kinds: TokenKind) -> Token | None:
        """Consume and return the current token if its kind is in kinds."""
        if self.current.kind in kinds:
            return self.advance()
        return None

    def mark(self) -> int:
        return self.pos

    def reset(self, mark: int) -> None:
        self.pos = mark

    def is_done(self) -> bool:
        """True when every token except EOF has been consumed."""
        return self.current.kind == TokenKind.EOF

    @staticmethod
    def adjacent(first: Token, second: Token) -> bool:
        """True if second starts exactly where first ends in the source."""
        return first.end == second.pos

    def snippet(self, token: Token) -> str | None:
        """Source line containing token, if the source text is known."""
        if self.source is None:
            return None
        line_start = self.source.rfind("\n", 0, token.pos) + 1
        return _line_text(self.source, line_start)
