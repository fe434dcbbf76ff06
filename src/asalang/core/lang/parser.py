"""
Ordered-choice recursive descent parser for the Asa language.

Every production either matches and returns a node, or returns None and
leaves the token stream where it found it. Alternatives are tried in the
order listed and the first match wins, so the order matters: ``true`` is
tried as a boolean before it could ever be read as an identifier.

Grammar:
    program          → (function_define | expression | statement
                        | string | boolean | number)+
    function_define  → "fn" identifier "(" arguments? ")" "{" statement+ "}"
    statement        → (variable_define | expression | function_return) ";"
    variable_define  → "let" identifier "=" expression
    function_return  → "return" (function_call | expression | identifier)
    expression       → boolean | math_expression | function_call
                        | number | string | identifier
    math_expression  → value ("+" | "-" | "*" | "/") value
    value            → number | identifier | boolean
    function_call    → identifier "(" arguments? ")"
    arguments        → expression ("," expression)*
    identifier       → ALPHA (ALPHA | DIGIT)*
    number           → DIGIT+
    boolean          → "true" | "false"
    string           → QUOTE (ALPHA | DIGIT | keyword)* QUOTE
    comment          → "/" "/" ALPHA*          (not reachable from program)

Identifiers, numbers and string bodies are built from runs that touch in the
source; whitespace between runs ends the token group.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TypeVar

from asalang.core.errors import (
    NestingDepthError,
    ParseError,
    TrailingInputError,
    make_parse_error,
)
from asalang.core.ir.nodes import (
    I32_MAX,
    BoolLiteral,
    Comment,
    Expression,
    FunctionArguments,
    FunctionCall,
    FunctionDefine,
    FunctionReturn,
    FunctionStatements,
    Identifier,
    MathExpression,
    MathOp,
    Node,
    NumberLiteral,
    Program,
    Statement,
    StringLiteral,
    VariableDefine,
)
from asalang.core.lang.tokenizer import Token, TokenKind, TokenStream

logger = logging.getLogger(__name__)

N = TypeVar("N")

_MATH_OPS: dict[TokenKind, MathOp] = {
    TokenKind.PLUS: MathOp.ADD,
    TokenKind.DASH: MathOp.SUB,
    TokenKind.STAR: MathOp.MUL,
    TokenKind.SLASH: MathOp.DIV,
}

# Keywords lose their meaning inside quotes
_STRING_BODY = (
    TokenKind.ALPHA,
    TokenKind.DIGIT,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.LET,
    TokenKind.FN,
    TokenKind.RETURN,
)


def production(method: Callable[..., N | None]) -> Callable[..., N | None]:
    """Rewind the stream when the wrapped production does not match."""

    @functools.wraps(method)
    def wrapper(self: Parser, *args: object, **kwargs: object) -> N | None:
        mark = self.stream.mark()
        node = method(self, *args, **kwargs)
        if node is None:
            self.stream.reset(mark)
        return node

    return wrapper


class Parser:
    """Backtracking parser over a TokenStream."""

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream

    def choice(self, *alternatives: Callable[[], Node | None]) -> Node | None:
        """Return the first alternative that matches."""
        for alternative in alternatives:
            node = alternative()
            if node is not None:
                return node
        return None

    def _run(self, first: Token, kinds: tuple[TokenKind, ...]) -> list[Token]:
        """Collect tokens of the given kinds that directly follow first."""
        run = [first]
        while self.stream.current.kind in kinds and TokenStream.adjacent(run[-1], self.stream.current):
            run.append(self.stream.advance())
        return run

    def _error(self, message: str, token: Token) -> ParseError:
        return make_parse_error(message, token.line, token.column, self.stream.snippet(token))

    # -- Terminals --

    @production
    def identifier(self) -> Identifier | None:
        """ALPHA (ALPHA | DIGIT)*"""
        first = self.stream.match(TokenKind.ALPHA)
        if first is None:
            return None
        run = self._run(first, (TokenKind.ALPHA, TokenKind.DIGIT))
        return Identifier(name="".join(t.lexeme for t in run))

    @production
    def number(self) -> NumberLiteral | None:
        """DIGIT+"""
        first = self.stream.match(TokenKind.DIGIT)
        if first is None:
            return None
        run = self._run(first, (TokenKind.DIGIT,))
        digits = "".join(t.lexeme for t in run).lstrip("0") or "0"
        if len(digits) > len(str(I32_MAX)) or int(digits) > I32_MAX:
            raise self._error(f"Number literal out of range: {digits}", first)
        return NumberLiteral(value=int(digits))

    @production
    def boolean(self) -> BoolLiteral | None:
        """'true' | 'false'"""
        tok = self.stream.match(TokenKind.TRUE, TokenKind.FALSE)
        if tok is None:
            return None
        return BoolLiteral(value=tok.kind == TokenKind.TRUE)

    @production
    def string(self) -> StringLiteral | None:
        """QUOTE (ALPHA | DIGIT | keyword)* QUOTE"""
        open_quote = self.stream.match(TokenKind.QUOTE)
        if open_quote is None:
            return None
        run = self._run(open_quote, _STRING_BODY)
        close_quote = self.stream.current
        if close_quote.kind != TokenKind.QUOTE or not TokenStream.adjacent(run[-1], close_quote):
            return None
        self.stream.advance()
        return StringLiteral(value="".join(t.lexeme for t in run[1:]))

    @production
    def comment(self) -> Comment | None:
        """'/' '/' ALPHA*"""
        first = self.stream.match(TokenKind.SLASH)
        if first is None:
            return None
        second = self.stream.match(TokenKind.SLASH)
        if second is None or not TokenStream.adjacent(first, second):
            return None
        words: list[str] = []
        while tok := self.stream.match(TokenKind.ALPHA):
            words.append(tok.lexeme)
        return Comment(text=" ".join(words))

    # -- Expressions --

    def value(self) -> Node | None:
        """number | identifier | boolean"""
        return self.choice(self.number, self.identifier, self.boolean)

    @production
    def math_expression(self) -> MathExpression | None:
        """value op value"""
        left = self.value()
        if left is None:
            return None
        op_tok = self.stream.match(*_MATH_OPS)
        if op_tok is None:
            return None
        right = self.value()
        if right is None:
            return None
        return MathExpression(op=_MATH_OPS[op_tok.kind], children=[left, right])

    @production
    def function_call(self) -> FunctionCall | None:
        """identifier '(' arguments? ')'"""
        name = self.identifier()
        if name is None or self.stream.match(TokenKind.LEFT_PAREN) is None:
            return None
        args = self.arguments()
        if args is None:
            args = FunctionArguments(children=[])
        if self.stream.match(TokenKind.RIGHT_PAREN) is None:
            return None
        return FunctionCall(name=name.name, children=[args])

    @production
    def expression(self) -> Expression | None:
        """boolean | math_expression | function_call | number | string | identifier"""
        node = self.choice(
            self.boolean,
            self.math_expression,
            self.function_call,
            self.number,
            self.string,
            self.identifier,
        )
        if node is None:
            return None
        return Expression(children=[node])

    @production
    def arguments(self) -> FunctionArguments | None:
        """expression (',' expression)*"""
        first = self.expression()
        if first is None:
            return None
        args: list[Node] = [first]
        while (arg := self._other_argument()) is not None:
            args.append(arg)
        return FunctionArguments(children=args)

    @production
    def _other_argument(self) -> Expression | None:
        if self.stream.match(TokenKind.COMMA) is None:
            return None
        return self.expression()

    # -- Statements --

    @production
    def variable_define(self) -> VariableDefine | None:
        """'let' identifier '=' expression"""
        if self.stream.match(TokenKind.LET) is None:
            return None
        target = self.identifier()
        if target is None or self.stream.match(TokenKind.EQUAL) is None:
            return None
        value = self.expression()
        if value is None:
            return None
        return VariableDefine(children=[target, value])

    @production
    def function_return(self) -> FunctionReturn | None:
        """'return' (function_call | expression | identifier)"""
        if self.stream.match(TokenKind.RETURN) is None:
            return None
        node = self.choice(self.function_call, self.expression, self.identifier)
        if node is None:
            return None
        return FunctionReturn(children=[node])

    @production
    def statement(self) -> Statement | None:
        """(variable_define | expression | function_return) ';'"""
        node = self.choice(self.variable_define, self.expression, self.function_return)
        if node is None or self.stream.match(TokenKind.SEMICOLON) is None:
            return None
        return Statement(children=[node])

    @production
    def function_define(self) -> FunctionDefine | None:
        """'fn' identifier '(' arguments? ')' '{' statement+ '}'"""
        if self.stream.match(TokenKind.FN) is None:
            return None
        name = self.identifier()
        if name is None or self.stream.match(TokenKind.LEFT_PAREN) is None:
            return None
        args = self.arguments()
        if self.stream.match(TokenKind.RIGHT_PAREN) is None:
            return None
        params = _parameters(args)
        if params is None or self.stream.match(TokenKind.LEFT_CURLY) is None:
            return None

        statements: list[Node] = []
        while (stmt := self.statement()) is not None:
            statements.append(stmt)
        if not statements or self.stream.match(TokenKind.RIGHT_CURLY) is None:
            return None

        return FunctionDefine(
            name=name.name,
            children=[params, FunctionStatements(children=statements)],
        )

    # -- Entry --

    @production
    def program(self) -> Program | None:
        """(function_define | expression | statement | string | boolean | number)+"""
        children: list[Node] = []
        while (
            node := self.choice(
                self.function_define,
                self.expression,
                self.statement,
                self.string,
                self.boolean,
                self.number,
            )
        ) is not None:
            children.append(node)
        if not children:
            return None
        return Program(children=children)


def _parameters(args: FunctionArguments | None) -> FunctionArguments | None:
    """Unwrap parameter expressions into bare identifiers.

    Returns None when any parameter is not a plain name.
    """
    if args is None:
        return FunctionArguments(children=[])
    names: list[Node] = []
    for arg in args.children:
        inner = arg.children[0] if isinstance(arg, Expression) else arg
        if not isinstance(inner, Identifier):
            return None
        names.append(inner)
    return FunctionArguments(children=names)


def parse_program(source: str | bytes | list[Token] | TokenStream) -> Program:
    """Parse Asa source into a Program tree.

    Args:
        source: Source text, UTF-8 bytes, a token list, or a TokenStream.

    Returns:
        Parsed Program.

    Raises:
        ParseError: If no program prefix matches, or a literal is invalid.
        TrailingInputError: If tokens remain after the longest program prefix.
        NestingDepthError: If calls are nested deeper than the parser can recurse.
        TokenizeError: If the source contains an unknown character.
        InvalidEncodingError: If bytes input is not valid UTF-8.
    """
    if isinstance(source, TokenStream):
        stream = source
    elif isinstance(source, list):
        stream = TokenStream(source)
    else:
        stream = TokenStream.from_source(source)

    parser = Parser(stream)
    try:
        program = parser.program()
    except RecursionError:
        tok = stream.current
        raise make_parse_error(
            "Expression nesting too deep",
            tok.line,
            tok.column,
            stream.snippet(tok),
            error_class=NestingDepthError,
        ) from None

    tok = stream.current
    if program is None:
        if tok.kind == TokenKind.EOF:
            raise make_parse_error("Empty program", tok.line, tok.column, stream.snippet(tok))
        raise make_parse_error(
            f"Unexpected token: {tok.kind} ({tok.lexeme!r})",
            tok.line,
            tok.column,
            stream.snippet(tok),
        )

    # Ensure all tokens consumed
    if not stream.is_done():
        raise make_parse_error(
            f"Unexpected token after program: {tok.lexeme!r}",
            tok.line,
            tok.column,
            stream.snippet(tok),
            error_class=TrailingInputError,
        )

    logger.debug("Parsed program with %d top-level node(s)", len(program.children))
    return program
