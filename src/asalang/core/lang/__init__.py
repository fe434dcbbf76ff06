"""
Asa language front end and evaluator.

Tokenizer, ordered-choice parser and tree-walking evaluator.

Usage:
    from asalang.core.lang import Evaluator, parse_program

    program = parse_program("fn add(a, b) { return a + b; } fn main() { return add(1, 2); }")
    result = Evaluator().run_as_program(program)
    # result == Number(value=3)
"""

from asalang.core.lang.evaluator import Evaluator
from asalang.core.lang.parser import Parser, parse_program
from asalang.core.lang.tokenizer import Token, TokenKind, TokenStream, tokenize

__all__ = [
    "Evaluator",
    "Parser",
    "Token",
    "TokenKind",
    "TokenStream",
    "parse_program",
    "tokenize",
]
