"""
asalang - a minimal language with an ordered-choice parser and a
tree-walking evaluator.

Usage:
    from asalang import evaluate_source, run_source

    evaluate_source("let x = 5; let x = x + 1;")      # Number(value=6)
    run_source("fn main() { return 1 + 2; }")          # Number(value=3)
"""

from __future__ import annotations

from collections.abc import Sequence

from asalang._version import get_version
from asalang.core import ir
from asalang.core.config import InterpreterConfig, load_interpreter_config
from asalang.core.errors import (
    ArityError,
    AsaError,
    EvaluationError,
    NestingDepthError,
    ParseError,
    RecursionLimitError,
    TrailingInputError,
    UndefinedFunctionError,
    UndefinedNameError,
    UndefinedVariableError,
)
from asalang.core.ir.values import Bool, Number, String, Value
from asalang.core.lang import Evaluator, parse_program, tokenize

__version__ = get_version()


def evaluate_source(source: str | bytes, config: InterpreterConfig | None = None) -> Value:
    """Parse source and evaluate it as a fragment."""
    return Evaluator(config).evaluate(parse_program(source))


def run_source(
    source: str | bytes,
    args: Sequence[Value] | None = None,
    config: InterpreterConfig | None = None,
) -> Value:
    """Parse source, evaluate its definitions and call ``main(args)``."""
    return Evaluator(config).run_as_program(parse_program(source), args)


__all__ = [
    "__version__",
    "ir",
    # Pipeline
    "Evaluator",
    "InterpreterConfig",
    "evaluate_source",
    "load_interpreter_config",
    "parse_program",
    "run_source",
    "tokenize",
    # Values
    "Bool",
    "Number",
    "String",
    "Value",
    # Errors
    "ArityError",
    "AsaError",
    "EvaluationError",
    "NestingDepthError",
    "ParseError",
    "RecursionLimitError",
    "TrailingInputError",
    "UndefinedFunctionError",
    "UndefinedNameError",
    "UndefinedVariableError",
]
