"""
Error types for Asa tokenizing, parsing, and evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass


class AsaError(Exception):
    """Base exception for all Asa errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


@dataclass
class ErrorContext:
    """
    Source location for an error.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line containing the error
        source_name: Optional file name the source was read from
    """

    line: int
    column: int
    snippet: str | None = None
    source_name: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "main.asa:3:7" followed by the snippet
        """
        location = f"{self.line}:{self.column}"
        if self.source_name:
            location = f"{self.source_name}:{location}"

        if self.snippet is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with a marker under the error column."""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


# =============================================================================
# Parse errors
# =============================================================================


class ParseError(AsaError):
    """
    Raised when Asa source cannot be turned into a syntax tree.

    Examples:
    - No grammar production matches
    - Number literal outside the 32-bit range
    - Trailing tokens after a program
    """


class TokenizeError(ParseError):
    """Raised for characters the tokenizer does not recognize."""


class InvalidEncodingError(ParseError):
    """Raised when byte input is not valid UTF-8."""


class TrailingInputError(ParseError):
    """Raised when a program matches only a prefix of the token stream."""


class NestingDepthError(ParseError):
    """Raised when nested calls go deeper than the parser can recurse."""


# =============================================================================
# Evaluation errors
# =============================================================================


class EvaluationError(AsaError):
    """Base class for errors raised while walking a syntax tree."""


class UndefinedNameError(EvaluationError):
    """A function or variable name could not be resolved."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Undefined name: {name!r}")


class UndefinedFunctionError(UndefinedNameError):
    """Call to a function that is not in the function table."""

    def __init__(self, name: str):
        super().__init__(name, f"Undefined function: {name}()")


class UndefinedVariableError(UndefinedNameError):
    """Identifier not bound in the current frame."""

    def __init__(self, name: str):
        super().__init__(name, f"Undefined variable: {name!r}")


class ArityError(EvaluationError):
    """Function called with the wrong number of arguments."""

    def __init__(self, function: str, expected: int, actual: int):
        self.function = function
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{function}() expects {expected} argument(s), got {actual}"
        )


class StructureError(EvaluationError):
    """
    A node does not have the shape the evaluator expects.

    Examples:
    - VariableDefine without an Identifier target
    - FunctionDefine children out of order
    """


class UndefinedExpressionError(StructureError):
    """Statement wrapping something other than a definition or a return."""


class InternalConsistencyError(StructureError):
    """Program contains a child kind the parser never produces there."""


class UnsupportedNodeError(StructureError):
    """Node kind has no evaluation rule."""


class UnsupportedOperationError(EvaluationError):
    """MathExpression carries an operator the evaluator does not know."""


class OperandTypeError(EvaluationError):
    """Arithmetic applied to a non-numeric value."""


class DivisionByZeroError(EvaluationError):
    """Integer division with a zero divisor."""


class ArithmeticOverflowError(EvaluationError):
    """Arithmetic result does not fit in a signed 32-bit integer."""


class RecursionLimitError(EvaluationError):
    """Call depth exceeded the configured limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Maximum call depth of {limit} exceeded")


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(AsaError):
    """Raised when asalang.toml or environment overrides are invalid."""


def make_parse_error(
    message: str,
    line: int,
    column: int,
    snippet: str | None = None,
    error_class: type[ParseError] = ParseError,
) -> ParseError:
    """
    Helper to create a ParseError (or subclass) with context.

    Args:
        message: Error description
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line
        error_class: ParseError subclass to instantiate

    Returns:
        Error with context attached
    """
    context = ErrorContext(line=line, column=column, snippet=snippet)
    return error_class(message, context)
