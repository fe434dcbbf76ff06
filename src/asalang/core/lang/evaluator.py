"""
Tree-walking evaluator for the Asa language.

An Evaluator owns a function table and a call stack. The stack starts with
one global frame; each function call pushes a fresh frame and pops it when
the call finishes, whether the body succeeded or raised. Identifier lookup
only ever consults the top frame, so a function body cannot see its
caller's variables and the caller never sees the callee's.

Pure evaluation: no I/O, no Python eval(). The first error aborts the
evaluation and propagates to the caller unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from asalang.core.config import InterpreterConfig
from asalang.core.errors import (
    ArithmeticOverflowError,
    ArityError,
    DivisionByZeroError,
    InternalConsistencyError,
    OperandTypeError,
    RecursionLimitError,
    StructureError,
    UndefinedExpressionError,
    UndefinedFunctionError,
    UndefinedVariableError,
    UnsupportedNodeError,
    UnsupportedOperationError,
)
from asalang.core.ir.nodes import (
    I32_MAX,
    I32_MIN,
    BoolLiteral,
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
from asalang.core.ir.values import Bool, Number, String, Value, type_name

logger = logging.getLogger(__name__)

Frame = dict[str, Value]

# Node kinds that may appear directly under a Program
_PROGRAM_CHILDREN = (
    FunctionDefine,
    Expression,
    Statement,
    VariableDefine,
    StringLiteral,
    NumberLiteral,
    BoolLiteral,
)


def _div(lhs: int, rhs: int) -> int:
    """Integer division truncating toward zero."""
    if rhs == 0:
        raise DivisionByZeroError("Division by zero")
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


_ARITHMETIC: dict[MathOp, Callable[[int, int], int]] = {
    MathOp.ADD: lambda lhs, rhs: lhs + rhs,
    MathOp.SUB: lambda lhs, rhs: lhs - rhs,
    MathOp.MUL: lambda lhs, rhs: lhs * rhs,
    MathOp.DIV: _div,
}


class Evaluator:
    """Evaluates Asa syntax trees.

    Each instance is an independent interpreter: functions defined and
    globals bound through one evaluator are invisible to every other.
    Instances are not thread-safe; use one per thread.
    """

    def __init__(self, config: InterpreterConfig | None = None) -> None:
        self.config = config or InterpreterConfig()
        self._functions: dict[str, tuple[FunctionArguments, FunctionStatements]] = {}
        self._stack: list[Frame] = [{}]
        self._dispatch: dict[type, Callable[[Any], Value]] = {
            Program: self._eval_program,
            Statement: self._eval_statement,
            FunctionDefine: self._eval_function_define,
            FunctionCall: self._eval_function_call,
            FunctionReturn: self._eval_function_return,
            VariableDefine: self._eval_variable_define,
            MathExpression: self._eval_math_expression,
            Expression: self._eval_expression,
            Identifier: self._eval_identifier,
            NumberLiteral: lambda node: Number(value=node.value),
            StringLiteral: lambda node: String(value=node.value),
            BoolLiteral: lambda node: Bool(value=node.value),
        }

    # -- Public API --

    def evaluate(self, node: Node) -> Value:
        """Evaluate a tree or fragment and return its value.

        Args:
            node: Any node; typically a Program from parse_program().

        Returns:
            The value of the node (for a Program, its last child).

        Raises:
            EvaluationError: On any runtime failure.
        """
        try:
            return self._eval(node)
        except RecursionError:
            raise RecursionLimitError(self.config.max_call_depth) from None

    def run_as_program(self, node: Node, args: Sequence[Node | Value] | None = None) -> Value:
        """Evaluate node for its definitions, then call ``main(args)``."""
        self.evaluate(node)
        return self.start_main(args)

    def start_main(self, args: Sequence[Node | Value] | None = None) -> Value:
        """Call ``main`` as if the source contained ``main(args)``."""
        arguments = [_as_node(a) for a in args or ()]
        call = FunctionCall(name="main", children=[FunctionArguments(children=arguments)])
        return self.evaluate(call)

    @property
    def functions(self) -> list[str]:
        """Names of defined functions, in definition order."""
        return list(self._functions)

    @property
    def call_depth(self) -> int:
        """Number of active function calls (0 at top level)."""
        return len(self._stack) - 1

    @property
    def current_frame(self) -> Frame:
        """Copy of the innermost frame's bindings."""
        return dict(self._stack[-1])

    def lookup(self, name: str) -> Value:
        """Resolve a variable in the current frame."""
        return self._eval_identifier(Identifier(name=name))

    # -- Dispatch --

    def _eval(self, node: Node) -> Value:
        handler = self._dispatch.get(type(node))
        if handler is None:
            raise UnsupportedNodeError(f"No supported node type: {type(node).__name__}")
        return handler(node)

    def _eval_program(self, node: Program) -> Value:
        """Evaluate children in order; the last child's value wins."""
        result: Value = Bool(value=True)
        for child in node.children:
            if not isinstance(child, _PROGRAM_CHILDREN):
                raise InternalConsistencyError(
                    f"Unexpected top-level node: {type(child).__name__}"
                )
            result = self._eval(child)
        return result

    def _eval_statement(self, node: Statement) -> Value:
        child = node.children[0]
        if not isinstance(child, (VariableDefine, FunctionReturn)):
            raise UndefinedExpressionError(
                f"The expression is undefined: statement of kind {type(child).__name__}"
            )
        return self._eval(child)

    def _eval_expression(self, node: Expression) -> Value:
        return self._eval(node.children[0])

    def _eval_function_return(self, node: FunctionReturn) -> Value:
        # Straight-line bodies: return just yields its value, nothing unwinds
        return self._eval(node.children[0])

    def _eval_identifier(self, node: Identifier) -> Value:
        frame = self._stack[-1]
        if node.name not in frame:
            logger.debug("Identifier %r not found at depth %d", node.name, self.call_depth)
            raise UndefinedVariableError(node.name)
        value = frame[node.name]
        logger.debug("Identifier %r resolved to %s", node.name, value)
        return value

    def _eval_variable_define(self, node: VariableDefine) -> Value:
        if len(node.children) != 2:
            raise StructureError("VariableDefine must have exactly two children")
        target, value_node = node.children
        if not isinstance(target, Identifier):
            raise StructureError("The first child of VariableDefine must be an identifier")

        value = self._eval(value_node)
        self._stack[-1][target.name] = value
        logger.debug("Bound %s = %s at depth %d", target.name, value, self.call_depth)
        return value

    def _eval_math_expression(self, node: MathExpression) -> Value:
        if len(node.children) != 2:
            raise StructureError("MathExpression must have exactly two children")
        left = self._eval(node.children[0])
        right = self._eval(node.children[1])

        if not isinstance(left, Number) or not isinstance(right, Number):
            raise OperandTypeError(
                f"MathExpression operands must be numbers, got {type_name(left)} and {type_name(right)}"
            )

        operation = _ARITHMETIC.get(node.op)
        if operation is None:
            raise UnsupportedOperationError(f"Unsupported operation in MathExpression: {node.op}")

        result = operation(left.value, right.value)
        if not I32_MIN <= result <= I32_MAX:
            raise ArithmeticOverflowError(
                f"Result of {left} {node.op} {right} does not fit in 32 bits"
            )
        return Number(value=result)

    def _eval_function_define(self, node: FunctionDefine) -> Value:
        if (
            len(node.children) != 2
            or not isinstance(node.children[0], FunctionArguments)
            or not isinstance(node.children[1], FunctionStatements)
        ):
            raise StructureError(
                f"Function {node.name!r} must have [FunctionArguments, FunctionStatements] children"
            )
        params, body = node.children
        if node.name in self._functions:
            logger.debug("Redefining function %s", node.name)
        self._functions[node.name] = (params.model_copy(deep=True), body.model_copy(deep=True))
        logger.debug("Registered function %s/%d", node.name, len(params.children))
        return Bool(value=True)

    def _eval_function_call(self, node: FunctionCall) -> Value:
        entry = self._functions.get(node.name)
        if entry is None:
            raise UndefinedFunctionError(node.name)
        params, body = entry

        args = _call_arguments(node)
        if len(params.children) != len(args):
            raise ArityError(node.name, len(params.children), len(args))

        # Arguments are evaluated in the caller's frame
        frame: Frame = {}
        for param, arg in zip(params.children, args, strict=True):
            if not isinstance(param, Identifier):
                raise StructureError(
                    f"Parameter of {node.name}() is not an identifier: {type(param).__name__}"
                )
            frame[param.name] = self._eval(arg)

        if self.call_depth >= self.config.max_call_depth:
            raise RecursionLimitError(self.config.max_call_depth)

        self._log_call("enter", node.name)
        self._stack.append(frame)
        try:
            result = self._eval_body(node.name, body)
        finally:
            self._stack.pop()
        self._log_call("exit", node.name)
        return result

    def _eval_body(self, name: str, body: FunctionStatements) -> Value:
        if not body.children:
            raise StructureError(f"Function {name!r} has an empty body")
        first, *rest = body.children
        result = self._eval(first)
        for stmt in rest:
            result = self._eval(stmt)
        return result

    def _log_call(self, event: str, name: str) -> None:
        level = logging.INFO if self.config.trace_calls else logging.DEBUG
        logger.log(level, "%s %s() at depth %d", event, name, self.call_depth)


def _call_arguments(node: FunctionCall) -> list[Node]:
    """Flatten the argument lists of a call into positional arguments."""
    args: list[Node] = []
    for group in node.children:
        if not isinstance(group, FunctionArguments):
            raise StructureError(
                f"Arguments of {node.name}() must be FunctionArguments, got {type(group).__name__}"
            )
        args.extend(group.children)
    return args


def _as_node(arg: Node | Value) -> Node:
    """Turn a runtime value into the literal node that produces it."""
    if isinstance(arg, Number):
        return NumberLiteral(value=arg.value)
    if isinstance(arg, String):
        return StringLiteral(value=arg.value)
    if isinstance(arg, Bool):
        return BoolLiteral(value=arg.value)
    return arg
