"""
Syntax tree for Asa programs.

Every node is a frozen pydantic model tagged with a ``kind`` literal, and
``Node`` is the discriminated union of all variants. Structural nodes hold
their sub-trees in ``children``; leaves hold a scalar.

Shape invariants the parser guarantees:
- MathExpression and VariableDefine always have exactly two children
- FunctionDefine children are [FunctionArguments, FunctionStatements]
- Statement, Expression and FunctionReturn wrap exactly one child
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


class MathOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    @property
    def symbol(self) -> str:
        return _OP_SYMBOLS[self]


_OP_SYMBOLS = {
    MathOp.ADD: "+",
    MathOp.SUB: "-",
    MathOp.MUL: "*",
    MathOp.DIV: "/",
}


# ---------------------------------------------------------------------------
# Structural nodes
# ---------------------------------------------------------------------------


class Program(BaseModel):
    """Top-level sequence of definitions, statements and expressions."""

    kind: Literal["program"] = "program"
    children: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "\n".join(str(c) for c in self.children)


class Statement(BaseModel):
    """A ``;``-terminated statement."""

    kind: Literal["statement"] = "statement"
    children: list[Node] = Field(min_length=1, max_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.children[0]};"


class FunctionArguments(BaseModel):
    """Parameter names of a definition, or argument expressions of a call."""

    kind: Literal["function_arguments"] = "function_arguments"
    children: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self.children)


class FunctionStatements(BaseModel):
    """Body of a function definition."""

    kind: Literal["function_statements"] = "function_statements"
    children: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return " ".join(str(c) for c in self.children)


class FunctionDefine(BaseModel):
    """
    Function definition: ``fn name(a, b) { statements }``.

    children[0] is the FunctionArguments holding parameter identifiers,
    children[1] the FunctionStatements body.
    """

    kind: Literal["function_define"] = "function_define"
    name: str
    children: list[Node]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        params, body = self.children
        return f"fn {self.name}({params}) {{ {body} }}"


class Expression(BaseModel):
    """Wrapper around the single node an ``expression`` production matched."""

    kind: Literal["expression"] = "expression"
    children: list[Node] = Field(min_length=1, max_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.children[0])


class MathExpression(BaseModel):
    """Binary arithmetic: left op right."""

    kind: Literal["math_expression"] = "math_expression"
    op: MathOp
    children: list[Node]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        left, right = self.children
        return f"{left} {self.op.symbol} {right}"


class FunctionCall(BaseModel):
    """
    Call: ``name(args)``.

    children holds FunctionArguments lists. A call without arguments still
    carries one empty FunctionArguments placeholder.
    """

    kind: Literal["function_call"] = "function_call"
    name: str
    children: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args = ", ".join(str(c) for c in self.children if str(c))
        return f"{self.name}({args})"


class VariableDefine(BaseModel):
    """Binding: ``let name = expression``."""

    kind: Literal["variable_define"] = "variable_define"
    children: list[Node]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        target, value = self.children
        return f"let {target} = {value}"


class FunctionReturn(BaseModel):
    """``return expression``. Evaluates to its child; it does not unwind."""

    kind: Literal["function_return"] = "function_return"
    children: list[Node] = Field(min_length=1, max_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"return {self.children[0]}"


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """Signed 32-bit integer literal."""

    kind: Literal["number"] = "number"
    value: int = Field(ge=I32_MIN, le=I32_MAX)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class BoolLiteral(BaseModel):
    """``true`` or ``false``."""

    kind: Literal["bool"] = "bool"
    value: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class Identifier(BaseModel):
    """Variable, parameter or function name."""

    kind: Literal["identifier"] = "identifier"
    name: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class StringLiteral(BaseModel):
    """Quoted alphanumeric text."""

    kind: Literal["string"] = "string"
    value: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f'"{self.value}"'


class Comment(BaseModel):
    """``//`` followed by words. Parsed, never evaluated."""

    kind: Literal["comment"] = "comment"
    text: str = ""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"//{self.text}"


class Null(BaseModel):
    """Placeholder variant; the grammar never produces it."""

    kind: Literal["null"] = "null"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "null"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Node = Annotated[
    Program
    | Statement
    | FunctionDefine
    | FunctionArguments
    | FunctionStatements
    | Expression
    | MathExpression
    | FunctionCall
    | VariableDefine
    | FunctionReturn
    | NumberLiteral
    | BoolLiteral
    | Identifier
    | StringLiteral
    | Comment
    | Null,
    Field(discriminator="kind"),
]

# Rebuild models for recursive forward references
Program.model_rebuild()
Statement.model_rebuild()
FunctionArguments.model_rebuild()
FunctionStatements.model_rebuild()
FunctionDefine.model_rebuild()
Expression.model_rebuild()
MathExpression.model_rebuild()
FunctionCall.model_rebuild()
VariableDefine.model_rebuild()
FunctionReturn.model_rebuild()
