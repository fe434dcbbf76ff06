"""
Asa intermediate representation: syntax tree nodes and runtime values.
"""

from asalang.core.ir.nodes import (
    I32_MAX,
    I32_MIN,
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
    Null,
    NumberLiteral,
    Program,
    Statement,
    StringLiteral,
    VariableDefine,
)
from asalang.core.ir.values import Bool, Number, String, Value

__all__ = [
    "I32_MAX",
    "I32_MIN",
    # Nodes
    "BoolLiteral",
    "Comment",
    "Expression",
    "FunctionArguments",
    "FunctionCall",
    "FunctionDefine",
    "FunctionReturn",
    "FunctionStatements",
    "Identifier",
    "MathExpression",
    "MathOp",
    "Node",
    "Null",
    "NumberLiteral",
    "Program",
    "Statement",
    "StringLiteral",
    "VariableDefine",
    # Values
    "Bool",
    "Number",
    "String",
    "Value",
]
