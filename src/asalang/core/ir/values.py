"""
Runtime values produced by evaluating Asa syntax trees.

Values are plain scalars: there are no function values and no runtime null.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from asalang.core.ir.nodes import I32_MAX, I32_MIN


class Number(BaseModel):
    """Signed 32-bit integer."""

    value: int = Field(ge=I32_MIN, le=I32_MAX)

    model_config = ConfigDict(frozen=True, strict=True)

    def __str__(self) -> str:
        return str(self.value)


class String(BaseModel):
    """Text value."""

    value: str

    model_config = ConfigDict(frozen=True, strict=True)

    def __str__(self) -> str:
        return f'"{self.value}"'


class Bool(BaseModel):
    """Boolean value."""

    value: bool

    model_config = ConfigDict(frozen=True, strict=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


Value = Number | String | Bool


def type_name(value: Value) -> str:
    """Lower-case type name used in error messages."""
    return type(value).__name__.lower()
