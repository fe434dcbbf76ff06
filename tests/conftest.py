"""Shared pytest fixtures for asalang tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from asalang.core.config import InterpreterConfig
from asalang.core.ir.values import Value
from asalang.core.lang.evaluator import Evaluator
from asalang.core.lang.parser import parse_program

FULL_PROGRAM = """fn foo(a,b,c) {
  let x = a + 1;
  let y = bar(c + b);
  return x + y;
}

fn bar(a) {
  return a + 3;
}

fn main() {
  return foo(1,2,3);
}
"""


@pytest.fixture
def evaluator() -> Evaluator:
    """Return a fresh evaluator with default limits."""
    return Evaluator()


@pytest.fixture
def run_fragment() -> Callable[..., Value]:
    """Parse source and evaluate it without calling main."""

    def _run(source: str, config: InterpreterConfig | None = None) -> Value:
        return Evaluator(config).evaluate(parse_program(source))

    return _run


@pytest.fixture
def run_program() -> Callable[..., Value]:
    """Parse source, register its definitions and call main."""

    def _run(source: str, config: InterpreterConfig | None = None) -> Value:
        return Evaluator(config).run_as_program(parse_program(source))

    return _run


@pytest.fixture
def program_file(tmp_path: Path) -> Path:
    """Write the multi-function sample program to a temporary file."""
    path = tmp_path / "main.asa"
    path.write_text(FULL_PROGRAM)
    return path
