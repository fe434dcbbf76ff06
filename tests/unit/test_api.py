"""Tests for the top-level asalang API."""

import pytest

import asalang
from asalang import (
    InterpreterConfig,
    Number,
    RecursionLimitError,
    String,
    evaluate_source,
    run_source,
)


class TestTopLevelApi:
    def test_evaluate_source(self) -> None:
        assert evaluate_source("let x = 5; let x = x + 1;") == Number(value=6)

    def test_evaluate_bytes(self) -> None:
        assert evaluate_source(b'"abc"') == String(value="abc")

    def test_run_source(self) -> None:
        assert run_source("fn main() { return 1 + 2; }") == Number(value=3)

    def test_run_source_with_arguments(self) -> None:
        source = "fn main(a) { return a * 2; }"
        assert run_source(source, [Number(value=21)]) == Number(value=42)

    def test_run_source_with_config(self) -> None:
        source = "fn f() { return f(); }\nfn main() { return f(); }"
        with pytest.raises(RecursionLimitError):
            run_source(source, config=InterpreterConfig(max_call_depth=4))

    def test_version(self) -> None:
        assert asalang.__version__
