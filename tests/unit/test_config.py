"""Tests for interpreter configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from asalang.core.config import (
    CONFIG_FILENAME,
    InterpreterConfig,
    find_config,
    load_interpreter_config,
)
from asalang.core.errors import ConfigError


class TestInterpreterConfig:
    def test_defaults(self) -> None:
        config = InterpreterConfig()
        assert config.max_call_depth == 64
        assert config.trace_calls is False

    def test_depth_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            InterpreterConfig(max_call_depth=0)

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InterpreterConfig(max_depth=3)

    def test_frozen(self) -> None:
        config = InterpreterConfig()
        with pytest.raises(ValidationError):
            config.max_call_depth = 3


class TestLoadInterpreterConfig:
    """File values first, environment overrides on top."""

    def test_no_file_no_env(self) -> None:
        assert load_interpreter_config(None, environ={}) == InterpreterConfig()

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_interpreter_config(tmp_path / CONFIG_FILENAME, environ={})
        assert config == InterpreterConfig()

    def test_reads_interpreter_table(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\nmax_call_depth = 10\ntrace_calls = true\n")
        config = load_interpreter_config(path, environ={})
        assert config == InterpreterConfig(max_call_depth=10, trace_calls=True)

    def test_file_without_interpreter_table(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[other]\nname = "x"\n')
        assert load_interpreter_config(path, environ={}) == InterpreterConfig()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_interpreter_config(path, environ={})

    def test_interpreter_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("interpreter = 3\n")
        with pytest.raises(ConfigError, match="must be a table"):
            load_interpreter_config(path, environ={})

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\nmax_call_depth = 0\n")
        with pytest.raises(ConfigError, match="Invalid interpreter configuration"):
            load_interpreter_config(path, environ={})

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\ndepth = 3\n")
        with pytest.raises(ConfigError):
            load_interpreter_config(path, environ={})

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\nmax_call_depth = 10\n")
        config = load_interpreter_config(path, environ={"ASALANG_MAX_CALL_DEPTH": "20"})
        assert config.max_call_depth == 20

    def test_env_depth_not_integer(self) -> None:
        with pytest.raises(ConfigError, match="must be an integer"):
            load_interpreter_config(environ={"ASALANG_MAX_CALL_DEPTH": "deep"})

    def test_env_blank_depth_ignored(self) -> None:
        config = load_interpreter_config(environ={"ASALANG_MAX_CALL_DEPTH": "  "})
        assert config.max_call_depth == 64

    @pytest.mark.parametrize("raw", ["1", "true", "YES", "on"])
    def test_env_trace_true(self, raw: str) -> None:
        assert load_interpreter_config(environ={"ASALANG_TRACE_CALLS": raw}).trace_calls

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", ""])
    def test_env_trace_false(self, tmp_path: Path, raw: str) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\ntrace_calls = true\n")
        config = load_interpreter_config(path, environ={"ASALANG_TRACE_CALLS": raw})
        assert config.trace_calls is False

    def test_env_trace_unknown_value_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[interpreter]\ntrace_calls = true\n")
        with caplog.at_level(logging.WARNING, logger="asalang.core.config"):
            config = load_interpreter_config(path, environ={"ASALANG_TRACE_CALLS": "maybe"})
        assert config.trace_calls is True
        assert "ASALANG_TRACE_CALLS" in caplog.text

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASALANG_MAX_CALL_DEPTH", "7")
        monkeypatch.delenv("ASALANG_TRACE_CALLS", raising=False)
        assert load_interpreter_config().max_call_depth == 7


class TestFindConfig:
    def test_finds_in_parent(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[interpreter]\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / CONFIG_FILENAME

    def test_start_may_be_a_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[interpreter]\n")
        source = tmp_path / "main.asa"
        source.write_text("1")
        assert find_config(source) == tmp_path / CONFIG_FILENAME

    def test_nearest_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[interpreter]\n")
        nested = tmp_path / "inner"
        nested.mkdir()
        (nested / CONFIG_FILENAME).write_text("[interpreter]\n")
        assert find_config(nested) == nested / CONFIG_FILENAME
