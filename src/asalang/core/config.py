"""
Interpreter configuration for Asa.

Configuration is loaded from the [interpreter] table of asalang.toml and
can be overridden through environment variables:

    ASALANG_MAX_CALL_DEPTH  - maximum nested function calls (default: 64)
    ASALANG_TRACE_CALLS     - log every call entry/exit at INFO (default: off)

Usage:
    from asalang.core.config import load_interpreter_config

    config = load_interpreter_config(Path("asalang.toml"))
    evaluator = Evaluator(config)
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from asalang.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "asalang.toml"

MAX_CALL_DEPTH_VAR = "ASALANG_MAX_CALL_DEPTH"
TRACE_CALLS_VAR = "ASALANG_TRACE_CALLS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class InterpreterConfig(BaseModel):
    """Evaluator limits and diagnostics."""

    max_call_depth: int = Field(default=64, ge=1, description="Deepest allowed call nesting")
    trace_calls: bool = Field(default=False, description="Log call entry and exit at INFO")

    model_config = ConfigDict(frozen=True, extra="forbid")


def load_interpreter_config(
    toml_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> InterpreterConfig:
    """
    Load interpreter configuration from asalang.toml and the environment.

    Args:
        toml_path: Path to asalang.toml. Missing files fall back to defaults.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        InterpreterConfig with file values, then environment overrides applied

    Raises:
        ConfigError: If the file is not valid TOML or a value is invalid
    """
    data: dict[str, Any] = {}
    if toml_path is not None and toml_path.exists():
        try:
            with open(toml_path, "rb") as f:
                data = tomllib.load(f).get("interpreter", {})
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"[interpreter] in {toml_path} must be a table")

    data.update(_env_overrides(os.environ if environ is None else environ))

    try:
        config = InterpreterConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid interpreter configuration: {e}") from e

    logger.debug("Interpreter config: %s", config)
    return config


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect overrides from ASALANG_* environment variables."""
    overrides: dict[str, Any] = {}

    depth = environ.get(MAX_CALL_DEPTH_VAR, "").strip()
    if depth:
        try:
            overrides["max_call_depth"] = int(depth)
        except ValueError as e:
            raise ConfigError(f"{MAX_CALL_DEPTH_VAR} must be an integer, got {depth!r}") from e

    if TRACE_CALLS_VAR in environ:
        trace = environ[TRACE_CALLS_VAR].lower().strip()
        if trace in _TRUE_VALUES:
            overrides["trace_calls"] = True
        elif trace in _FALSE_VALUES:
            overrides["trace_calls"] = False
        else:
            # Unknown value - keep the file setting with a warning
            logger.warning("Unknown %s value '%s', ignoring", TRACE_CALLS_VAR, trace)

    return overrides


def find_config(start: Path) -> Path | None:
    """Return the nearest asalang.toml at or above start, if any."""
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        path = candidate / CONFIG_FILENAME
        if path.exists():
            return path
    return None
