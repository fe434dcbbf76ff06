"""
asalang CLI - run, evaluate, and inspect Asa programs.

Commands:
  run     Parse a file, evaluate its definitions and call main()
  eval    Evaluate a source fragment and print its value
  parse   Print the syntax tree of a file
  tokens  List the tokens of a source fragment
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from asalang._version import get_version
from asalang.core.config import InterpreterConfig, find_config, load_interpreter_config
from asalang.core.errors import AsaError
from asalang.core.ir.values import Bool, Number, String, Value
from asalang.core.lang.evaluator import Evaluator
from asalang.core.lang.parser import parse_program
from asalang.core.lang.tokenizer import TokenKind, tokenize

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Asa - a minimal language with a tree-walking interpreter",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"asalang {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """asalang CLI main callback for global options."""
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(error: AsaError) -> typer.Exit:
    """Render an Asa error and return the exit to raise."""
    err_console.print(f"[bold red]error:[/bold red] {type(error).__name__}")
    err_console.print(str(error), markup=False, highlight=False)
    return typer.Exit(code=1)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[bold red]error:[/bold red] cannot read {path}: {e.strerror}")
        raise typer.Exit(code=1) from e
    except UnicodeDecodeError as e:
        err_console.print(f"[bold red]error:[/bold red] {path} is not valid UTF-8")
        raise typer.Exit(code=1) from e


def _load_config(config_path: Path | None, near: Path | None) -> InterpreterConfig:
    if config_path is None and near is not None:
        config_path = find_config(near.resolve())
    logger.debug("Loading interpreter config from %s", config_path or "defaults")
    try:
        return load_interpreter_config(config_path)
    except AsaError as e:
        raise _fail(e) from e


def _to_value(raw: str) -> Value:
    """Interpret a command line argument as an Asa value."""
    if raw in ("true", "false"):
        return Bool(value=raw == "true")
    try:
        number = int(raw)
    except ValueError:
        return String(value=raw)
    # Out-of-range integers fail Number validation here
    return Number(value=number)


@app.command("run")
def run_command(
    file: str = typer.Argument(..., help="Source file to run ('-' for stdin)"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to main()"),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Path to asalang.toml (default: nearest to the file)"
    ),
) -> None:
    """Run a program by calling its main() function."""
    near = None if file == "-" else Path(file)
    interpreter_config = _load_config(config, near)
    source = _read_source(file)

    main_args: list[Value] = []
    for raw in args or []:
        try:
            main_args.append(_to_value(raw))
        except ValueError as e:
            err_console.print(
                f"[bold red]error:[/bold red] invalid argument {escape(raw)}: "
                "integers must fit in 32 bits"
            )
            raise typer.Exit(code=1) from e

    try:
        program = parse_program(source)
        result = Evaluator(interpreter_config).run_as_program(program, main_args)
    except AsaError as e:
        raise _fail(e) from e

    typer.echo(str(result))


@app.command("eval")
def eval_command(
    source: str = typer.Argument(..., help="Asa source fragment"),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Path to asalang.toml"
    ),
) -> None:
    """Evaluate a fragment and print the value of its last element."""
    interpreter_config = _load_config(config, Path.cwd())
    try:
        result = Evaluator(interpreter_config).evaluate(parse_program(source))
    except AsaError as e:
        raise _fail(e) from e
    typer.echo(str(result))


@app.command("parse")
def parse_command(
    file: str = typer.Argument(..., help="Source file to parse ('-' for stdin)"),
    as_json: bool = typer.Option(False, "--json", help="Dump the tree as JSON"),
) -> None:
    """Print the syntax tree of a program."""
    source = _read_source(file)
    try:
        program = parse_program(source)
    except AsaError as e:
        raise _fail(e) from e

    if as_json:
        typer.echo(program.model_dump_json(indent=2))
    else:
        typer.echo(str(program))


@app.command("tokens")
def tokens_command(
    source: str = typer.Argument(..., help="Asa source fragment"),
    whitespace: bool = typer.Option(False, "--whitespace", help="Include whitespace tokens"),
) -> None:
    """List the tokens of a fragment."""
    try:
        tokens = tokenize(source)
    except AsaError as e:
        raise _fail(e) from e

    table = Table(title="Tokens")
    table.add_column("Kind", style="cyan")
    table.add_column("Lexeme")
    table.add_column("Position", justify="right")
    for tok in tokens:
        if tok.kind == TokenKind.WHITESPACE and not whitespace:
            continue
        table.add_row(str(tok.kind), repr(tok.lexeme), f"{tok.line}:{tok.column}")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
