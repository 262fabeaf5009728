"""
Command line entry point for eqparse.

    eqparse eval "2*[x]^2+5" --var x=3
    eqparse eval "2*x^2+5" --pattern none --var x=3
    eqparse tokens "12*([x]+3)^2"
    eqparse render "2*x^2+5" --pattern none
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from eqparse import __version__
from eqparse.core.equation_lang import parse, tokenize
from eqparse.core.errors import EquationError
from eqparse.core.numeric import Number
from eqparse.core.options import ErrorBehavior, ParsingOptions, load_parsing_options
from eqparse.core.storage import SimpleStorage
from eqparse.core.variables import get_pattern

app = typer.Typer(
    help="Parse and evaluate arithmetic equations",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"eqparse {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _build_options(pattern: str | None, config: Path | None, raise_errors: bool) -> ParsingOptions:
    options = ParsingOptions.default()
    try:
        if config is not None:
            options = load_parsing_options(config, options)
        if pattern is not None:
            options = options.with_variable_pattern(get_pattern(pattern))
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    if raise_errors:
        options = options.with_error_behavior(ErrorBehavior.RAISE)
    return options


def _parse_assignment(assignment: str) -> tuple[str, Number]:
    name, sep, raw = assignment.partition("=")
    if not sep or not name.strip():
        raise typer.BadParameter(f"Expected name=value, got {assignment!r}")
    raw = raw.strip()
    try:
        value: Number = int(raw)
    except ValueError:
        try:
            value = float(raw)
        except ValueError:
            raise typer.BadParameter(f"Not a number: {raw!r}") from None
    return name.strip(), value


def _fail(kind: str, error: EquationError) -> NoReturn:
    console.print(f"[red]{kind} error:[/red] {escape(str(error))}")
    raise typer.Exit(code=1)


PATTERN_OPTION = typer.Option(
    None, "--pattern", "-p", help="Variable pattern: brackets, braces, pipes or none"
)
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="TOML file with an [equation] table")


@app.command(name="eval")
def eval_command(
    equation: str = typer.Argument(..., help="Equation to evaluate"),
    var: list[str] = typer.Option([], "--var", "-v", help="Variable binding, e.g. x=3"),  # noqa: B008
    pattern: str | None = PATTERN_OPTION,
    config: Path | None = CONFIG_OPTION,
    raise_errors: bool = typer.Option(
        False, "--raise-errors", help="Raise failures instead of capturing them in a result"
    ),
) -> None:
    """Evaluate an equation with the given variable bindings."""
    options = _build_options(pattern, config, raise_errors)
    storage = SimpleStorage(dict(_parse_assignment(a) for a in var))

    try:
        parsed = parse(equation, options)
        if not parsed.is_success:
            _fail("Parse", parsed.error)  # type: ignore[arg-type]
        result = parsed.get().evaluate(storage)
        if not result.is_success:
            _fail("Evaluation", result.error)  # type: ignore[arg-type]
    except EquationError as e:
        _fail("Equation", e)

    console.print(escape(str(result.get())))


@app.command(name="tokens")
def tokens_command(
    equation: str = typer.Argument(..., help="Equation to tokenize"),
    pattern: str | None = PATTERN_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Show how an equation is split into tokens."""
    options = _build_options(pattern, config, raise_errors=False)
    try:
        tokens = tokenize(equation, options)
    except EquationError as e:
        _fail("Tokenize", e)

    table = Table(title="Tokens")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Text")
    table.add_column("Span")
    for i, tok in enumerate(tokens):
        table.add_row(str(i), str(tok.kind), escape(tok.text), f"{tok.start}:{tok.end}")
    console.print(table)


@app.command(name="render")
def render_command(
    equation: str = typer.Argument(..., help="Equation to re-render"),
    pattern: str | None = PATTERN_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Print the fully parenthesized form of a parsed equation."""
    options = _build_options(pattern, config, raise_errors=False)
    parsed = parse(equation, options)
    if not parsed.is_success:
        _fail("Parse", parsed.error)  # type: ignore[arg-type]
    console.print(escape(parsed.get().render()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
