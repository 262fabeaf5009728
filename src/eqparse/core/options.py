"""
Parsing options.

A ParsingOptions object decides which operators, functions and variable
pattern are recognized, which tokenizers and parsers run (and in which
order), and whether failures are raised or captured in a Result.

Options can also be loaded from the [equation] table of a TOML file:

    [equation]
    variable_pattern = "none"
    error_behavior = "raise"
    operators = ["+", "-", "*", "/", "^"]
    functions = ["sqrt", "min", "max"]
    max_depth = 100
"""

from __future__ import annotations

import logging
import tomllib
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eqparse.core.catalog import (
    STANDARD_FUNCTIONS,
    STANDARD_OPERATORS,
    MathFunction,
    Operator,
    select_functions,
    select_operators,
)
from eqparse.core.variables import BRACKETS, VariablePattern, get_pattern

logger = logging.getLogger(__name__)

# Characters the parenthesis tokenizer owns
STRUCTURAL_CHARACTERS = frozenset("(),")


class TokenizerKind(StrEnum):
    """Tokenizer behaviors, selected by delimiter character."""

    VARIABLE = "variable"
    PARENTHESIS = "parenthesis"
    OPERATOR = "operator"


class ParserKind(StrEnum):
    """Parser strategies, tried in the configured order."""

    CONSTANT = "constant"
    VARIABLE = "variable"
    PARENTHESIS = "parenthesis"
    OPERATION = "operation"


class ErrorBehavior(StrEnum):
    """How parse/evaluate failures reach the caller."""

    RAISE = "raise"
    RESULT = "result"


class ParsingOptions(BaseModel):
    """Immutable parser configuration."""

    variable_pattern: VariablePattern = BRACKETS
    operators: tuple[Operator, ...] = STANDARD_OPERATORS
    functions: tuple[MathFunction, ...] = STANDARD_FUNCTIONS
    tokenizers: tuple[TokenizerKind, ...] = (
        TokenizerKind.VARIABLE,
        TokenizerKind.PARENTHESIS,
        TokenizerKind.OPERATOR,
    )
    parsers: tuple[ParserKind, ...] = (
        ParserKind.PARENTHESIS,
        ParserKind.OPERATION,
        ParserKind.CONSTANT,
        ParserKind.VARIABLE,
    )
    error_behavior: ErrorBehavior = ErrorBehavior.RESULT
    max_depth: int = Field(default=200, ge=1, description="Maximum parse nesting depth")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_conflicts(self) -> ParsingOptions:
        symbols = [op.symbol for op in self.operators]
        if len(symbols) != len(set(symbols)):
            raise ValueError("operator symbols must be unique")
        reserved = STRUCTURAL_CHARACTERS | set(symbols)
        clash = self.variable_pattern.delimiters & reserved
        if clash:
            raise ValueError(
                f"variable delimiters clash with operators or parentheses: {''.join(sorted(clash))}"
            )
        if len(set(self.tokenizers)) != len(self.tokenizers):
            raise ValueError("tokenizers must not be registered twice")
        if len(set(self.parsers)) != len(self.parsers):
            raise ValueError("parsers must not be registered twice")
        return self

    # -- Factories --

    @classmethod
    def default(cls) -> ParsingOptions:
        """Shared default options (brackets, all standard operators/functions)."""
        return DEFAULT_OPTIONS

    def _replace(self, **update: Any) -> ParsingOptions:
        return type(self)(**{**dict(self), **update})

    def with_operators(self, *operators: Operator) -> ParsingOptions:
        return self._replace(operators=tuple(operators))

    def with_functions(self, *functions: MathFunction) -> ParsingOptions:
        return self._replace(functions=tuple(functions))

    def with_additional_functions(self, *functions: MathFunction) -> ParsingOptions:
        return self._replace(functions=self.functions + tuple(functions))

    def with_variable_pattern(self, pattern: VariablePattern) -> ParsingOptions:
        return self._replace(variable_pattern=pattern)

    def with_error_behavior(self, behavior: ErrorBehavior) -> ParsingOptions:
        return self._replace(error_behavior=behavior)

    def with_tokenizers(self, *kinds: TokenizerKind) -> ParsingOptions:
        return self._replace(tokenizers=tuple(kinds))

    def with_parsers(self, *kinds: ParserKind) -> ParsingOptions:
        return self._replace(parsers=tuple(kinds))

    @property
    def raises(self) -> bool:
        return self.error_behavior == ErrorBehavior.RAISE


DEFAULT_OPTIONS = ParsingOptions()


def load_parsing_options(toml_path: Path, base: ParsingOptions | None = None) -> ParsingOptions:
    """
    Load parsing options from the [equation] table of a TOML file.

    Args:
        toml_path: Path to the TOML file
        base: Options to start from (defaults to DEFAULT_OPTIONS)

    Returns:
        ParsingOptions with the file's values applied; the base options
        unchanged when the file or table is missing.

    Raises:
        ValueError: If the table names unknown patterns, operators or functions.
    """
    options = base or DEFAULT_OPTIONS
    if not toml_path.exists():
        logger.debug("No options file at %s, using defaults", toml_path)
        return options

    with open(toml_path, "rb") as f:
        data = tomllib.load(f)

    table = data.get("equation", {})
    update: dict[str, Any] = {}

    if "variable_pattern" in table:
        update["variable_pattern"] = get_pattern(table["variable_pattern"])
    if "error_behavior" in table:
        update["error_behavior"] = ErrorBehavior(table["error_behavior"])
    if "operators" in table:
        update["operators"] = select_operators(table["operators"])
    if "functions" in table:
        update["functions"] = select_functions(table["functions"])
    if "max_depth" in table:
        update["max_depth"] = table["max_depth"]

    logger.debug("Loaded equation options from %s: %s", toml_path, sorted(update))
    return options._replace(**update)
