"""
Operator and function catalogs.

The parser never hard-codes an operator: precedence, associativity and the
numeric implementation all come from the Operator entries of the active
ParsingOptions. The standard tables below are built once at import time and
shared by every options object.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eqparse.core import numeric


class Associativity(StrEnum):
    """Which occurrence wins when equal-precedence operators are chained."""

    LEFT = "left"
    RIGHT = "right"


class Operator(BaseModel):
    """A single-character infix operator, optionally usable as a prefix."""

    symbol: str = Field(description="Operator character, e.g. '+'")
    precedence: int = Field(description="Higher binds tighter")
    associativity: Associativity = Associativity.LEFT
    binary: Callable[..., Any] = Field(description="Implementation for 'a op b'")
    unary: Callable[..., Any] | None = Field(
        default=None, description="Implementation for 'op a', if allowed"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("symbol")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1 or value.isalnum() or value.isspace() or value in "(),":
            raise ValueError(f"operator symbol must be one punctuation character, got {value!r}")
        return value


class MathFunction(BaseModel):
    """A named function callable as name(arg, ...)."""

    name: str
    implementation: Callable[..., Any]
    min_args: int = 1
    max_args: int | None = Field(default=1, description="None means unbounded")

    model_config = ConfigDict(frozen=True)

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    @property
    def arity_text(self) -> str:
        """Human readable argument count, e.g. '1', '1-2', 'at least 1'."""
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.max_args == self.min_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"


# ---------------------------------------------------------------------------
# Standard catalogs
# ---------------------------------------------------------------------------

PLUS = Operator(symbol="+", precedence=10, binary=numeric.add, unary=numeric.identity)
MINUS = Operator(symbol="-", precedence=10, binary=numeric.subtract, unary=numeric.negate)
MULTIPLY = Operator(symbol="*", precedence=20, binary=numeric.multiply)
DIVIDE = Operator(symbol="/", precedence=20, binary=numeric.divide)
MODULO = Operator(symbol="%", precedence=20, binary=numeric.modulo)
POWER = Operator(
    symbol="^",
    precedence=30,
    associativity=Associativity.RIGHT,
    binary=numeric.power,
)

STANDARD_OPERATORS: tuple[Operator, ...] = (PLUS, MINUS, MULTIPLY, DIVIDE, MODULO, POWER)


def _fn(name: str, impl: Callable[..., Any], min_args: int = 1, max_args: int | None = 1) -> MathFunction:
    return MathFunction(name=name, implementation=impl, min_args=min_args, max_args=max_args)


STANDARD_FUNCTIONS: tuple[MathFunction, ...] = (
    _fn("abs", abs),
    _fn("sign", numeric.sign),
    _fn("sqrt", math.sqrt),
    _fn("exp", math.exp),
    _fn("ln", math.log),
    _fn("log", numeric.log, 1, 2),
    _fn("log10", math.log10),
    _fn("sin", math.sin),
    _fn("cos", math.cos),
    _fn("tan", math.tan),
    _fn("asin", math.asin),
    _fn("acos", math.acos),
    _fn("atan", math.atan),
    _fn("atan2", math.atan2, 2, 2),
    _fn("floor", math.floor),
    _fn("ceil", math.ceil),
    _fn("round", numeric.round_half_up, 1, 2),
    _fn("min", min, 1, None),
    _fn("max", max, 1, None),
)


def operators_by_symbol(operators: Iterable[Operator]) -> dict[str, Operator]:
    """Index operators by symbol; later entries replace earlier ones."""
    return {op.symbol: op for op in operators}


def functions_by_name(functions: Iterable[MathFunction]) -> dict[str, MathFunction]:
    """Index functions by name; later entries replace earlier ones."""
    return {fn.name: fn for fn in functions}


def select_operators(symbols: Iterable[str]) -> tuple[Operator, ...]:
    """Pick standard operators by symbol, keeping catalog order."""
    wanted = set(symbols)
    unknown = wanted - {op.symbol for op in STANDARD_OPERATORS}
    if unknown:
        raise ValueError(f"Unknown operators: {', '.join(sorted(unknown))}")
    return tuple(op for op in STANDARD_OPERATORS if op.symbol in wanted)


def select_functions(names: Iterable[str]) -> tuple[MathFunction, ...]:
    """Pick standard functions by name, keeping catalog order."""
    wanted = set(names)
    unknown = wanted - {fn.name for fn in STANDARD_FUNCTIONS}
    if unknown:
        raise ValueError(f"Unknown functions: {', '.join(sorted(unknown))}")
    return tuple(fn for fn in STANDARD_FUNCTIONS if fn.name in wanted)
