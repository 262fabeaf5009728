"""
Result wrapper and error-behavior policy.

parse() and evaluate() both funnel through run_with_behavior(): the same
function computes the value, and the configured ErrorBehavior only decides
whether an EquationError is raised at the call site or captured:

    result = parse("5/0")           # Result[Equation]
    outcome = result.get().evaluate({})
    if not outcome.is_success:
        print(outcome.error)        # Division by zero in '/'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from eqparse.core.errors import EquationError
from eqparse.core.options import ErrorBehavior

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a successful value or a captured EquationError."""

    value: T | None = None
    error: EquationError | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: EquationError) -> Result[T]:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def get(self) -> T:
        """Return the value, raising the captured error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def or_else(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    def as_float(self) -> float:
        """The value as float; raises the captured error on failure."""
        return float(self.get())  # type: ignore[arg-type]

    def __repr__(self) -> str:
        if self.error is not None:
            return f"Result.failure({self.error.message!r})"
        return f"Result.success({self.value!r})"


def run_with_behavior(
    func: Callable[[], T],
    behavior: ErrorBehavior,
    what: str,
) -> Result[T]:
    """Run func and surface an EquationError according to behavior."""
    try:
        return Result.success(func())
    except EquationError as e:
        if behavior == ErrorBehavior.RAISE:
            raise
        logger.debug("Captured %s failure: %s", what, e.message)
        return Result.failure(e)
