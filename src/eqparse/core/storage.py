"""
Variable storage: where the evaluator looks up variable values.

Anything with a get(name) method returning a number or None works, so a
plain dict is a valid storage. SimpleStorage adds a small mutable API.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol

from eqparse.core.numeric import Number


class VariableStorage(Protocol):
    """Read interface consumed by the evaluator."""

    def get(self, name: str) -> Any: ...


class SimpleStorage:
    """Dict-backed variable storage."""

    def __init__(self, values: Mapping[str, Number] | None = None) -> None:
        self._values: dict[str, Number] = dict(values or {})

    def put_value(self, name: str, value: Number) -> None:
        self._values[name] = value

    def get(self, name: str) -> Number | None:
        return self._values.get(name)

    def remove(self, name: str) -> None:
        self._values.pop(name, None)

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"SimpleStorage({self._values!r})"
