"""
Equation AST for eqparse.

Every node is a frozen pydantic model owning its children, so a parsed
Equation can be evaluated repeatedly, and from several threads, without
copying.

Rendering (render / __str__) produces fully parenthesized text that parses
back into an equivalent tree under the same variable pattern:

    BinaryOperation("+", Constant(2), VariableRef("x"))  ->  (2+[x])
"""

from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from eqparse.core.options import DEFAULT_OPTIONS, ErrorBehavior, ParsingOptions
from eqparse.core.variables import BRACKETS, VariablePattern

if TYPE_CHECKING:
    from eqparse.core.result import Result
    from eqparse.core.storage import VariableStorage


def format_number(value: int | float) -> str:
    """Positional notation; floats always keep a decimal point."""
    if isinstance(value, int):
        text = str(abs(value))
    else:
        text = format(Decimal(repr(abs(value))), "f")
        if "." not in text:
            text += ".0"
    if value < 0:
        return f"(-{text})"
    return text


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Constant(BaseModel):
    """A numeric literal."""

    value: int | float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def render(self, pattern: VariablePattern = BRACKETS) -> str:
        return format_number(self.value)

    def __str__(self) -> str:
        return self.render()


class VariableRef(BaseModel):
    """A named variable, resolved against variable storage at evaluation time."""

    name: str = Field(description="Variable name without delimiters")

    model_config = ConfigDict(frozen=True)

    def render(self, pattern: VariablePattern = BRACKETS) -> str:
        return pattern.wrap(self.name)

    def __str__(self) -> str:
        return self.render()


class UnaryOperation(BaseModel):
    """Prefix operation: op operand."""

    op: str
    operand: Node

    model_config = ConfigDict(frozen=True)

    def render(self, pattern: VariablePattern = BRACKETS) -> str:
        return f"({self.op}{self.operand.render(pattern)})"

    def __str__(self) -> str:
        return self.render()


class BinaryOperation(BaseModel):
    """Infix operation: left op right."""

    op: str
    left: Node
    right: Node

    model_config = ConfigDict(frozen=True)

    def render(self, pattern: VariablePattern = BRACKETS) -> str:
        return f"({self.left.render(pattern)}{self.op}{self.right.render(pattern)})"

    def __str__(self) -> str:
        return self.render()


class FunctionCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    The name was checked against the function catalog when parsing, and the
    argument count against the function's declared arity.
    """

    name: str = Field(description="Function name")
    args: tuple[Node, ...] = Field(default=(), description="Arguments")

    model_config = ConfigDict(frozen=True)

    def render(self, pattern: VariablePattern = BRACKETS) -> str:
        args_str = ",".join(a.render(pattern) for a in self.args)
        return f"{self.name}({args_str})"

    def __str__(self) -> str:
        return self.render()


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Node = Constant | VariableRef | UnaryOperation | BinaryOperation | FunctionCall

# Rebuild models for recursive forward references
UnaryOperation.model_rebuild()
BinaryOperation.model_rebuild()
FunctionCall.model_rebuild()


def iter_nodes(node: Node) -> Iterator[Node]:
    """Walk a tree in pre-order."""
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, UnaryOperation):
            stack.append(current.operand)
        elif isinstance(current, BinaryOperation):
            stack.extend((current.right, current.left))
        elif isinstance(current, FunctionCall):
            stack.extend(reversed(current.args))


class Equation(BaseModel):
    """A parsed equation: the AST root plus what it was parsed from."""

    root: Node
    source: str = Field(description="Original equation string")
    options: ParsingOptions = Field(default=DEFAULT_OPTIONS, description="Options used to parse it")

    model_config = ConfigDict(frozen=True)

    @property
    def variable_pattern(self) -> VariablePattern:
        return self.options.variable_pattern

    @property
    def error_behavior(self) -> ErrorBehavior:
        return self.options.error_behavior

    @property
    def variables(self) -> frozenset[str]:
        """Names of all variables referenced by the equation."""
        return frozenset(n.name for n in iter_nodes(self.root) if isinstance(n, VariableRef))

    def render(self) -> str:
        """Re-render the tree as equation text in its own variable pattern."""
        return self.root.render(self.variable_pattern)

    def evaluate(self, storage: VariableStorage) -> Result[Any]:
        """Shortcut for eqparse.core.equation_lang.evaluator.evaluate(self, storage)."""
        from eqparse.core.equation_lang.evaluator import evaluate

        return evaluate(self, storage)

    def __str__(self) -> str:
        return self.source
