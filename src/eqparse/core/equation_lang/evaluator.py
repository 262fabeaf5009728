"""
Equation evaluator for eqparse.

Walks an Equation AST post-order against a variable storage. Pure
evaluation: no node is mutated and no state is kept between calls, so one
Equation can be evaluated from several threads at once as long as the
storage tolerates concurrent reads.

The first failure anywhere in the tree aborts the walk and is propagated
unchanged; there are no partial results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from eqparse.core import numeric
from eqparse.core.catalog import MathFunction, Operator, functions_by_name, operators_by_symbol
from eqparse.core.errors import EvaluationError, UnresolvedVariableError
from eqparse.core.ir.equation import (
    BinaryOperation,
    Constant,
    Equation,
    FunctionCall,
    Node,
    UnaryOperation,
    VariableRef,
)
from eqparse.core.numeric import Number
from eqparse.core.options import ParsingOptions
from eqparse.core.result import Result, run_with_behavior
from eqparse.core.storage import VariableStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Context:
    storage: VariableStorage
    operators: dict[str, Operator]
    functions: dict[str, MathFunction]


def evaluate(equation: Equation, storage: VariableStorage) -> Result[Number]:
    """Evaluate an equation against a variable storage.

    Args:
        equation: Parsed equation.
        storage: Anything with get(name) -> number | None (a dict works).

    Returns:
        Result.success(number), or Result.failure(EvaluationError) when the
        equation was parsed with ErrorBehavior.RESULT.

    Raises:
        EvaluationError: When the equation was parsed with ErrorBehavior.RAISE.
    """
    logger.debug("Evaluating %r", equation.source)
    return run_with_behavior(
        lambda: evaluate_node(equation.root, storage, equation.options),
        equation.error_behavior,
        "evaluation",
    )


def evaluate_node(
    node: Node,
    storage: VariableStorage,
    options: ParsingOptions | None = None,
) -> Number:
    """Evaluate a bare AST node, raising on failure.

    Raises:
        EvaluationError: If a variable is missing or a computation fails.
    """
    options = options or ParsingOptions.default()
    ctx = _Context(
        storage=storage,
        operators=operators_by_symbol(options.operators),
        functions=functions_by_name(options.functions),
    )
    return _interpret(node, ctx)


def _interpret(node: Node, ctx: _Context) -> Number:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(node, Constant):
        return node.value

    if isinstance(node, VariableRef):
        return _interpret_variable(node, ctx)

    if isinstance(node, BinaryOperation):
        return _interpret_binary(node, ctx)

    if isinstance(node, UnaryOperation):
        return _interpret_unary(node, ctx)

    if isinstance(node, FunctionCall):
        return _interpret_function(node, ctx)

    raise EvaluationError(f"Unknown node type: {type(node).__name__}")


def _interpret_variable(node: VariableRef, ctx: _Context) -> Number:
    value = ctx.storage.get(node.name)
    if value is None:
        raise UnresolvedVariableError(node.name)
    return numeric.check_number(value, f"variable {node.name!r}")


def _lookup_operator(symbol: str, ctx: _Context) -> Operator:
    operator = ctx.operators.get(symbol)
    if operator is None:
        raise EvaluationError(f"Unknown operator: {symbol!r}")
    return operator


def _interpret_binary(node: BinaryOperation, ctx: _Context) -> Number:
    """Evaluate a chain of binary operations without recursing along it.

    "1+2+3+4" nests to the left and "2^3^2" to the right; the chain is
    collected along that side and folded in a loop, operands in source order.
    """
    leftward = isinstance(node.left, BinaryOperation)
    chain = [node]
    while True:
        nxt = chain[-1].left if leftward else chain[-1].right
        if not isinstance(nxt, BinaryOperation):
            break
        chain.append(nxt)
    operators = [_lookup_operator(link.op, ctx) for link in chain]

    if leftward:
        value = _interpret(chain[-1].left, ctx)
        for link, operator in zip(reversed(chain), reversed(operators)):
            right = _interpret(link.right, ctx)
            value = numeric.apply(operator.binary, [value, right], repr(link.op))
        return value

    lefts = [_interpret(link.left, ctx) for link in chain]
    value = _interpret(chain[-1].right, ctx)
    for link, operator, left in zip(reversed(chain), reversed(operators), reversed(lefts)):
        value = numeric.apply(operator.binary, [left, value], repr(link.op))
    return value


def _interpret_unary(node: UnaryOperation, ctx: _Context) -> Number:
    operator = _lookup_operator(node.op, ctx)
    if operator.unary is None:
        raise EvaluationError(f"Operator {node.op!r} has no prefix form")
    operand = _interpret(node.operand, ctx)
    return numeric.apply(operator.unary, [operand], repr(node.op))


def _interpret_function(node: FunctionCall, ctx: _Context) -> Number:
    function = ctx.functions.get(node.name)
    if function is None:
        raise EvaluationError(f"Unknown function: {node.name}()")
    args = [_interpret(arg, ctx) for arg in node.args]
    return numeric.apply(function.implementation, args, f"{node.name}()")
