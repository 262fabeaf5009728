"""
Parser chain for eqparse equations.

A token span is handed to each registered parser in turn (by default
parenthesis, operation, constant, variable). A parser returns a node when the
span has its shape, None when it does not, and raises ParseError when the
shape matches but the content is invalid (unknown function, wrong argument
count, missing operand).

The operation parser drives the recursion. For a span it finds every
top-level binary operator at the lowest precedence, parses the operands
between them and folds the chain by that level's associativity:

    2*[x]^2+5      ->  split at "+"  ->  (2*[x]^2) + 5
    8-4-2          ->  operands 8, 4, 2  ->  (8-4)-2 (left-associative)
    2^3^2          ->  operands 2, 3, 2  ->  2^(3^2) (right-associative)

max_depth bounds nested parser calls: parentheses, function arguments,
prefix operators and each step down to a tighter precedence level. The
number of terms in a chain does not count.

An operator is binary only when it follows a value or a closing parenthesis;
otherwise it is a prefix operator, applied after all binary splits, so a
prefix always binds tighter than any binary operator ("-2^2" is (-2)^2).
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Sequence

from eqparse.core.catalog import (
    Associativity,
    Operator,
    functions_by_name,
    operators_by_symbol,
)
from eqparse.core.equation_lang.tokenizer import Token, TokenKind, tokenize
from eqparse.core.errors import ParseError, make_parse_error
from eqparse.core.ir.equation import (
    BinaryOperation,
    Constant,
    Equation,
    FunctionCall,
    Node,
    UnaryOperation,
    VariableRef,
)
from eqparse.core.numeric import MAX_INT_BITS
from eqparse.core.options import ParserKind, ParsingOptions
from eqparse.core.result import Result, run_with_behavior

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE]\d+)?", re.ASCII)
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*", re.ASCII)

Span = Sequence[Token]


class _Parser:
    """Recursive parser over token spans."""

    def __init__(self, source: str, options: ParsingOptions) -> None:
        self.source = source
        self.options = options
        self.operators = operators_by_symbol(options.operators)
        self.functions = functions_by_name(options.functions)
        self.depth = 0
        self.strategies: dict[ParserKind, Callable[[Span], Node | None]] = {
            ParserKind.CONSTANT: self.parse_constant,
            ParserKind.VARIABLE: self.parse_variable,
            ParserKind.PARENTHESIS: self.parse_parenthesis,
            ParserKind.OPERATION: self.parse_operation,
        }

    def error(self, message: str, tokens: Span) -> ParseError:
        return make_parse_error(message, self.source, tokens[0].start, tokens[-1].end)

    def text(self, tokens: Span) -> str:
        return self.source[tokens[0].start : tokens[-1].end]

    # -- Chain --

    def parse(self, tokens: Span) -> Node:
        """Run the parser chain over a non-empty span."""
        self.depth += 1
        try:
            if self.depth > self.options.max_depth:
                raise self.error(
                    f"Equation nested deeper than {self.options.max_depth} levels", tokens
                )
            for kind in self.options.parsers:
                node = self.strategies[kind](tokens)
                if node is not None:
                    return node
        finally:
            self.depth -= 1

        raise self.error(f"Unable to parse {self.text(tokens)!r}", tokens)

    # -- Parsers --

    def parse_constant(self, tokens: Span) -> Constant | None:
        """A single numeric literal: int without fraction/exponent, float otherwise."""
        if len(tokens) != 1 or tokens[0].kind != TokenKind.VALUE:
            return None
        text = tokens[0].text
        if not _NUMBER_RE.fullmatch(text):
            return None
        if text.isdigit():
            try:
                number = int(text)
            except ValueError as e:
                raise self.error(f"Numeric literal out of range: {text!r}", tokens) from e
            if number.bit_length() > MAX_INT_BITS:
                raise self.error(f"Numeric literal out of range: {text!r}", tokens)
            return Constant(value=number)
        value = float(text)
        if not math.isfinite(value):
            raise self.error(f"Numeric literal out of range: {text!r}", tokens)
        return Constant(value=value)

    def parse_variable(self, tokens: Span) -> VariableRef | None:
        """A single value token shaped like the active variable pattern."""
        if len(tokens) != 1 or tokens[0].kind != TokenKind.VALUE:
            return None
        text = tokens[0].text
        pattern = self.options.variable_pattern

        if not pattern.escaped:
            if _IDENT_RE.fullmatch(text):
                return VariableRef(name=text)
            return None

        if len(text) < 2 or text[0] != pattern.opening or text[-1] != pattern.closing:
            return None
        name = text[1:-1]
        if not name or pattern.opening in name or pattern.closing in name:
            raise self.error(f"Invalid variable name {text!r}", tokens)
        return VariableRef(name=name)

    def parse_parenthesis(self, tokens: Span) -> Node | None:
        """'(' span ')' or name '(' args ')', wrapping the whole span."""
        if len(tokens) < 2 or tokens[-1].kind != TokenKind.CLOSE:
            return None

        first = tokens[0]
        if first.kind == TokenKind.OPEN:
            open_index = 0
        elif (
            first.kind == TokenKind.VALUE
            and tokens[1].kind == TokenKind.OPEN
            and _IDENT_RE.fullmatch(first.text)
        ):
            open_index = 1
        else:
            return None

        if _matching_close(tokens, open_index) != len(tokens) - 1:
            return None

        interior = tokens[open_index + 1 : -1]
        if open_index == 0:
            if not interior:
                raise self.error("Empty parentheses", tokens)
            groups = _split_arguments(interior)
            if len(groups) > 1:
                raise self.error(f"Unexpected ',' in {self.text(tokens)!r}", tokens)
            return self.parse(interior)

        return self._parse_function_call(first, tokens, interior)

    def _parse_function_call(self, name_tok: Token, tokens: Span, interior: Span) -> FunctionCall:
        function = self.functions.get(name_tok.text)
        if function is None:
            raise self.error(f"Unknown function {name_tok.text!r}", [name_tok])

        groups = _split_arguments(interior) if interior else []
        for group in groups:
            if not group:
                raise self.error(f"Missing argument in call to {name_tok.text!r}", tokens)

        if not function.accepts(len(groups)):
            raise self.error(
                f"Function {function.name!r} takes {function.arity_text} argument(s), "
                f"got {len(groups)}",
                tokens,
            )
        args = tuple(self.parse(group) for group in groups)
        return FunctionCall(name=function.name, args=args)

    def parse_operation(self, tokens: Span) -> Node | None:
        """Split at the weakest top-level binary operators, else apply a prefix operator."""
        splits, associativity = self._find_splits(tokens)

        if splits:
            bounds = [-1, *splits, len(tokens)]
            operands = [tokens[a + 1 : b] for a, b in zip(bounds, bounds[1:])]
            if not operands[-1]:
                op_tok = tokens[splits[-1]]
                raise self.error(f"Missing right operand for {op_tok.text!r}", [op_tok])
            nodes = [self.parse(operand) for operand in operands]
            symbols = [tokens[i].text for i in splits]

            # Chains are folded in place; their length adds no parse depth
            if associativity == Associativity.RIGHT:
                node = nodes[-1]
                for symbol, left in zip(reversed(symbols), reversed(nodes[:-1])):
                    node = BinaryOperation(op=symbol, left=left, right=node)
                return node
            node = nodes[0]
            for symbol, right in zip(symbols, nodes[1:]):
                node = BinaryOperation(op=symbol, left=node, right=right)
            return node

        first = tokens[0]
        if first.kind != TokenKind.OPERATOR:
            return None
        operator = self._operator(first)
        if operator.unary is None:
            raise self.error(f"Operator {first.text!r} cannot be used as a prefix", [first])
        if len(tokens) == 1:
            raise self.error(f"Missing operand for {first.text!r}", [first])
        return UnaryOperation(op=first.text, operand=self.parse(tokens[1:]))

    def _find_splits(self, tokens: Span) -> tuple[list[int], Associativity | None]:
        """Positions of every top-level binary operator at the weakest precedence."""
        splits: list[int] = []
        best: Operator | None = None
        depth = 0
        previous: Token | None = None

        for i, tok in enumerate(tokens):
            if tok.kind == TokenKind.OPEN:
                depth += 1
            elif tok.kind == TokenKind.CLOSE:
                depth -= 1
            elif (
                tok.kind == TokenKind.OPERATOR
                and depth == 0
                and previous is not None
                and previous.kind in (TokenKind.VALUE, TokenKind.CLOSE)
            ):
                operator = self._operator(tok)
                if best is None or operator.precedence < best.precedence:
                    splits, best = [i], operator
                elif operator.precedence == best.precedence:
                    splits.append(i)
            previous = tok

        return splits, (best.associativity if best is not None else None)

    def _operator(self, tok: Token) -> Operator:
        operator = self.operators.get(tok.text)
        if operator is None:
            raise self.error(f"Unknown operator {tok.text!r}", [tok])
        return operator


def _matching_close(tokens: Span, open_index: int) -> int:
    """Index of the parenthesis closing tokens[open_index], or -1."""
    depth = 0
    for i in range(open_index, len(tokens)):
        kind = tokens[i].kind
        if kind == TokenKind.OPEN:
            depth += 1
        elif kind == TokenKind.CLOSE:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_arguments(tokens: Span) -> list[Span]:
    """Split a span on separators that are not nested in parentheses."""
    groups: list[Span] = []
    depth = 0
    start = 0
    for i, tok in enumerate(tokens):
        if tok.kind == TokenKind.OPEN:
            depth += 1
        elif tok.kind == TokenKind.CLOSE:
            depth -= 1
        elif tok.kind == TokenKind.SEPARATOR and depth == 0:
            groups.append(tokens[start:i])
            start = i + 1
    groups.append(tokens[start:])
    return groups


def parse_tokens(tokens: Span, source: str, options: ParsingOptions | None = None) -> Node:
    """Parse an already tokenized equation into an AST.

    Args:
        tokens: Tokens produced by tokenize(source, options)
        source: The equation string the tokens point into
        options: Parsing options; defaults to ParsingOptions.default()

    Raises:
        ParseError: If the tokens do not form a single valid expression.
    """
    options = options or ParsingOptions.default()
    if not tokens:
        raise make_parse_error("Empty equation", source, 0, len(source))
    return _Parser(source, options).parse(tokens)


def parse_equation(source: str, options: ParsingOptions | None = None) -> Equation:
    """Parse an equation string, raising on failure.

    Args:
        source: Equation string (e.g., "2*[x]^2+5")
        options: Parsing options; defaults to ParsingOptions.default()

    Returns:
        Parsed, immutable Equation.

    Raises:
        TokenizeError: On unbalanced parentheses or unterminated variables.
        ParseError: If the equation is otherwise invalid.
    """
    options = options or ParsingOptions.default()
    tokens = tokenize(source, options)
    root = parse_tokens(tokens, source, options)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Parsed %r into %s", source, root.render(options.variable_pattern))
    return Equation(
        root=root,
        source=source,
        options=options,
    )


def parse(source: str, options: ParsingOptions | None = None) -> Result[Equation]:
    """Parse an equation string under the options' error behavior.

    With ErrorBehavior.RESULT (the default) failures come back as
    Result.failure; with ErrorBehavior.RAISE they are raised.
    """
    options = options or ParsingOptions.default()
    return run_with_behavior(lambda: parse_equation(source, options), options.error_behavior, "parse")
