"""
Tokenizer for eqparse equations.

Splits an equation string into value spans and structural tokens. With the
default bracket pattern, "12*([x]+3)^2" becomes:

    "12", "*", "(", "[x]", "+", "3", ")", "^", "2"

The scan is driven by a delimiter table: every character claimed by a
registered tokenizer kind is handed to that kind's handler, every other
character just extends the pending value span. While an escaped variable is
open (context depth > 0) no other tokenizer may split, so "[a+(b)]" stays a
single value token.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from eqparse.core.errors import make_tokenize_error
from eqparse.core.options import ParsingOptions, TokenizerKind


class TokenKind(StrEnum):
    """Token types produced by the tokenizer."""

    VALUE = "value"
    OPERATOR = "operator"
    OPEN = "open"
    CLOSE = "close"
    SEPARATOR = "separator"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token; start/end are offsets into the equation string."""

    kind: TokenKind
    text: str
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text!r}, {self.start}:{self.end})"


@dataclass
class TokenizerContext:
    """Mutable state of a single scan."""

    depth: int = 0
    paren_depth: int = 0
    # Offset of the delimiter that opened the current escaped variable
    escape_start: int = -1
    # Offsets of currently open parentheses
    open_parens: list[int] = field(default_factory=list)

    @property
    def split_prohibited(self) -> bool:
        return self.depth > 0


@dataclass
class _Scan:
    """Everything a handler may read or change during the scan."""

    source: str
    options: ParsingOptions
    tokens: list[Token] = field(default_factory=list)
    begin: int = 0
    context: TokenizerContext = field(default_factory=TokenizerContext)

    def flush(self, end: int) -> None:
        """Emit source[begin:end] as a value token if it is not blank."""
        raw = self.source[self.begin : end]
        stripped = raw.strip()
        if stripped:
            start = self.begin + (len(raw) - len(raw.lstrip()))
            self.tokens.append(Token(TokenKind.VALUE, stripped, start, start + len(stripped)))

    def split(self, index: int, kind: TokenKind | None) -> bool:
        """Close the pending span at index, optionally emitting a structural token."""
        self.flush(index)
        if kind is not None:
            self.tokens.append(Token(kind, self.source[index], index, index + 1))
        return True


Handler = Callable[[_Scan, int, str], bool]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_variable(scan: _Scan, index: int, char: str) -> bool:
    """Track escaped variable regions; only the final closing delimiter splits."""
    pattern = scan.options.variable_pattern
    ctx = scan.context

    if pattern.same_delimiters:
        opening = not ctx.split_prohibited
    else:
        opening = char == pattern.opening

    if opening:
        if ctx.depth == 0:
            ctx.escape_start = index
        ctx.depth += 1
        return False

    if ctx.depth == 0:
        raise make_tokenize_error(
            f"Closing variable delimiter {char!r} without opening {pattern.opening!r}",
            scan.source,
            index,
            index + 1,
        )
    ctx.depth -= 1
    if ctx.depth > 0:
        return False

    # The closing delimiter belongs to the value span it terminates
    scan.flush(index + 1)
    return True


def _handle_parenthesis(scan: _Scan, index: int, char: str) -> bool:
    ctx = scan.context
    if ctx.split_prohibited:
        return False

    if char == "(":
        ctx.paren_depth += 1
        ctx.open_parens.append(index)
        return scan.split(index, TokenKind.OPEN)

    if char == ")":
        if ctx.paren_depth == 0:
            raise make_tokenize_error(
                "Closing parenthesis without matching opening parenthesis",
                scan.source,
                index,
                index + 1,
            )
        ctx.paren_depth -= 1
        ctx.open_parens.pop()
        return scan.split(index, TokenKind.CLOSE)

    return scan.split(index, TokenKind.SEPARATOR)


def _handle_operator(scan: _Scan, index: int, char: str) -> bool:
    if scan.context.split_prohibited:
        return False
    return scan.split(index, TokenKind.OPERATOR)


_HANDLERS: dict[TokenizerKind, Handler] = {
    TokenizerKind.VARIABLE: _handle_variable,
    TokenizerKind.PARENTHESIS: _handle_parenthesis,
    TokenizerKind.OPERATOR: _handle_operator,
}


def delimiters_for(kind: TokenizerKind, options: ParsingOptions) -> frozenset[str]:
    """Characters a tokenizer kind claims under the given options."""
    if kind == TokenizerKind.VARIABLE:
        return options.variable_pattern.delimiters
    if kind == TokenizerKind.PARENTHESIS:
        return frozenset("(),")
    return frozenset(op.symbol for op in options.operators)


def delimiter_table(options: ParsingOptions) -> dict[str, TokenizerKind]:
    """Map each claimed character to its tokenizer; first registered wins."""
    table: dict[str, TokenizerKind] = {}
    for kind in options.tokenizers:
        for char in delimiters_for(kind, options):
            table.setdefault(char, kind)
    return table


def tokenize(source: str, options: ParsingOptions | None = None) -> list[Token]:
    """Tokenize an equation string into a list of tokens.

    Args:
        source: Equation string (e.g., "2*[x]^2+5")
        options: Parsing options; defaults to ParsingOptions.default()

    Returns:
        Tokens in source order, covering every non-blank character.

    Raises:
        TokenizeError: On unbalanced parentheses or unterminated variables.
    """
    options = options or ParsingOptions.default()
    table = delimiter_table(options)
    scan = _Scan(source=source, options=options)

    for index, char in enumerate(source):
        kind = table.get(char)
        if kind is None:
            continue
        if _HANDLERS[kind](scan, index, char):
            scan.begin = index + 1

    ctx = scan.context
    if ctx.depth > 0:
        raise make_tokenize_error(
            "Unterminated variable",
            source,
            ctx.escape_start,
            len(source),
        )
    if ctx.paren_depth > 0:
        position = ctx.open_parens[-1]
        raise make_tokenize_error("Unclosed parenthesis", source, position, position + 1)

    scan.flush(len(source))
    return scan.tokens
