"""
Error types for eqparse tokenizing, parsing, and evaluation.
"""

from dataclasses import dataclass


class EquationError(Exception):
    """Base exception for all eqparse errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ParseError(EquationError):
    """
    Raised when an equation string cannot be turned into an AST.

    Examples:
    - Unrecognized token shape ("2&3")
    - Unknown function name
    - Wrong function argument count
    - Missing operand
    """

    pass


class TokenizeError(ParseError):
    """
    Raised when the equation string is structurally malformed.

    Examples:
    - Closing parenthesis without an opening one
    - Unclosed parenthesis
    - Unterminated escaped variable
    """

    pass


class EvaluationError(EquationError):
    """Raised when a parsed equation cannot be evaluated."""

    pass


class UnresolvedVariableError(EvaluationError):
    """Raised when the variable storage has no value for a referenced name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unresolved variable: {name!r}")


class NumericError(EvaluationError):
    """
    Raised when an operator or function cannot produce a finite number.

    Examples:
    - Division or modulo by zero
    - Math domain errors (sqrt of a negative number)
    - Overflow or non-finite results
    """

    pass


class OperandTypeError(EvaluationError):
    """Raised when a value is not a supported number."""

    pass


@dataclass(frozen=True)
class ErrorContext:
    """
    Location of an error inside the equation source.

    Attributes:
        source: The full equation string
        start: Offset of the first offending character
        end: Offset one past the last offending character
    """

    source: str
    start: int
    end: int

    @property
    def snippet(self) -> str:
        """The offending substring."""
        return self.source[self.start : self.end]

    def format(self) -> str:
        """
        Format the source with a marker under the offending span.

        Returns:
            Two lines: the source and a caret marker, e.g.

                2+foo(3)
                  ^^^
        """
        width = max(1, self.end - self.start)
        return f"  {self.source}\n  {' ' * self.start}{'^' * width}"


def make_parse_error(message: str, source: str, start: int, end: int) -> ParseError:
    """
    Helper to create a ParseError pointing at a span of the source.

    Args:
        message: Error description
        source: Equation string
        start: Span start offset
        end: Span end offset

    Returns:
        ParseError with context attached
    """
    return ParseError(message, ErrorContext(source=source, start=start, end=end))


def make_tokenize_error(message: str, source: str, start: int, end: int) -> TokenizeError:
    """Helper to create a TokenizeError pointing at a span of the source."""
    return TokenizeError(message, ErrorContext(source=source, start=start, end=end))
