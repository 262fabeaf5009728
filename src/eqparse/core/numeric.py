"""
Numeric promotion rules shared by every operator and function.

Promotion rule:
    - int stays int under +, -, *, %, under / when the division is exact,
      and under ^ with a non-negative int exponent. An exact power that
      would exceed MAX_INT_BITS is computed in float instead (and overflows).
    - Any float operand promotes the result to float.
    - Fraction operands (only ever supplied through variable storage)
      follow Python's numeric tower: Fraction with int stays Fraction,
      Fraction with float becomes float.
    - No value may exceed MAX_INT_BITS: an int (or a Fraction numerator or
      denominator) above it is a NumericError, whichever operator made it.

Failures never leak as NaN, Infinity, complex numbers or bare Python
exceptions: apply() turns them into NumericError / OperandTypeError.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable
from fractions import Fraction
from typing import Any

from eqparse.core.errors import NumericError, OperandTypeError

Number = int | float | Fraction

# Largest integer size, in bits, any value may have
MAX_INT_BITS = 4096

# round() accepts digits in [-MAX_ROUND_DIGITS, MAX_ROUND_DIGITS]
MAX_ROUND_DIGITS = 308


def check_number(value: Any, what: str) -> Number:
    """Ensure a value is a finite real number within eqparse's size limits."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Fraction)):
        raise OperandTypeError(f"Unsupported operand type for {what}: {type(value).__name__}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise NumericError(f"Non-finite number in {what}")
    elif isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise NumericError(f"Integer too large in {what} (over {MAX_INT_BITS} bits)")
    elif max(value.numerator.bit_length(), value.denominator.bit_length()) > MAX_INT_BITS:
        raise NumericError(f"Fraction too large in {what} (over {MAX_INT_BITS} bits)")
    return value


def apply(func: Callable[..., Any], args: list[Number], label: str) -> Number:
    """Call an operator/function implementation and normalize its outcome."""
    try:
        result = func(*args)
    except ZeroDivisionError as e:
        raise NumericError(f"Division by zero in {label}") from e
    except OverflowError as e:
        raise NumericError(f"Numeric overflow in {label}") from e
    except ValueError as e:
        raise NumericError(f"Math domain error in {label}: {e}") from e
    except TypeError as e:
        raise OperandTypeError(f"Unsupported operand type in {label}: {e}") from e

    if isinstance(result, complex):
        raise NumericError(f"Complex result in {label}")
    if isinstance(result, numbers.Integral) and not isinstance(result, bool):
        result = int(result)
    return check_number(result, label)


# ---------------------------------------------------------------------------
# Operator implementations
# ---------------------------------------------------------------------------


def add(left: Number, right: Number) -> Number:
    return left + right


def subtract(left: Number, right: Number) -> Number:
    return left - right


def multiply(left: Number, right: Number) -> Number:
    return left * right


def divide(left: Number, right: Number) -> Number:
    """Exact int division stays int, everything else follows true division."""
    if right == 0:
        raise ZeroDivisionError("division by zero")
    if isinstance(left, int) and isinstance(right, int):
        quotient, remainder = divmod(left, right)
        if remainder == 0:
            return quotient
        return left / right
    return left / right


def modulo(left: Number, right: Number) -> Number:
    if right == 0:
        raise ZeroDivisionError("modulo by zero")
    return left % right


def power(base: Number, exponent: Number) -> Number:
    if isinstance(base, int) and isinstance(exponent, int) and exponent >= 0:
        if abs(base) > 1 and exponent * math.log2(abs(base)) > MAX_INT_BITS:
            return float(base) ** float(exponent)
        return base**exponent
    return base**exponent


def negate(operand: Number) -> Number:
    return -operand


def identity(operand: Number) -> Number:
    return +operand


# ---------------------------------------------------------------------------
# Function implementations
# ---------------------------------------------------------------------------


def log(value: Number, base: Number | None = None) -> float:
    """Natural logarithm, or logarithm to ``base`` when given."""
    if base is None:
        return math.log(value)
    return math.log(value, base)


def round_half_up(value: Number, digits: Number = 0) -> Number:
    """Round with ties away from zero; returns int when digits == 0."""
    if not isinstance(digits, int):
        raise TypeError("round() digits must be an integer")
    if abs(digits) > MAX_ROUND_DIGITS:
        raise ValueError(
            f"round() digits must be between -{MAX_ROUND_DIGITS} and {MAX_ROUND_DIGITS}"
        )
    scale = Fraction(10) ** digits
    scaled = Fraction(value) * scale
    rounded = math.floor(abs(scaled) + Fraction(1, 2))
    if scaled < 0:
        rounded = -rounded
    result = Fraction(rounded) / scale
    if digits <= 0:
        return int(result)
    if isinstance(value, int):
        return value
    if isinstance(value, Fraction):
        return result
    return float(result)


def sign(value: Number) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
