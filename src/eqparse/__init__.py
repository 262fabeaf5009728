"""
eqparse - parse and evaluate arithmetic equations with named variables.

    from eqparse import parse

    equation = parse("2*[x]^2+5").get()
    equation.evaluate({"x": 2}).get()   # 13
"""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import variables
from .core.catalog import Associativity, MathFunction, Operator
from .core.equation_lang import evaluate, parse, tokenize
from .core.errors import (
    EquationError,
    EvaluationError,
    NumericError,
    OperandTypeError,
    ParseError,
    TokenizeError,
    UnresolvedVariableError,
)
from .core.ir import Equation
from .core.options import ErrorBehavior, ParserKind, ParsingOptions, TokenizerKind, load_parsing_options
from .core.result import Result
from .core.storage import SimpleStorage, VariableStorage
from .core.variables import VariablePattern


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("eqparse")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "Associativity",
    "Equation",
    "EquationError",
    "ErrorBehavior",
    "EvaluationError",
    "MathFunction",
    "NumericError",
    "OperandTypeError",
    "Operator",
    "ParseError",
    "ParserKind",
    "ParsingOptions",
    "Result",
    "SimpleStorage",
    "TokenizeError",
    "TokenizerKind",
    "UnresolvedVariableError",
    "VariablePattern",
    "VariableStorage",
    "evaluate",
    "load_parsing_options",
    "parse",
    "tokenize",
    "variables",
]
