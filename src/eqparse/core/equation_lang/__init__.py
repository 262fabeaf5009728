"""
eqparse equation language.

Tokenizer, parser chain and evaluator for arithmetic equations.

Usage:
    from eqparse.core.equation_lang import parse, evaluate

    equation = parse("2*[x]^2+5").get()
    result = evaluate(equation, {"x": 3})
    # result.get() == 23
"""

from eqparse.core.equation_lang.evaluator import evaluate, evaluate_node
from eqparse.core.equation_lang.parser import parse, parse_equation, parse_tokens
from eqparse.core.equation_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "Token",
    "TokenKind",
    "evaluate",
    "evaluate_node",
    "parse",
    "parse_equation",
    "parse_tokens",
    "tokenize",
]
