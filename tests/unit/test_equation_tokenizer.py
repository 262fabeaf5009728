"""Tests for the eqparse tokenizer.

Covers:
- Splitting on operators, parentheses and separators
- Escaped variables (distinct and same-character delimiters)
- Offsets and whitespace handling
- Structural errors (unbalanced parentheses, unterminated variables)
"""

from __future__ import annotations

import pytest

from eqparse.core import variables
from eqparse.core.catalog import MULTIPLY, PLUS
from eqparse.core.equation_lang.tokenizer import (
    Token,
    TokenKind,
    delimiter_table,
    tokenize,
)
from eqparse.core.errors import ParseError, TokenizeError
from eqparse.core.options import ParsingOptions, TokenizerKind


def texts(tokens: list[Token]) -> list[str]:
    return [t.text for t in tokens]


def kinds(tokens: list[Token]) -> list[TokenKind]:
    return [t.kind for t in tokens]


class TestTokenizer:
    """Tokenizer produces correct token sequences."""

    def test_bracketed_example(self) -> None:
        tokens = tokenize("12*([x]+3)^2")
        assert texts(tokens) == ["12", "*", "(", "[x]", "+", "3", ")", "^", "2"]

    def test_bracketed_example_kinds(self) -> None:
        tokens = tokenize("12*([x]+3)^2")
        assert kinds(tokens) == [
            TokenKind.VALUE,
            TokenKind.OPERATOR,
            TokenKind.OPEN,
            TokenKind.VALUE,
            TokenKind.OPERATOR,
            TokenKind.VALUE,
            TokenKind.CLOSE,
            TokenKind.OPERATOR,
            TokenKind.VALUE,
        ]

    def test_single_value(self) -> None:
        tokens = tokenize("42")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.VALUE
        assert tokens[0].text == "42"

    def test_empty_string(self) -> None:
        assert tokenize("") == []

    def test_blank_string(self) -> None:
        assert tokenize("   ") == []

    def test_function_call(self) -> None:
        tokens = tokenize("max(1, [x])")
        assert texts(tokens) == ["max", "(", "1", ",", "[x]", ")"]
        assert tokens[3].kind == TokenKind.SEPARATOR

    def test_whitespace_is_stripped(self) -> None:
        tokens = tokenize("  2 +  [x] ")
        assert texts(tokens) == ["2", "+", "[x]"]

    def test_offsets_point_at_stripped_text(self) -> None:
        source = "  12 + [x]"
        tokens = tokenize(source)
        for tok in tokens:
            assert source[tok.start : tok.end] == tok.text
        assert (tokens[0].start, tokens[0].end) == (2, 4)

    def test_unary_minus_is_operator_token(self) -> None:
        tokens = tokenize("-3")
        assert kinds(tokens) == [TokenKind.OPERATOR, TokenKind.VALUE]

    def test_unknown_symbol_stays_in_value(self) -> None:
        tokens = tokenize("2&3")
        assert texts(tokens) == ["2&3"]

    def test_tokens_are_immutable(self) -> None:
        tok = tokenize("1")[0]
        with pytest.raises(AttributeError):
            tok.text = "2"  # type: ignore[misc]


class TestEscapedVariables:
    """Escaped variable regions suppress every other split."""

    def test_operators_inside_brackets(self) -> None:
        tokens = tokenize("[a+b]*2")
        assert texts(tokens) == ["[a+b]", "*", "2"]

    def test_parentheses_inside_brackets(self) -> None:
        tokens = tokenize("([rate (%)])")
        assert texts(tokens) == ["(", "[rate (%)]", ")"]

    def test_closing_delimiter_ends_value(self) -> None:
        tokens = tokenize("[a][b]")
        assert texts(tokens) == ["[a]", "[b]"]

    def test_nested_distinct_delimiters(self) -> None:
        tokens = tokenize("[[x]]")
        assert texts(tokens) == ["[[x]]"]

    def test_braces_pattern(self) -> None:
        options = ParsingOptions.default().with_variable_pattern(variables.BRACES)
        tokens = tokenize("{x}*[2]", options)
        assert texts(tokens) == ["{x}", "*", "[2]"]

    def test_same_character_delimiters_toggle(self) -> None:
        options = ParsingOptions.default().with_variable_pattern(variables.PIPES)
        tokens = tokenize("|a|+|b (1)|", options)
        assert texts(tokens) == ["|a|", "+", "|b (1)|"]

    def test_unescaped_pattern_has_no_delimiters(self) -> None:
        options = ParsingOptions.default().with_variable_pattern(variables.NONE)
        tokens = tokenize("[a+b]", options)
        assert texts(tokens) == ["[a", "+", "b]"]


class TestTokenizerErrors:
    """Malformed nesting is a structural failure."""

    def test_unclosed_parenthesis(self) -> None:
        with pytest.raises(TokenizeError, match="Unclosed parenthesis"):
            tokenize("(2+3")

    def test_closing_without_opening(self) -> None:
        with pytest.raises(TokenizeError, match="Closing parenthesis"):
            tokenize("2+3)")

    def test_unterminated_variable(self) -> None:
        with pytest.raises(TokenizeError, match="Unterminated variable"):
            tokenize("2+[x")

    def test_closing_variable_without_opening(self) -> None:
        with pytest.raises(TokenizeError, match="without opening"):
            tokenize("2+x]")

    def test_odd_same_character_delimiters(self) -> None:
        options = ParsingOptions.default().with_variable_pattern(variables.PIPES)
        with pytest.raises(TokenizeError, match="Unterminated"):
            tokenize("|||", options)

    def test_tokenize_error_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            tokenize("((1)")

    def test_error_context_marks_position(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize("1+2)")
        context = excinfo.value.context
        assert context is not None
        assert context.start == 3
        assert context.snippet == ")"


class TestDelimiterTable:
    """The delimiter table follows the registered tokenizers."""

    def test_default_table(self) -> None:
        table = delimiter_table(ParsingOptions.default())
        assert table["["] == TokenizerKind.VARIABLE
        assert table["]"] == TokenizerKind.VARIABLE
        assert table["("] == TokenizerKind.PARENTHESIS
        assert table[","] == TokenizerKind.PARENTHESIS
        assert table["^"] == TokenizerKind.OPERATOR

    def test_restricted_operators(self) -> None:
        options = ParsingOptions.default().with_operators(PLUS, MULTIPLY)
        table = delimiter_table(options)
        assert "+" in table
        assert "-" not in table
        assert texts(tokenize("2-1*3", options)) == ["2-1", "*", "3"]

    def test_unregistered_tokenizer_is_ignored(self) -> None:
        options = ParsingOptions.default().with_tokenizers(
            TokenizerKind.PARENTHESIS, TokenizerKind.OPERATOR
        )
        assert texts(tokenize("[a+b]", options)) == ["[a", "+", "b]"]
