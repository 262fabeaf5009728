"""Tests for parsing options, catalogs, storage and results."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from eqparse.core import variables
from eqparse.core.catalog import (
    MINUS,
    PLUS,
    POWER,
    STANDARD_FUNCTIONS,
    Associativity,
    MathFunction,
    Operator,
    select_functions,
    select_operators,
)
from eqparse.core.equation_lang.parser import parse, parse_equation
from eqparse.core.errors import NumericError, ParseError
from eqparse.core.numeric import subtract
from eqparse.core.options import (
    DEFAULT_OPTIONS,
    ErrorBehavior,
    ParserKind,
    ParsingOptions,
    TokenizerKind,
    load_parsing_options,
)
from eqparse.core.result import Result, run_with_behavior
from eqparse.core.storage import SimpleStorage


class TestParsingOptions:
    """Options are immutable and validated on construction."""

    def test_default_is_shared(self) -> None:
        assert ParsingOptions.default() is DEFAULT_OPTIONS
        assert DEFAULT_OPTIONS.variable_pattern == variables.BRACKETS
        assert DEFAULT_OPTIONS.error_behavior == ErrorBehavior.RESULT
        assert DEFAULT_OPTIONS.max_depth == 200

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_OPTIONS.max_depth = 5  # type: ignore[misc]

    def test_factories_return_new_objects(self) -> None:
        changed = DEFAULT_OPTIONS.with_error_behavior(ErrorBehavior.RAISE)
        assert changed is not DEFAULT_OPTIONS
        assert changed.raises
        assert not DEFAULT_OPTIONS.raises
        assert changed.operators == DEFAULT_OPTIONS.operators

    def test_duplicate_operator_symbols(self) -> None:
        with pytest.raises(ValidationError, match="unique"):
            DEFAULT_OPTIONS.with_operators(PLUS, PLUS)

    def test_delimiter_clashes_with_operator(self) -> None:
        slashes = variables.VariablePattern(escaped=True, opening="/", closing="/")
        with pytest.raises(ValidationError, match="clash"):
            DEFAULT_OPTIONS.with_variable_pattern(slashes)

    def test_delimiter_clashes_with_parenthesis(self) -> None:
        parens = variables.VariablePattern(escaped=True, opening="(", closing=")")
        with pytest.raises(ValidationError, match="clash"):
            DEFAULT_OPTIONS.with_variable_pattern(parens)

    def test_duplicate_parsers(self) -> None:
        with pytest.raises(ValidationError, match="parsers"):
            DEFAULT_OPTIONS.with_parsers(ParserKind.CONSTANT, ParserKind.CONSTANT)

    def test_duplicate_tokenizers(self) -> None:
        with pytest.raises(ValidationError, match="tokenizers"):
            DEFAULT_OPTIONS.with_tokenizers(TokenizerKind.OPERATOR, TokenizerKind.OPERATOR)

    def test_max_depth_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ParsingOptions(max_depth=0)

    def test_additional_function(self) -> None:
        double = MathFunction(name="double", implementation=lambda v: v * 2)
        options = DEFAULT_OPTIONS.with_additional_functions(double)
        assert parse_equation("double([x])+1", options).evaluate({"x": 4}).get() == 9
        assert not parse("double(1)").is_success

    def test_custom_operator(self) -> None:
        tilde = Operator(symbol="~", precedence=10, binary=subtract)
        options = DEFAULT_OPTIONS.with_operators(PLUS, MINUS, POWER, tilde)
        assert parse_equation("7~2^2", options).evaluate({}).get() == 3

    def test_right_associative_custom_operator(self) -> None:
        arrow = Operator(
            symbol="~", precedence=10, associativity=Associativity.RIGHT, binary=subtract
        )
        options = DEFAULT_OPTIONS.with_operators(arrow)
        assert parse_equation("8~4~2", options).evaluate({}).get() == 6


class TestCatalog:
    """Operator and function catalog entries."""

    @pytest.mark.parametrize("symbol", ["", "ab", "a", "1", " ", "(", ","])
    def test_invalid_operator_symbol(self, symbol: str) -> None:
        with pytest.raises(ValidationError):
            Operator(symbol=symbol, precedence=1, binary=subtract)

    def test_arity(self) -> None:
        by_name = {fn.name: fn for fn in STANDARD_FUNCTIONS}
        assert by_name["sqrt"].accepts(1)
        assert not by_name["sqrt"].accepts(2)
        assert by_name["log"].arity_text == "1-2"
        assert by_name["max"].arity_text == "at least 1"
        assert by_name["max"].accepts(10)
        assert not by_name["max"].accepts(0)

    def test_select_operators_keeps_order(self) -> None:
        assert [op.symbol for op in select_operators(["^", "+"])] == ["+", "^"]

    def test_select_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown operators"):
            select_operators(["&"])
        with pytest.raises(ValueError, match="Unknown functions"):
            select_functions(["gamma"])


class TestVariablePatterns:
    """Variable pattern lookup and validation."""

    def test_get_pattern_case_insensitive(self) -> None:
        assert variables.get_pattern("Braces") == variables.BRACES

    def test_unknown_pattern(self) -> None:
        with pytest.raises(ValueError, match="Unknown variable pattern"):
            variables.get_pattern("angle")

    def test_escaped_needs_delimiters(self) -> None:
        with pytest.raises(ValidationError):
            variables.VariablePattern(escaped=True, opening="<<", closing=">")

    def test_wrap(self) -> None:
        assert variables.PIPES.wrap("x") == "|x|"
        assert variables.NONE.wrap("x") == "x"
        assert variables.PIPES.same_delimiters
        assert not variables.BRACKETS.same_delimiters


class TestLoadParsingOptions:
    """Options loaded from the [equation] table of a TOML file."""

    def test_missing_file_returns_base(self, tmp_path: Path) -> None:
        assert load_parsing_options(tmp_path / "missing.toml") is DEFAULT_OPTIONS

    def test_missing_table_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "eqparse.toml"
        path.write_text('[other]\nname = "x"\n')
        assert load_parsing_options(path) == DEFAULT_OPTIONS

    def test_full_table(self, tmp_path: Path) -> None:
        path = tmp_path / "eqparse.toml"
        path.write_text(
            """
[equation]
variable_pattern = "none"
error_behavior = "raise"
operators = ["+", "*"]
functions = ["sqrt"]
max_depth = 10
"""
        )
        options = load_parsing_options(path)
        assert options.variable_pattern == variables.NONE
        assert options.raises
        assert [op.symbol for op in options.operators] == ["+", "*"]
        assert [fn.name for fn in options.functions] == ["sqrt"]
        assert options.max_depth == 10
        assert parse_equation("sqrt(x)*2+1", options).evaluate({"x": 16}).get() == 9.0

    def test_unknown_pattern_in_file(self, tmp_path: Path) -> None:
        path = tmp_path / "eqparse.toml"
        path.write_text('[equation]\nvariable_pattern = "angle"\n')
        with pytest.raises(ValueError):
            load_parsing_options(path)

    def test_unknown_error_behavior_in_file(self, tmp_path: Path) -> None:
        path = tmp_path / "eqparse.toml"
        path.write_text('[equation]\nerror_behavior = "ignore"\n')
        with pytest.raises(ValueError):
            load_parsing_options(path)


class TestSimpleStorage:
    """Mutable variable storage."""

    def test_put_and_get(self) -> None:
        storage = SimpleStorage()
        storage.put_value("x", 2)
        assert storage.get("x") == 2
        assert "x" in storage
        assert len(storage) == 1

    def test_missing_is_none(self) -> None:
        assert SimpleStorage().get("x") is None

    def test_overwrite_remove_clear(self) -> None:
        storage = SimpleStorage({"x": 1, "y": 2})
        storage.put_value("x", 5)
        assert storage.get("x") == 5
        storage.remove("y")
        storage.remove("never-there")
        assert list(storage) == ["x"]
        storage.clear()
        assert len(storage) == 0

    def test_initial_values_are_copied(self) -> None:
        values = {"x": 1}
        storage = SimpleStorage(values)
        values["x"] = 2
        assert storage.get("x") == 1


class TestResult:
    """Result wrapper and the error-behavior policy."""

    def test_success(self) -> None:
        result = Result.success(3)
        assert result.is_success
        assert result.get() == 3
        assert result.or_else(0) == 3
        assert result.as_float() == 3.0
        assert repr(result) == "Result.success(3)"

    def test_failure(self) -> None:
        error = NumericError("Division by zero in '/'")
        result: Result[int] = Result.failure(error)
        assert not result.is_success
        assert result.or_else(0) == 0
        with pytest.raises(NumericError):
            result.get()
        assert "Division by zero" in repr(result)

    def test_run_with_behavior_captures(self) -> None:
        def fail() -> int:
            raise ParseError("bad")

        result = run_with_behavior(fail, ErrorBehavior.RESULT, "test")
        assert isinstance(result.error, ParseError)

    def test_run_with_behavior_raises(self) -> None:
        def fail() -> int:
            raise ParseError("bad")

        with pytest.raises(ParseError, match="bad"):
            run_with_behavior(fail, ErrorBehavior.RAISE, "test")

    def test_non_equation_errors_propagate(self) -> None:
        def fail() -> int:
            raise KeyError("x")

        with pytest.raises(KeyError):
            run_with_behavior(fail, ErrorBehavior.RESULT, "test")
