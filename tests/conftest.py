"""Shared pytest fixtures for eqparse tests."""

import pytest

from eqparse.core import variables
from eqparse.core.options import ErrorBehavior, ParsingOptions
from eqparse.core.storage import SimpleStorage


@pytest.fixture
def options() -> ParsingOptions:
    """Default options: bracket variables, captured errors."""
    return ParsingOptions.default()


@pytest.fixture
def plain_options() -> ParsingOptions:
    """Options with unescaped variable names."""
    return ParsingOptions.default().with_variable_pattern(variables.NONE)


@pytest.fixture
def raising_options() -> ParsingOptions:
    """Default options that raise failures at the call site."""
    return ParsingOptions.default().with_error_behavior(ErrorBehavior.RAISE)


@pytest.fixture
def storage() -> SimpleStorage:
    """Storage with a few bound variables."""
    return SimpleStorage({"x": 3, "y": 0.5, "rate (%)": 20})
