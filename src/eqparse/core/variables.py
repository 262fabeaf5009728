"""
Variable patterns: how variable names are delimited in equation text.

    BRACKETS  2*[x]+1     (default)
    BRACES    2*{x}+1
    PIPES     2*|x|+1     (same character opens and closes)
    NONE      2*x+1       (plain identifiers, nothing escaped)

Escaped patterns allow any characters inside the delimiters, including
operators and parentheses ("[rate (%)]").
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VariablePattern(BaseModel):
    """Describes how a variable is written in the equation string."""

    escaped: bool = Field(description="Whether names are wrapped in delimiters")
    opening: str = Field(default="", description="Opening delimiter character")
    closing: str = Field(default="", description="Closing delimiter character")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_delimiters(self) -> VariablePattern:
        if not self.escaped:
            return self
        if len(self.opening) != 1 or len(self.closing) != 1:
            raise ValueError("escaped variable patterns need single-character delimiters")
        return self

    @property
    def same_delimiters(self) -> bool:
        """True when one character both opens and closes a variable."""
        return self.escaped and self.opening == self.closing

    @property
    def delimiters(self) -> frozenset[str]:
        """Characters the variable tokenizer has to watch."""
        if not self.escaped:
            return frozenset()
        return frozenset({self.opening, self.closing})

    def wrap(self, name: str) -> str:
        """Render a variable name the way this pattern expects it."""
        if not self.escaped:
            return name
        return f"{self.opening}{name}{self.closing}"


BRACKETS = VariablePattern(escaped=True, opening="[", closing="]")
BRACES = VariablePattern(escaped=True, opening="{", closing="}")
PIPES = VariablePattern(escaped=True, opening="|", closing="|")
NONE = VariablePattern(escaped=False)

STANDARD_PATTERNS: dict[str, VariablePattern] = {
    "brackets": BRACKETS,
    "braces": BRACES,
    "pipes": PIPES,
    "none": NONE,
}


def get_pattern(name: str) -> VariablePattern:
    """Look up a standard pattern by name (case-insensitive)."""
    try:
        return STANDARD_PATTERNS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(STANDARD_PATTERNS))
        raise ValueError(f"Unknown variable pattern {name!r} (expected one of: {known})") from None
