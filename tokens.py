"""Token definitions for the lexer.

This module defines the `TokenType` enum for the token kinds recognized by
the lexer and a small `Token` dataclass that carries the token type together
with its payload (identifier name, numeric value or the character itself)
and the source position it started at. Tokens are produced on demand by the
lexer and consumed by the parser.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    # Special
    EOF = auto()

    # Keywords
    DEF = auto()
    EXTERN = auto()

    # Primary
    IDENTIFIER = auto()
    NUMBER = auto()

    # Any other single character: operators, parentheses, commas, `;`, ...
    CHAR = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Optional[str | float] = None
    line: int = 0
    column: int = 0
    text: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type}, {repr(self.value)})"

    @property
    def lexeme(self) -> str:
        if self.text:
            return self.text
        if self.value is None:
            return str(self.type)
        return str(self.value)

    def is_char(self, char: str) -> bool:
        """True if this is the single-character token `char`."""
        return self.type == TokenType.CHAR and self.value == char
