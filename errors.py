"""Parse errors and parse results.

`ParseError` is raised by the grammar rules in `parser.py` as soon as a rule
cannot continue. The driver-facing entry points of the parser catch it and
hand back a `ParseResult` instead, so a top-level construct either carries a
complete node or the error that stopped it, never both.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from tokens import Token

T = TypeVar("T")


class ParseError(SyntaxError):
    """Syntax error with the source position of the offending token."""

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        token: Optional[Token] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.token = token

    @classmethod
    def at(cls, token: Token, message: str) -> ParseError:
        return cls(message, token.line, token.column, token)

    def __str__(self) -> str:
        if self.line:
            return f"line {self.line}, column {self.column}: {self.message}"
        return self.message


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    node: Optional[T] = None
    error: Optional[ParseError] = None

    def __post_init__(self) -> None:
        if (self.node is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of node or error")

    @classmethod
    def success(cls, node: T) -> ParseResult[T]:
        return cls(node=node)

    @classmethod
    def failure(cls, error: ParseError) -> ParseResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the parsed node, or raise the error that stopped the parse."""
        if self.error is not None:
            raise self.error
        return self.node
