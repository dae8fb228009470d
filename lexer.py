"""
Lexer for the Kaleidoscope expression language.

Overview:
- This module implements a small hand-written scanner that turns a stream of
    characters into `Token` objects defined in `tokens.py`, one token per call
    to `get_next_token()`.
- It recognizes the keywords `def` and `extern`, identifiers, numeric
    literals and passes every other character through as a single-character
    token. Whitespace and `#` comments (to end of line) are skipped.

Examples:
    Input:  "def add(a b) a + b  # sum"
    Tokens: [DEF, IDENTIFIER('add'), CHAR('('), IDENTIFIER('a'), ...]

Implementation notes:
- The source may be a string or any readable text stream such as
    `sys.stdin`. Characters are pulled one at a time and exactly one character
    of read-ahead is kept in `self.current_char`, so the lexer can sit on an
    interactive stream without reading past the token it is producing.
- Numerals are accumulated from digits and dots without validation. A run
    that `float()` rejects (for example `1.2.3`) still becomes a NUMBER token,
    with a `None` value, and the parser reports it.
- The lexer never raises: any unknown character is a valid CHAR token.
"""

from __future__ import annotations
import io
from typing import Iterator, List, Optional, TextIO, Union
from tokens import Token, TokenType


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_numeral_char(char: str) -> bool:
    return (char.isascii() and char.isdigit()) or char == "."


class Lexer:
    def __init__(self, source: Union[str, TextIO]):
        self.stream: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self.line = 1
        self.column = 0
        self.current_char: Optional[str] = None

        self.keywords = {
            "def": TokenType.DEF,
            "extern": TokenType.EXTERN,
        }

        self.advance()

    def advance(self) -> None:
        """Advance to next character."""
        # Newlines reset the column and increment the line number; the
        # counters always describe `self.current_char`.
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        char = self.stream.read(1)
        self.current_char = char if char else None

    def skip_whitespace(self) -> None:
        """Skip whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self) -> None:
        """Skip a `#` comment up to (not including) the end of the line."""
        while self.current_char is not None and self.current_char not in "\n\r":
            self.advance()

    def number(self) -> str:
        """Accumulate a run of digits and dots."""
        result = []
        while self.current_char is not None and _is_numeral_char(self.current_char):
            result.append(self.current_char)
            self.advance()
        return "".join(result)

    def identifier(self) -> str:
        """Accumulate an identifier: a letter followed by letters or digits."""
        result = [self.current_char]
        self.advance()

        while self.current_char is not None and _is_alnum(self.current_char):
            result.append(self.current_char)
            self.advance()

        return "".join(result)

    def get_next_token(self) -> Token:
        """Lexical analyzer that returns tokens one at a time."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            # Comments never produce a token; scanning resumes on the next line.
            if self.current_char == "#":
                self.skip_comment()
                continue

            line, column = self.line, self.column

            # Identifiers and keywords
            if _is_alpha(self.current_char):
                ident = self.identifier()
                token_type = self.keywords.get(ident, TokenType.IDENTIFIER)
                return Token(token_type, ident, line, column, ident)

            # Numbers: [0-9.]+
            if _is_numeral_char(self.current_char):
                numeral = self.number()
                try:
                    value: Optional[float] = float(numeral)
                except ValueError:
                    value = None
                return Token(TokenType.NUMBER, value, line, column, numeral)

            char = self.current_char
            self.advance()
            return Token(TokenType.CHAR, char, line, column, char)

        return Token(TokenType.EOF, None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input, ending with EOF."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
