"""
Parser for the Kaleidoscope expression language.

Overview and approach:
- This parser is a small, hand-written recursive-descent parser that keeps a
    single token of lookahead in `self.current` and pulls tokens from the
    lexer on demand. Nothing is buffered beyond that one token, so it can
    parse an interactive stream construct by construct.

Key points:
- Expression parsing:
    - `parse_primary()` dispatches on the kind of the current token: numbers,
        identifiers (variables or calls) and parenthesized expressions.
    - `parse_binop_rhs()` implements operator-precedence climbing. While the
        current token is a binary operator binding at least as tightly as the
        minimum precedence, it consumes the operator and a primary, lets any
        tighter-binding operators that follow absorb that primary first, and
        then folds the pair into a `BinaryExprNode`. Equal precedences fold
        to the left, so `1 - 2 - 3` is `(1 - 2) - 3`.
    - Precedences come from `self.precedence`, a map from operator character
        to a positive level. Adding a binary operator only needs a new entry.

- Declaration parsing:
    - `def` prototype expression    -> FunctionNode
    - `extern` prototype            -> PrototypeNode
    - expression                    -> FunctionNode named `__anon_expr`
    - A prototype is `name(param param ...)`, parameters separated by
        whitespace only.

Errors:
- Grammar rules raise `ParseError` on the first problem and never backtrack.
    The driver-facing entry points `parse_definition()`, `parse_extern()` and
    `parse_top_level_expr()` catch it and return a `ParseResult`; skipping
    ahead after a failure is left to the caller.
- Every nested expression (parenthesized or call argument) costs a few
    Python stack frames, so nesting is capped at `max_depth` levels and
    deeper input fails with "expression nested too deeply".

Examples:
    - Definition: `def add(a b) a + b`
    - Extern:     `extern sin(x)`
    - Top level:  `add(1, 2) * 3`
"""

from __future__ import annotations
from typing import Callable, Dict, List, Mapping, Optional, TypeVar
from tokens import Token, TokenType
from lexer import Lexer
from ast_nodes import *
from errors import ParseError, ParseResult

T = TypeVar("T")

# Operator precedence table (higher = tighter binding)
DEFAULT_BINOP_PRECEDENCE: Dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
}

# Deepest nesting of parenthesized expressions and call arguments.
MAX_NESTING_DEPTH = 200


class Parser:
    def __init__(
        self,
        lexer: Lexer,
        precedence: Optional[Mapping[str, int]] = None,
        max_depth: int = MAX_NESTING_DEPTH,
    ):
        self.lexer = lexer

        table = DEFAULT_BINOP_PRECEDENCE if precedence is None else precedence
        for op, level in table.items():
            if not isinstance(op, str) or len(op) != 1:
                raise ValueError(f"Binary operator must be a single character: {op!r}")
            if not isinstance(level, int) or isinstance(level, bool):
                raise ValueError(f"Precedence of {op!r} must be an integer: {level!r}")
        self.precedence: Dict[str, int] = dict(table)

        self.max_depth = max_depth
        self.depth = 0

        self.current = Token(TokenType.EOF, None)
        self.advance()

    @classmethod
    def from_text(
        cls,
        text: str,
        precedence: Optional[Mapping[str, int]] = None,
        max_depth: int = MAX_NESTING_DEPTH,
    ) -> Parser:
        return cls(Lexer(text), precedence, max_depth)

    def advance(self) -> Token:
        """Move to next token."""
        self.current = self.lexer.get_next_token()
        return self.current

    def error(self, message: str) -> ParseError:
        return ParseError.at(self.current, message)

    def expect_char(self, char: str, message: str) -> None:
        """Expect and consume the single-character token `char`."""
        if not self.current.is_char(char):
            raise self.error(message)
        self.advance()

    def get_token_precedence(self) -> int:
        """Precedence of the pending binary operator, or -1 if it is not one."""
        if self.current.type != TokenType.CHAR:
            return -1
        precedence = self.precedence.get(self.current.value, 0)
        if precedence <= 0:
            return -1
        return precedence

    # Expressions

    def parse_number_expr(self) -> NumberExprNode:
        """numberexpr ::= number"""
        token = self.current
        if token.value is None:
            raise self.error(f"malformed number '{token.text}'")
        self.advance()
        return NumberExprNode(value=token.value, line=token.line, column=token.column)

    def parse_paren_expr(self) -> ExprNode:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # Consume '('
        expr = self.parse_expression()
        self.expect_char(")", "expected ')'")
        return expr

    def parse_identifier_expr(self) -> ExprNode:
        """identifierexpr ::= identifier | identifier '(' (expression (',' expression)*)? ')'"""
        token = self.current
        self.advance()

        if not self.current.is_char("("):
            return VariableExprNode(name=token.value, line=token.line, column=token.column)

        self.advance()  # Consume '('
        args: List[ExprNode] = []
        if not self.current.is_char(")"):
            while True:
                args.append(self.parse_expression())

                if self.current.is_char(")"):
                    break
                if not self.current.is_char(","):
                    raise self.error("Expected ')' or ',' in argument list")
                self.advance()

        self.advance()  # Consume ')'
        return CallExprNode(
            callee=token.value, args=tuple(args), line=token.line, column=token.column
        )

    def parse_primary(self) -> ExprNode:
        """Parse primary expressions (numbers, identifiers, parenthesized)."""
        match self.current.type:
            case TokenType.IDENTIFIER:
                return self.parse_identifier_expr()
            case TokenType.NUMBER:
                return self.parse_number_expr()
            case TokenType.CHAR if self.current.value == "(":
                return self.parse_paren_expr()
            case _:
                raise self.error("unknown token when expecting an expression")

    def parse_binop_rhs(self, min_precedence: int, left: ExprNode) -> ExprNode:
        """binoprhs ::= (binop primary)*

        Folds operators binding at least as tightly as `min_precedence` into
        `left`.
        """
        while True:
            precedence = self.get_token_precedence()

            # Also stops at any non-operator: ')', ',', ';', EOF, ...
            if precedence < min_precedence:
                return left

            op_token = self.current
            self.advance()

            right = self.parse_primary()

            # A tighter operator after the right operand takes it first.
            if precedence < self.get_token_precedence():
                right = self.parse_binop_rhs(precedence + 1, right)

            left = BinaryExprNode(
                operator=op_token.value,
                left=left,
                right=right,
                line=op_token.line,
                column=op_token.column,
            )

    def parse_expression(self) -> ExprNode:
        """expression ::= primary binoprhs"""
        if self.depth >= self.max_depth:
            raise self.error("expression nested too deeply")
        self.depth += 1
        try:
            left = self.parse_primary()
            return self.parse_binop_rhs(0, left)
        finally:
            self.depth -= 1

    # Declarations

    def parse_prototype(self) -> PrototypeNode:
        """prototype ::= identifier '(' identifier* ')'"""
        name_token = self.current
        if name_token.type != TokenType.IDENTIFIER:
            raise self.error("Expected function name in prototype")
        self.advance()

        if not self.current.is_char("("):
            raise self.error("Expected '(' in prototype")

        # Duplicate parameter names are accepted.
        params: List[str] = []
        while self.advance().type == TokenType.IDENTIFIER:
            params.append(self.current.value)

        self.expect_char(")", "Expected ')' in prototype")
        return PrototypeNode(
            name=name_token.value,
            params=tuple(params),
            line=name_token.line,
            column=name_token.column,
        )

    def _definition(self) -> FunctionNode:
        """definition ::= 'def' prototype expression"""
        def_token = self.current
        if def_token.type != TokenType.DEF:
            raise self.error("Expected 'def'")
        self.advance()
        proto = self.parse_prototype()
        body = self.parse_expression()
        return FunctionNode(
            proto=proto, body=body, line=def_token.line, column=def_token.column
        )

    def _extern(self) -> PrototypeNode:
        """external ::= 'extern' prototype"""
        if self.current.type != TokenType.EXTERN:
            raise self.error("Expected 'extern'")
        self.advance()
        return self.parse_prototype()

    def _top_level_expr(self) -> FunctionNode:
        """toplevelexpr ::= expression"""
        start = self.current
        body = self.parse_expression()
        proto = PrototypeNode(
            name=ANON_FUNCTION_NAME, params=(), line=start.line, column=start.column
        )
        return FunctionNode(proto=proto, body=body, line=start.line, column=start.column)

    def _attempt(self, rule: Callable[[], T]) -> ParseResult[T]:
        try:
            return ParseResult.success(rule())
        except ParseError as e:
            return ParseResult.failure(e)
        except RecursionError:
            # Only reachable when the caller is already deep in the stack.
            return ParseResult.failure(self.error("expression nested too deeply"))

    def parse_definition(self) -> ParseResult[FunctionNode]:
        """Parse `def name(params) body` at the current token."""
        return self._attempt(self._definition)

    def parse_extern(self) -> ParseResult[PrototypeNode]:
        """Parse `extern name(params)` at the current token."""
        return self._attempt(self._extern)

    def parse_top_level_expr(self) -> ParseResult[FunctionNode]:
        """Parse a bare expression, wrapped in an anonymous function."""
        return self._attempt(self._top_level_expr)
