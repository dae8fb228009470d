"""AST node definitions for the Kaleidoscope expression language.

This module defines the AST node dataclasses built by the parser. Each node
is a frozen dataclass carrying the information of one grammar construct (a
literal, a variable reference, an operator with its operands, a call, a
prototype or a function definition). The `NodeType` enum identifies node
kinds and is used by the printers and exporters.

Conventions:
- All AST node dataclasses inherit from `ASTNode` which records the node
    kind (`NodeType`) and the `line`/`column` of the token the node starts at.
    Positions are excluded from equality, so two trees with the same shape
    compare equal wherever they came from in the source.
- Nodes are immutable and own their children exclusively; sequences of
    children are stored as tuples.
- All values in the language are doubles, so neither parameters nor
    expressions carry a type.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Tuple, Union


# Name given to the zero-argument function wrapping a top-level expression.
ANON_FUNCTION_NAME = "__anon_expr"


class NodeType(Enum):
    NUMBER = auto()
    VARIABLE = auto()
    BINARY_OP = auto()
    CALL = auto()
    PROTOTYPE = auto()
    FUNCTION = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass(frozen=True)
class ASTNode:
    type: NodeType
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


# Expression Nodes
@dataclass(frozen=True)
class NumberExprNode(ASTNode):
    type: NodeType = NodeType.NUMBER
    value: float = 0.0


@dataclass(frozen=True)
class VariableExprNode(ASTNode):
    type: NodeType = NodeType.VARIABLE
    name: str = ""


@dataclass(frozen=True)
class BinaryExprNode(ASTNode):
    type: NodeType = NodeType.BINARY_OP
    operator: str = ""
    left: ExprNode = field(default_factory=lambda: NumberExprNode())
    right: ExprNode = field(default_factory=lambda: NumberExprNode())


@dataclass(frozen=True)
class CallExprNode(ASTNode):
    type: NodeType = NodeType.CALL
    callee: str = ""
    args: Tuple[ExprNode, ...] = ()


ExprNode = Union[NumberExprNode, VariableExprNode, BinaryExprNode, CallExprNode]


# Declaration Nodes
@dataclass(frozen=True)
class PrototypeNode(ASTNode):
    """A function name and its ordered parameter names."""

    type: NodeType = NodeType.PROTOTYPE
    name: str = ""
    params: Tuple[str, ...] = ()

    @property
    def is_anonymous(self) -> bool:
        return self.name == ANON_FUNCTION_NAME


@dataclass(frozen=True)
class FunctionNode(ASTNode):
    """A prototype bound to its body expression."""

    type: NodeType = NodeType.FUNCTION
    proto: PrototypeNode = field(default_factory=lambda: PrototypeNode())
    body: ExprNode = field(default_factory=lambda: NumberExprNode())
