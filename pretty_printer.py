"""Pretty-printer for the AST.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line string, and `PrettyPrinter.print_surface(node)`
which renders it back as one line of source with every binary expression
parenthesized, making the parsed grouping visible:

    PrettyPrinter.print_surface(<tree for `1 + 2 * 3`>)  ->  "(1 + (2 * 3))"

The printer is intended for debugging, tests and the command-line driver.
"""

from __future__ import annotations
from ast_nodes import *


def format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


class PrettyPrinter:
    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        match node:
            case NumberExprNode(value=v):
                lines.append(f"{indent_str}{prefix}Number({format_number(v)})")

            case VariableExprNode(name=n):
                lines.append(f"{indent_str}{prefix}Variable({n})")

            case BinaryExprNode(operator=op, left=left, right=right):
                lines.append(f"{indent_str}{prefix}BinaryOp({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case CallExprNode(callee=callee, args=args):
                lines.append(f"{indent_str}{prefix}Call({callee})")
                for i, arg in enumerate(args):
                    lines.append(PrettyPrinter.print_ast(arg, indent + 4, f"arg[{i}]: "))

            case PrototypeNode(name=name, params=params):
                lines.append(f"{indent_str}{prefix}Prototype({name}, params=[{', '.join(params)}])")

            case FunctionNode(proto=proto, body=body):
                lines.append(f"{indent_str}{prefix}Function({proto.name})")
                lines.append(PrettyPrinter.print_ast(proto, indent + 2, "proto: "))
                lines.append(PrettyPrinter.print_ast(body, indent + 2, "body: "))

            case _:
                raise TypeError(f"Cannot print {type(node).__name__}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a compact, source-like one-line representation of an AST node."""
        if node is None:
            return ""

        _p = PrettyPrinter.print_surface

        match node:
            case NumberExprNode(value=v):
                return format_number(v)
            case VariableExprNode(name=n):
                return n
            case BinaryExprNode(operator=op, left=l, right=r):
                return f"({_p(l)} {op} {_p(r)})"
            case CallExprNode(callee=callee, args=args):
                return f"{callee}({', '.join(_p(a) for a in args)})"
            case PrototypeNode(name=name, params=params):
                return f"{name}({' '.join(params)})"
            case FunctionNode(proto=proto, body=body):
                if proto.is_anonymous:
                    return _p(body)
                return f"def {_p(proto)} {_p(body)}"
            case _:
                raise TypeError(f"Cannot print {type(node).__name__}")
