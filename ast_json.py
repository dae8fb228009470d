"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node. It encodes the node type
and its fields; source positions are included so tools can point back into
the input.
"""

import math
from typing import Any, Dict, Optional
from ast_nodes import *


def _position(node: ASTNode) -> Dict[str, int]:
    return {"line": node.line, "column": node.column}


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    t = node.type
    if t == NodeType.NUMBER and isinstance(node, NumberExprNode):
        # JSON has no infinity; very long numerals overflow to inf.
        value = node.value if math.isfinite(node.value) else str(node.value)
        return {"node_type": "Number", "value": value, **_position(node)}
    if t == NodeType.VARIABLE and isinstance(node, VariableExprNode):
        return {"node_type": "Variable", "name": node.name, **_position(node)}
    if t == NodeType.BINARY_OP and isinstance(node, BinaryExprNode):
        return {
            "node_type": "BinaryOp",
            "operator": node.operator,
            "left": ast_to_json(node.left),
            "right": ast_to_json(node.right),
            **_position(node),
        }
    if t == NodeType.CALL and isinstance(node, CallExprNode):
        return {
            "node_type": "Call",
            "callee": node.callee,
            "args": [ast_to_json(a) for a in node.args],
            **_position(node),
        }
    if t == NodeType.PROTOTYPE and isinstance(node, PrototypeNode):
        return {
            "node_type": "Prototype",
            "name": node.name,
            "params": list(node.params),
            **_position(node),
        }
    if t == NodeType.FUNCTION and isinstance(node, FunctionNode):
        return {
            "node_type": "Function",
            "proto": ast_to_json(node.proto),
            "body": ast_to_json(node.body),
            **_position(node),
        }

    raise TypeError(f"Cannot convert {type(node).__name__} to JSON")
