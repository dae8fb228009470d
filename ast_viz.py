"""Graphviz visualization helpers for ASTs.

Provides `render_ast_dot(nodes)` which returns a `graphviz.Digraph` object
(not rendered) with one graph node per AST node and an edge from every node
to each of its children, labelled with the child's role (`left`, `arg[0]`,
`body`, ...). `write_and_render` writes the rendered file to disk.

Several top-level constructs may be drawn into one graph; each gets its own
cluster labelled with the function name.
"""

from typing import Iterable, List, Optional, Tuple, Union
from graphviz import Digraph
from ast_nodes import *
from pretty_printer import format_number


def _node_label(node: ASTNode) -> str:
    match node:
        case NumberExprNode(value=v):
            return f"Number\\n{format_number(v)}"
        case VariableExprNode(name=n):
            return f"Variable\\n{n}"
        case BinaryExprNode(operator=op):
            return f"BinaryOp\\n{op}"
        case CallExprNode(callee=callee):
            return f"Call\\n{callee}"
        case PrototypeNode(name=name, params=params):
            return f"Prototype\\n{name}({' '.join(params)})"
        case FunctionNode(proto=proto):
            return f"Function\\n{proto.name}"
        case _:
            return type(node).__name__


def _children(node: ASTNode) -> List[Tuple[str, ASTNode]]:
    match node:
        case BinaryExprNode(left=left, right=right):
            return [("left", left), ("right", right)]
        case CallExprNode(args=args):
            return [(f"arg[{i}]", a) for i, a in enumerate(args)]
        case FunctionNode(proto=proto, body=body):
            return [("proto", proto), ("body", body)]
        case _:
            return []


def render_ast_dot(
    nodes: Union[ASTNode, Iterable[ASTNode]], fmt: str = "svg"
) -> Digraph:
    """Return a graphviz.Digraph for one AST or a sequence of them.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    roots = [nodes] if isinstance(nodes, ASTNode) else list(nodes)

    dot = Digraph(format=fmt)
    dot.attr("graph", rankdir="TB")
    dot.attr("node", shape="box", fontname="Helvetica", fontsize="10")

    counter = 0

    def _add(graph: Digraph, node: ASTNode) -> str:
        nonlocal counter
        node_id = f"n{counter}"
        counter += 1
        graph.node(node_id, label=_node_label(node))
        for role, child in _children(node):
            child_id = _add(graph, child)
            graph.edge(node_id, child_id, label=role)
        return node_id

    for i, root in enumerate(roots):
        # Subgraph names must start with `cluster` for Graphviz to box them.
        with dot.subgraph(name=f"cluster_{i}") as c:
            if isinstance(root, FunctionNode):
                title = root.proto.name
            elif isinstance(root, PrototypeNode):
                title = f"extern {root.name}"
            else:
                title = str(root.type)
            c.attr(label=title, style="rounded", color="gray")
            _add(c, root)

    return dot


def write_and_render(
    nodes: Union[ASTNode, Iterable[ASTNode]],
    out_path: str,
    fmt: str = "svg",
) -> Optional[str]:
    """Write and render the AST to the given path (without extension).

    Example: write_and_render(ast, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz). Returns the path of the rendered file."""
    dot = render_ast_dot(nodes, fmt=fmt)
    # Note: render will append extension automatically
    return dot.render(out_path, cleanup=True)
