"""Graphviz visualization helpers for annotated ASTs.

Provides `render_ast_dot(program, arena=None)` which returns a
`graphviz.Digraph` object (not rendered). Optionally `write_and_render`
can write the file to disk.

Layout: one graph node per AST node, edges from parent to child labelled
with the child's role (`loc`, `field`, `stmt[0]`, ...). Identifier nodes show
their resolved symbol when an arena is supplied; identifiers left unresolved
by name analysis are highlighted.
"""

from typing import Any, Iterator, Optional, Tuple
from itertools import count
from graphviz import Digraph
from ast_nodes import ASTNode, IdentifierNode
from symbols import SymbolArena

UNRESOLVED_COLOR = "#ffefef"
RESOLVED_COLOR = "#efffef"


def _edges(node: ASTNode) -> Iterator[Tuple[str, ASTNode]]:
    """Yield (role, child) pairs in field order, skipping empty values."""
    for name, value in vars(node).items():
        if isinstance(value, ASTNode):
            yield name, value
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, ASTNode):
                    yield f"{name}[{i}]", item


def _label(node: ASTNode, arena: Optional[SymbolArena]) -> str:
    kind = node.type.name
    detail: Any = None
    if isinstance(node, IdentifierNode):
        detail = node.name
        if arena is not None and node.symbol is not None:
            detail = f"{node.name} : {arena[node.symbol]}"
    elif hasattr(node, "value"):
        detail = node.value
    elif hasattr(node, "operator"):
        detail = node.operator

    # DOT interprets a literal backslash-n as a line break.
    text = kind if detail is None else f"{kind}\\n{detail}"
    return f"{text}\\n{node.line}:{node.column}"


def render_ast_dot(program: ASTNode, arena: Optional[SymbolArena] = None) -> Digraph:
    """Return a graphviz.Digraph for the tree rooted at `program`.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")
    dot.attr("node", shape="box", fontsize="10")
    ids = count()

    def walk(node: ASTNode) -> str:
        node_id = f"n{next(ids)}"
        attrs = {}
        if isinstance(node, IdentifierNode) and arena is not None:
            attrs["style"] = "filled"
            attrs["fillcolor"] = RESOLVED_COLOR if node.symbol is not None else UNRESOLVED_COLOR
        dot.node(node_id, _label(node, arena), **attrs)
        for role, child in _edges(node):
            child_id = walk(child)
            dot.edge(node_id, child_id, label=role)
        return node_id

    walk(program)
    return dot


def write_and_render(
    program: ASTNode,
    out_path: str,
    arena: Optional[SymbolArena] = None,
    fmt: str = "svg",
) -> None:
    """Write and render the tree to the given path (without extension).

    Example: write_and_render(program, 'out/ast', arena, fmt='png') will create
    out/ast.png (requires Graphviz)."""
    dot = render_ast_dot(program, arena)
    dot.format = fmt
    # Note: render will append extension automatically
    dot.render(out_path, cleanup=True)
