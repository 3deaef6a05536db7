from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from tree_sitter import Node

from treesitter_search.core.tokens import Encoding, compact_json, count_text_tokens
from treesitter_search.models import Analysis, CstNode, Position, ThinAstNode

COMMENT_KINDS = frozenset({"comment", "line_comment", "block_comment"})

T = TypeVar("T")


def node_text(node: Node) -> str:
    text = node.text
    return text.decode("utf-8", errors="replace") if text is not None else ""


def start_position(node: Node) -> Position:
    return Position(row=node.start_point[0], column=node.start_point[1])


def end_position(node: Node) -> Position:
    return Position(row=node.end_point[0], column=node.end_point[1])


def node_name(node: Node) -> str | None:
    name_node = node.child_by_field_name("name")
    return node_text(name_node) if name_node is not None else None


def walk(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all of its descendants in pre-order (document order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def serialize_cst(root: Node) -> CstNode:
    """Serialize every node under ``root``, comments and punctuation included."""
    return _build_bottom_up(root, _cst_node)  # type: ignore[return-value]


def _cst_node(node: Node, children: list[CstNode]) -> CstNode:
    return CstNode(
        type=node.type,
        text=node_text(node),
        start=start_position(node),
        end=end_position(node),
        children=children,
    )


def reduce_thin_ast(root: Node) -> ThinAstNode | None:
    """Reduce a CST to its thin-AST form.

    Comments and unnamed nodes are dropped together with their subtrees.
    """
    return _build_bottom_up(root, _thin_ast_node, keep=_is_thin_ast_node)


def _is_thin_ast_node(node: Node) -> bool:
    return node.is_named and node.type not in COMMENT_KINDS


def _thin_ast_node(node: Node, children: list[ThinAstNode]) -> ThinAstNode:
    return ThinAstNode(
        type=node.type,
        name=node_name(node),
        start=start_position(node),
        end=end_position(node),
        children=children or None,
    )


def _build_bottom_up(
    root: Node,
    build: Callable[[Node, list[T]], T],
    keep: Callable[[Node], bool] | None = None,
) -> T | None:
    """Build one model per kept node, children before their parent.

    Uses an explicit stack so deeply nested sources do not exhaust the
    interpreter's recursion limit.
    """
    if keep is not None and not keep(root):
        return None

    built: list[T] = []
    # (node, index of its first built child in ``built``, expanded)
    stack: list[tuple[Node, int, bool]] = [(root, 0, False)]
    while stack:
        node, first_child, expanded = stack.pop()
        if expanded:
            children = built[first_child:]
            del built[first_child:]
            built.append(build(node, children))
            continue
        stack.append((node, len(built), True))
        for child in reversed(node.children):
            if keep is None or keep(child):
                stack.append((child, 0, False))
    return built[0]


def tree_to_data(model: CstNode | ThinAstNode | None) -> dict[str, Any] | None:
    """Dump a CST or thin-AST model tree to plain data, omitting ``None`` fields."""
    if model is None:
        return None
    root = model.model_dump(exclude={"children"}, exclude_none=True)
    stack = [(model, root)]
    while stack:
        node, data = stack.pop()
        if node.children is None:
            continue
        data["children"] = []
        for child in node.children:
            child_data = child.model_dump(exclude={"children"}, exclude_none=True)
            data["children"].append(child_data)
            stack.append((child, child_data))
    return root


def analysis_to_data(analysis: Analysis) -> dict[str, Any]:
    data = analysis.model_dump(exclude={"cst", "ast"})
    data["cst"] = tree_to_data(analysis.cst)
    if analysis.ast is not None:
        data["ast"] = tree_to_data(analysis.ast)
    return data


def to_compact_json(model: CstNode | ThinAstNode | None) -> str:
    return compact_json(tree_to_data(model))


def analyze_tree(root: Node, raw_source: str, encoding: Encoding | None = None) -> Analysis:
    """Compare token counts of the raw source, the full CST and the thin AST."""
    cst = serialize_cst(root)
    ast = reduce_thin_ast(root)
    return Analysis(
        original_token_count=count_text_tokens(raw_source, encoding),
        cst_token_count=count_text_tokens(to_compact_json(cst), encoding),
        ast_token_count=count_text_tokens(to_compact_json(ast), encoding),
        cst=cst,
        ast=ast,
    )
