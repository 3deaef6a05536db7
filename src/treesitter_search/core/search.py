from __future__ import annotations

from typing import TYPE_CHECKING

from tree_sitter import Node, Query, QueryCursor, QueryError

from treesitter_search.core.ast import end_position, node_name, node_text, start_position, walk
from treesitter_search.errors import InvalidQueryError
from treesitter_search.models import Capture, CodeElement

if TYPE_CHECKING:
    from treesitter_search.core.index import ParsedFile

ANONYMOUS = "(anonymous)"


def compile_query(parsed: ParsedFile, query_text: str) -> Query:
    try:
        return Query(parsed.grammar, query_text)
    except QueryError as exc:
        raise InvalidQueryError(query_text, str(exc)) from exc


def search(parsed: ParsedFile, query_text: str) -> list[Capture]:
    """Run an S-expression query and return every capture in document order.

    Captures belonging to the same match are reported separately. Captures
    that start at the same byte keep the order the matcher produced them in.
    """
    query = compile_query(parsed, query_text)
    cursor = QueryCursor(query)

    captured: list[tuple[str, Node]] = []
    for _, matched_captures in cursor.matches(parsed.tree.root_node):
        for capture_name, nodes in matched_captures.items():
            captured.extend((capture_name, node) for node in nodes)
    captured.sort(key=lambda item: item[1].start_byte)

    return [
        Capture(
            name=capture_name,
            text=node_text(node),
            start=start_position(node),
            end=end_position(node),
        )
        for capture_name, node in captured
    ]


def list_elements(parsed: ParsedFile, kind: str) -> list[CodeElement]:
    """List every node of ``kind`` anywhere in the tree, nested ones included.

    An unknown kind is not an error; it simply matches nothing.
    """
    return [
        CodeElement(
            name=node_name(node) or ANONYMOUS,
            type=node.type,
            text=node_text(node),
            start=start_position(node),
            end=end_position(node),
        )
        for node in walk(parsed.tree.root_node)
        if node.type == kind
    ]
