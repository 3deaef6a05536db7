from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from treesitter_search.core.ast import node_text

if TYPE_CHECKING:
    from treesitter_search.core.index import ParsedFile

DEFAULT_BLOCK_KINDS = frozenset(
    {
        "function_declaration",
        "method_definition",
        "class_declaration",
        "arrow_function",
    }
)

_LANGUAGE_BLOCK_KINDS: dict[str, frozenset[str]] = {
    "javascript": frozenset({"function_expression", "generator_function_declaration"}),
    "typescript": frozenset(
        {"function_expression", "generator_function_declaration", "interface_declaration", "abstract_class_declaration"}
    ),
    "tsx": frozenset(
        {"function_expression", "generator_function_declaration", "interface_declaration", "abstract_class_declaration"}
    ),
    "python": frozenset({"function_definition", "class_definition"}),
    "go": frozenset({"method_declaration", "func_literal", "type_declaration"}),
    "java": frozenset(
        {
            "method_declaration",
            "constructor_declaration",
            "interface_declaration",
            "enum_declaration",
            "record_declaration",
        }
    ),
    "rust": frozenset({"function_item", "impl_item", "struct_item", "enum_item", "trait_item", "closure_expression"}),
    "ruby": frozenset({"method", "singleton_method", "class", "module"}),
    "c": frozenset({"function_definition", "struct_specifier"}),
    "cpp": frozenset({"function_definition", "class_specifier", "struct_specifier", "lambda_expression"}),
    "csharp": frozenset(
        {"method_declaration", "constructor_declaration", "interface_declaration", "struct_declaration"}
    ),
}


def block_kinds_for(language: str, overrides: Mapping[str, frozenset[str]] | None = None) -> frozenset[str]:
    if overrides and language in overrides:
        return overrides[language]
    return DEFAULT_BLOCK_KINDS | _LANGUAGE_BLOCK_KINDS.get(language, frozenset())


def snippet_at(parsed: ParsedFile, row: int, column: int, block_kinds: frozenset[str] | None = None) -> str | None:
    """Return the text of the smallest block enclosing ``(row, column)``.

    Falls back to the whole file when no block encloses the point, and
    returns ``None`` when the point lies outside the root node. The root
    starts at the first token, so leading blank lines are outside it.
    """
    root = parsed.tree.root_node
    point = (row, column)
    if point < tuple(root.start_point) or point > tuple(root.end_point):
        return None

    node = root.descendant_for_point_range(point, point)
    if node is None:
        return None

    kinds = block_kinds if block_kinds is not None else block_kinds_for(parsed.language)
    while node.parent is not None and node.type not in kinds:
        node = node.parent

    if node.parent is None and node.type not in kinds:
        return parsed.text
    return node_text(node)
