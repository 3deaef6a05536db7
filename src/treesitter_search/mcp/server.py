"""FastMCP server exposing treesitter-search tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from treesitter_search.core.index import StructuralIndex
from treesitter_search.models import ErrorContent, JsonContent, TextContent, ToolResult
from treesitter_search.tools.handlers import call_tool
from treesitter_search.tools.usage import UsageSink

INSTRUCTIONS = (
    "Structural code search and navigation backed by tree-sitter. "
    "Call initialize_treesitter_context once per session with the languages you need, "
    "then pass absolute file paths to the other tools; files are parsed on first use."
)


def _unwrap(result: ToolResult) -> Any:
    """Return a tool result's payload, raising ``ToolError`` for failures."""
    part = result.content[0]
    if isinstance(part, ErrorContent):
        raise ToolError(part.error)
    if isinstance(part, JsonContent):
        return part.data
    assert isinstance(part, TextContent)
    return part.text


def create_mcp_server(index: StructuralIndex, sink: UsageSink | None = None) -> FastMCP:
    """Create a FastMCP server wired to the given structural index."""

    mcp = FastMCP("treesitter-search", instructions=INSTRUCTIONS)

    async def _call(name: str, arguments: dict[str, Any]) -> Any:
        return _unwrap(await call_tool(index, name, arguments, sink))

    @mcp.tool()
    async def initialize_treesitter_context(languages: list[str]) -> str:
        """Load tree-sitter grammars for the given languages (e.g. ['python', 'typescript']).

        Call this once at the start of a task, before any other tool.
        """
        return await _call("initialize_treesitter_context", {"languages": languages})

    @mcp.tool()
    async def parse_file(path: str, language: str | None = None, content: str | None = None) -> str:
        """Parse a file (or the given content) and replace its cached syntax tree.

        Use this after a file changed on disk; other tools keep serving the first parse.
        """
        return await _call("parse_file", {"path": path, "language": language, "content": content})

    @mcp.tool()
    async def structural_code_search(path: str, query: str) -> list[dict[str, Any]]:
        """Run a tree-sitter S-expression query against a file and return every capture.

        Example query: (call_expression function: (identifier) @func (#eq? @func "execute"))
        """
        return await _call("structural_code_search", {"path": path, "query": query})

    @mcp.tool()
    async def list_code_elements_by_kind(path: str, node_type: str) -> list[dict[str, Any]]:
        """List every syntax node of one kind in a file (e.g. 'function_declaration'), nested ones included."""
        return await _call("list_code_elements_by_kind", {"path": path, "node_type": node_type})

    @mcp.tool()
    async def get_contextual_code_snippets(path: str, row: int, column: int) -> str:
        """Return the full text of the function or class enclosing a zero-based row and column."""
        return await _call("get_contextual_code_snippets", {"path": path, "row": row, "column": column})

    @mcp.tool()
    async def analyze_code_structure(path: str, language: str) -> dict[str, Any]:
        """Compare token counts of a file's raw text, its full CST and its thin AST."""
        return await _call("analyze_code_structure", {"path": path, "language": language})

    return mcp
