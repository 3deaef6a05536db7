"""Tests for the MCP server tool definitions."""

from __future__ import annotations

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from treesitter_search.core.index import StructuralIndex
from treesitter_search.mcp.server import create_mcp_server
from treesitter_search.tools.handlers import TOOL_HANDLERS

FUNCTION_SOURCE = "function f() {\n  return 1;\n}"


class TestMcpServerCreation:
    def test_creates_server(self, index: StructuralIndex) -> None:
        server = create_mcp_server(index)
        assert server is not None
        assert server.name == "treesitter-search"

    @pytest.mark.asyncio
    async def test_server_has_a_tool_per_operation(self, index: StructuralIndex) -> None:
        server = create_mcp_server(index)

        async with Client(server) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == set(TOOL_HANDLERS)


class TestMcpToolCalls:
    @pytest.mark.asyncio
    async def test_snippet_tool_returns_text(self, index: StructuralIndex) -> None:
        await index.resolve("/virtual/f.js", content=FUNCTION_SOURCE)
        server = create_mcp_server(index)

        async with Client(server) as client:
            result = await client.call_tool(
                "get_contextual_code_snippets", {"path": "/virtual/f.js", "row": 1, "column": 4}
            )

        assert result.content[0].text == FUNCTION_SOURCE

    @pytest.mark.asyncio
    async def test_search_tool_returns_captures(self, index: StructuralIndex) -> None:
        await index.resolve("/virtual/f.js", content="function a(){} function b(){}")
        server = create_mcp_server(index)

        async with Client(server) as client:
            result = await client.call_tool(
                "structural_code_search",
                {"path": "/virtual/f.js", "query": "(function_declaration name: (identifier) @name)"},
            )

        captures = json.loads(result.content[0].text)
        assert [capture["text"] for capture in captures] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failures_surface_as_tool_errors(self, index: StructuralIndex) -> None:
        server = create_mcp_server(index)

        async with Client(server) as client:
            with pytest.raises(ToolError, match="Unsupported file extension"):
                await client.call_tool("list_code_elements_by_kind", {"path": "/virtual/a.txt", "node_type": "x"})
