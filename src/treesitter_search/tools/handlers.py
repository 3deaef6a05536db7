"""Named operations exposed to agents.

Each handler validates its arguments before touching the index, then
delegates to ``StructuralIndex``. ``call_tool`` is the request boundary: it
turns every failure into an error result and reports a usage event.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from treesitter_search.config import get_settings
from treesitter_search.core.ast import analysis_to_data
from treesitter_search.core.index import StructuralIndex
from treesitter_search.core.tokens import count_tokens
from treesitter_search.errors import ArgumentError, TreeSitterSearchError
from treesitter_search.models import ToolResult
from treesitter_search.tools.usage import LoggingUsageSink, UsageEvent, UsageSink

logger = logging.getLogger(__name__)

SNIPPET_NOT_FOUND = "Could not find a contextual snippet for the given position."

ToolHandler = Callable[[StructuralIndex, Mapping[str, Any]], Awaitable[ToolResult]]


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


def _require_str(arguments: Mapping[str, Any], *names: str) -> list[str]:
    values = [arguments.get(name) for name in names]
    if any(not isinstance(value, str) or not value for value in values):
        quoted = ", ".join(f"'{name}'" for name in names)
        noun = "parameter is" if len(names) == 1 else "parameters are"
        raise ArgumentError(f"The {quoted} {noun} required.")
    return [str(value) for value in values]


def _require_position(arguments: Mapping[str, Any]) -> tuple[int, int]:
    row, column = arguments.get("row"), arguments.get("column")
    for name, value in (("row", row), ("column", column)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ArgumentError(f"The '{name}' parameter is required and must be an integer.")
        if value < 0:
            raise ArgumentError(f"The '{name}' parameter must be zero or greater.")
    return row, column  # type: ignore[return-value]


def _optional_str(arguments: Mapping[str, Any], name: str) -> str | None:
    value = arguments.get(name)
    if value is not None and not isinstance(value, str):
        raise ArgumentError(f"The '{name}' parameter must be a string.")
    return value


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def initialize_context(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    languages = arguments.get("languages")
    if not isinstance(languages, list) or not all(isinstance(lang, str) and lang for lang in languages):
        raise ArgumentError("The 'languages' parameter must be an array of strings.")

    await asyncio.gather(*(index.registry.load(lang) for lang in languages))
    return ToolResult.text(
        f"Successfully initialized Tree-sitter context and loaded grammars for: {', '.join(languages)}."
    )


async def parse_file(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    (path,) = _require_str(arguments, "path")
    language = _optional_str(arguments, "language")
    content = _optional_str(arguments, "content")

    parsed = await index.parse(path, language, content)
    return ToolResult.text(f"Successfully parsed and indexed file: {parsed.file_id} (language: {parsed.language})")


async def structural_search(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    path, query = _require_str(arguments, "path", "query")
    captures = await index.search(path, query)
    return ToolResult.structured([capture.model_dump() for capture in captures])


async def list_elements(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    path, node_type = _require_str(arguments, "path", "node_type")
    elements = await index.list_elements(path, node_type)
    return ToolResult.structured([element.model_dump() for element in elements])


async def contextual_snippet(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    (path,) = _require_str(arguments, "path")
    row, column = _require_position(arguments)
    snippet = await index.snippet_at(path, row, column)
    return ToolResult.text(snippet if snippet is not None else SNIPPET_NOT_FOUND)


async def analyze_structure(index: StructuralIndex, arguments: Mapping[str, Any]) -> ToolResult:
    path, language = _require_str(arguments, "path", "language")
    content = _optional_str(arguments, "content")
    analysis = await index.analyze(path, language, content)
    return ToolResult.structured(analysis_to_data(analysis))


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "initialize_treesitter_context": initialize_context,
    "parse_file": parse_file,
    "structural_code_search": structural_search,
    "list_code_elements_by_kind": list_elements,
    "get_contextual_code_snippets": contextual_snippet,
    "analyze_code_structure": analyze_structure,
}


# ---------------------------------------------------------------------------
# Request boundary
# ---------------------------------------------------------------------------


async def call_tool(
    index: StructuralIndex,
    name: str,
    arguments: Mapping[str, Any] | None = None,
    sink: UsageSink | None = None,
) -> ToolResult:
    """Dispatch a named operation and convert any failure into an error result."""
    arguments = dict(arguments or {})
    started = time.perf_counter()
    error: str | None = None

    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        error = f"Unknown tool: {name}"
        result = ToolResult.error(error)
    else:
        try:
            result = await handler(index, arguments)
        except TreeSitterSearchError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            error = str(exc)
            result = ToolResult.error(error)

    event = UsageEvent(
        tool_name=name,
        arguments=arguments,
        status="error" if result.is_error else "success",
        error=error,
        duration_ms=(time.perf_counter() - started) * 1000,
        output_token_count=count_tokens(result.content, index.encoding),
    )
    (sink if sink is not None else LoggingUsageSink(get_settings().usage_log)).record(event)
    return result
