"""Unit tests for contextual snippet extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from treesitter_search.core.grammars import GrammarRegistry
from treesitter_search.core.index import StructuralIndex
from treesitter_search.core.snippet import DEFAULT_BLOCK_KINDS, block_kinds_for, snippet_at

if TYPE_CHECKING:
    from conftest import CountingReader

FUNCTION_SOURCE = "function f() {\n  return 1;\n}"


@pytest.mark.asyncio
async def test_returns_the_enclosing_function(index: StructuralIndex) -> None:
    parsed = await index.resolve("/virtual/f.js", content=FUNCTION_SOURCE)

    assert snippet_at(parsed, 1, 4) == FUNCTION_SOURCE


@pytest.mark.asyncio
async def test_starting_node_can_be_the_block(index: StructuralIndex) -> None:
    parsed = await index.resolve("/virtual/f.js", content=FUNCTION_SOURCE)

    assert snippet_at(parsed, 0, 0) == FUNCTION_SOURCE


@pytest.mark.asyncio
async def test_returns_the_innermost_block(index: StructuralIndex) -> None:
    source = "class A {\n  m() {\n    const g = () => 42;\n  }\n}\n"
    parsed = await index.resolve("/virtual/a.js", content=source)

    assert snippet_at(parsed, 2, 20) == "() => 42"
    assert snippet_at(parsed, 1, 3) == "m() {\n    const g = () => 42;\n  }"


@pytest.mark.asyncio
async def test_top_level_statement_yields_whole_file(index: StructuralIndex) -> None:
    source = "const x = 1;\nconst y = 2;\n"
    parsed = await index.resolve("/virtual/top.js", content=source)

    assert snippet_at(parsed, 1, 6) == source


@pytest.mark.asyncio
async def test_position_past_end_of_file_is_none(index: StructuralIndex) -> None:
    parsed = await index.resolve("/virtual/f.js", content=FUNCTION_SOURCE)

    assert snippet_at(parsed, 50, 0) is None


@pytest.mark.asyncio
async def test_python_uses_language_block_kinds(index: StructuralIndex) -> None:
    source = "class A:\n    def m(self):\n        return 1\n"
    parsed = await index.resolve("/virtual/a.py", content=source)

    assert snippet_at(parsed, 2, 10) == "def m(self):\n        return 1"


def test_block_kinds_extend_defaults() -> None:
    kinds = block_kinds_for("python")
    assert DEFAULT_BLOCK_KINDS <= kinds
    assert "function_definition" in kinds
    assert block_kinds_for("unknown") == DEFAULT_BLOCK_KINDS


def test_block_kind_overrides_replace_the_set() -> None:
    custom = frozenset({"class_definition"})
    assert block_kinds_for("python", {"python": custom}) == custom


@pytest.mark.asyncio
async def test_index_applies_block_kind_overrides(reader: CountingReader) -> None:
    source = "class A:\n    def m(self):\n        return 1\n"
    index = StructuralIndex(
        registry=GrammarRegistry(),
        reader=reader,
        block_kinds={"python": frozenset({"class_definition"})},
    )
    await index.resolve("/virtual/a.py", content=source)

    assert await index.snippet_at("/virtual/a.py", 2, 10) == source.rstrip("\n")


@pytest.mark.asyncio
async def test_leading_blank_lines_are_outside_the_tree(index: StructuralIndex) -> None:
    parsed = await index.resolve("/virtual/padded.js", content="\n\nfunction f() {}\n")

    assert snippet_at(parsed, 0, 0) is None
    assert snippet_at(parsed, 2, 0) == "function f() {}"
