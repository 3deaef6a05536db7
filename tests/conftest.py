"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Language
from tree_sitter_language_pack import get_language

from treesitter_search.core.grammars import GrammarRegistry
from treesitter_search.core.index import StructuralIndex

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeEncoding:
    """Deterministic stand-in for a tiktoken encoding: one token per four characters."""

    def encode(self, text: str, /) -> list[int]:
        return list(range((len(text) + 3) // 4))


class CountingReader:
    """In-memory ``SourceReader`` that records every read."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.reads: list[str] = []

    async def read_text(self, path: str) -> str:
        self.reads.append(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_encoding() -> FakeEncoding:
    return FakeEncoding()


@pytest.fixture
def reader() -> CountingReader:
    return CountingReader()


@pytest.fixture
def index(reader: CountingReader, fake_encoding: FakeEncoding) -> StructuralIndex:
    """A fresh index per test, backed by the in-memory reader."""
    return StructuralIndex(reader=reader, encoding=fake_encoding)


@pytest.fixture
def javascript_language() -> Language:
    """Return the tree-sitter JavaScript language."""
    return get_language("javascript")


@pytest.fixture
def python_language() -> Language:
    """Return the tree-sitter Python language."""
    return get_language("python")


@pytest.fixture
def registry() -> GrammarRegistry:
    return GrammarRegistry()
