from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Language, Parser, Tree

from treesitter_search.core import search as _search
from treesitter_search.core import snippet as _snippet
from treesitter_search.core.ast import analyze_tree
from treesitter_search.core.grammars import GrammarRegistry
from treesitter_search.core.languages import resolve_language
from treesitter_search.core.ports.storage import FileSystemReader, SourceReader
from treesitter_search.core.tokens import Encoding
from treesitter_search.errors import ParseFailureError, SourceNotFoundError
from treesitter_search.models import Analysis, Capture, CodeElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedFile:
    file_id: str
    language: str
    grammar: Language
    tree: Tree
    source: bytes

    @property
    def text(self) -> str:
        return self.source.decode("utf-8", errors="replace")


class StructuralIndex:
    """Per-file parse state plus the structural lookups served from it.

    Owns the grammar registry and the tree cache. The cache holds one entry
    per canonical absolute path; a re-parse replaces the entry wholesale and
    nothing tracks whether the file changed on disk since.
    """

    def __init__(
        self,
        registry: GrammarRegistry | None = None,
        reader: SourceReader | None = None,
        encoding: Encoding | None = None,
        block_kinds: Mapping[str, frozenset[str]] | None = None,
    ) -> None:
        self.registry = registry if registry is not None else GrammarRegistry()
        self.reader: SourceReader = reader if reader is not None else FileSystemReader()
        self.encoding = encoding
        self._block_kinds = dict(block_kinds) if block_kinds else {}
        self._trees: dict[str, ParsedFile] = {}

    # ------------------------------------------------------------------
    # Tree cache
    # ------------------------------------------------------------------

    @staticmethod
    def file_id(path: str | Path) -> str:
        return str(Path(path).resolve())

    @property
    def cached_files(self) -> list[str]:
        return sorted(self._trees)

    def is_parsed(self, path: str | Path) -> bool:
        return self.file_id(path) in self._trees

    def get(self, path: str | Path) -> ParsedFile | None:
        return self._trees.get(self.file_id(path))

    def evict(self, path: str | Path) -> bool:
        return self._trees.pop(self.file_id(path), None) is not None

    def clear(self) -> None:
        self._trees.clear()

    # ------------------------------------------------------------------
    # Tree resolver
    # ------------------------------------------------------------------

    async def resolve(self, path: str | Path, language: str | None = None, content: str | None = None) -> ParsedFile:
        """Return the cached tree for ``path``, parsing it on a cache miss.

        On a miss the language comes from ``language`` or the file extension,
        and the source from ``content`` or the file on disk.
        """
        file_id = self.file_id(path)
        cached = self._trees.get(file_id)
        if cached is not None:
            logger.debug("Tree cache hit for %s", file_id)
            return cached
        return await self._parse(file_id, language, content)

    async def parse(self, path: str | Path, language: str | None = None, content: str | None = None) -> ParsedFile:
        """Parse ``path`` unconditionally and replace any cached tree."""
        return await self._parse(self.file_id(path), language, content)

    async def _parse(self, file_id: str, language: str | None, content: str | None) -> ParsedFile:
        resolved_language = resolve_language(language, file_id)
        await self.registry.load(resolved_language)
        grammar = self.registry.get(resolved_language)

        if content is None:
            try:
                content = await self.reader.read_text(file_id)
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceNotFoundError(file_id, exc) from exc

        source = content.encode("utf-8")
        tree = Parser(grammar).parse(source)
        if tree is None:
            raise ParseFailureError(file_id)

        parsed = ParsedFile(file_id=file_id, language=resolved_language, grammar=grammar, tree=tree, source=source)
        self._trees[file_id] = parsed
        logger.info("Parsed %s (language: %s)", file_id, resolved_language)
        return parsed

    # ------------------------------------------------------------------
    # Structural lookups
    # ------------------------------------------------------------------

    async def search(self, path: str | Path, query_text: str) -> list[Capture]:
        parsed = await self.resolve(path)
        return _search.search(parsed, query_text)

    async def list_elements(self, path: str | Path, kind: str) -> list[CodeElement]:
        parsed = await self.resolve(path)
        return _search.list_elements(parsed, kind)

    async def snippet_at(self, path: str | Path, row: int, column: int) -> str | None:
        parsed = await self.resolve(path)
        kinds = _snippet.block_kinds_for(parsed.language, self._block_kinds)
        return _snippet.snippet_at(parsed, row, column, kinds)

    async def analyze(self, path: str | Path, language: str | None = None, content: str | None = None) -> Analysis:
        parsed = await self.resolve(path, language, content)
        return analyze_tree(parsed.tree.root_node, parsed.text, self.encoding)
