from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import cast

from tree_sitter import Language
from tree_sitter_language_pack import SupportedLanguage, get_language

from treesitter_search.core.languages import normalize_language
from treesitter_search.errors import GrammarLoadError, UnloadedLanguageError

logger = logging.getLogger(__name__)


def _load_from_language_pack(language: str) -> Language:
    return get_language(cast(SupportedLanguage, language))


class GrammarRegistry:
    """Load-once cache of compiled tree-sitter grammars keyed by language name.

    Loading runs in a worker thread. Concurrent ``load`` calls for the same
    language share one in-flight task; distinct languages load independently.
    A failed load leaves nothing registered, so the caller may retry.
    """

    def __init__(self, loader: Callable[[str], Language] = _load_from_language_pack) -> None:
        self._loader = loader
        self._grammars: dict[str, Language] = {}
        self._pending: dict[str, asyncio.Task[Language]] = {}

    @property
    def languages(self) -> list[str]:
        return sorted(self._grammars)

    def is_loaded(self, language: str) -> bool:
        return normalize_language(language) in self._grammars

    def get(self, language: str) -> Language:
        name = normalize_language(language)
        grammar = self._grammars.get(name)
        if grammar is None:
            raise UnloadedLanguageError(name)
        return grammar

    async def load(self, language: str) -> None:
        name = normalize_language(language)
        if name in self._grammars:
            logger.debug("Language '%s' is already loaded.", name)
            return

        task = self._pending.get(name)
        if task is None:
            task = asyncio.create_task(self._load(name))
            self._pending[name] = task
        try:
            await asyncio.shield(task)
        finally:
            if task.done() and self._pending.get(name) is task:
                del self._pending[name]

    async def _load(self, name: str) -> Language:
        try:
            grammar = await asyncio.to_thread(self._loader, name)
        except Exception as exc:
            logger.error("Failed to load grammar for '%s': %s", name, exc)
            raise GrammarLoadError(name, exc) from exc
        self._grammars[name] = grammar
        logger.info("Successfully loaded language: %s", name)
        return grammar
