from treesitter_search.core.grammars import GrammarRegistry
from treesitter_search.core.index import ParsedFile, StructuralIndex
from treesitter_search.core.tokens import count_text_tokens, count_tokens
from treesitter_search.errors import (
    ArgumentError,
    GrammarLoadError,
    InvalidQueryError,
    ParseFailureError,
    SourceNotFoundError,
    TreeSitterSearchError,
    UnloadedLanguageError,
    UnsupportedExtensionError,
)
from treesitter_search.tools.handlers import TOOL_HANDLERS, call_tool

__all__ = [
    "TOOL_HANDLERS",
    "ArgumentError",
    "GrammarLoadError",
    "GrammarRegistry",
    "InvalidQueryError",
    "ParseFailureError",
    "ParsedFile",
    "SourceNotFoundError",
    "StructuralIndex",
    "TreeSitterSearchError",
    "UnloadedLanguageError",
    "UnsupportedExtensionError",
    "call_tool",
    "count_text_tokens",
    "count_tokens",
]
