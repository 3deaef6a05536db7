"""Exception taxonomy for the structural index.

Every failure raised by a collaborator (grammar loading, file reads, parsing,
query compilation) is re-raised as one of these types and propagates
unchanged up to the request boundary in ``treesitter_search.tools.handlers``.
"""

from __future__ import annotations


class TreeSitterSearchError(Exception):
    """Base class for all errors raised by treesitter-search."""


class UnloadedLanguageError(TreeSitterSearchError):
    """A grammar was requested before it was loaded."""

    def __init__(self, language: str) -> None:
        super().__init__(
            f"Language '{language}' is not loaded. Call initialize_treesitter_context first."
        )
        self.language = language


class GrammarLoadError(TreeSitterSearchError):
    """The grammar artifact for a language is missing or unusable."""

    def __init__(self, language: str, cause: BaseException) -> None:
        super().__init__(f"Could not load grammar for '{language}': {cause}")
        self.language = language
        self.cause = cause


class UnsupportedExtensionError(TreeSitterSearchError):
    """No language could be inferred from a file extension."""

    def __init__(self, extension: str) -> None:
        shown = extension or "(none)"
        super().__init__(
            f"Unsupported file extension: {shown}. Pass an explicit language instead."
        )
        self.extension = extension


class SourceNotFoundError(TreeSitterSearchError):
    """The source text for a file could not be read."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__(
            f"File not found at path: {path}. Please ensure you are using an absolute path to the file."
        )
        self.path = path
        self.cause = cause


class ParseFailureError(TreeSitterSearchError):
    """The parsing engine returned no tree."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Failed to parse file: {path}. The parser returned no tree.")
        self.path = path


class InvalidQueryError(TreeSitterSearchError):
    """A structural query could not be compiled against the file's grammar."""

    def __init__(self, query: str, diagnostic: str) -> None:
        super().__init__(f"Invalid query: {diagnostic}\nQuery: {query}")
        self.query = query
        self.diagnostic = diagnostic


class ArgumentError(TreeSitterSearchError):
    """A request was missing a required argument or carried an invalid one."""
