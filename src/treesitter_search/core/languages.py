from pathlib import Path

from treesitter_search.errors import UnsupportedExtensionError

_LANGUAGE_ALIASES = {
    "c#": "csharp",
    "csharp": "csharp",
    "cpp": "cpp",
    "c++": "cpp",
    "cs": "csharp",
    "css": "css",
    "go": "go",
    "golang": "go",
    "html": "html",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "json": "json",
    "python": "python",
    "py": "python",
    "rb": "ruby",
    "ruby": "ruby",
    "rs": "rust",
    "rust": "rust",
    "ts": "typescript",
    "tsx": "tsx",
    "typescript": "typescript",
    "c": "c",
}

_EXTENSION_LANGUAGE_MAP = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".cxx": "cpp",
    ".go": "go",
    ".h": "c",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".htm": "html",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".css": "css",
    ".ts": "typescript",
    ".tsx": "tsx",
}


def normalize_language(language: str) -> str:
    """Map an alias such as ``js`` or ``golang`` to its grammar name.

    Unknown names pass through unchanged so the grammar registry can decide
    whether a grammar exists for them.
    """
    normalized = language.strip().lower()
    return _LANGUAGE_ALIASES.get(normalized, normalized)


def detect_language_from_path(file_path: str | Path) -> str:
    suffix = Path(file_path).suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise UnsupportedExtensionError(suffix)


def resolve_language(language: str | None, file_path: str | Path) -> str:
    if language:
        return normalize_language(language)
    return detect_language_from_path(file_path)
