"""Token counting over raw text and tool result payloads."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, Protocol

import tiktoken

from treesitter_search.config import get_settings
from treesitter_search.models import Content, JsonContent, TextContent

DEFAULT_ENCODING = "cl100k_base"


class Encoding(Protocol):
    def encode(self, text: str, /) -> list[int]: ...


@lru_cache(maxsize=4)
def get_encoding(name: str = DEFAULT_ENCODING) -> Encoding:
    return tiktoken.get_encoding(name)


def default_encoding() -> Encoding:
    """Return the encoding named by ``TREESITTER_SEARCH_ENCODING``."""
    return get_encoding(get_settings().encoding)


class _Raw(str):
    """JSON text that is already encoded."""


def compact_json(value: Any) -> str:
    """Encode plain data as JSON without whitespace.

    Works from an explicit stack, so arbitrarily deep trees encode without
    hitting the interpreter's recursion limit.
    """
    parts: list[str] = []
    stack: list[Any] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, _Raw):
            parts.append(item)
        elif isinstance(item, Mapping):
            pending: list[Any] = [_Raw("{")]
            for i, (key, child) in enumerate(item.items()):
                if i:
                    pending.append(_Raw(","))
                pending.append(_Raw(json.dumps(str(key), ensure_ascii=False) + ":"))
                pending.append(child)
            pending.append(_Raw("}"))
            stack.extend(reversed(pending))
        elif isinstance(item, (list, tuple)):
            pending = [_Raw("[")]
            for i, child in enumerate(item):
                if i:
                    pending.append(_Raw(","))
                pending.append(child)
            pending.append(_Raw("]"))
            stack.extend(reversed(pending))
        else:
            parts.append(json.dumps(item, ensure_ascii=False))
    return "".join(parts)


def count_text_tokens(text: str, encoding: Encoding | None = None) -> int:
    if not text:
        return 0
    enc = encoding if encoding is not None else default_encoding()
    # Source files may legitimately contain strings like "<|endoftext|>".
    if isinstance(enc, tiktoken.Encoding):
        return len(enc.encode(text, disallowed_special=()))
    return len(enc.encode(text))


def count_tokens(content: Sequence[Content] | None, encoding: Encoding | None = None) -> int:
    """Count the tokens in a tool result's content parts.

    Text parts are counted as-is, structured parts as their compact JSON
    encoding. Error parts carry no payload and count as zero.
    """
    if not content:
        return 0

    total = 0
    for part in content:
        if isinstance(part, TextContent):
            total += count_text_tokens(part.text, encoding)
        elif isinstance(part, JsonContent) and part.data is not None:
            total += count_text_tokens(compact_json(part.data), encoding)
    return total
