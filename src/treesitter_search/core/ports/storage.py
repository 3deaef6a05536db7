import asyncio
from pathlib import Path
from typing import Protocol


class SourceReader(Protocol):
    async def read_text(self, path: str) -> str: ...


class FileSystemReader:
    """Read source files from local disk without blocking the event loop.

    Implements the ``SourceReader`` protocol.
    """

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
