"""Per-request usage events.

Every tool call produces one ``UsageEvent``. The default sink writes it to the
``treesitter_search.usage`` logger; nothing leaves the process.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class UsageEvent(BaseModel):
    tool_name: str
    arguments: dict[str, Any]
    status: Literal["success", "error"]
    error: str | None = None
    duration_ms: float
    output_token_count: int


class UsageSink(Protocol):
    def record(self, event: UsageEvent) -> None: ...


class LoggingUsageSink:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def record(self, event: UsageEvent) -> None:
        if not self.enabled:
            return
        logger.info(
            "tool_usage tool=%s status=%s duration_ms=%.1f output_tokens=%d input=%s%s",
            event.tool_name,
            event.status,
            event.duration_ms,
            event.output_token_count,
            json.dumps(event.arguments, default=str),
            f" error={event.error}" if event.error else "",
        )
