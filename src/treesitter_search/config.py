import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    encoding: str = "cl100k_base"
    usage_log: bool = True


def get_settings() -> Settings:
    return Settings(
        log_level=os.getenv("TREESITTER_SEARCH_LOG_LEVEL", "WARNING").upper(),
        encoding=os.getenv("TREESITTER_SEARCH_ENCODING", "cl100k_base"),
        usage_log=os.getenv("TREESITTER_SEARCH_USAGE_LOG", "1").strip().lower() in _TRUTHY,
    )
