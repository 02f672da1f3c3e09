from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .const import LAYOUT_KEY, SECTION_HEADING_LEVEL


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class BoardConfig:
    """Settings for the file layer (heading level, frontmatter key, writes)"""
    heading_level: int = SECTION_HEADING_LEVEL
    layout_key: str = LAYOUT_KEY
    backup: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 1 <= self.heading_level <= 6:
            raise ValueError(f"heading_level must be between 1 and 6, got {self.heading_level}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> "BoardConfig":
        """Create config from environment variables (and a .env file if present)"""
        load_dotenv()
        return cls(
            heading_level=int(os.getenv("BOARD_HEADING_LEVEL", str(SECTION_HEADING_LEVEL))),
            layout_key=os.getenv("BOARD_LAYOUT_KEY", LAYOUT_KEY),
            backup=_env_bool("BOARD_BACKUP", True),
            log_level=os.getenv("BOARD_LOG_LEVEL", "INFO").upper(),
        )
