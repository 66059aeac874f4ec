from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

import httpx

API_KEY_ENV = "EXA_API_KEY"
LOG_LEVEL_ENV = "EXA_CLI_LOG_LEVEL"

DEFAULT_BASE_URL = "https://api.exa.ai"
DEFAULT_TIMEOUT_SEC = 25.0
DEFAULT_LOG_LEVEL = "ERROR"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

SEARCH_ENDPOINT = "/search"
CONTENTS_ENDPOINT = "/contents"
CONTEXT_ENDPOINT = "/context"
RESEARCH_ENDPOINT = "/research/v1"

DEFAULT_NUM_RESULTS = 5
DEFAULT_MAX_CHARACTERS = 3000


@dataclass(frozen=True)
class ToolConfig:
    exa_api_key: str | None = None
    env: Mapping[str, str] | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    transport: httpx.AsyncBaseTransport | None = None

    def resolve_api_key(self) -> str:
        if self.exa_api_key:
            return self.exa_api_key
        env = os.environ if self.env is None else self.env
        return env.get(API_KEY_ENV, "")


def resolve_log_level(env: Mapping[str, str] | None = None) -> int:
    source = os.environ if env is None else env
    raw = str(source.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level
