from __future__ import annotations

import logging
import time
import uuid

from exa_cli.tools.errors import describe_error


def new_request_id(tool_id: str) -> str:
    return f"{tool_id}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:5]}"


class RequestLogger:
    """Prefixes every line with the request id and tool id of one handler call."""

    def __init__(self, request_id: str, tool_id: str, logger: logging.Logger | None = None) -> None:
        self.request_id = request_id
        self.tool_id = tool_id
        self._logger = logger or logging.getLogger("exa_cli.tools")

    @classmethod
    def for_tool(cls, tool_id: str) -> RequestLogger:
        return cls(new_request_id(tool_id), tool_id)

    def start(self, query: str) -> None:
        self._logger.info("[%s] [%s] Starting request: %s", self.request_id, self.tool_id, query)

    def log(self, message: str) -> None:
        self._logger.info("[%s] [%s] %s", self.request_id, self.tool_id, message)

    def error(self, error: object) -> None:
        self._logger.warning("[%s] [%s] Error: %s", self.request_id, self.tool_id, describe_error(error))

    def complete(self) -> None:
        self._logger.info("[%s] [%s] Request completed", self.request_id, self.tool_id)
