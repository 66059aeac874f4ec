from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from exa_cli.tools.base import ToolResult, error_result


class ToolError(Exception):
    """Base exception for tool errors."""


class ToolValidationError(ToolError):
    """Raised when tool input is invalid or a tool id is not registered."""


class LineLogger(Protocol):
    def log(self, message: str) -> None: ...


@dataclass(frozen=True)
class RemoteErrorInfo:
    status_code: int | str
    message: str
    response_body: str | None = None


_NO_BODY = object()


def _response_data(response: httpx.Response | None) -> Any:
    if response is None:
        return _NO_BODY
    try:
        content = response.content
    except httpx.ResponseNotRead:
        return _NO_BODY
    if not content:
        return _NO_BODY
    try:
        return response.json()
    except ValueError:
        return response.text


def _response_message(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    return message if isinstance(message, str) else None


def describe_error(error: object) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


def get_remote_error_info(error: object) -> RemoteErrorInfo | None:
    """
    Normalize a failed httpx call into status/message/body.

    Returns None for anything that is not an httpx error so callers fall back
    to describe_error().
    """
    if not isinstance(error, httpx.HTTPError):
        return None
    response = error.response if isinstance(error, httpx.HTTPStatusError) else None
    status_code: int | str = response.status_code if response is not None else "unknown"
    data = _response_data(response)
    if data is _NO_BODY:
        return RemoteErrorInfo(status_code=status_code, message=describe_error(error))
    message = _response_message(data) or describe_error(error)
    if isinstance(data, str):
        body = data
    else:
        body = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return RemoteErrorInfo(status_code=status_code, message=message, response_body=body)


def log_remote_error(
    logger: LineLogger,
    info: RemoteErrorInfo,
    include_response_body: bool = False,
    label: str = "HTTP error",
) -> None:
    if include_response_body and info.response_body is not None:
        logger.log(f"Response body: {info.response_body}")
    logger.log(f"{label} ({info.status_code}): {info.message}")


def failure_result(label: str, error: object, logger: LineLogger | None = None) -> ToolResult:
    info = get_remote_error_info(error)
    if info is not None:
        if logger is not None:
            log_remote_error(logger, info)
        return error_result(f"{label} error ({info.status_code}): {info.message}")
    return error_result(f"{label} error: {describe_error(error)}")
