from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from exa_cli.config import ToolConfig


class FakeExaApi:
    """Answers every request with one canned response (or exception) and records what was sent."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._status = 200
        self._body: bytes = b"{}"
        self._error: Callable[[httpx.Request], Exception] | None = None

    def respond(self, status: int = 200, json_body: Any = None, text: str | None = None) -> None:
        self._status = status
        self._error = None
        if text is not None:
            self._body = text.encode("utf-8")
        elif json_body is None:
            self._body = b""
        else:
            self._body = json.dumps(json_body).encode("utf-8")

    def fail(self, factory: Callable[[httpx.Request], Exception]) -> None:
        self._error = factory

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error(request)
        return httpx.Response(self._status, content=self._body)

    def config(self, api_key: str | None = "test-key", env: dict[str, str] | None = None) -> ToolConfig:
        return ToolConfig(
            exa_api_key=api_key,
            env={} if env is None else env,
            transport=httpx.MockTransport(self._handle),
        )

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture
def exa_api() -> FakeExaApi:
    return FakeExaApi()


def connect_error(message: str = "fallback") -> Callable[[httpx.Request], Exception]:
    return lambda request: httpx.ConnectError(message, request=request)


def runtime_error(message: str = "boom") -> Callable[[httpx.Request], Exception]:
    return lambda request: RuntimeError(message)
