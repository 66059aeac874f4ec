from __future__ import annotations

import json
from typing import Any

from pydantic import Field

from exa_cli.config import CONTEXT_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, JsonNumber, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger

DEFAULT_TOKENS_NUM = 5000


class CodeContextArgs(ToolArgs):
    query: str = Field(description="Search query for code snippets, APIs, libraries and SDK documentation")
    tokens_num: JsonNumber = Field(
        default=DEFAULT_TOKENS_NUM,
        alias="tokensNum",
        ge=1000,
        le=50000,
        description="Number of tokens to return (1000-50000, default: 5000)",
    )


class CodeContextTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "get_code_context_exa"

    @property
    def description(self) -> str:
        return (
            "Search and get relevant code context for any programming question using Exa Code - returns "
            "code snippets, examples and documentation from open source libraries, GitHub repositories "
            "and programming frameworks."
        )

    @property
    def schema(self) -> type[CodeContextArgs]:
        return CodeContextArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: CodeContextArgs) -> dict[str, Any]:
        return {"query": args.query, "tokensNum": args.tokens_num}

    async def handler(self, args: CodeContextArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(f"{args.query} (tokens: {args.tokens_num})")
        try:
            data = await post_json(self._config, "exa-code-mcp", CONTEXT_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("Code search", exc, log)

        if not isinstance(data, dict) or not data.get("response"):
            log.log("Empty or invalid response from Exa Code API")
            return text_result(
                "No code snippets or documentation found. Please try a different query or be more specific "
                "about the library or programming concept you're looking for."
            )

        log.log(f"Code search completed with {data.get('resultsCount', 0)} results")
        response = data["response"]
        log.complete()
        if isinstance(response, str):
            return text_result(response)
        return text_result(json.dumps(response, indent=2, ensure_ascii=False))
