from __future__ import annotations

import json
from typing import Any

from pydantic import Field

from exa_cli.config import CONTENTS_ENDPOINT, DEFAULT_MAX_CHARACTERS, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, JsonNumber, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger


class CrawlingArgs(ToolArgs):
    url: str = Field(description="URL to crawl and extract content from")
    max_characters: JsonNumber = Field(
        default=DEFAULT_MAX_CHARACTERS,
        alias="maxCharacters",
        description="Maximum characters to extract (default: 3000)",
    )


class CrawlingTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "crawling_exa"

    @property
    def description(self) -> str:
        return (
            "Extract and crawl content from specific URLs using Exa AI - retrieves full text content, "
            "metadata, and structured information from web pages. Ideal for extracting detailed content "
            "from known URLs."
        )

    @property
    def schema(self) -> type[CrawlingArgs]:
        return CrawlingArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: CrawlingArgs) -> dict[str, Any]:
        return {
            "ids": [args.url],
            "text": {"maxCharacters": args.max_characters},
            "livecrawl": "preferred",
        }

    async def handler(self, args: CrawlingArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(args.url)
        try:
            data = await post_json(self._config, "crawling-mcp", CONTENTS_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("Crawling", exc, log)

        if not isinstance(data, dict) or data.get("results") is None:
            log.log("Empty or invalid response from Exa API")
            return text_result("No content found for the provided URL.")
        log.complete()
        return text_result(json.dumps(data, indent=2, ensure_ascii=False))
