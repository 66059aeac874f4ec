from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from exa_cli.config import SEARCH_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, JsonNumber, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger

DEFAULT_WEB_NUM_RESULTS = 8
DEFAULT_CONTEXT_MAX_CHARACTERS = 10_000


class WebSearchArgs(ToolArgs):
    query: str = Field(description="Web search query")
    num_results: JsonNumber = Field(
        default=DEFAULT_WEB_NUM_RESULTS,
        alias="numResults",
        description="Number of search results to return (default: 8)",
    )
    livecrawl: Literal["fallback", "preferred"] = Field(
        default="fallback", description="Live crawl mode: 'fallback' or 'preferred' (default: fallback)"
    )
    type: Literal["auto", "fast", "deep", "neural", "keyword"] = Field(
        default="auto", description="Search type (default: auto)"
    )
    context_max_characters: JsonNumber = Field(
        default=DEFAULT_CONTEXT_MAX_CHARACTERS,
        alias="contextMaxCharacters",
        description="Maximum characters for the context string (default: 10000)",
    )


class WebSearchTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "web_search_exa"

    @property
    def description(self) -> str:
        return (
            "Search the web using Exa AI - performs real-time web searches and returns a context string "
            "built from the most relevant pages. Supports live crawling and configurable result counts."
        )

    @property
    def schema(self) -> type[WebSearchArgs]:
        return WebSearchArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: WebSearchArgs) -> dict[str, Any]:
        return {
            "query": args.query,
            "type": args.type,
            "numResults": args.num_results,
            "contents": {
                "context": {"maxCharacters": args.context_max_characters},
                "livecrawl": args.livecrawl,
            },
        }

    async def handler(self, args: WebSearchArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(args.query)
        try:
            data = await post_json(self._config, "web-search-mcp", SEARCH_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("Search", exc, log)

        context = data.get("context") if isinstance(data, dict) else None
        if not context:
            log.log("Empty or invalid response from Exa API")
            return text_result("No search results found. Please try a different query.")
        log.complete()
        return text_result(str(context))
