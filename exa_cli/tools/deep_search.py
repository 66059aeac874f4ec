from __future__ import annotations

from typing import Any

from pydantic import Field

from exa_cli.config import SEARCH_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger


class DeepSearchArgs(ToolArgs):
    objective: str = Field(description="Natural language description of what the search should find")
    search_queries: list[str] = Field(
        default_factory=list, description="Optional extra keyword queries to run alongside the objective"
    )


class DeepSearchTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "deep_search_exa"

    @property
    def description(self) -> str:
        return (
            "Deep search using Exa AI - expands an objective into multiple queries, searches them in depth "
            "and returns a combined context string. Best for broad or multi-part questions."
        )

    @property
    def schema(self) -> type[DeepSearchArgs]:
        return DeepSearchArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: DeepSearchArgs) -> dict[str, Any]:
        request: dict[str, Any] = {
            "query": args.objective,
            "type": "deep",
            "contents": {"context": True},
        }
        if args.search_queries:
            request["additionalQueries"] = list(args.search_queries)
        return request

    async def handler(self, args: DeepSearchArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(args.objective)
        try:
            data = await post_json(self._config, "deep-search-mcp", SEARCH_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("Deep search", exc, log)

        context = data.get("context") if isinstance(data, dict) else None
        if not context:
            log.log("Empty or invalid response from Exa API")
            return text_result("No search results found. Please try a different objective.")
        log.complete()
        return text_result(str(context))
