from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import Field

from exa_cli.config import DEFAULT_MAX_CHARACTERS, DEFAULT_NUM_RESULTS, SEARCH_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, JsonNumber, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger

# search type -> (domain filter, Exa search type)
_SEARCH_SCOPES: dict[str, tuple[str, str]] = {
    "profiles": ("linkedin.com/in", "keyword"),
    "companies": ("linkedin.com/company", "keyword"),
}
_DEFAULT_SCOPE = ("linkedin.com", "neural")


class LinkedInSearchArgs(ToolArgs):
    query: str = Field(description="LinkedIn search query (e.g., person name, company, job title)")
    search_type: Literal["profiles", "companies", "all"] = Field(
        default="all", alias="searchType", description="Type of LinkedIn content to search (default: all)"
    )
    num_results: JsonNumber = Field(
        default=DEFAULT_NUM_RESULTS,
        alias="numResults",
        description="Number of LinkedIn results to return (default: 5)",
    )


class LinkedInSearchTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "linkedin_search_exa"

    @property
    def description(self) -> str:
        return (
            "Search LinkedIn profiles and companies using Exa AI - finds professional profiles, company pages, "
            "and business-related content on LinkedIn. Useful for networking, recruitment, and business research."
        )

    @property
    def schema(self) -> type[LinkedInSearchArgs]:
        return LinkedInSearchArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: LinkedInSearchArgs) -> dict[str, Any]:
        domain, search_type = _SEARCH_SCOPES.get(args.search_type, _DEFAULT_SCOPE)
        return {
            "query": args.query,
            "type": search_type,
            "numResults": args.num_results,
            "contents": {
                "text": {"maxCharacters": DEFAULT_MAX_CHARACTERS},
                "livecrawl": "preferred",
            },
            "includeDomains": [domain],
        }

    async def handler(self, args: LinkedInSearchArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(f"{args.query} ({args.search_type})")
        try:
            data = await post_json(self._config, "linkedin-search-mcp", SEARCH_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("LinkedIn search", exc, log)

        if not isinstance(data, dict) or data.get("results") is None:
            log.log("Empty or invalid response from Exa API")
            return text_result("No LinkedIn content found. Please try a different query.")
        log.log(f"Found {len(data['results']) if isinstance(data['results'], list) else 0} LinkedIn results")
        log.complete()
        return text_result(json.dumps(data, indent=2, ensure_ascii=False))
