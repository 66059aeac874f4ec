from __future__ import annotations

import json
from typing import Any

from pydantic import Field

from exa_cli.config import DEFAULT_NUM_RESULTS, SEARCH_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, JsonNumber, ToolArgs, ToolHints, ToolResult, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import post_json
from exa_cli.tools.request_log import RequestLogger

COMPANY_MAX_CHARACTERS = 7000


class CompanyResearchArgs(ToolArgs):
    company_name: str = Field(alias="companyName", description="Name of the company to research")
    num_results: JsonNumber = Field(
        default=DEFAULT_NUM_RESULTS,
        alias="numResults",
        description="Number of search results to return (default: 5)",
    )


class CompanyResearchTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "company_research_exa"

    @property
    def description(self) -> str:
        return (
            "Research companies using Exa AI - finds company websites, news and business information "
            "and returns the matching pages as JSON."
        )

    @property
    def schema(self) -> type[CompanyResearchArgs]:
        return CompanyResearchArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    def build_request(self, args: CompanyResearchArgs) -> dict[str, Any]:
        return {
            "query": f"{args.company_name} company",
            "type": "auto",
            "numResults": args.num_results,
            "category": "company",
            "contents": {"text": {"maxCharacters": COMPANY_MAX_CHARACTERS}},
        }

    async def handler(self, args: CompanyResearchArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(args.company_name)
        try:
            data = await post_json(self._config, "company-research-mcp", SEARCH_ENDPOINT, self.build_request(args))
        except Exception as exc:
            log.error(exc)
            return failure_result("Company research", exc, log)

        if not isinstance(data, dict) or data.get("results") is None:
            log.log("Empty or invalid response from Exa API")
            return text_result("No company information found. Please try a different company name.")
        log.log(f"Found {len(data['results']) if isinstance(data['results'], list) else 0} results")
        log.complete()
        return text_result(json.dumps(data, indent=2, ensure_ascii=False))
