from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from exa_cli.config import ToolConfig
from exa_cli.tools.base import Tool, ToolArgs
from exa_cli.tools.code_context import CodeContextTool
from exa_cli.tools.company_research import CompanyResearchTool
from exa_cli.tools.crawling import CrawlingTool
from exa_cli.tools.deep_research import DeepResearchCheckTool, DeepResearchStartTool
from exa_cli.tools.deep_search import DeepSearchTool
from exa_cli.tools.errors import ToolValidationError
from exa_cli.tools.linkedin_search import LinkedInSearchTool
from exa_cli.tools.web_search import WebSearchTool

TOOL_IDS: tuple[str, ...] = (
    "web_search_exa",
    "deep_search_exa",
    "company_research_exa",
    "crawling_exa",
    "linkedin_search_exa",
    "deep_researcher_start",
    "deep_researcher_check",
    "get_code_context_exa",
)


class ToolRegistry:
    def __init__(self, allowed_ids: tuple[str, ...] = TOOL_IDS) -> None:
        self._allowed_ids = frozenset(allowed_ids)
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        tool_id = tool.id
        if not tool_id:
            raise ToolValidationError("Tool id cannot be empty")
        if tool_id not in self._allowed_ids:
            raise ToolValidationError(f"Tool '{tool_id}' is not in the tool catalog")
        if tool_id in self._tools:
            raise ToolValidationError(f"Tool '{tool_id}' already registered")
        self._tools[tool_id] = tool

    def find(self, tool_id: str) -> Tool | None:
        return self._tools.get(tool_id)

    def list_tools(self) -> list[dict[str, Any]]:
        return [{"id": tool.id, "description": tool.description} for tool in self._tools.values()]


def _format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(item) for item in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def bind_arguments(tool: Tool, payload: Any) -> ToolArgs:
    try:
        return tool.schema.model_validate(payload)
    except ValidationError as exc:
        raise ToolValidationError(f"Invalid arguments for {tool.id}: {_format_validation_error(exc)}") from exc


def build_tools(config: ToolConfig | None = None) -> list[Tool]:
    cfg = config or ToolConfig()
    return [
        WebSearchTool(cfg),
        DeepSearchTool(cfg),
        CompanyResearchTool(cfg),
        CrawlingTool(cfg),
        LinkedInSearchTool(cfg),
        DeepResearchStartTool(cfg),
        DeepResearchCheckTool(cfg),
        CodeContextTool(cfg),
    ]


def create_tool_registry(config: ToolConfig | None = None) -> ToolRegistry:
    registry = ToolRegistry()
    for tool in build_tools(config):
        registry.register(tool)
    return registry


def get_tool_definition(tool_id: str, config: ToolConfig | None = None) -> Tool | None:
    if tool_id not in TOOL_IDS:
        return None
    return create_tool_registry(config).find(tool_id)
