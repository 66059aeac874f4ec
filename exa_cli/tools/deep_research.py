"""
Deep research tools.

deep_researcher_start creates an asynchronous research task on the Exa side and
returns its id; deep_researcher_check waits a short poll delay, then reports the
task status. Callers are expected to keep calling the check tool until the task
reports "completed" or "failed".
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Literal

import httpx
from pydantic import Field

from exa_cli.config import RESEARCH_ENDPOINT, ToolConfig
from exa_cli.tools.base import READ_ONLY_HINTS, ToolArgs, ToolHints, ToolResult, error_result, text_result
from exa_cli.tools.errors import failure_result
from exa_cli.tools.http import get_json, post_json
from exa_cli.tools.request_log import RequestLogger

DEFAULT_RESEARCH_MODEL = "exa-research"
RESEARCH_POLL_DELAY_SEC = 5.0

ResearchModel = Literal["exa-research", "exa-research-pro"]


def _pretty(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _format_created_at(value: Any) -> Any:
    # createdAt is epoch milliseconds
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return value


class DeepResearchStartArgs(ToolArgs):
    instructions: str = Field(description="Complex research question or detailed instructions for the AI researcher")
    model: ResearchModel = Field(
        default=DEFAULT_RESEARCH_MODEL,
        description="'exa-research' for most queries, 'exa-research-pro' for the most complex topics "
        "(default: exa-research)",
    )


class DeepResearchCheckArgs(ToolArgs):
    task_id: str = Field(alias="taskId", description="Task id returned by deep_researcher_start")


class DeepResearchStartTool:
    def __init__(self, config: ToolConfig) -> None:
        self._config = config

    @property
    def id(self) -> str:
        return "deep_researcher_start"

    @property
    def description(self) -> str:
        return (
            "Start a comprehensive AI-powered deep research task for complex queries. The task runs in the "
            "background; use deep_researcher_check with the returned task ID to monitor progress and fetch "
            "the final report."
        )

    @property
    def schema(self) -> type[DeepResearchStartArgs]:
        return DeepResearchStartArgs

    @property
    def hints(self) -> ToolHints:
        return ToolHints(read_only=False, destructive=False, idempotent=False)

    def build_request(self, args: DeepResearchStartArgs) -> dict[str, Any]:
        return {
            "model": args.model,
            "instructions": args.instructions,
            "output": {"inferSchema": False},
        }

    async def handler(self, args: DeepResearchStartArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        request = self.build_request(args)
        model = request["model"]
        log.start(f"{args.instructions} (model: {model})")
        try:
            data = await post_json(self._config, "deep-research-mcp", RESEARCH_ENDPOINT, request)
        except Exception as exc:
            log.error(exc)
            return failure_result("Research start", exc, log)

        task_id = data.get("id") if isinstance(data, dict) else None
        if not task_id:
            log.log("Failed to start research task")
            return error_result("Failed to start research task. Please try again.")

        log.log(f"Started research task {task_id}")
        payload: dict[str, Any] = {
            "success": True,
            "taskId": task_id,
            "model": model,
            "instructions": args.instructions,
        }
        if data.get("outputSchema") is not None:
            payload["outputSchema"] = data["outputSchema"]
        payload["message"] = (
            f"Deep research task started successfully with {model} model. "
            f"Use deep_researcher_check with task ID '{task_id}' to monitor progress and get results."
        )
        payload["nextStep"] = f"Call deep_researcher_check with taskId: \"{task_id}\""
        log.complete()
        return text_result(_pretty(payload))


class DeepResearchCheckTool:
    def __init__(self, config: ToolConfig, poll_delay_sec: float = RESEARCH_POLL_DELAY_SEC) -> None:
        self._config = config
        self._poll_delay_sec = poll_delay_sec

    @property
    def id(self) -> str:
        return "deep_researcher_check"

    @property
    def description(self) -> str:
        return (
            "Check the status of a deep research task and retrieve its report when complete. Waits briefly "
            "before each check; call repeatedly until the status is 'completed'."
        )

    @property
    def schema(self) -> type[DeepResearchCheckArgs]:
        return DeepResearchCheckArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    async def handler(self, args: DeepResearchCheckArgs) -> ToolResult:
        log = RequestLogger.for_tool(self.id)
        log.start(args.task_id)
        try:
            if self._poll_delay_sec > 0:
                await asyncio.sleep(self._poll_delay_sec)
            data = await get_json(self._config, "deep-research-mcp", f"{RESEARCH_ENDPOINT}/{args.task_id}")
        except Exception as exc:
            log.error(exc)
            if isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == 404:
                return error_result("Task not found. Please check the task ID or start a new research task.")
            return failure_result("Research check", exc, log)

        if not isinstance(data, dict):
            log.log("Empty or invalid response from Exa API")
            return error_result("Failed to check research task status. Please try again.")

        status = data.get("status")
        log.log(f"Task {args.task_id} status: {status}")
        log.complete()
        return text_result(_pretty(self._status_payload(args.task_id, status, data)))

    def _status_payload(self, task_id: str, status: Any, data: dict[str, Any]) -> dict[str, Any]:
        if status == "completed":
            details = data.get("data")
            report = details.get("report") if isinstance(details, dict) else None
            return {
                "success": True,
                "status": status,
                "taskId": data.get("id", task_id),
                "report": report or "No report generated",
                "timeMs": data.get("timeMs"),
                "model": data.get("model"),
                "message": "Deep research completed! Here's the comprehensive research report.",
            }
        if status in ("running", "pending"):
            return {
                "success": True,
                "status": status,
                "taskId": data.get("id", task_id),
                "message": "Research in progress. Continue polling...",
                "nextAction": "Call deep_researcher_check again with the same task ID",
            }
        if status == "failed":
            return {
                "success": False,
                "status": status,
                "taskId": data.get("id", task_id),
                "createdAt": _format_created_at(data.get("createdAt")),
                "instructions": data.get("instructions"),
                "message": "Deep research task failed. Please try starting a new research task with different instructions.",
            }
        return {
            "success": False,
            "status": status,
            "taskId": data.get("id", task_id),
            "message": f"Unknown status: {status}. Continue polling or restart the research task if needed.",
        }
