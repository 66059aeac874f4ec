from __future__ import annotations

from typing import Any

import httpx

from exa_cli.config import ToolConfig


def exa_client(config: ToolConfig, integration: str) -> httpx.AsyncClient:
    headers = {
        "accept": "application/json",
        "content-type": "application/json",
        "x-api-key": config.resolve_api_key(),
        "x-exa-integration": integration,
    }
    return httpx.AsyncClient(
        base_url=config.base_url.rstrip("/"),
        headers=headers,
        timeout=config.timeout_sec,
        transport=config.transport,
    )


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    return resp.json()


async def post_json(config: ToolConfig, integration: str, path: str, payload: dict[str, Any]) -> Any:
    async with exa_client(config, integration) as client:
        resp = await client.post(path, json=payload)
        resp.raise_for_status()
        return _decode(resp)


async def get_json(config: ToolConfig, integration: str, path: str) -> Any:
    async with exa_client(config, integration) as client:
        resp = await client.get(path)
        resp.raise_for_status()
        return _decode(resp)
