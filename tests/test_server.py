from __future__ import annotations

import asyncio

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from tests.fakes import FakeVercelClient
from vercel_mcp.config import Settings
from vercel_mcp.server.factory import build_server
from vercel_mcp.tools.base import ToolContext
from vercel_mcp.tools.registry import ToolRegistry
from vercel_mcp.tools.search import DEPLOYMENTS_PATH, PROJECTS_PATH


def _server(client: FakeVercelClient):
    return build_server(ToolContext(settings=Settings(), client=client))  # type: ignore[arg-type]


def _call(server, name: str, arguments: dict) -> types.ServerResult:
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return asyncio.run(handler(request))


def test_registry_declares_search_and_fetch() -> None:
    tools = {tool.name: tool for tool in ToolRegistry.list_tools()}
    assert set(tools) == {"search", "fetch"}
    assert tools["search"].inputSchema["required"] == ["query"]
    assert tools["fetch"].inputSchema["required"] == ["id"]


def test_list_tools_handler() -> None:
    server = _server(FakeVercelClient())
    handler = server.request_handlers[types.ListToolsRequest]
    result = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))

    assert sorted(tool.name for tool in result.root.tools) == ["fetch", "search"]


def test_call_tool_routes_to_handler() -> None:
    client = FakeVercelClient({PROJECTS_PATH: {"projects": []}, DEPLOYMENTS_PATH: {"deployments": []}})
    result = _call(_server(client), "search", {"query": "x"})

    assert isinstance(result.root, types.CallToolResult)
    assert result.root.isError is False
    assert [item.text for item in result.root.content] == ["No matches."]


def test_unknown_tool_is_protocol_error() -> None:
    client = FakeVercelClient()
    with pytest.raises(McpError) as exc_info:
        _call(_server(client), "delete", {})

    assert exc_info.value.error.code == types.INVALID_PARAMS
    assert "delete" in exc_info.value.error.message
    assert client.calls == []


def test_each_build_returns_fresh_server() -> None:
    client = FakeVercelClient()
    assert _server(client) is not _server(client)
