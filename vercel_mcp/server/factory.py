"""
描述: MCP Server 实例工厂
主要功能:
    - 每个请求构建全新的 Server 实例 (无跨请求状态)
    - 注册 tools/list 与 tools/call 处理器
    - 未知工具以 JSON-RPC 错误返回
"""

from __future__ import annotations

import logging

from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

import vercel_mcp.tools  # noqa: F401
from vercel_mcp.errors import UnknownToolError
from vercel_mcp.tools.base import ToolContext
from vercel_mcp.tools.registry import ToolRegistry


SERVER_NAME = "vercel-readonly"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def build_server(context: ToolContext) -> Server:
    """
    构建绑定到单个请求的 MCP Server

    参数:
        context: 工具执行上下文 (配置 + Vercel 客户端)
    """
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return ToolRegistry.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        """直接注册处理器: SDK 的 call_tool 装饰器会把异常包成 isError 结果, 未知工具需走 JSON-RPC 错误"""
        name = request.params.name
        try:
            tool_cls = ToolRegistry.get(name)
        except UnknownToolError as exc:
            logger.info("Unknown tool requested", extra={"tool": name})
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(exc))) from exc

        content = await tool_cls(context).execute(request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server
