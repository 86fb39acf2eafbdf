"""
描述: MCP Gateway 主入口
主要功能:
    - FastAPI 应用初始化
    - 路由注册 (MCP Protocol & HTTP)
    - 日志与配置加载
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from vercel_mcp.config import get_settings
from vercel_mcp.server.http import router as http_router
from vercel_mcp.server.transport import McpEndpoint
from vercel_mcp.tools.registry import ToolRegistry
from vercel_mcp.utils.logger import setup_logging


# region 初始化
load_dotenv()
settings = get_settings()
setup_logging(settings.logging)
logger = logging.getLogger(__name__)

if not settings.vercel.token:
    logger.warning("VERCEL_TOKEN is not set, Vercel API calls will be rejected")

logger.info(
    "MCP gateway config loaded",
    extra={
        "default_team": bool(settings.vercel.default_team_id),
        "tools": [tool.name for tool in ToolRegistry.list_tools()],
    },
)
# endregion


# region FastAPI 应用
app = FastAPI(title="Vercel MCP Gateway", version="0.1.0")
app.include_router(http_router)
app.add_route("/mcp", McpEndpoint(settings), methods=["POST"])
# endregion
