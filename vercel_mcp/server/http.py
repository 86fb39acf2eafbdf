"""
描述: HTTP 辅助路由
主要功能:
    - 根路径与健康检查 (MCP 端点以外的路由)
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from vercel_mcp.server.factory import SERVER_NAME


router = APIRouter()


@router.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok", "service": SERVER_NAME}


@router.get("/favicon.ico")
async def favicon() -> Response:
    return Response(status_code=204)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
