"""
描述: Vercel REST API 客户端
主要功能:
    - 封装只读 GET 请求与 Bearer 鉴权
    - 查询参数序列化 (空值不发送)
    - 统一错误处理 (非 2xx -> UpstreamError, 不重试)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from vercel_mcp.config import Settings
from vercel_mcp.errors import UpstreamError


logger = logging.getLogger(__name__)

QueryValue = str | int | float | bool | None


def build_query(params: Mapping[str, QueryValue] | None) -> dict[str, str]:
    """过滤空参数并转换为字符串"""
    query: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


# region Vercel 客户端
class VercelClient:
    """
    Vercel API 客户端

    功能:
        - 每次调用附带静态 Bearer Token
        - 成功时原样返回 JSON, 结构校验由调用方负责
    """
    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        初始化客户端

        参数:
            settings: 全局配置对象
            transport: 可选的 httpx transport (测试注入)
        """
        self._settings = settings
        self._transport = transport

    async def get(self, path: str, params: Mapping[str, QueryValue] | None = None) -> Any:
        """
        执行 GET 请求

        参数:
            path: API 路径 (不含 Base URL)
            params: 查询参数, None 与空字符串会被忽略

        返回:
            响应 JSON 数据

        抛出:
            UpstreamError: 非 2xx 响应或网络异常
        """
        vercel = self._settings.vercel
        url = f"{vercel.api_base.rstrip('/')}{path}"
        headers = {"Authorization": f"Bearer {vercel.token}"}
        client_kwargs: dict[str, Any] = {"trust_env": False, "transport": self._transport}
        if vercel.request.timeout:
            client_kwargs["timeout"] = vercel.request.timeout

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.get(url, params=build_query(params), headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Vercel API request failed", extra={"path": path, "error": str(exc)})
            raise UpstreamError(path, None, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise UpstreamError(path, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(path, response.status_code, f"invalid JSON body: {response.text}") from exc
# endregion
