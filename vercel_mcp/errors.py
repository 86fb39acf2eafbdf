"""
描述: Gateway 错误类型定义
主要功能:
    - UpstreamError / MalformedInputError: 在工具内部被转换为文本内容返回
    - UnknownToolError / BodyParseError: 作为 JSON-RPC 协议错误返回给调用方
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for all typed gateway errors."""
    code: str = "gateway_error"

    def __init__(self, message: str = "", *, code: str | None = None) -> None:
        if code:
            self.code = code
        super().__init__(message or self.code)


class UpstreamError(GatewayError):
    """Vercel API 返回非 2xx 或请求本身失败"""
    code = "upstream_error"

    def __init__(self, path: str, status_code: int | None, body: str) -> None:
        self.path = path
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "without response"
        super().__init__(f"Vercel API {path} failed {status}: {body}")


class MalformedInputError(GatewayError):
    code = "malformed_input"


class UnknownToolError(GatewayError):
    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class BodyParseError(GatewayError):
    code = "body_parse_error"
