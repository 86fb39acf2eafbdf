"""
描述: MCP 请求传输适配器
主要功能:
    - 读取并缓存原始请求体, UTF-8 解码
    - 解析 JSON (兼容部分客户端的二次编码字符串)
    - 每个请求构建独立的 Server 与 streamable HTTP transport, 结束时统一释放
    - ?debug=1 探针: 仅返回解析结果摘要
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from mcp import types
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.requests import ClientDisconnect, Request
from starlette.responses import JSONResponse
from starlette.types import Message, Receive, Scope, Send

from vercel_mcp.config import Settings, get_settings
from vercel_mcp.errors import BodyParseError
from vercel_mcp.server.factory import build_server
from vercel_mcp.tools.base import ToolContext
from vercel_mcp.vercel.client import VercelClient


logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], VercelClient]


# region 请求体解析
async def read_body(request: Request) -> bytes:
    chunks = [chunk async for chunk in request.stream()]
    return b"".join(chunks)


def decode_body(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BodyParseError(f"Request body is not valid UTF-8: {exc}") from exc


def parse_payload(text: str) -> Any:
    """
    解析 JSON 请求体

    若第一次解析结果仍是字符串 (二次编码), 再解析一次。

    抛出:
        BodyParseError: 空请求体或任一阶段 JSON 解析失败
    """
    if not text.strip():
        raise BodyParseError("Request body is empty")
    try:
        payload = json.loads(text)
        if isinstance(payload, str):
            payload = json.loads(payload)
    except ValueError as exc:
        raise BodyParseError(f"Request body is not valid JSON: {exc}") from exc
    return payload


def _js_typeof(payload: Any) -> str:
    """与 JavaScript typeof 一致: null 与数组均为 object"""
    if isinstance(payload, bool):
        return "boolean"
    if isinstance(payload, (int, float)):
        return "number"
    if isinstance(payload, str):
        return "string"
    return "object"


def _js_truthy(value: Any) -> bool:
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def describe_payload(payload: Any, parsed: bool) -> dict[str, Any]:
    """debug 探针输出"""
    if not parsed:
        return {"parsedType": "undefined", "parsedPreview": None}
    preview: Any = payload
    if isinstance(payload, dict):
        preview = {
            "jsonrpc": payload.get("jsonrpc"),
            "method": payload.get("method"),
            "hasParams": _js_truthy(payload.get("params")),
        }
    return {"parsedType": _js_typeof(payload), "parsedPreview": preview}
# endregion


# region 请求重放
def _replay_scope(scope: Scope, body: bytes) -> Scope:
    headers = [
        (key, value)
        for key, value in scope.get("headers", [])
        if key.lower() not in (b"content-length", b"content-type")
    ]
    headers.append((b"content-type", b"application/json"))
    headers.append((b"content-length", str(len(body)).encode("latin-1")))
    return {**scope, "headers": headers}


def _replay_receive(body: bytes, receive: Receive) -> Receive:
    """首次返回规范化后的请求体, 之后交回原始 receive (用于断开检测)"""
    delivered = False

    async def replay() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def _parse_error_response(message: str) -> JSONResponse:
    error = types.JSONRPCError(
        jsonrpc="2.0",
        id="server-error",
        error=types.ErrorData(code=types.PARSE_ERROR, message=message),
    )
    return JSONResponse(error.model_dump(by_alias=True, exclude_none=True), status_code=400)
# endregion


# region MCP 端点
class McpEndpoint:
    """
    POST /mcp 的 ASGI 端点

    状态流转: 接收 -> 解码 -> 解析 -> 分发。Server 与 transport 只服务一次请求。
    """
    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: ClientFactory = VercelClient,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response_started = False

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self._handle(scope, receive, tracked_send)
        except ClientDisconnect:
            logger.info("Client disconnected before request body was read")
        except Exception:
            logger.exception("MCP request failed")
            if not response_started:
                response = JSONResponse({"error": "Internal error"}, status_code=500)
                await response(scope, receive, send)

    async def _handle(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        body = await read_body(request)

        parsed = True
        payload: Any = None
        error: BodyParseError | None = None
        try:
            payload = parse_payload(decode_body(body))
        except BodyParseError as exc:
            parsed = False
            error = exc

        if request.query_params.get("debug") == "1":
            await JSONResponse(describe_payload(payload, parsed))(scope, receive, send)
            return

        if error is not None:
            logger.info("Rejected unparsable MCP request body", extra={"error": str(error)})
            await _parse_error_response(str(error))(scope, receive, send)
            return

        normalized = json.dumps(payload).encode("utf-8")
        await self._dispatch(_replay_scope(scope, normalized), _replay_receive(normalized, receive), send)

    async def _dispatch(self, scope: Scope, receive: Receive, send: Send) -> None:
        settings = self._settings or get_settings()
        context = ToolContext(settings=settings, client=self._client_factory(settings))
        server = build_server(context)
        manager = StreamableHTTPSessionManager(app=server, json_response=True, stateless=True)
        try:
            async with manager.run():
                await manager.handle_request(scope, receive, send)
        finally:
            logger.debug("MCP request transport closed")
# endregion
