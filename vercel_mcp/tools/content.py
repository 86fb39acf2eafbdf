"""
描述: 工具内容构建
主要功能:
    - 构建 text / resource_link 内容项
    - URL 非法时回退为文本内容
    - 摘要字段拼接
"""

from __future__ import annotations

import logging
from typing import Any, Union

from mcp import types
from pydantic import ValidationError


logger = logging.getLogger(__name__)

ContentItem = Union[types.TextContent, types.ResourceLink]

SEPARATOR = " • "


def text_item(text: str) -> types.TextContent:
    return types.TextContent(type="text", text=text)


def link_item(uri: str, name: str, description: str | None = None) -> ContentItem:
    """上游返回的 URL 不合法时退化为只含名称的文本项"""
    try:
        return types.ResourceLink(type="resource_link", uri=uri, name=name, description=description)
    except ValidationError:
        logger.warning("Invalid resource link uri", extra={"uri": uri})
        return text_item(name)


def site_url(host_or_url: str) -> str:
    """Vercel 返回的 url 字段不带协议"""
    if host_or_url.startswith(("http://", "https://")):
        return host_or_url
    return f"https://{host_or_url}"


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def join_parts(*parts: Any) -> str:
    return SEPARATOR.join(text for text in (as_text(part) for part in parts) if text)
