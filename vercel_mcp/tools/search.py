"""
描述: search 工具
主要功能:
    - 解析查询文本中的 team:<id> 作用域
    - 并发查询 Vercel 项目与部署
    - 按 "项目在前, 部署在后" 的固定顺序组装内容
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, StrictStr

from vercel_mcp.errors import UpstreamError
from vercel_mcp.tools.base import BaseTool
from vercel_mcp.tools.content import ContentItem, as_text, join_parts, link_item, text_item
from vercel_mcp.tools.registry import ToolRegistry


logger = logging.getLogger(__name__)

_TEAM_PATTERN = re.compile(r"team:(\S+)")

PROJECTS_PATH = "/v10/projects"
DEPLOYMENTS_PATH = "/v6/deployments"
NO_MATCHES = "No matches."


class SearchArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: StrictStr


# region 辅助函数
def split_team_scope(query: str, default_team: str = "") -> tuple[str, str | None]:
    """
    拆分查询文本与 team 作用域

    返回:
        (去除 team:<id> 后的查询文本, team id 或 None)
    """
    match = _TEAM_PATTERN.search(query)
    team_id = match.group(1) if match else (default_team or None)
    text = _TEAM_PATTERN.sub("", query).strip()
    return text, team_id


def _items(payload: Any, key: str) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    items = payload.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def project_items(payload: Any, limit: int) -> list[ContentItem]:
    return [
        text_item(f"Project • {as_text(project.get('name'))} • id={as_text(project.get('id'))}")
        for project in _items(payload, "projects")[:limit]
    ]


def deployment_title(deployment: dict[str, Any]) -> str:
    state = deployment.get("readyState") or deployment.get("state")
    return join_parts("Deployment", deployment.get("name"), state, deployment.get("target"))


def deployment_items(payload: Any, limit: int) -> list[ContentItem]:
    content: list[ContentItem] = []
    for deployment in _items(payload, "deployments")[:limit]:
        title = deployment_title(deployment)
        inspector_url = deployment.get("inspectorUrl")
        if inspector_url:
            content.append(link_item(inspector_url, title))
        else:
            content.append(text_item(title))
    return content
# endregion


# region search 工具
@ToolRegistry.register
class SearchTool(BaseTool[SearchArguments]):
    name = "search"
    description = "Find projects and deployments on Vercel"
    input_schema = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search text, e.g. 'team:team_123 my-app'",
            },
        },
        "required": ["query"],
        "additionalProperties": False,
    }
    arguments_model = SearchArguments

    async def run(self, args: SearchArguments) -> list[ContentItem]:
        settings = self.context.settings
        client = self.context.client
        text, team_id = split_team_scope(args.query, settings.vercel.default_team_id)
        project_limit = settings.search.project_limit
        deployment_limit = settings.search.deployment_limit

        projects, deployments = await asyncio.gather(
            client.get(PROJECTS_PATH, {"search": text, "teamId": team_id, "limit": project_limit}),
            client.get(DEPLOYMENTS_PATH, {"app": text, "teamId": team_id, "limit": deployment_limit}),
            return_exceptions=True,
        )

        content: list[ContentItem] = []
        content.extend(self._fold(projects, "Project", lambda payload: project_items(payload, project_limit)))
        content.extend(
            self._fold(deployments, "Deployment", lambda payload: deployment_items(payload, deployment_limit))
        )
        if not content:
            content.append(text_item(NO_MATCHES))
        return content

    @staticmethod
    def _fold(result: Any, kind: str, render: Callable[[Any], list[ContentItem]]) -> list[ContentItem]:
        """一半失败时以文本说明替代, 其余异常继续抛出"""
        if isinstance(result, UpstreamError):
            logger.warning(
                "%s search failed",
                kind,
                extra={"path": result.path, "status_code": result.status_code},
            )
            return [text_item(f"{kind} search failed: {result}")]
        if isinstance(result, BaseException):
            raise result
        return render(result)
# endregion
