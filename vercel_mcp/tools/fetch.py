"""
描述: fetch 工具
主要功能:
    - 区分部署标识 (dpl_ 前缀 / vercel.app 域名 / 完整 URL) 与项目标识
    - 查询部署或项目详情并生成摘要与资源链接
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from vercel_mcp.errors import UpstreamError
from vercel_mcp.tools.base import BaseTool
from vercel_mcp.tools.content import ContentItem, as_text, link_item, site_url, text_item
from vercel_mcp.tools.registry import ToolRegistry


logger = logging.getLogger(__name__)

DEPLOYMENT_ID_PREFIX = "dpl_"
DEPLOYMENT_DOMAIN = ".vercel.app"
_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


class IdentifierKind(str, enum.Enum):
    DEPLOYMENT = "deployment"
    PROJECT = "project"


class FetchArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: StrictStr

    @field_validator("id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("id must not be empty")
        return value


def classify_identifier(identifier: str) -> IdentifierKind:
    """判断标识指向部署还是项目"""
    if (
        identifier.startswith(DEPLOYMENT_ID_PREFIX)
        or DEPLOYMENT_DOMAIN in identifier
        or _URL_PATTERN.match(identifier)
    ):
        return IdentifierKind.DEPLOYMENT
    return IdentifierKind.PROJECT


def _title(kind: str, name: str, identifier: str) -> str:
    if name and identifier and name != identifier:
        return f"{kind}: {name} ({identifier})"
    return f"{kind}: {name or identifier}"


# region 摘要格式化
def deployment_content(deployment: dict[str, Any], identifier: str) -> list[ContentItem]:
    deployment_id = as_text(deployment.get("id") or deployment.get("uid")) or identifier
    name = as_text(deployment.get("name"))
    state = as_text(deployment.get("readyState") or deployment.get("state"))
    target = as_text(deployment.get("target"))
    url = as_text(deployment.get("url"))
    inspector_url = as_text(deployment.get("inspectorUrl"))
    live_url = site_url(url) if url else ""

    lines = [_title("Deployment", name, deployment_id)]
    if state:
        lines.append(f"State: {state}")
    if target:
        lines.append(f"Target: {target}")
    if live_url:
        lines.append(f"URL: {live_url}")
    if inspector_url:
        lines.append(f"Inspector: {inspector_url}")

    content: list[ContentItem] = [text_item("\n".join(lines))]
    if inspector_url:
        content.append(link_item(inspector_url, f"Inspect {name or deployment_id}"))
    if live_url:
        content.append(link_item(live_url, name or deployment_id, description=f"Live site of {deployment_id}"))
    return content


def _deployment_ids(project: dict[str, Any], limit: int) -> list[str]:
    deployments = project.get("latestDeployments")
    if not isinstance(deployments, list):
        return []
    ids: list[str] = []
    for deployment in deployments:
        if not isinstance(deployment, dict):
            continue
        deployment_id = as_text(deployment.get("id") or deployment.get("uid"))
        if deployment_id:
            ids.append(deployment_id)
    return ids[:limit]


def project_content(project: dict[str, Any], identifier: str, recent_limit: int) -> list[ContentItem]:
    name = as_text(project.get("name"))
    project_id = as_text(project.get("id")) or identifier
    lines = [_title("Project", name, project_id)]
    framework = as_text(project.get("framework"))
    if framework:
        lines.append(f"Framework: {framework}")
    recent = _deployment_ids(project, recent_limit)
    if recent:
        lines.append(f"Recent deployments: {', '.join(recent)}")
    return [text_item("\n".join(lines))]
# endregion


# region fetch 工具
@ToolRegistry.register
class FetchTool(BaseTool[FetchArguments]):
    name = "fetch"
    description = "Fetch a Vercel deployment (id, *.vercel.app host or URL) or project (id or name)"
    input_schema = {
        "type": "object",
        "properties": {
            "id": {
                "type": "string",
                "description": "Deployment id/URL (e.g. 'dpl_abc', 'my-app.vercel.app') or project id/name",
            },
        },
        "required": ["id"],
        "additionalProperties": False,
    }
    arguments_model = FetchArguments

    async def run(self, args: FetchArguments) -> list[ContentItem]:
        settings = self.context.settings
        identifier = args.id
        kind = classify_identifier(identifier)
        team_id = settings.vercel.default_team_id or None
        if kind is IdentifierKind.DEPLOYMENT:
            path = f"/v13/deployments/{quote(identifier, safe='')}"
        else:
            path = f"/v9/projects/{quote(identifier, safe='')}"

        try:
            payload = await self.context.client.get(path, {"teamId": team_id})
        except UpstreamError as exc:
            logger.warning(
                "Fetch failed",
                extra={"kind": kind.value, "path": exc.path, "status_code": exc.status_code},
            )
            return [text_item(f"Fetch failed: {exc}")]

        if not isinstance(payload, dict):
            payload = {}
        if kind is IdentifierKind.DEPLOYMENT:
            return deployment_content(payload, identifier)
        return project_content(payload, identifier, settings.fetch.recent_deployments)
# endregion
