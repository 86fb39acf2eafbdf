from __future__ import annotations

import asyncio

import pytest
from mcp import types

from tests.fakes import FakeVercelClient
from vercel_mcp.config import Settings, VercelSettings
from vercel_mcp.errors import UpstreamError
from vercel_mcp.tools.base import ToolContext
from vercel_mcp.tools.fetch import FetchTool, IdentifierKind, classify_identifier


def _run(client: FakeVercelClient, arguments: dict | None, settings: Settings | None = None) -> list:
    context = ToolContext(settings=settings or Settings(), client=client)  # type: ignore[arg-type]
    return asyncio.run(FetchTool(context).execute(arguments))


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("dpl_abc", IdentifierKind.DEPLOYMENT),
        ("my-app-git-main-acme.vercel.app", IdentifierKind.DEPLOYMENT),
        ("https://example.com/anything", IdentifierKind.DEPLOYMENT),
        ("HTTP://example.com", IdentifierKind.DEPLOYMENT),
        ("prj_123", IdentifierKind.PROJECT),
        ("my-app", IdentifierKind.PROJECT),
        ("vercel", IdentifierKind.PROJECT),
        ("xdpl_abc", IdentifierKind.PROJECT),
    ],
)
def test_classify_identifier(identifier: str, expected: IdentifierKind) -> None:
    assert classify_identifier(identifier) is expected


def test_deployment_summary_without_inspector() -> None:
    client = FakeVercelClient({
        "/v13/deployments/dpl_abc": {
            "id": "dpl_abc",
            "name": "site",
            "readyState": "READY",
            "target": "production",
            "url": "site.example.app",
        }
    })
    content = _run(client, {"id": "dpl_abc"})

    assert len(content) == 2
    summary, link = content
    assert isinstance(summary, types.TextContent)
    assert summary.text.split("\n") == [
        "Deployment: site (dpl_abc)",
        "State: READY",
        "Target: production",
        "URL: https://site.example.app",
    ]
    assert isinstance(link, types.ResourceLink)
    assert str(link.uri).rstrip("/") == "https://site.example.app"


def test_deployment_with_inspector_adds_both_links() -> None:
    client = FakeVercelClient({
        "/v13/deployments/https%3A%2F%2Fsite.vercel.app": {
            "uid": "dpl_xyz",
            "name": "site",
            "state": "ERROR",
            "url": "site.vercel.app",
            "inspectorUrl": "https://vercel.com/acme/site/xyz",
        }
    })
    content = _run(client, {"id": "https://site.vercel.app"})

    summary, inspector, live = content
    assert summary.text.split("\n") == [
        "Deployment: site (dpl_xyz)",
        "State: ERROR",
        "URL: https://site.vercel.app",
        "Inspector: https://vercel.com/acme/site/xyz",
    ]
    assert str(inspector.uri) == "https://vercel.com/acme/site/xyz"
    assert str(live.uri).rstrip("/") == "https://site.vercel.app"


def test_project_summary_with_recent_deployments() -> None:
    client = FakeVercelClient({
        "/v9/projects/my-app": {
            "id": "prj_1",
            "name": "my-app",
            "framework": "nextjs",
            "latestDeployments": [{"id": f"dpl_{i}"} for i in range(5)],
        }
    })
    settings = Settings(vercel=VercelSettings(default_team_id="team_1"))
    content = _run(client, {"id": "my-app"}, settings)

    assert len(content) == 1
    assert content[0].text.split("\n") == [
        "Project: my-app (prj_1)",
        "Framework: nextjs",
        "Recent deployments: dpl_0, dpl_1, dpl_2",
    ]
    assert client.calls == [("/v9/projects/my-app", {"teamId": "team_1"})]


def test_project_summary_omits_absent_fields() -> None:
    client = FakeVercelClient({"/v9/projects/prj_2": {"id": "prj_2", "name": "bare", "latestDeployments": []}})
    content = _run(client, {"id": "prj_2"})

    assert content[0].text == "Project: bare (prj_2)"


@pytest.mark.parametrize("arguments", [{"id": ""}, {"id": "   "}, {}, None, {"id": 7}])
def test_missing_or_empty_id_rejected_without_upstream_calls(arguments) -> None:
    client = FakeVercelClient()
    content = _run(client, arguments)

    assert len(content) == 1
    assert content[0].text.startswith("Invalid arguments for fetch")
    assert client.calls == []


def test_upstream_failure_becomes_text_item() -> None:
    client = FakeVercelClient({"/v9/projects/ghost": UpstreamError("/v9/projects/ghost", 404, "not found")})
    content = _run(client, {"id": "ghost"})

    assert [item.text for item in content] == ["Fetch failed: Vercel API /v9/projects/ghost failed 404: not found"]


def test_fetch_is_idempotent() -> None:
    client = FakeVercelClient({
        "/v13/deployments/dpl_abc": {"id": "dpl_abc", "name": "site", "url": "site.example.app"}
    })
    first = _run(client, {"id": "dpl_abc"})
    second = _run(client, {"id": "dpl_abc"})

    assert [item.model_dump() for item in first] == [item.model_dump() for item in second]


def test_invalid_inspector_url_falls_back_to_text() -> None:
    client = FakeVercelClient({
        "/v13/deployments/dpl_bad": {
            "id": "dpl_bad",
            "name": "site",
            "url": "site.example.app",
            "inspectorUrl": "vercel.com/x",
        }
    })
    content = _run(client, {"id": "dpl_bad"})

    summary, inspector, live = content
    assert "Inspector: vercel.com/x" in summary.text
    assert isinstance(inspector, types.TextContent)
    assert inspector.text == "Inspect site"
    assert isinstance(live, types.ResourceLink)
