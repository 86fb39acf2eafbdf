"""
描述: MCP 工具注册入口。
主要功能:
    - 导入并注册 search、fetch 工具
"""

from vercel_mcp.tools import fetch, search  # noqa: F401
