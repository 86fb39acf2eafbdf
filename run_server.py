"""
描述: MCP Gateway 启动脚本
主要功能:
    - 配置 asyncio 策略 (Windows)
    - 使用 uvicorn 启动 ASGI 服务
"""
import asyncio
import sys

# Windows 兼容性：在任何 asyncio 操作前设置策略
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from dotenv import load_dotenv
load_dotenv()

import uvicorn

from vercel_mcp.config import get_settings

if __name__ == "__main__":
    server = get_settings().server
    print(f"Starting Vercel MCP Gateway on http://{server.host}:{server.port}/mcp")
    print("Press Ctrl+C to stop")
    uvicorn.run("vercel_mcp.main:app", host=server.host, port=server.port, log_level="info")
