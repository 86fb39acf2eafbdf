"""
描述: MCP 工具基类定义
主要功能:
    - 定义 BaseTool 抽象基类 (参数校验 + 执行)
    - 定义 ToolContext 上下文对象
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from mcp import types
from pydantic import BaseModel, ValidationError

from vercel_mcp.config import Settings
from vercel_mcp.errors import MalformedInputError
from vercel_mcp.tools.content import ContentItem, text_item
from vercel_mcp.vercel.client import VercelClient


ArgsT = TypeVar("ArgsT", bound=BaseModel)


# region 工具上下文与基类
@dataclass(frozen=True)
class ToolContext:
    """工具执行上下文 (依赖注入)"""
    settings: Settings
    client: VercelClient


class BaseTool(ABC, Generic[ArgsT]):
    """MCP 工具抽象基类"""
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    input_schema: ClassVar[dict[str, Any]] = {}
    arguments_model: ClassVar[type[BaseModel]]

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    @classmethod
    def definition(cls) -> types.Tool:
        return types.Tool(name=cls.name, description=cls.description, inputSchema=cls.input_schema)

    @classmethod
    def parse_arguments(cls, arguments: dict[str, Any] | None) -> ArgsT:
        """
        校验工具参数

        抛出:
            MalformedInputError: 缺少必填字段或类型错误
        """
        try:
            return cls.arguments_model.model_validate(arguments or {})  # type: ignore[return-value]
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in exc.errors()
            )
            raise MalformedInputError(f"Invalid arguments for {cls.name}: {problems}") from exc

    async def execute(self, arguments: dict[str, Any] | None) -> list[ContentItem]:
        """校验参数后执行, 参数错误转换为文本内容"""
        try:
            args = self.parse_arguments(arguments)
        except MalformedInputError as exc:
            return [text_item(str(exc))]
        return await self.run(args)

    @abstractmethod
    async def run(self, args: ArgsT) -> list[ContentItem]:
        """
        执行工具逻辑

        参数:
            args: 已校验的工具参数

        返回:
            有序内容列表
        """
        raise NotImplementedError
# endregion
