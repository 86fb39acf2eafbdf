"""
描述: MCP Gateway 全局配置加载器
主要功能:
    - 统一管理 Gateway 配置 (只读, 进程启动时构建一次)
    - 支持 YAML 文件加载与环境变量覆盖
    - 提供 Vercel / search / fetch 等业务配置模型
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


# region 基础配置模型
class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerSettings(_FrozenModel):
    """服务监听配置"""
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False


class RequestSettings(_FrozenModel):
    timeout: float | None = None


class VercelSettings(_FrozenModel):
    """Vercel REST API 配置"""
    token: str = ""
    default_team_id: str = ""
    api_base: str = "https://api.vercel.com"
    request: RequestSettings = Field(default_factory=RequestSettings)


class SearchSettings(_FrozenModel):
    project_limit: int = 5
    deployment_limit: int = 5


class FetchSettings(_FrozenModel):
    recent_deployments: int = 3


class LoggingSettings(_FrozenModel):
    """日志系统配置"""
    level: str = "INFO"
    format: str = "json"


class Settings(_FrozenModel):
    """Gateway 配置聚合根"""
    server: ServerSettings = Field(default_factory=ServerSettings)
    vercel: VercelSettings = Field(default_factory=VercelSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
# endregion


# region 配置加载逻辑
def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                key, default = expr.split(":-", 1)
                return os.getenv(key, default)
            return os.getenv(expr, "")

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: _expand_env(val) for key, val in value.items()}
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _expand_env(data)


def _set_nested(data: dict[str, Any], keys: list[str], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    mapping = {
        "VERCEL_TOKEN": ["vercel", "token"],
        "VERCEL_TEAM_ID": ["vercel", "default_team_id"],
        "VERCEL_API_BASE": ["vercel", "api_base"],
        "VERCEL_REQUEST_TIMEOUT": ["vercel", "request", "timeout"],
        "LOG_LEVEL": ["logging", "level"],
        "LOG_FORMAT": ["logging", "format"],
        "SERVER_HOST": ["server", "host"],
        "SERVER_PORT": ["server", "port"],
    }
    for env_key, path in mapping.items():
        env_value = os.getenv(env_key)
        if env_value is not None and env_value != "":
            _set_nested(data, path, env_value)
    return data


def load_settings(config_path: str | None = None) -> Settings:
    path = Path(config_path or os.getenv("CONFIG_PATH", "config.yaml"))
    data = _load_yaml(path)
    data = _apply_env_overrides(data)
    return Settings.model_validate(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取单例配置对象"""
    return load_settings()
# endregion
