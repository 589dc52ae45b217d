"""
配置管理模块

配置文件位于 ~/.dproc/config.json（可用 DPROC_CONFIG_DIR 覆盖），
API Key 不写入文件，从环境变量 {PROVIDER}_API_KEY 读取
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigError


ProviderName = Literal["gemini", "openai", "deepseek"]

PROVIDERS: dict[str, str] = {
    "gemini": "Google Gemini",
    "openai": "OpenAI",
    "deepseek": "DeepSeek",
}

DEFAULT_MODELS: dict[str, str] = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "deepseek": "deepseek-chat",
}

DEFAULT_OUTPUT_DIR = "./output"
CONFIG_FILE_NAME = "config.json"


class LLMConfig(BaseModel):
    """LLM 配置"""
    model_config = ConfigDict(populate_by_name=True)

    provider: ProviderName | None = Field(default=None, description="模型服务商")
    model: str | None = Field(default=None, description="模型名称")
    api_key: str | None = Field(default=None, alias="apiKey", description="API Key（一般留空，从环境变量读取）")


class CliConfig(BaseModel):
    """CLI 配置"""
    model_config = ConfigDict(populate_by_name=True)

    llm: LLMConfig | None = Field(default=None, description="LLM 配置")
    default_output_dir: str | None = Field(default=None, alias="defaultOutputDir", description="默认输出目录")
    last_used_bundle: str | None = Field(default=None, alias="lastUsedBundle", description="最近使用的 bundle")

    def to_json(self) -> str:
        return json.dumps(
            self.model_dump(by_alias=True, exclude_none=True),
            ensure_ascii=False,
            indent=2,
        )


def default_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    override = environ.get("DPROC_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".dproc"


class ConfigManager:
    """
    配置文件读写

    - load(): 文件不存在时返回空配置，格式错误抛出 ConfigError
    - save(): 自动创建配置目录
    """

    def __init__(self, config_dir: str | Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def exists(self) -> bool:
        return self.config_path.is_file()

    def load(self) -> CliConfig:
        """
        加载配置

        Raises:
            ConfigError: 文件无法读取或内容不合法
        """
        if not self.config_path.exists():
            return CliConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"无法读取配置文件 {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"配置文件格式错误 {self.config_path}: 顶层必须是对象")

        try:
            return CliConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"配置文件格式错误 {self.config_path}: {e}") from e

    def save(self, config: CliConfig) -> Path:
        """保存配置"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(config.to_json() + "\n")
        except OSError as e:
            raise ConfigError(f"无法写入配置文件 {self.config_path}: {e}") from e
        return self.config_path

    def update(self, **changes: Any) -> CliConfig:
        """合并部分字段后保存"""
        current = self.load()
        data = current.model_dump(exclude_none=True)
        data.update(changes)
        try:
            config = CliConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"配置值不合法: {e}") from e
        self.save(config)
        return config

    def set_value(self, key: str, value: str) -> CliConfig:
        """
        按点分路径设置单个值，如 llm.model、defaultOutputDir

        Raises:
            ConfigError: 键不存在或值不合法
        """
        current = self.load()
        data = current.model_dump(by_alias=True, exclude_none=True)
        parts = _normalize_key(key)

        node = data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise ConfigError(f"无效的配置键: {key}")
        node[parts[-1]] = value

        try:
            config = CliConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"配置值不合法 {key}={value}: {e}") from e
        self.save(config)
        return config


# 允许的配置键（snake_case 与 camelCase 均可）
_KEY_ALIASES = {
    "llm": "llm",
    "provider": "provider",
    "model": "model",
    "api_key": "apiKey",
    "apikey": "apiKey",
    "default_output_dir": "defaultOutputDir",
    "defaultoutputdir": "defaultOutputDir",
    "last_used_bundle": "lastUsedBundle",
    "lastusedbundle": "lastUsedBundle",
}

_VALID_PATHS = {
    ("llm", "provider"),
    ("llm", "model"),
    ("llm", "apiKey"),
    ("defaultOutputDir",),
    ("lastUsedBundle",),
}


def _normalize_key(key: str) -> list[str]:
    parts = []
    for raw in key.split("."):
        normalized = _KEY_ALIASES.get(raw.strip().lower())
        if normalized is None:
            raise ConfigError(f"无效的配置键: {key}")
        parts.append(normalized)
    if tuple(parts) not in _VALID_PATHS:
        raise ConfigError(f"无效的配置键: {key}")
    return parts


def load_config(
    env_file: str | Path | None = None,
    config_dir: str | Path | None = None,
) -> CliConfig:
    """
    加载 .env 与配置文件

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env
        config_dir: 配置目录，默认 ~/.dproc

    Returns:
        CliConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return ConfigManager(config_dir).load()


def api_key_env_var(provider: str) -> str:
    return f"{provider.upper()}_API_KEY"


def resolve_api_key(
    config: CliConfig,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """
    解析 API Key：优先配置文件，其次环境变量 {PROVIDER}_API_KEY

    只读取传入的 environ（默认 os.environ），不修改进程环境
    """
    if not config.llm or not config.llm.provider:
        return None
    if config.llm.api_key:
        return config.llm.api_key

    environ = os.environ if environ is None else environ
    return environ.get(api_key_env_var(config.llm.provider)) or None


def validate_config(
    config: CliConfig,
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """检查配置，返回问题列表（为空表示有效）"""
    problems = []
    if not config.llm or not config.llm.provider:
        problems.append("llm.provider 未设置，请运行 dproc init")
        return problems
    if not config.llm.model:
        problems.append("llm.model 未设置")
    if not resolve_api_key(config, environ):
        problems.append(f"未找到 API Key，请设置环境变量 {api_key_env_var(config.llm.provider)}")
    return problems


def mask_secret(value: str) -> str:
    """只显示前 8 个字符"""
    return value[:8] + "..."
