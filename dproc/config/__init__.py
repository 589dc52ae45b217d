"""
配置模块
"""

from .settings import (
    DEFAULT_MODELS,
    DEFAULT_OUTPUT_DIR,
    PROVIDERS,
    CliConfig,
    ConfigManager,
    LLMConfig,
    api_key_env_var,
    load_config,
    mask_secret,
    resolve_api_key,
    validate_config,
)

__all__ = [
    "DEFAULT_MODELS",
    "DEFAULT_OUTPUT_DIR",
    "PROVIDERS",
    "CliConfig",
    "ConfigManager",
    "LLMConfig",
    "api_key_env_var",
    "load_config",
    "mask_secret",
    "resolve_api_key",
    "validate_config",
]
