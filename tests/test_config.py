"""
测试配置管理
"""

import json
import os

import pytest

from dproc.config import (
    CliConfig,
    ConfigManager,
    LLMConfig,
    load_config,
    mask_secret,
    resolve_api_key,
    validate_config,
)
from dproc.errors import ConfigError


def test_default_dir_from_environment(isolated_config_dir):
    assert ConfigManager().config_path == isolated_config_dir / "config.json"


def test_load_missing_file_returns_empty(tmp_path):
    config = ConfigManager(tmp_path / "nowhere").load()
    assert config == CliConfig()


def test_save_and_load_use_camel_case_keys(tmp_path):
    manager = ConfigManager(tmp_path / "cfg")
    manager.save(CliConfig(
        llm=LLMConfig(provider="openai", model="gpt-4o-mini"),
        default_output_dir="./output",
    ))

    data = json.loads(manager.config_path.read_text(encoding="utf-8"))
    assert data == {
        "llm": {"provider": "openai", "model": "gpt-4o-mini"},
        "defaultOutputDir": "./output",
    }
    assert manager.load().llm.model == "gpt-4o-mini"


def test_load_existing_camel_case_file(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.config_path.write_text(
        json.dumps({"llm": {"provider": "gemini", "apiKey": ""}, "lastUsedBundle": "b.json"}),
        encoding="utf-8",
    )
    config = manager.load()
    assert config.llm.provider == "gemini"
    assert config.last_used_bundle == "b.json"


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"llm": {"provider": "nope"}}'])
def test_load_malformed_file(tmp_path, content):
    manager = ConfigManager(tmp_path)
    manager.config_path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        manager.load()


def test_update_merges_fields(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.save(CliConfig(default_output_dir="./out"))

    config = manager.update(last_used_bundle="data.bundle")

    assert config.default_output_dir == "./out"
    assert manager.load().last_used_bundle == "data.bundle"


def test_set_value_dotted_keys(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.set_value("llm.provider", "deepseek")
    manager.set_value("llm.model", "deepseek-chat")
    manager.set_value("default_output_dir", "./reports")

    config = manager.load()
    assert config.llm == LLMConfig(provider="deepseek", model="deepseek-chat")
    assert config.default_output_dir == "./reports"


@pytest.mark.parametrize("key,value", [("llm.unknown", "x"), ("model", "x"), ("llm.provider", "acme")])
def test_set_value_rejects_invalid(tmp_path, key, value):
    with pytest.raises(ConfigError):
        ConfigManager(tmp_path).set_value(key, value)


def test_resolve_api_key_prefers_config():
    config = CliConfig(llm=LLMConfig(provider="openai", api_key="sk-from-config"))
    assert resolve_api_key(config, {"OPENAI_API_KEY": "sk-env"}) == "sk-from-config"


def test_resolve_api_key_from_explicit_environment():
    config = CliConfig(llm=LLMConfig(provider="gemini"))
    environ = {"GEMINI_API_KEY": "g-123"}
    before = dict(os.environ)

    assert resolve_api_key(config, environ) == "g-123"
    assert resolve_api_key(config, {}) is None
    assert dict(os.environ) == before


def test_resolve_api_key_without_provider():
    assert resolve_api_key(CliConfig(), {"OPENAI_API_KEY": "x"}) is None


def test_validate_config():
    assert validate_config(CliConfig(), {}) == ["llm.provider 未设置，请运行 dproc init"]

    config = CliConfig(llm=LLMConfig(provider="openai", model="gpt-4o-mini"))
    problems = validate_config(config, {})
    assert len(problems) == 1
    assert "OPENAI_API_KEY" in problems[0]
    assert validate_config(config, {"OPENAI_API_KEY": "sk"}) == []


def test_mask_secret():
    assert mask_secret("sk-1234567890abcdef") == "sk-12345..."


def test_load_config_reads_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DEEPSEEK_API_KEY=ds-from-dotenv\n", encoding="utf-8")
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    ConfigManager().save(CliConfig(llm=LLMConfig(provider="deepseek", model="deepseek-chat")))

    config = load_config(env_file)

    assert resolve_api_key(config) == "ds-from-dotenv"
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
