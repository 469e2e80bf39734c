"""Tests for the configuration module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mcp_chat.core.config import (
    SAMPLE_QUERIES,
    AppConfig,
    AppSettings,
    RemoteServerConfig,
    StdioServerConfig,
    load_config,
)
from mcp_chat.core.errors import ConfigurationError

VALID_CONFIG = """
// commentaire JSON5
{
  llm: {
    provider: "anthropic",
    model: "claude-3-5-haiku-latest",
    temperature: 0,
    max_tokens: 1000,
  },
  mcpServers: {
    fetch: { command: "uvx", args: ["mcp-server-fetch"] },
    remote: { url: "https://example.com/mcp", transport: "sse" },
  },
}
"""


def write_config(tmp_path, content: str):
    path = tmp_path / "llm-mcp-config.json5"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test the load_config function."""

    def test_load_valid_json5(self, tmp_path) -> None:
        """Comments, unquoted keys and trailing commas are accepted."""
        config = load_config(write_config(tmp_path, VALID_CONFIG))

        assert config.llm.model_provider == "anthropic"
        assert config.llm.model == "claude-3-5-haiku-latest"
        assert config.llm.temperature == 0
        assert config.llm.max_tokens == 1000

        assert list(config.mcp_servers) == ["fetch", "remote"]
        assert isinstance(config.mcp_servers["fetch"], StdioServerConfig)
        assert config.mcp_servers["fetch"].args == ["mcp-server-fetch"]
        assert isinstance(config.mcp_servers["remote"], RemoteServerConfig)
        assert config.mcp_servers["remote"].transport == "sse"

    def test_default_sample_queries(self, tmp_path) -> None:
        config = load_config(write_config(tmp_path, VALID_CONFIG))
        assert config.sample_queries == list(SAMPLE_QUERIES)

    def test_sample_queries_override(self, tmp_path) -> None:
        content = '{llm: {provider: "openai", model: "gpt-4o"}, sampleQueries: ["one", "two"]}'
        config = load_config(write_config(tmp_path, content))
        assert config.sample_queries == ["one", "two"]
        assert config.mcp_servers == {}

    def test_env_var_substitution(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("TEST_MCP_TOKEN", "secret-token")
        content = """{
          llm: {provider: "openai", model: "gpt-4o"},
          mcpServers: {
            remote: {url: "https://example.com/mcp", headers: {Authorization: "Bearer ${TEST_MCP_TOKEN}"}},
          },
        }"""
        config = load_config(write_config(tmp_path, content))
        assert config.mcp_servers["remote"].headers == {
            "Authorization": "Bearer secret-token"
        }

    def test_missing_env_var(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("TEST_MCP_UNSET_VAR", raising=False)
        content = '{llm: {provider: "openai", model: "${TEST_MCP_UNSET_VAR}"}}'
        with pytest.raises(ConfigurationError, match="TEST_MCP_UNSET_VAR"):
            load_config(write_config(tmp_path, content))

    def test_env_var_in_comment_is_ignored(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("TEST_MCP_UNSET_IN_COMMENT", raising=False)
        content = """{
          // token: "${TEST_MCP_UNSET_IN_COMMENT}"
          llm: {provider: "openai", model: "gpt-4o"},
        }"""
        config = load_config(write_config(tmp_path, content))
        assert config.llm.model == "gpt-4o"

    def test_shipped_config_loads_without_optional_env_vars(self, monkeypatch) -> None:
        """The repository's default config only references variables in comments."""
        monkeypatch.delenv("MCP_REMOTE_TOKEN", raising=False)
        shipped = Path(__file__).resolve().parents[2] / "llm-mcp-config.json5"

        config = load_config(shipped)

        assert config.llm.model_provider == "openai"
        assert "remote" not in config.mcp_servers
        assert set(config.mcp_servers) == {"filesystem", "fetch", "weather"}

    def test_env_value_with_backslashes_is_kept_verbatim(
        self, tmp_path, monkeypatch
    ) -> None:
        monkeypatch.setenv("TEST_MCP_DIR", r"C:\Users\me")
        content = """{
          llm: {provider: "openai", model: "gpt-4o"},
          mcpServers: {fs: {command: "npx", args: ["${TEST_MCP_DIR}"], cwd: "${TEST_MCP_DIR}"}},
        }"""
        config = load_config(write_config(tmp_path, content))
        assert config.mcp_servers["fs"].args == [r"C:\Users\me"]
        assert config.mcp_servers["fs"].cwd == r"C:\Users\me"

    def test_env_value_with_quote_is_kept_verbatim(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("TEST_MCP_TOKEN", 'ab"cd')
        content = '{llm: {provider: "openai", model: "gpt-4o", api_key: "${TEST_MCP_TOKEN}"}}'
        config = load_config(write_config(tmp_path, content))
        assert config.llm.api_key == 'ab"cd'

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.json5")

    def test_malformed_json5(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_config(write_config(tmp_path, '{llm: {provider: "openai"'))

    def test_top_level_must_be_object(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="object"):
            load_config(write_config(tmp_path, "[1, 2, 3]"))

    def test_missing_llm_section(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(write_config(tmp_path, "{mcpServers: {}}"))

    def test_server_entry_needs_command_or_url(self, tmp_path) -> None:
        content = '{llm: {provider: "openai", model: "gpt-4o"}, mcpServers: {bad: {args: ["x"]}}}'
        with pytest.raises(ConfigurationError):
            load_config(write_config(tmp_path, content))


class TestAppConfig:
    """Test the pydantic models directly."""

    def test_populate_by_field_name(self) -> None:
        config = AppConfig.model_validate(
            {
                "llm": {"model_provider": "openai", "model": "gpt-4o"},
                "mcp_servers": {"fs": {"command": "npx", "args": ["server"]}},
            }
        )
        assert config.llm.model_provider == "openai"
        assert config.mcp_servers["fs"].command == "npx"

    def test_remote_default_transport(self) -> None:
        config = AppConfig.model_validate(
            {
                "llm": {"modelProvider": "openai", "model": "gpt-4o"},
                "mcpServers": {"remote": {"url": "http://localhost:8000/mcp"}},
            }
        )
        assert config.mcp_servers["remote"].transport == "streamable_http"


class TestAppSettings:
    """Test the AppSettings class."""

    def test_default_values_when_env_vars_not_set(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, {}, clear=True):
            settings = AppSettings()

        assert settings.LOG_LEVEL == "WARNING"
        assert settings.THREAD_ID == "cli-thread"
        assert settings.NO_COLOR is False
        assert settings.MCP_INIT_TIMEOUT == 10.0

    def test_env_prefix(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        with patch.dict(
            os.environ,
            {"MCP_CHAT_THREAD_ID": "my-thread", "MCP_CHAT_NO_COLOR": "true"},
            clear=True,
        ):
            settings = AppSettings()

        assert settings.THREAD_ID == "my-thread"
        assert settings.NO_COLOR is True
