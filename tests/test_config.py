from __future__ import annotations

import pytest
import yaml

from claude_mcp.engine.config import DEFAULT_MAX_OUTPUT_BYTES, ServerConfig
from claude_mcp.engine.yaml_config import load_yaml_config


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "CLAUDE_MCP_COMMAND",
        "CLAUDE_MCP_SHELL",
        "CLAUDE_MCP_TIMEOUT",
        "CLAUDE_MCP_MAX_OUTPUT_BYTES",
        "CLAUDE_MCP_DEFAULT_CWD",
        "CLAUDE_MCP_DEFAULT_MODEL",
        "CLAUDE_MCP_LOG_LEVEL",
        "CLAUDE_MCP_CONFIG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_server_config_defaults() -> None:
    cfg = ServerConfig()
    assert cfg.command == "claude"
    assert cfg.shell == "/bin/bash"
    assert cfg.timeout_seconds == 300.0
    assert cfg.max_output_bytes == DEFAULT_MAX_OUTPUT_BYTES == 10 * 1024 * 1024
    assert cfg.default_cwd is None
    assert cfg.default_model is None


def test_server_config_from_env_defaults(clean_env) -> None:
    assert ServerConfig.from_env() == ServerConfig()


def test_server_config_from_env_overrides(clean_env) -> None:
    clean_env.setenv("CLAUDE_MCP_COMMAND", "/opt/bin/claude")
    clean_env.setenv("CLAUDE_MCP_TIMEOUT", "600")
    clean_env.setenv("CLAUDE_MCP_MAX_OUTPUT_BYTES", "2048")
    clean_env.setenv("CLAUDE_MCP_DEFAULT_CWD", "/srv/app")
    clean_env.setenv("CLAUDE_MCP_DEFAULT_MODEL", "sonnet")
    clean_env.setenv("CLAUDE_MCP_LOG_LEVEL", "DEBUG")

    cfg = ServerConfig.from_env()

    assert cfg.command == "/opt/bin/claude"
    assert cfg.timeout_seconds == 600.0
    assert cfg.max_output_bytes == 2048
    assert cfg.default_cwd == "/srv/app"
    assert cfg.default_model == "sonnet"
    assert cfg.log_level == "DEBUG"


def test_server_config_from_env_empty_values_mean_unset(clean_env) -> None:
    clean_env.setenv("CLAUDE_MCP_DEFAULT_CWD", "")
    clean_env.setenv("CLAUDE_MCP_DEFAULT_MODEL", "")
    cfg = ServerConfig.from_env()
    assert cfg.default_cwd is None
    assert cfg.default_model is None


def test_yaml_config_loads_server_section(tmp_path) -> None:
    config_path = tmp_path / "claude-mcp.yaml"
    config_path.write_text(
        "server:\n"
        "  command: /usr/local/bin/claude\n"
        "  timeout_seconds: 120\n"
        "  max_output_bytes: 4096\n"
        "  default_cwd: /home/dev/project\n"
        "  default_model: opus\n"
    )

    cfg = load_yaml_config(config_path)

    assert cfg.command == "/usr/local/bin/claude"
    assert cfg.timeout_seconds == 120.0
    assert cfg.max_output_bytes == 4096
    assert cfg.default_cwd == "/home/dev/project"
    assert cfg.default_model == "opus"
    assert cfg.shell == "/bin/bash"


def test_yaml_config_empty_file_uses_defaults(tmp_path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("")
    assert load_yaml_config(config_path) == ServerConfig()


def test_yaml_config_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "nope.yaml")


def test_yaml_config_parse_error_raises(tmp_path) -> None:
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("server: [unclosed\n")
    with pytest.raises(yaml.YAMLError):
        load_yaml_config(config_path)
