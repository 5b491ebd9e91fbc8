"""YAML configuration loader.

Loads a single YAML file as an alternative to CLAUDE_MCP_* env vars.
Only the ``server`` section is read; missing keys keep their defaults.

Example YAML:
    server:
      command: claude
      shell: /bin/bash
      timeout_seconds: 300
      max_output_bytes: 10485760
      default_cwd: /path/to/project
      default_model: sonnet
      log_level: INFO
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import ServerConfig

logger = logging.getLogger(__name__)


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def load_yaml_config(path: str | Path) -> ServerConfig:
    """Load and parse a YAML config file into a ServerConfig.

    Raises FileNotFoundError or yaml.YAMLError; callers decide
    whether a broken config file is fatal.
    """
    path = Path(path)
    logger.info(
        "load_yaml_config: attempting to load config from %s (exists=%s)",
        path, path.exists()
    )
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(
            "load_yaml_config: config file not found at %s (absolute path: %s)",
            path, path.absolute()
        )
        raise
    except yaml.YAMLError as exc:
        logger.error(
            "load_yaml_config: YAML parse error in %s: %s",
            path, exc
        )
        raise

    server_raw = raw.get("server") or {}
    config = ServerConfig(
        command=str(server_raw.get("command", ServerConfig.command)),
        shell=str(server_raw.get("shell", ServerConfig.shell)),
        timeout_seconds=float(server_raw.get(
            "timeout_seconds", ServerConfig.timeout_seconds
        )),
        max_output_bytes=int(server_raw.get(
            "max_output_bytes", ServerConfig.max_output_bytes
        )),
        default_cwd=_optional_str(server_raw.get("default_cwd")),
        default_model=_optional_str(server_raw.get("default_model")),
        log_level=str(server_raw.get("log_level", ServerConfig.log_level)),
    )
    logger.info(
        "Parsed YAML config %s: command=%s timeout=%ss cwd=%s",
        path.name, config.command, config.timeout_seconds, config.default_cwd,
    )
    return config
