"""Configuration loaded from environment variables.

All settings have sensible defaults. Override via CLAUDE_MCP_* env vars
or a YAML file (see yaml_config.py).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


@dataclass
class ServerConfig:
    """Bridge server configuration."""

    # CLI binary invoked for every turn
    command: str = "claude"
    # Shell used to run the assembled command line
    shell: str = "/bin/bash"
    # Max wall-clock time for a single CLI run.
    # Set to 0 (or a negative value) to disable timeout.
    timeout_seconds: float = 300.0
    # Combined stdout + stderr capture ceiling
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES

    # Applied when a request does not carry its own value.
    # None means the server's own working directory / the CLI's default model.
    default_cwd: str | None = None
    default_model: str | None = None

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Load configuration from CLAUDE_MCP_* environment variables."""
        overrides = {
            k: v for k, v in os.environ.items() if k.startswith("CLAUDE_MCP_")
        }
        if overrides:
            logger.info(
                "ServerConfig.from_env: CLAUDE_MCP_* env overrides: %s",
                ", ".join(f"{k}={v}" for k, v in sorted(overrides.items())),
            )
        else:
            logger.debug("ServerConfig.from_env: no CLAUDE_MCP_* env vars set, using defaults")

        config = cls(
            command=os.getenv("CLAUDE_MCP_COMMAND", cls.command),
            shell=os.getenv("CLAUDE_MCP_SHELL", cls.shell),
            timeout_seconds=float(os.getenv(
                "CLAUDE_MCP_TIMEOUT", str(cls.timeout_seconds)
            )),
            max_output_bytes=int(os.getenv(
                "CLAUDE_MCP_MAX_OUTPUT_BYTES", str(cls.max_output_bytes)
            )),
            default_cwd=os.getenv("CLAUDE_MCP_DEFAULT_CWD") or None,
            default_model=os.getenv("CLAUDE_MCP_DEFAULT_MODEL") or None,
            log_level=os.getenv("CLAUDE_MCP_LOG_LEVEL", cls.log_level),
        )
        logger.info(
            "ServerConfig.from_env: command=%s timeout=%ss cwd=%s log_level=%s",
            config.command, config.timeout_seconds,
            config.default_cwd, config.log_level,
        )
        return config
