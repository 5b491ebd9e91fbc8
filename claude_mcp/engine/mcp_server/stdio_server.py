"""Stdio MCP server exposing the Claude CLI as chat tools.

Each tool call runs one `claude -p ... --output-format json` subprocess
and returns its result text, with the CLI session id attached as
``_meta.sessionId`` so clients can continue the conversation.

Usage:
    claude-mcp-server
    python -m claude_mcp.engine.mcp_server.stdio_server \
        --config claude-mcp.yaml
    python -m claude_mcp.engine.mcp_server.stdio_server \
        --cwd /path/to/project --timeout 600 --verbose
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from ... import __version__
from ..config import ServerConfig
from ..executor import ShellExecutor
from ..providers.claude_cli_provider import ClaudeCliProvider
from ..yaml_config import load_yaml_config
from .tools import register_tools

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Parsed CLI args, set in main() before server starts
_parsed_args: argparse.Namespace | None = None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI args for the MCP server process."""
    parser = argparse.ArgumentParser(
        prog="claude-mcp-server",
        description="MCP server exposing the Claude CLI as chat tools",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "YAML config file (replaces CLAUDE_MCP_* env vars). "
            "Also reads CLAUDE_MCP_CONFIG_FILE env var."
        ),
    )
    parser.add_argument(
        "--cwd",
        default=None,
        help="Default working directory for claude CLI runs",
    )
    parser.add_argument(
        "--command",
        default=None,
        help="Path to the claude CLI binary",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-call timeout in seconds (0 disables)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> ServerConfig:
    """Build ServerConfig from YAML or env vars, then apply CLI overrides."""
    config_file = args.config or os.getenv("CLAUDE_MCP_CONFIG_FILE")
    if config_file:
        logger.info(
            "Config source: %s (from %s)",
            config_file,
            "--config" if args.config else "CLAUDE_MCP_CONFIG_FILE env",
        )
        config = load_yaml_config(config_file)
    else:
        logger.info("No config file specified; using env vars / defaults")
        config = ServerConfig.from_env()

    if args.cwd:
        config.default_cwd = args.cwd
    if args.command:
        config.command = args.command
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def build_provider(config: ServerConfig) -> ClaudeCliProvider:
    """Wire a ShellExecutor and ClaudeCliProvider from config."""
    executor = ShellExecutor(
        shell=config.shell,
        timeout_seconds=config.timeout_seconds,
        max_output_bytes=config.max_output_bytes,
    )
    return ClaudeCliProvider(
        executor,
        command=config.command,
        default_model=config.default_model,
        default_cwd=config.default_cwd,
    )


def _apply_log_level(level: str) -> None:
    """Set the root log level, keeping INFO for unrecognized names."""
    try:
        logging.getLogger().setLevel(level.upper())
    except ValueError:
        logger.warning("Unknown log level %r; using INFO", level)
        logging.getLogger().setLevel(logging.INFO)


@asynccontextmanager
async def server_lifespan(server: FastMCP):
    """Build config and provider for the server lifetime.

    Yields context dict accessible via ctx.request_context.lifespan_context
    in tool handlers.
    """
    global _parsed_args
    if _parsed_args is None:
        _parsed_args = _parse_args([])

    config = load_config(_parsed_args)
    _apply_log_level(config.log_level)

    provider = build_provider(config)
    if not provider.is_available():
        logger.warning(
            "'%s' CLI not found on PATH; tool calls will fail until it is installed",
            provider.command,
        )

    logger.info(
        "Claude MCP server initialized (version=%s, command=%s, cwd=%s, timeout=%ss)",
        __version__,
        provider.command,
        config.default_cwd or os.getcwd(),
        config.timeout_seconds,
    )

    try:
        yield {
            "config": config,
            "provider": provider,
        }
    finally:
        logger.info("Claude MCP server shut down")


mcp = FastMCP(
    name="claude-mcp-server",
    instructions=(
        "Tools for talking to Claude through the local claude CLI. "
        "Use chat to start a new session; the result carries the "
        "session id in _meta.sessionId. Use chat-reply with that "
        "sessionId to continue it, or without one to continue the "
        "most recent session."
    ),
    lifespan=server_lifespan,
)

register_tools(mcp)


def _add_file_logging() -> None:
    """Best-effort persistent log file for debugging stdio stream closures."""
    try:
        log_dir = Path.home() / ".claude-mcp" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"claude-mcp-server-{os.getpid()}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        logger.warning("File logging disabled: %s", exc)
        return
    file_handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    logging.getLogger().addHandler(file_handler)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the MCP server."""
    global _parsed_args
    _parsed_args = _parse_args(argv)

    # Logging must go to stderr (stdout is the stdio transport)
    logging.basicConfig(
        level=logging.DEBUG if _parsed_args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    _add_file_logging()
    logger.info(
        "Starting stdio MCP server (pid=%s, argv=%s)", os.getpid(), sys.argv
    )

    try:
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal stdio MCP server error (pid=%s)", os.getpid())
        raise


if __name__ == "__main__":
    main()
