"""Exception hierarchy for the Claude CLI bridge.

Build-time and execution failures are exceptions. Output that cannot
be decoded is not: see interpreter.RawTextOutput.
"""
from __future__ import annotations


class ClaudeMcpError(Exception):
    """Base exception for all bridge errors."""


class CommandBuildError(ClaudeMcpError):
    """A request field was rejected before any subprocess was spawned."""
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid '{field}': {reason}")


class ExecutionError(ClaudeMcpError):
    """The external CLI could not be run to a successful exit."""
    def __init__(
        self,
        message: str,
        *,
        stderr: str | None = None,
        exit_code: int | None = None,
        stdout: str | None = None,
    ):
        self.message = message
        self.stderr = stderr
        self.exit_code = exit_code
        self.stdout = stdout
        super().__init__(message)


class ToolNotFoundError(ExecutionError):
    """The shell could not find the CLI binary (exit status 127)."""
    def __init__(self, command: str, stderr: str | None = None):
        self.command = command
        super().__init__(
            f"'{command}' CLI not found (is it installed and on PATH?)",
            stderr=stderr,
            exit_code=127,
        )


class ExecutionTimeoutError(ExecutionError):
    """The CLI exceeded its wall-clock budget and was killed."""
    def __init__(self, timeout_seconds: float, stderr: str | None = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Command timed out after {timeout_seconds}s",
            stderr=stderr,
        )


class OutputLimitExceededError(ExecutionError):
    """The CLI produced more output than the capture ceiling allows."""
    def __init__(self, limit_bytes: int, stderr: str | None = None):
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Command output exceeded {limit_bytes} bytes",
            stderr=stderr,
        )


class UnknownToolError(ClaudeMcpError):
    """A tool call named a tool this server does not expose."""
    def __init__(self, tool_name: str, available: list[str]):
        self.tool_name = tool_name
        self.available = available
        avail_str = ", ".join(available) if available else "none"
        super().__init__(
            f"Unknown tool: {tool_name} (available: {avail_str})"
        )
