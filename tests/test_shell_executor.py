"""Tests for ShellExecutor against real bash subprocesses."""
from __future__ import annotations

import asyncio
import os
import time

import pytest

from claude_mcp.engine.command_builder import quote_text
from claude_mcp.engine.errors import (
    ExecutionError,
    ExecutionTimeoutError,
    OutputLimitExceededError,
    ToolNotFoundError,
)
from claude_mcp.engine.executor import ShellExecutor

pytestmark = pytest.mark.skipif(
    not os.path.exists("/bin/bash"), reason="requires /bin/bash",
)


@pytest.mark.asyncio
async def test_returns_stdout_and_stderr():
    executor = ShellExecutor()
    outcome = await executor.run("echo hello; echo warn >&2")
    assert outcome.stdout == "hello\n"
    assert outcome.stderr == "warn\n"
    assert outcome.exit_code == 0
    assert outcome.duration_seconds >= 0


@pytest.mark.asyncio
async def test_stdin_is_empty():
    # cat would block forever on an inherited interactive stdin
    executor = ShellExecutor(timeout_seconds=5)
    outcome = await executor.run("cat")
    assert outcome.stdout == ""


@pytest.mark.asyncio
async def test_quoted_text_reaches_process_unchanged():
    text = 'a "double" and \'single\' quote\nback\\slash $HOME `id` $(id)'
    executor = ShellExecutor()
    outcome = await executor.run(f"printf '%s' {quote_text(text)}")
    assert outcome.stdout == text


@pytest.mark.asyncio
async def test_cwd_override(tmp_path):
    executor = ShellExecutor()
    outcome = await executor.run("pwd", cwd=str(tmp_path))
    assert os.path.realpath(outcome.stdout.strip()) == os.path.realpath(tmp_path)


@pytest.mark.asyncio
async def test_missing_cwd_is_execution_error(tmp_path):
    executor = ShellExecutor()
    with pytest.raises(ExecutionError, match="Failed to start command"):
        await executor.run("pwd", cwd=str(tmp_path / "missing"))


@pytest.mark.asyncio
async def test_nonzero_exit_carries_stderr_and_code():
    executor = ShellExecutor()
    with pytest.raises(ExecutionError) as exc_info:
        await executor.run("echo partial; echo boom >&2; exit 3")
    err = exc_info.value
    assert not isinstance(err, ToolNotFoundError)
    assert err.exit_code == 3
    assert err.stderr == "boom\n"
    assert err.stdout == "partial\n"
    assert "exit code 3" in str(err)
    assert "boom" in str(err)


@pytest.mark.asyncio
async def test_missing_tool_raises_tool_not_found():
    executor = ShellExecutor()
    with pytest.raises(ToolNotFoundError) as exc_info:
        await executor.run("definitely-not-a-real-cli-4821 -p hi")
    assert exc_info.value.exit_code == 127
    assert exc_info.value.command == "definitely-not-a-real-cli-4821"
    assert "not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_kills_process():
    executor = ShellExecutor(timeout_seconds=0.3)
    start = time.monotonic()
    with pytest.raises(ExecutionTimeoutError) as exc_info:
        await executor.run("sleep 10")
    assert time.monotonic() - start < 5
    assert exc_info.value.timeout_seconds == 0.3


@pytest.mark.asyncio
async def test_zero_timeout_disables_deadline():
    executor = ShellExecutor(timeout_seconds=0)
    outcome = await executor.run("sleep 0.1; echo done")
    assert outcome.stdout == "done\n"


@pytest.mark.asyncio
async def test_output_ceiling_enforced():
    executor = ShellExecutor(max_output_bytes=1024, timeout_seconds=10)
    with pytest.raises(OutputLimitExceededError) as exc_info:
        await executor.run("head -c 4096 /dev/zero")
    assert exc_info.value.limit_bytes == 1024


@pytest.mark.asyncio
async def test_output_ceiling_counts_stderr():
    executor = ShellExecutor(max_output_bytes=1024, timeout_seconds=10)
    with pytest.raises(OutputLimitExceededError):
        await executor.run("head -c 4096 /dev/zero >&2")


@pytest.mark.asyncio
async def test_output_under_ceiling_succeeds():
    executor = ShellExecutor(max_output_bytes=1024)
    outcome = await executor.run("head -c 512 /dev/zero")
    assert len(outcome.stdout) == 512


@pytest.mark.asyncio
async def test_claudecode_env_is_removed(monkeypatch):
    monkeypatch.setenv("CLAUDECODE", "1")
    executor = ShellExecutor()
    outcome = await executor.run('echo "${CLAUDECODE:-unset}"')
    assert outcome.stdout == "unset\n"


@pytest.mark.asyncio
async def test_missing_shell_is_execution_error():
    executor = ShellExecutor(shell="/nonexistent/shell")
    with pytest.raises(ExecutionError, match="Failed to start command"):
        await executor.run("echo hi")


@pytest.mark.asyncio
async def test_concurrent_runs_are_independent():
    executor = ShellExecutor()
    results = await asyncio.gather(
        executor.run("sleep 0.2; echo one"),
        executor.run("echo two"),
    )
    assert [r.stdout for r in results] == ["one\n", "two\n"]


@pytest.mark.asyncio
async def test_unencodable_command_is_execution_error():
    executor = ShellExecutor()
    with pytest.raises(ExecutionError, match="Failed to start command"):
        await executor.run("printf '%s' 'hi \ud800'")
