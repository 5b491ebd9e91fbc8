"""Run assembled command lines as child processes.

CommandExecutor is the single seam between the bridge and the outside
world: a command line goes in, captured text comes out. Providers take
an executor as a constructor argument so tests can substitute a fake.
"""
from __future__ import annotations

import abc
import asyncio
import logging
import os
import shlex
import signal
import time

from .config import DEFAULT_MAX_OUTPUT_BYTES
from .errors import (
    ExecutionError,
    ExecutionTimeoutError,
    OutputLimitExceededError,
    ToolNotFoundError,
)
from .models import ExecutionOutcome

logger = logging.getLogger(__name__)

_READ_CHUNK_BYTES = 64 * 1024
# bash exit status for "command not found"
_EXIT_COMMAND_NOT_FOUND = 127


class CommandExecutor(abc.ABC):
    """Runs one command line and returns its captured output."""

    @abc.abstractmethod
    async def run(
        self,
        command: str,
        *,
        cwd: str | None = None,
    ) -> ExecutionOutcome:
        """Run *command* to completion.

        Returns the outcome on a zero exit status. Raises
        ExecutionError (or a subclass) on any other outcome.
        """


def _decode(data: bytes | bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def _program_name(command: str) -> str:
    try:
        parts = shlex.split(command)
    except ValueError:
        parts = command.split()
    return parts[0] if parts else command


class ShellExecutor(CommandExecutor):
    """Executor backed by a real shell subprocess.

    - stdin is /dev/null so the CLI never waits for interactive input
    - combined stdout + stderr is capped at max_output_bytes
    - the whole process group is killed after timeout_seconds
      (0 or negative disables the timeout)
    """

    def __init__(
        self,
        shell: str = "/bin/bash",
        timeout_seconds: float = 300.0,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ) -> None:
        self._shell = shell
        self._timeout_seconds = timeout_seconds
        self._max_output_bytes = max_output_bytes

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    @property
    def max_output_bytes(self) -> int:
        return self._max_output_bytes

    def _build_env(self) -> dict[str, str]:
        """Build subprocess environment.

        CLAUDECODE is dropped so the CLI does not refuse a nested
        invocation when this server runs inside a Claude Code session.
        """
        env = os.environ.copy()
        env.pop("CLAUDECODE", None)
        return env

    async def _kill(self, proc: asyncio.subprocess.Process) -> None:
        """Kill the process group started for *proc* and reap it."""
        try:
            if hasattr(os, "killpg"):
                os.killpg(proc.pid, signal.SIGKILL)
            elif proc.returncode is None:
                proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()

    async def run(
        self,
        command: str,
        *,
        cwd: str | None = None,
    ) -> ExecutionOutcome:
        logger.info("Executing command (%d chars)", len(command))
        logger.debug("Full command: %s", command)
        if cwd:
            logger.info("Working directory: %s", cwd)

        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd or None,
                env=self._build_env(),
                executable=self._shell,
                start_new_session=True,
            )
        except (OSError, ValueError) as exc:
            logger.error("Failed to start command: %s", exc)
            raise ExecutionError(f"Failed to start command: {exc}") from exc

        stdout_buf = bytearray()
        stderr_buf = bytearray()
        overflowed = False

        async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
            nonlocal overflowed
            while not overflowed:
                chunk = await stream.read(_READ_CHUNK_BYTES)
                if not chunk:
                    return
                sink.extend(chunk)
                if len(stdout_buf) + len(stderr_buf) > self._max_output_bytes:
                    # Only the first stream to cross the ceiling raises.
                    overflowed = True
                    raise OutputLimitExceededError(self._max_output_bytes)

        timeout = self._timeout_seconds if self._timeout_seconds > 0 else None
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(proc.stdout, stdout_buf),
                    _drain(proc.stderr, stderr_buf),
                    proc.wait(),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.error(
                "Command timed out after %.1fs (pid=%d)",
                time.monotonic() - start, proc.pid,
            )
            raise ExecutionTimeoutError(
                self._timeout_seconds, stderr=_decode(stderr_buf),
            ) from None
        except OutputLimitExceededError as exc:
            await self._kill(proc)
            exc.stderr = _decode(stderr_buf)
            logger.error(
                "Command output exceeded %d bytes (pid=%d)",
                self._max_output_bytes, proc.pid,
            )
            raise
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        duration = time.monotonic() - start
        stdout = _decode(stdout_buf)
        stderr = _decode(stderr_buf)
        returncode = proc.returncode
        logger.info(
            "Command finished in %dms (rc=%s, stdout=%d chars)",
            int(duration * 1000), returncode, len(stdout),
        )
        if stderr:
            logger.debug("stderr: %s", stderr.strip())

        if returncode == _EXIT_COMMAND_NOT_FOUND:
            raise ToolNotFoundError(_program_name(command), stderr=stderr)

        if returncode != 0:
            detail = stderr.strip() or stdout.strip()
            message = f"Command failed with exit code {returncode}"
            if detail:
                message = f"{message}: {detail}"
            logger.error("%s", message)
            raise ExecutionError(
                message,
                stderr=stderr,
                exit_code=returncode,
                stdout=stdout,
            )

        return ExecutionOutcome(
            stdout=stdout,
            stderr=stderr,
            exit_code=returncode,
            duration_seconds=duration,
        )
